"""Build sbpf-linker against the LLVM installed in the cache."""

import logging
from pathlib import Path

from bpf_toolchain.errors import BuildFailed, ProcessFailure
from bpf_toolchain.settings import ToolchainSettings
from bpf_toolchain.toolchain.repo_fetcher import ensure_checkout
from bpf_toolchain.util.cache_dir import ensure_directory
from bpf_toolchain.util.process_runner import ProcessRunner


logger = logging.getLogger(__name__)


class LinkerBuilder:
    """
    Clones and builds the linker.

    There is no up-to-date check: ``cargo build`` runs on every call and
    relies on Cargo's own incremental build to be cheap when nothing changed.
    """

    def __init__(self, settings: ToolchainSettings, runner: ProcessRunner):
        self.settings = settings
        self.runner = runner

    def ensure_linker(self) -> Path:
        """
        Returns:
            Path of the built ``sbpf-linker`` binary.

        Raises:
            DirectoryCreateFailed, CloneFailed, BuildFailed
        """
        s = self.settings
        logger.info(f"  SBPF linker will be built in: {s.linker_dir}")
        ensure_directory(s.cache_dir)

        logger.info("[1/3] Cloning SBPF linker...")
        ensure_checkout(self.runner, s.linker_repo, s.linker_branch, s.linker_dir)

        # LLVM_PREFIX makes the linker's llvm-sys link our LLVM, not the system's
        logger.info(
            f"[2/3] Building SBPF linker (LLVM_PREFIX={s.llvm_install_dir})..."
        )
        try:
            self.runner.run(
                ["cargo", "build", "--release"],
                "build sbpf-linker",
                env={"LLVM_PREFIX": str(s.llvm_install_dir)},
                cwd=s.linker_dir,
            )
        except ProcessFailure as e:
            raise BuildFailed("failed to build sbpf-linker") from e

        return s.linker_bin
