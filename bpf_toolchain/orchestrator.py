"""
Sequencing of the bootstrap steps behind the four CLI operations.

Steps run strictly in order and the first failure propagates unchanged.
Nothing is rolled back: a failed ``setup`` may leave LLVM built and the
linker missing, and re-running it picks up from the path and marker checks.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Optional

from bpf_toolchain.errors import BuildFailed, ProcessFailure
from bpf_toolchain.settings import ToolchainSettings
from bpf_toolchain.toolchain.cargo_config import write_cargo_config
from bpf_toolchain.toolchain.linker_builder import LinkerBuilder
from bpf_toolchain.toolchain.llvm_builder import LlvmBuilder
from bpf_toolchain.util.banner_print import BannerPrinter
from bpf_toolchain.util.process_runner import ProcessRunner


logger = logging.getLogger(__name__)


class ToolchainOrchestrator:
    def __init__(
        self, settings: ToolchainSettings, runner: Optional[ProcessRunner] = None
    ):
        self.settings = settings
        self.runner = runner or ProcessRunner()
        self.llvm = LlvmBuilder(settings, self.runner)
        self.linker = LinkerBuilder(settings, self.runner)

    @property
    def operations(self) -> dict[str, Callable[[], object]]:
        """CLI name -> operation."""
        return {
            "setup": self.setup,
            "build-linker": self.build_linker,
            "build-llvm": self.build_llvm,
            "build": self.build,
        }

    def run(self, name: str) -> None:
        self.operations[name]()

    def setup(self) -> None:
        """Build LLVM, then the linker, then point Cargo at the linker."""
        start = time.time()
        BannerPrinter.print_phase_banner(
            "SETUP U128 BPF TOOLCHAIN",
            {
                "Cache": str(self.settings.cache_dir),
                "Project": str(self.settings.project_root),
            },
        )
        self.build_llvm()
        self.build_linker()

        BannerPrinter.print_completion_banner(
            "Setup complete!",
            next_steps=[
                "Build this project with:",
                "  cargo +nightly build-bpf",
            ],
            elapsed_time=BannerPrinter.format_elapsed_time(time.time() - start),
        )

    def build_llvm(self) -> None:
        self.llvm.ensure_llvm()

    def build_linker(self) -> Path:
        linker_bin = self.linker.ensure_linker()
        logger.info("[3/3] Updating .cargo/config.toml with linker path...")
        write_cargo_config(
            self.settings.project_root, linker_bin, self.settings.target_triple
        )
        logger.info(f"  SBPF linker ready at: {linker_bin}")
        return linker_bin

    def build(self) -> None:
        """Build the project through the ``build-bpf`` alias in the generated config."""
        logger.info("Building project with cargo +nightly...")
        try:
            self.runner.run(
                ["cargo", "+nightly", "build-bpf"],
                "build project",
                cwd=self.settings.project_root,
            )
        except ProcessFailure as e:
            raise BuildFailed("failed to build the project") from e
        logger.info("Build complete!")
