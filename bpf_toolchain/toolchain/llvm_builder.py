"""
Build and install the patched LLVM (BPF backend only) into the cache.

The build is skipped entirely when ``llvm-install/bin/llvm-config`` exists.
That file is installed late, so its presence is taken as proof that a
previous configure/build/install finished.
"""

import logging
from pathlib import Path

from bpf_toolchain.errors import BuildFailed, ConfigureFailed, ProcessFailure
from bpf_toolchain.settings import ToolchainSettings
from bpf_toolchain.toolchain.repo_fetcher import ensure_checkout
from bpf_toolchain.util.cache_dir import ensure_directory
from bpf_toolchain.util.process_runner import ProcessRunner
from bpf_toolchain.util.symlink_resolver import resolve_install_symlinks


logger = logging.getLogger(__name__)


LLVM_CMAKE_OPTIONS = [
    "-DCMAKE_BUILD_TYPE=Release",
    "-DLLVM_BUILD_LLVM_DYLIB=ON",
    "-DLLVM_ENABLE_ASSERTIONS=ON",
    "-DLLVM_ENABLE_PROJECTS=",
    "-DLLVM_ENABLE_RUNTIMES=",
    "-DLLVM_INSTALL_UTILS=ON",
    "-DLLVM_LINK_LLVM_DYLIB=ON",
    "-DLLVM_TARGETS_TO_BUILD=BPF",
]

# GCC-built LLVM has C++ ABI mismatches with the Rust toolchain's LLVM on Linux
LINUX_COMPILER_OPTIONS = [
    "-DCMAKE_C_COMPILER=clang",
    "-DCMAKE_CXX_COMPILER=clang++",
]

# Install symlinks instead of copies to save disk on small build hosts.
# Absolute links keep them distinguishable from LLVM's own relative links.
INSTALL_ENV = {"CMAKE_INSTALL_MODE": "ABS_SYMLINK"}


def cmake_configure_command(
    src_dir: Path, build_dir: Path, install_prefix: Path, host_platform: str
) -> list[str]:
    cmd = [
        "cmake",
        "-S",
        str(src_dir / "llvm"),
        "-B",
        str(build_dir),
        "-G",
        "Ninja",
    ]
    cmd += LLVM_CMAKE_OPTIONS
    cmd.append(f"-DCMAKE_INSTALL_PREFIX={install_prefix}")
    if host_platform.startswith("linux"):
        cmd += LINUX_COMPILER_OPTIONS
    return cmd


def cmake_install_command(build_dir: Path) -> list[str]:
    return ["cmake", "--build", str(build_dir), "--target", "install"]


class LlvmBuilder:
    """Clones, configures, builds and installs LLVM under the cache directory."""

    def __init__(self, settings: ToolchainSettings, runner: ProcessRunner):
        self.settings = settings
        self.runner = runner

    def is_built(self) -> bool:
        return self.settings.llvm_config.exists()

    def ensure_llvm(self) -> Path:
        """
        Make sure a usable LLVM install exists, building it if needed.

        Returns:
            The LLVM install prefix.

        Raises:
            DirectoryCreateFailed, CloneFailed, ConfigureFailed, BuildFailed,
            FilesystemWalkFailed
        """
        s = self.settings
        logger.info(f"  LLVM will be built in: {s.cache_dir}")
        ensure_directory(s.cache_dir)

        logger.info("[1/2] Cloning LLVM...")
        ensure_checkout(self.runner, s.llvm_repo, s.llvm_branch, s.llvm_src_dir)

        if self.is_built():
            logger.info(
                f"[2/2] LLVM already built (found {s.llvm_config}), skipping"
            )
        else:
            logger.info("[2/2] Building LLVM (this may take a while)...")
            ensure_directory(s.llvm_build_dir)
            ensure_directory(s.llvm_install_dir)
            self.build()

        logger.info(f"  LLVM installed to: {s.llvm_install_dir}")
        return s.llvm_install_dir

    def build(self) -> None:
        """Configure, build+install, then move symlink targets into the install tree."""
        s = self.settings

        configure = cmake_configure_command(
            s.llvm_src_dir, s.llvm_build_dir, s.llvm_install_dir, s.host_platform
        )
        try:
            self.runner.run(configure, "configure LLVM build")
        except ProcessFailure as e:
            raise ConfigureFailed("failed to configure LLVM build") from e

        try:
            self.runner.run(
                cmake_install_command(s.llvm_build_dir),
                "build and install LLVM",
                env=INSTALL_ENV,
            )
        except ProcessFailure as e:
            raise BuildFailed("failed to build LLVM") from e

        resolve_install_symlinks(s.llvm_install_dir)
