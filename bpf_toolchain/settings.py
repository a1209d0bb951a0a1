"""Toolchain sources, target and the two directories every step works in."""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from typeguard import typechecked

from bpf_toolchain.util.cache_dir import toolchain_cache_dir


logger = logging.getLogger(__name__)


LLVM_REPO = "https://github.com/blueshift-gg/llvm-project.git"
LLVM_BRANCH = "BPF_i128_ret"
LINKER_REPO = "https://github.com/blueshift-gg/sbpf-linker"
LINKER_BRANCH = "u128_mul_libcall"

TARGET_TRIPLE = "bpfel-unknown-none"

# Absolute path overriding the platform cache lookup
CACHE_DIR_ENV = "U128_BPF_TOOLCHAIN_CACHE"
LOG_LEVEL_ENV = "U128_BPF_LOG_LEVEL"


def find_project_root(environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Root of the Cargo project being built.

    ``CARGO_MANIFEST_DIR`` when set, else the working directory. When the
    tool is launched from the project's ``xtask`` directory the parent is used.
    """
    env = os.environ if environ is None else environ
    manifest_dir = env.get("CARGO_MANIFEST_DIR")
    root = Path(manifest_dir) if manifest_dir else Path.cwd()
    if root.name == "xtask":
        return root.parent
    return root


@typechecked
@dataclass(frozen=True)
class ToolchainSettings:
    """Everything the bootstrap steps need, passed explicitly instead of read globally."""

    cache_dir: Path
    project_root: Path
    llvm_repo: str = LLVM_REPO
    llvm_branch: str = LLVM_BRANCH
    linker_repo: str = LINKER_REPO
    linker_branch: str = LINKER_BRANCH
    target_triple: str = TARGET_TRIPLE
    host_platform: str = sys.platform

    @property
    def llvm_src_dir(self) -> Path:
        return self.cache_dir / "llvm-project"

    @property
    def llvm_build_dir(self) -> Path:
        return self.cache_dir / "llvm-build"

    @property
    def llvm_install_dir(self) -> Path:
        return self.cache_dir / "llvm-install"

    @property
    def llvm_config(self) -> Path:
        """Marker: present only after a completed LLVM install."""
        return self.llvm_install_dir / "bin" / "llvm-config"

    @property
    def linker_dir(self) -> Path:
        return self.cache_dir / "sbpf-linker"

    @property
    def linker_bin(self) -> Path:
        return self.linker_dir / "target" / "release" / "sbpf-linker"

    @property
    def cargo_config_path(self) -> Path:
        return self.project_root / ".cargo" / "config.toml"

    @classmethod
    def from_environment(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "ToolchainSettings":
        env = os.environ if environ is None else environ

        override = env.get(CACHE_DIR_ENV)
        if override and os.path.isabs(override):
            cache_dir = Path(override)
        else:
            if override:
                logger.warning(
                    f"Ignoring {CACHE_DIR_ENV}={override!r}: not an absolute path"
                )
            cache_dir = toolchain_cache_dir(environ=env)

        return cls(cache_dir=cache_dir, project_root=find_project_root(env))


def log_level_from_environment(environ: Optional[Mapping[str, str]] = None) -> int:
    """Logging level named by U128_BPF_LOG_LEVEL, INFO when unset or unknown."""
    env = os.environ if environ is None else environ
    name = env.get(LOG_LEVEL_ENV, "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
