"""
Location of the project-external cache that holds toolchain sources and builds.

The LLVM checkout and build take several gigabytes and must not live inside
the project tree, where they would interfere with Cargo's own build state.
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Mapping, Optional

from bpf_toolchain.errors import DirectoryCreateFailed


CACHE_DIR_NAME = "u128-bpf-toolchain"


def platform_cache_dir(
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    home: Optional[Path] = None,
) -> Optional[Path]:
    """
    Return the platform's per-user cache directory, or None if it can't be found.

    Linux and other Unixes: $XDG_CACHE_HOME when it is absolute, else ~/.cache
    macOS: ~/Library/Caches
    Windows: %LOCALAPPDATA%
    """
    env = os.environ if environ is None else environ
    platform = platform or sys.platform

    if home is None:
        try:
            home = Path.home()
        except (RuntimeError, KeyError):
            home = None

    if platform.startswith("win"):
        local_app_data = env.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data)
        return None

    if platform == "darwin":
        return home / "Library" / "Caches" if home is not None else None

    xdg_cache = env.get("XDG_CACHE_HOME")
    if xdg_cache and os.path.isabs(xdg_cache):
        return Path(xdg_cache)
    return home / ".cache" if home is not None else None


def _temp_dir_fallback(platform: str) -> Path:
    if platform.startswith("win"):
        return Path(tempfile.gettempdir())
    return Path("/tmp")


def toolchain_cache_dir(
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    home: Optional[Path] = None,
) -> Path:
    """Root directory for all toolchain artifacts. Not created here."""
    platform = platform or sys.platform
    base = platform_cache_dir(environ=environ, platform=platform, home=home)
    if base is None:
        base = _temp_dir_fallback(platform)
    return base / CACHE_DIR_NAME


def ensure_directory(path: Path) -> Path:
    """Create ``path`` and its parents if missing."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateFailed(f"failed to create directory {path}") from e
    return path
