"""
Turn the absolute symlinks left by ``CMAKE_INSTALL_MODE=ABS_SYMLINK`` into real files.

With that install mode CMake installs absolute symlinks pointing back into
the build tree instead of copying. LLVM's own install step also creates
relative symlinks (e.g. ``clang++ -> clang``), which must stay as they are;
the absolute/relative distinction is what tells the two apart. Each absolute
link target is moved onto the link's path, so the real file ends up in the
install tree and the build-tree copy is gone.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from typeguard import typechecked

from bpf_toolchain.errors import FilesystemWalkFailed


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SymlinkRecord:
    link_path: Path
    target: Path


def _raise_walk_error(root: Path) -> Callable[[OSError], None]:
    def onerror(err: OSError) -> None:
        raise FilesystemWalkFailed(
            f"failed to read filesystem entry while traversing install prefix {root}"
        ) from err

    return onerror


def collect_symlinks(root: Path) -> list[Path]:
    """All symlinks under ``root``, without following any of them."""
    links: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(
        root, followlinks=False, onerror=_raise_walk_error(root)
    ):
        for name in sorted(dirnames) + sorted(filenames):
            path = Path(dirpath) / name
            if path.is_symlink():
                links.append(path)
    return links


def resolve_symlink(link_path: Path) -> SymlinkRecord | None:
    """Move an absolute link's target onto the link. Relative links are skipped."""
    try:
        target = Path(os.readlink(link_path))
    except OSError as e:
        raise FilesystemWalkFailed(f"failed to read the link {link_path}") from e

    if not target.is_absolute():
        return None

    try:
        os.replace(target, link_path)
    except OSError as e:
        raise FilesystemWalkFailed(
            f"failed to move the target file {target} "
            f"to the location of the symlink {link_path}"
        ) from e
    return SymlinkRecord(link_path=link_path, target=target)


@typechecked
def resolve_install_symlinks(install_prefix: Path) -> list[SymlinkRecord]:
    """
    Replace every absolute symlink under ``install_prefix`` with its target.

    The whole tree is walked first and mutated afterwards, so renames never
    happen under a live directory iterator.

    Returns:
        One record per link that was replaced.
    """
    links = collect_symlinks(install_prefix)
    resolved: list[SymlinkRecord] = []
    for link_path in links:
        record = resolve_symlink(link_path)
        if record is not None:
            resolved.append(record)

    logger.info(
        f"  Resolved {len(resolved)} of {len(links)} symlinks in {install_prefix}"
    )
    return resolved
