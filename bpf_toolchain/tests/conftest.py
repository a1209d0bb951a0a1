"""Shared fixtures: isolated cache/project dirs and a runner that records instead of spawning."""

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

import pytest

from bpf_toolchain.errors import ProcessFailure
from bpf_toolchain.settings import ToolchainSettings
from bpf_toolchain.util.process_runner import ProcessRunner


@dataclass
class Invocation:
    args: list[str]
    description: str
    env: Optional[dict[str, str]]
    cwd: Optional[Path]


class RecordingRunner(ProcessRunner):
    """
    Fake ProcessRunner.

    Records every command. With ``simulate`` on, it also leaves behind what the
    real tool would: the clone destination, the LLVM install marker and the
    linker binary. ``fail_on`` makes any command starting with that prefix
    exit with status 1.
    """

    def __init__(
        self, fail_on: Optional[Sequence[str]] = None, simulate: bool = True
    ) -> None:
        self.calls: list[Invocation] = []
        self.fail_on = list(fail_on) if fail_on else None
        self.simulate = simulate
        self._install_prefix: Optional[Path] = None

    def run(
        self,
        args: Sequence[str],
        description: str,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> None:
        command = [str(arg) for arg in args]
        self.calls.append(
            Invocation(command, description, dict(env) if env else None, cwd)
        )
        if self.fail_on and command[: len(self.fail_on)] == self.fail_on:
            raise ProcessFailure(f"command failed: {description}", command, 1)
        if self.simulate:
            self._simulate(command, cwd)

    def _simulate(self, command: list[str], cwd: Optional[Path]) -> None:
        if command[:2] == ["git", "clone"]:
            Path(command[-1]).mkdir(parents=True)
        elif command[:2] == ["cmake", "-S"]:
            for arg in command:
                if arg.startswith("-DCMAKE_INSTALL_PREFIX="):
                    self._install_prefix = Path(arg.split("=", 1)[1])
        elif command[:2] == ["cmake", "--build"]:
            assert self._install_prefix is not None
            bin_dir = self._install_prefix / "bin"
            bin_dir.mkdir(parents=True, exist_ok=True)
            (bin_dir / "llvm-config").write_text("#!/bin/sh\n")
        elif command[:3] == ["cargo", "build", "--release"] and cwd is not None:
            release = cwd / "target" / "release"
            release.mkdir(parents=True, exist_ok=True)
            (release / "sbpf-linker").write_text("linker")

    def commands(self, *prefix: str) -> list[Invocation]:
        """Recorded calls whose argv starts with ``prefix``."""
        return [c for c in self.calls if c.args[: len(prefix)] == list(prefix)]

    def count(self, *prefix: str) -> int:
        return len(self.commands(*prefix))


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "u128-bpf-toolchain"


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def settings(cache_dir: Path, project_root: Path) -> ToolchainSettings:
    return ToolchainSettings(
        cache_dir=cache_dir, project_root=project_root, host_platform="linux"
    )


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()
