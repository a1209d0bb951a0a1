"""
Synchronous execution of the external tools (git, cmake, cargo).

Output of the child process is echoed line by line as it is produced, so the
operator sees the tool's own progress in real time. Nothing is parsed.
"""

import logging
import os
import shlex
import shutil
from pathlib import Path
from typing import Mapping, Optional, Sequence

from running_process import RunningProcess
from typeguard import typechecked

from bpf_toolchain.errors import ProcessFailure, ProcessSpawnFailed


logger = logging.getLogger(__name__)


def format_command(
    args: Sequence[str], env: Optional[Mapping[str, str]] = None
) -> str:
    """Shell-like rendering of a command line, with env overrides prefixed."""
    parts: list[str] = []
    if env:
        parts += [shlex.quote(f"{key}={value}") for key, value in env.items()]
    parts += [shlex.quote(str(arg)) for arg in args]
    return " ".join(parts)


class ProcessRunner:
    """Runs one external command at a time and waits for it to exit."""

    @typechecked
    def run(
        self,
        args: Sequence[str],
        description: str,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> None:
        """
        Run ``args`` to completion.

        Args:
            args: Program and arguments. Never interpreted by a shell.
            description: What the command does, used in error messages.
            env: Variables set on top of the current environment.
            cwd: Working directory, defaults to the current one.

        Raises:
            ProcessSpawnFailed: The program could not be started.
            ProcessFailure: The program exited with a non-zero status.
        """
        command = [str(arg) for arg in args]
        rendered = format_command(command, env)
        if cwd is not None:
            logger.info(f"+ (cd {shlex.quote(str(cwd))} && {rendered})")
        else:
            logger.info(f"+ {rendered}")

        child_env: Optional[dict[str, str]] = None
        if env:
            child_env = dict(os.environ)
            child_env.update(env)

        spawn_error = f"failed to run: {description} (command '{rendered}')"
        search_path = (child_env or os.environ).get("PATH")
        if shutil.which(command[0], path=search_path) is None:
            raise ProcessSpawnFailed(
                f"{spawn_error}: executable {command[0]!r} not found", command
            )

        # Spawn errors surface as OSError or, from the native backend, RuntimeError
        try:
            proc = RunningProcess(
                command,
                cwd=cwd,
                check=False,
                auto_run=True,
                shell=False,
                timeout=None,
                env=child_env,
            )
        except (OSError, RuntimeError) as e:
            raise ProcessSpawnFailed(spawn_error, command) from e

        returncode = proc.wait(echo=True)
        if returncode != 0:
            raise ProcessFailure(
                f"command failed: {description} "
                f"(command '{rendered}' exited with status {returncode})",
                command,
                returncode,
            )
