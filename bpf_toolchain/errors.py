"""
Error types for the toolchain bootstrap.

Every failure is fatal to the running operation. Each layer raises its own
error ``from`` the underlying one, so the full causal chain can be rendered
with ``format_error_chain`` at the top level.
"""

from typing import Optional, Sequence


class ToolchainError(Exception):
    """Base class for all bootstrap failures."""

    def __init__(self, description: str):
        super().__init__(description)
        self.description = description

    def __str__(self) -> str:
        return self.description


class ProcessFailure(ToolchainError):
    """An external command exited with a non-zero status."""

    def __init__(
        self,
        description: str,
        command: Sequence[str],
        returncode: Optional[int],
    ):
        super().__init__(description)
        self.command = list(command)
        self.returncode = returncode


class ProcessSpawnFailed(ProcessFailure):
    """An external command could not be started at all."""

    def __init__(self, description: str, command: Sequence[str]):
        super().__init__(description, command, None)


class CloneFailed(ToolchainError):
    pass


class ConfigureFailed(ToolchainError):
    pass


class BuildFailed(ToolchainError):
    pass


class ConfigWriteFailed(ToolchainError):
    pass


class FilesystemWalkFailed(ToolchainError):
    pass


class DirectoryCreateFailed(ToolchainError):
    pass


def format_error_chain(exc: BaseException) -> str:
    """
    Render an exception and its ``__cause__`` chain as one line.

    Example:
        failed to clone sbpf-linker: command 'git clone ...' exited with status 128
    """
    parts: list[str] = []
    seen: set[int] = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        message = str(current) or type(current).__name__
        parts.append(message)
        current = current.__cause__
    return ": ".join(parts)
