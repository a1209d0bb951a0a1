"""Clone the external source trees into the cache, once."""

import logging
from pathlib import Path

from typeguard import typechecked

from bpf_toolchain.errors import CloneFailed, ProcessFailure
from bpf_toolchain.util.process_runner import ProcessRunner


logger = logging.getLogger(__name__)


@typechecked
def ensure_checkout(
    runner: ProcessRunner, url: str, branch: str, destination: Path
) -> bool:
    """
    Clone ``url`` at ``branch`` into ``destination`` unless it already exists.

    An existing directory is trusted as-is: it is not fetched, and neither the
    branch nor the commit is checked.

    Returns:
        True if a clone was performed.

    Raises:
        CloneFailed: git could not be started or the clone failed.
    """
    if destination.exists():
        logger.info(f"  {destination.name} directory already exists, skipping clone")
        return False

    try:
        runner.run(
            ["git", "clone", "--branch", branch, url, str(destination)],
            f"clone {destination.name}",
        )
    except ProcessFailure as e:
        raise CloneFailed(f"failed to clone {url} ({branch}) into {destination}") from e
    return True
