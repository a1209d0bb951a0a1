"""
Generation of the project's ``.cargo/config.toml``.

The file is rewritten from scratch on every run and never merged, so manual
edits to it do not survive ``setup`` or ``build-linker``.
"""

import logging
from pathlib import Path, PurePath

from typeguard import typechecked

from bpf_toolchain.errors import ConfigWriteFailed
from bpf_toolchain.settings import TARGET_TRIPLE


logger = logging.getLogger(__name__)


CARGO_CONFIG_TEMPLATE = """\
[unstable]
build-std = ["core", "alloc"]

[target.{target}]
rustflags = [
    "-C", "linker={linker}",
    "-C", "panic=abort",
    "-C", "link-arg=--dump-module=llvm_dump",
    "-C", "link-arg=--llvm-args=-bpf-stack-size=4096",
    "-C", "relocation-model=static",
]

[alias]
build-bpf = "build --release --target {target}"
"""


def render_cargo_config(linker_path: PurePath, target: str = TARGET_TRIPLE) -> str:
    # Forward slashes: Windows backslashes would be escapes in a TOML basic string
    return CARGO_CONFIG_TEMPLATE.format(linker=linker_path.as_posix(), target=target)


@typechecked
def write_cargo_config(
    project_root: Path, linker_path: Path, target: str = TARGET_TRIPLE
) -> Path:
    """
    Overwrite ``<project_root>/.cargo/config.toml`` to use ``linker_path``.

    Returns:
        Path of the written file.

    Raises:
        ConfigWriteFailed: The directory or the file could not be written.
    """
    config_dir = project_root / ".cargo"
    config_path = config_dir / "config.toml"
    content = render_cargo_config(linker_path, target)

    try:
        config_dir.mkdir(parents=True, exist_ok=True)
        # newline="" keeps the template's \n line endings on Windows too
        with open(config_path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise ConfigWriteFailed(f"failed to write {config_path}") from e

    logger.info(f"  Wrote {config_path}")
    return config_path
