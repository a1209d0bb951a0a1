"""
Command line entry point.

Usage:
    python -m bpf_toolchain setup          # LLVM + sbpf-linker + .cargo/config.toml
    python -m bpf_toolchain build-llvm     # LLVM only
    python -m bpf_toolchain build-linker   # sbpf-linker + .cargo/config.toml
    python -m bpf_toolchain build          # cargo +nightly build-bpf
"""

import argparse
import logging
import sys
from typing import Optional

from bpf_toolchain.errors import ToolchainError, format_error_chain
from bpf_toolchain.orchestrator import ToolchainOrchestrator
from bpf_toolchain.settings import ToolchainSettings, log_level_from_environment


logger = logging.getLogger(__name__)


COMMANDS = {
    "setup": "Set up the complete toolchain (LLVM + sbpf linker)",
    "build-linker": "Clone and build the SBPF linker only",
    "build-llvm": "Clone and build LLVM with modified BPF backend",
    "build": "Build the example project with the custom toolchain",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bpf-toolchain",
        description="Build automation for the u128 BPF prototype",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True
    for name, help_text in COMMANDS.items():
        subparsers.add_parser(name, help=help_text, description=help_text)
    return parser


def main(
    argv: Optional[list[str]] = None,
    orchestrator: Optional[ToolchainOrchestrator] = None,
) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=log_level_from_environment(), format="%(message)s")

    if orchestrator is None:
        orchestrator = ToolchainOrchestrator(ToolchainSettings.from_environment())

    try:
        orchestrator.run(args.command)
    except KeyboardInterrupt:
        print(f"\n⚠️  {args.command} interrupted", file=sys.stderr)
        return 130
    except ToolchainError as e:
        print(f"error: {args.command} failed: {format_error_chain(e)}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
