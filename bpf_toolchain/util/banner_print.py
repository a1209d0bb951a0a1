"""
Banner printing for the long-running bootstrap phases.

Building LLVM takes a long time and produces a lot of tool output, so phase
boundaries and the final result are framed with box-drawing separators to
keep them visible in the scrollback.
"""

import sys
from typing import TextIO


class BannerPrinter:
    """Print framed banners for phase boundaries and completion."""

    DOUBLE_LINE = "═"

    BANNER_WIDTH = 60

    @staticmethod
    def print_phase_banner(
        title: str,
        details: dict[str, str] | None = None,
        stream: TextIO | None = None,
    ) -> None:
        """Print a phase banner with optional details.

        Example output:
            ═══════════════════════════════════════════════════════════
            BUILD LLVM
            ═══════════════════════════════════════════════════════════
            📋 Cache: /home/user/.cache/u128-bpf-toolchain
        """
        out = stream or sys.stdout
        separator = BannerPrinter.DOUBLE_LINE * BannerPrinter.BANNER_WIDTH

        print(separator, file=out)
        print(title, file=out)
        print(separator, file=out)

        if details:
            for key, value in details.items():
                print(f"📋 {key}: {value}", file=out)
            print(file=out)

    @staticmethod
    def print_completion_banner(
        message: str,
        next_steps: list[str] | None = None,
        elapsed_time: str | None = None,
        stream: TextIO | None = None,
    ) -> None:
        """Print the banner shown when an operation finished successfully.

        Example output:

            ═══════════════════════════════════════════════════════════
            Setup complete! (total: 41m 3s)

            Build this project with:
              cargo +nightly build-bpf
            ═══════════════════════════════════════════════════════════
        """
        out = stream or sys.stdout
        separator = BannerPrinter.DOUBLE_LINE * BannerPrinter.BANNER_WIDTH

        print(file=out)
        print(separator, file=out)
        if elapsed_time:
            print(f"{message} (total: {elapsed_time})", file=out)
        else:
            print(message, file=out)
        if next_steps:
            print(file=out)
            for line in next_steps:
                print(line, file=out)
        print(separator, file=out)

    @staticmethod
    def format_elapsed_time(seconds: float) -> str:
        """Format elapsed time like "2m 30s" or "45s"."""
        if seconds < 60:
            return f"{int(seconds)}s"
        elif seconds < 3600:
            minutes = int(seconds // 60)
            secs = int(seconds % 60)
            return f"{minutes}m {secs}s"
        else:
            hours = int(seconds // 3600)
            minutes = int((seconds % 3600) // 60)
            return f"{hours}h {minutes}m"
