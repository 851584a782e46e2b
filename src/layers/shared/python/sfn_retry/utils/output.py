"""Operator-facing output sinks.

Progress lines meant for a human at a terminal go through a ``Reporter``
handed to the orchestrator, separate from structured logging. Colors and
verbosity are settings of the reporter instance, never module state.
"""

import sys
from typing import Protocol, TextIO


class Colors:
    """ANSI color codes for terminal output."""

    GREEN = "\033[0;32m"
    RED = "\033[0;31m"
    YELLOW = "\033[1;33m"
    BLUE = "\033[0;34m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


class Reporter(Protocol):
    """Sink for operator-facing progress messages."""

    def info(self, msg: str) -> None: ...

    def success(self, msg: str) -> None: ...

    def warning(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...

    def verbose(self, msg: str) -> None: ...


class NullReporter:
    """Reporter that discards everything."""

    def info(self, msg: str) -> None:
        pass

    def success(self, msg: str) -> None:
        pass

    def warning(self, msg: str) -> None:
        pass

    def error(self, msg: str) -> None:
        pass

    def verbose(self, msg: str) -> None:
        pass


class ConsoleReporter:
    """Reporter printing tagged, optionally colored lines."""

    def __init__(
        self,
        stream: TextIO | None = None,
        verbose: bool = False,
        colors: bool | None = None,
    ):
        """Initialize the console reporter.

        Args:
            stream: Output stream. Defaults to stderr.
            verbose: Whether verbose (debug) lines are printed.
            colors: Force colors on/off. Defaults to on for a TTY.
        """
        self.stream = stream or sys.stderr
        self.is_verbose = verbose
        if colors is None:
            colors = hasattr(self.stream, "isatty") and self.stream.isatty()
        self.colors = colors

    def _emit(self, tag: str, color: str, msg: str) -> None:
        if self.colors:
            print(f"{color}[{tag}]{Colors.RESET} {msg}", file=self.stream)
        else:
            print(f"[{tag}] {msg}", file=self.stream)

    def info(self, msg: str) -> None:
        """Print info message in blue."""
        self._emit("INFO", Colors.BLUE, msg)

    def success(self, msg: str) -> None:
        """Print success message in green."""
        self._emit("SUCCESS", Colors.GREEN, msg)

    def warning(self, msg: str) -> None:
        """Print warning message in yellow."""
        self._emit("WARN", Colors.YELLOW, msg)

    def error(self, msg: str) -> None:
        """Print error message in red."""
        self._emit("ERROR", Colors.RED, msg)

    def verbose(self, msg: str) -> None:
        """Print debug message, only when verbose."""
        if self.is_verbose:
            self._emit("DEBUG", Colors.BLUE, msg)

    def header(self, msg: str) -> None:
        """Print section header."""
        rule = "=" * len(msg)
        if self.colors:
            print(f"{Colors.BOLD}{msg}{Colors.RESET}", file=self.stream)
            print(f"{Colors.BOLD}{rule}{Colors.RESET}", file=self.stream)
        else:
            print(msg, file=self.stream)
            print(rule, file=self.stream)
