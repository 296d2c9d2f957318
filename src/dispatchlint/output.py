"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (finding tables, route listings, JSON
  reports). This is what CI jobs pipe and parse.
* **stderr** -- all diagnostics (verdict headlines, statistics, fix hints,
  warnings, errors, debug logging). Never contaminates the data stream.
* **TTY detection** -- Rich formatting when stdout is an interactive
  terminal, plain text when piped to another process.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes three layers:

1. :class:`OutputManager` -- a stateful object holding format preferences,
   Rich consoles, and quiet/verbose flags. Created once in
   :func:`~dispatchlint.app.main_callback` and installed via
   :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`) that delegate to the global ``OutputManager``.
3. Renderers for pipeline results: :func:`render_report` and
   :func:`render_operations`.

This is caller-side state. The parser and safety packages never import it.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from dispatchlint.models import NormalizedOperation, SafetyReport


class OutputFormat(str, Enum):
    """Enumeration of supported output formats.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and colour
    is not disabled, or to ``PLAIN`` otherwise. Callers can force a specific
    format via the ``--json`` or ``--plain`` CLI flags.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics) -- and routes every
    output call to the correct stream with appropriate formatting.

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        # Resolve format: AUTO picks RICH for interactive TTY, PLAIN otherwise
        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.PLAIN
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    @property
    def no_color(self) -> bool:
        return self._no_color

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    @property
    def stderr_console(self) -> Console:
        """The diagnostics console, shared with the logging handler."""
        return self._stderr

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    def print_json(self, data: Any) -> None:
        """Print *data* as indented JSON to stdout, regardless of format."""
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print tabular data to stdout in the active format.

        * **Rich mode** -- styled :class:`~rich.table.Table` with column
          headers.
        * **JSON mode** -- array of objects keyed by header names.
        * **Plain mode** -- tab-separated values, one row per line.

        Args:
            headers: Column header strings.
            rows: List of rows, where each row is a list of cell strings.
            title: Optional table title (Rich mode only).
        """
        if self._format == OutputFormat.JSON:
            self.print_json([dict(zip(headers, row)) for row in rows])

        elif self._format == OutputFormat.PLAIN:
            self.print_data("\t".join(headers))
            for row in rows:
                self.print_data("\t".join(row))

        else:
            # RICH
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for h in headers:
                table.add_column(h)
            for row in rows:
                table.add_row(*row)
            self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, style="green")

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``."""
        if self._no_color:
            self._emit(f"Warning: {message}")
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {escape(message)}", soft_wrap=True)

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        if self._no_color:
            self._emit(f"Error: {message}")
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)

    def failure(self, message: str) -> None:
        """Print a bold-red verdict line to stderr. Never suppressed."""
        self._emit(message, style="bold red")

    def suggest(self, message: str) -> None:
        """Print a dimmed next-step suggestion to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(f"→ {message}", style="dim")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active."""
        if self._verbose:
            self._emit(f"[debug] {message}", style="dim")

    def _emit(self, message: str, style: Optional[str] = None) -> None:
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(
                message, style=style, markup=False, highlight=False, soft_wrap=True
            )


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


def configure_logging(output: OutputManager) -> None:
    """Route the package's ``logging`` records to stderr when verbose.

    Library modules only emit ``DEBUG`` records on ``dispatchlint.*`` loggers
    and never install handlers. With ``--verbose`` they are rendered through
    a :class:`~rich.logging.RichHandler` on the diagnostics console;
    otherwise they are dropped.
    """
    logger = logging.getLogger("dispatchlint")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    if not output.is_verbose:
        logger.setLevel(logging.WARNING)
        return

    handler = RichHandler(
        console=output.stderr_console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def apply_output_format(format: str) -> OutputManager:
    """Switch the global manager to *format*, keeping its other settings.

    Used once configuration has been resolved, since ``dispatch.yaml`` and
    the environment may choose a format the root CLI flags did not.

    Args:
        format: One of the :class:`OutputFormat` values.

    Returns:
        The manager now installed globally.
    """
    current = get_output()
    fmt = OutputFormat(format)
    if fmt == OutputFormat.AUTO or fmt == current.format:
        return current

    output = OutputManager(
        format=fmt,
        no_color=current.no_color,
        quiet=current.is_quiet,
        verbose=current.is_verbose,
    )
    set_output(output)
    return output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def info(message: str) -> None:
    """Print info message to stderr via the global OutputManager."""
    get_output().info(message)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)


# ------------------------------------------------------------------ #
# Pipeline renderers
# ------------------------------------------------------------------ #

_FINDING_HEADERS = ["Severity", "Method", "Route", "Rule", "Message"]
_ROUTE_HEADERS = ["Method", "Path", "Security", "Public", "Reason"]


def render_report(report: SafetyReport, strict: bool = False) -> None:
    """Present a :class:`~dispatchlint.models.SafetyReport`.

    In JSON mode the whole report (plus a ``blocking`` flag) is the only
    thing written to stdout. Otherwise the findings table goes to stdout and
    the verdict, route statistics and fix hints go to stderr.

    Args:
        report: The report to render.
        strict: Whether warnings count as blocking for the verdict.
    """
    output = get_output()
    blocking = report.is_blocking(strict=strict)

    if output.format == OutputFormat.JSON:
        payload = report.model_dump(mode="json")
        payload["blocking"] = blocking
        output.print_json(payload)
        return

    if report.skipped:
        output.warning("No OpenAPI spec found. Skipping safety checks.")
        return

    if report.findings:
        rows = [
            [f.severity.value, f.method, f.route, f.rule, f.message]
            for f in report.findings
        ]
        output.print_table(
            _FINDING_HEADERS, rows, title=f"Findings ({len(report.findings)})"
        )

    summary = report.summary
    if blocking:
        output.failure("✘ Safety checks failed")
    elif summary.warn:
        output.warning("Safety checks completed with warnings")
    else:
        output.success("✔ Safety checks passed")

    output.info(f"Routes analyzed: {len(report.operations)}")
    output.info(f"Protected routes: {report.protected_routes}")
    output.info(f"Public routes: {report.public_routes}")
    output.info(f"Blocking issues: {summary.block}  Warnings: {summary.warn}")

    if blocking:
        if summary.block:
            output.suggest("Declare authentication in the OpenAPI document")
            output.suggest(
                "OR explicitly mark the route as public with a reason (x-public + x-reason)"
            )
        else:
            output.suggest("Strict mode treats warnings as blocking")
        output.info("Deployment would be blocked.")
    elif summary.warn:
        output.info("Deployment would be allowed.")
    else:
        output.info("No blocking issues detected.")


def render_operations(operations: list[NormalizedOperation]) -> None:
    """Print normalized operations as a table, one row per (path, method)."""
    rows = [
        [
            op.method,
            op.path,
            ", ".join(op.security) or "-",
            "yes" if op.is_public_override else "",
            op.public_reason or "",
        ]
        for op in operations
    ]
    get_output().print_table(
        _ROUTE_HEADERS, rows, title=f"Routes ({len(rows)})"
    )
