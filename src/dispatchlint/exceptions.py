"""Exception hierarchy for dispatchlint.

All exceptions inherit from :class:`DispatchLintError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`dispatchlint.exit_codes`.
The top-level error handler in :func:`dispatchlint.app.main` catches
``DispatchLintError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Only the spec loader raises; the normalizer and the rule evaluator never do.

Subclass hierarchy::

    DispatchLintError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- ConfigError            (exit 3)
    +-- ProjectNotFoundError   (exit 4)
    +-- SpecNotFoundError      (exit 5)
    +-- UnsupportedFormatError (exit 6)
    +-- SpecParseError         (exit 7)
    +-- InvalidSpecError       (exit 8)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from dispatchlint.exit_codes import (
    EXIT_CONFIG_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_SPEC,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_UNSUPPORTED_FORMAT,
)


class DispatchLintError(Exception):
    """Base exception for all dispatchlint errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`dispatchlint.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(DispatchLintError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(DispatchLintError):
    """Raised for configuration problems (bad ``dispatch.yaml``, invalid env values)."""

    exit_code = EXIT_CONFIG_ERROR


class ProjectNotFoundError(DispatchLintError):
    """Raised when the project root does not exist or is not a directory."""

    exit_code = EXIT_NOT_FOUND


class SpecNotFoundError(DispatchLintError):
    """Raised when no candidate specification file exists in the project root.

    Kept distinct from every other loader error: callers may treat a project
    without any spec as "skip safety checks", while parse and validation
    failures are always hard stops.
    """

    exit_code = EXIT_SPEC_NOT_FOUND


class UnsupportedFormatError(DispatchLintError):
    """Raised when a spec file extension is neither ``.json`` nor ``.yaml``/``.yml``."""

    exit_code = EXIT_UNSUPPORTED_FORMAT


class SpecParseError(DispatchLintError):
    """Raised when a spec file cannot be read or decoded.

    Args:
        message: Human-readable error description, including the decoder
            message.
        path: The file that failed to decode.
    """

    exit_code = EXIT_SPEC_PARSE_ERROR

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class InvalidSpecError(DispatchLintError):
    """Raised when a parsed document is not a structurally sound OpenAPI 3.x spec."""

    exit_code = EXIT_INVALID_SPEC
