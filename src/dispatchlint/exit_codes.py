"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~dispatchlint.exceptions.DispatchLintError` subclass.
CI pipelines and deploy scripts can inspect the exit code to tell a blocked
deployment apart from a broken or missing specification without parsing
stderr.

Example::

    $ dispatchlint check
    $ echo $?
    10  # EXIT_UNSAFE -- at least one blocking finding
"""

EXIT_SUCCESS = 0
"""The check completed and the API is safe to deploy (warnings allowed)."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_CONFIG_ERROR = 3
"""The configuration (``dispatch.yaml`` or environment) is invalid."""

EXIT_NOT_FOUND = 4
"""The project root does not exist or is not a directory."""

EXIT_SPEC_NOT_FOUND = 5
"""No OpenAPI specification file was found in the project root."""

EXIT_UNSUPPORTED_FORMAT = 6
"""The specification file has an extension other than JSON or YAML."""

EXIT_SPEC_PARSE_ERROR = 7
"""The specification file could not be decoded as JSON or YAML."""

EXIT_INVALID_SPEC = 8
"""The document parsed but is not a structurally valid OpenAPI 3.x document."""

EXIT_UNSAFE = 10
"""The safety check produced blocking findings; deployment must not proceed."""
