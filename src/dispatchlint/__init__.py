"""dispatchlint -- Local authentication-exposure linter for OpenAPI 3.x APIs.

Before an API is deployed, every state-mutating route must either declare
authentication or be explicitly marked public with ``x-public``. This package
finds the project's OpenAPI document, normalizes its operations, and evaluates
a fixed set of safety rules, producing ``block`` and ``warn`` findings.

Typical workflow::

    dispatchlint check                  # lint ./openapi.{json,yaml,yml}
    dispatchlint check -p services/api  # lint another project directory
    dispatchlint routes                 # show what the rules evaluate

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: Precedence-based configuration resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric process exit codes.
    output: stdout/stderr formatting system with Rich support.
    parser: Spec discovery, parsing, validation and normalization.
    safety: Rule evaluation and report building.
"""

__version__ = "1.0.0"
