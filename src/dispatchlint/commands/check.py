"""Check command -- run the local safety checks on a project.

``dispatchlint check`` loads the project's OpenAPI document, evaluates the
authentication-exposure rules and exits non-zero when deployment must be
refused. Warnings are printed but do not fail the command unless ``--strict``
is given.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from dispatchlint.config import resolve_config
from dispatchlint.exceptions import DispatchLintError
from dispatchlint.exit_codes import EXIT_UNSAFE
from dispatchlint.models import LintConfig
from dispatchlint.output import apply_output_format, debug, error, render_report
from dispatchlint.safety.report import check_project


def resolve_command_config(ctx: typer.Context, **cli: Any) -> LintConfig:
    """Resolve configuration for a sub-command and apply its output format.

    Keyword arguments are forwarded to
    :func:`~dispatchlint.config.resolve_config`. The ``--json`` / ``--plain``
    root flags stored in ``ctx.obj`` take precedence over any configured
    format.

    Raises:
        typer.Exit: With the error's exit code when configuration is invalid.
    """
    obj = ctx.obj or {}
    try:
        config = resolve_config(cli_format=obj.get("format"), **cli)
    except DispatchLintError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    apply_output_format(config.output_format)
    debug(f"Resolved config: {config.model_dump()}")
    return config


def check_command(
    ctx: typer.Context,
    project: Optional[str] = typer.Option(
        None, "--project", "-p", help="Project root directory. [default: .]"
    ),
    strict: Optional[bool] = typer.Option(
        None, "--strict/--no-strict", help="Fail on warnings as well as blocking issues."
    ),
    allow_missing_spec: Optional[bool] = typer.Option(
        None,
        "--allow-missing-spec/--require-spec",
        help="Skip the checks instead of failing when the project has no spec.",
    ),
) -> None:
    """Run local safety checks on your API.

    Every write route (POST, PUT, PATCH, DELETE) that accepts a body or a
    path parameter must declare a security scheme or be marked
    ``x-public: true`` with an ``x-reason``.

    Example::

        dispatchlint check
        dispatchlint check --project services/api --strict
        dispatchlint --json check > safety.json
    """
    config = resolve_command_config(
        ctx,
        cli_project=project,
        cli_strict=strict,
        cli_allow_missing_spec=allow_missing_spec,
    )

    try:
        report = check_project(
            config.project_root, allow_missing_spec=config.allow_missing_spec
        )
    except DispatchLintError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    render_report(report, strict=config.strict)

    if report.is_blocking(strict=config.strict):
        raise typer.Exit(code=EXIT_UNSAFE)
