"""Routes command -- show the operations the safety rules evaluate.

``dispatchlint routes`` prints one row per normalized (path, method) pair with
its resolved security schemes and public-override marker, in the same order
the checks use. Useful for understanding why a route is or is not flagged.
"""

from __future__ import annotations

from typing import Optional

import typer

from dispatchlint.commands.check import resolve_command_config
from dispatchlint.exceptions import DispatchLintError
from dispatchlint.output import error, info, render_operations
from dispatchlint.parser import load_spec, normalize_spec


def routes_command(
    ctx: typer.Context,
    project: Optional[str] = typer.Option(
        None, "--project", "-p", help="Project root directory. [default: .]"
    ),
) -> None:
    """List normalized API routes with their resolved security.

    Example::

        dispatchlint routes
        dispatchlint --plain routes -p services/api | grep DELETE
    """
    config = resolve_command_config(ctx, cli_project=project)

    try:
        spec = load_spec(config.project_root)
    except DispatchLintError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    operations = normalize_spec(spec)
    if not operations:
        info("No operations defined in this spec.")
        return

    render_operations(operations)
