"""Compose the full pipeline for one project into a :class:`SafetyReport`.

:func:`check_project` is what callers (the ``check`` command, deploy
tooling) use: it loads the project's spec, normalizes it, evaluates the rules
and bundles everything with the aggregate verdict. :func:`build_report` does
the same for a document that is already in memory.

A project without any specification is an error by default. Callers that
treat "no spec at all" as "nothing to check" pass ``allow_missing_spec=True``
and get back an empty report flagged ``skipped``. Parse and validation
failures always propagate.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Union

from dispatchlint.exceptions import SpecNotFoundError
from dispatchlint.models import SafetyReport
from dispatchlint.parser.loader import find_spec_file, parse_spec_file, validate_spec
from dispatchlint.parser.normalizer import normalize_spec
from dispatchlint.safety.evaluator import (
    evaluate_operations,
    get_finding_summary,
    is_deployment_safe,
)

logger = logging.getLogger(__name__)


def build_report(
    spec: dict[str, Any],
    spec_path: Optional[Path] = None,
) -> SafetyReport:
    """Normalize and evaluate an already-validated document.

    Args:
        spec: A document accepted by
            :func:`~dispatchlint.parser.loader.validate_spec`.
        spec_path: Where the document came from, for display only.

    Returns:
        A report holding the operations, findings, summary and verdict.
    """
    operations = normalize_spec(spec)
    findings = evaluate_operations(operations)
    summary = get_finding_summary(findings)
    logger.debug(
        "Evaluated %d operations: %d blocking, %d warnings",
        len(operations),
        summary.block,
        summary.warn,
    )

    version = spec.get("openapi")
    return SafetyReport(
        spec_path=spec_path,
        openapi_version=version if isinstance(version, str) else None,
        operations=operations,
        findings=findings,
        summary=summary,
        safe=is_deployment_safe(findings),
    )


def check_project(
    project_root: Union[str, Path] = ".",
    allow_missing_spec: bool = False,
) -> SafetyReport:
    """Run the whole safety pipeline on a project directory.

    Args:
        project_root: The directory holding ``openapi.json`` or one of the
            other candidate spec files.
        allow_missing_spec: Return a ``skipped`` report instead of raising
            when the project has no specification.

    Returns:
        The resulting :class:`~dispatchlint.models.SafetyReport`.

    Raises:
        ProjectNotFoundError: If *project_root* is missing or not a directory.
        SpecNotFoundError: If there is no spec and *allow_missing_spec* is
            False.
        UnsupportedFormatError: If the spec file has an unknown extension.
        SpecParseError: If the spec file cannot be decoded.
        InvalidSpecError: If the document fails structural validation.
    """
    try:
        path = find_spec_file(project_root)
    except SpecNotFoundError:
        if not allow_missing_spec:
            raise
        logger.debug("No spec in %s, skipping safety checks", project_root)
        return SafetyReport(skipped=True)

    spec = parse_spec_file(path)
    validate_spec(spec)
    return build_report(spec, spec_path=path)
