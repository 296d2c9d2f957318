"""Safety rules -- turn normalized operations into findings and a verdict.

This sub-package is the second half of the dispatchlint pipeline.

Typical usage::

    from dispatchlint.safety import check_project

    report = check_project("path/to/project")
    if not report.safe:
        for finding in report.findings:
            print(finding.severity.value, finding.method, finding.route)

Sub-modules:

* :mod:`~dispatchlint.safety.evaluator` -- the independent rule functions
  plus :func:`is_deployment_safe` and :func:`get_finding_summary`.
* :mod:`~dispatchlint.safety.report` -- :func:`check_project` and
  :func:`build_report`, composing loader, normalizer and evaluator.
"""

from dispatchlint.safety.evaluator import (
    evaluate_operation,
    evaluate_operations,
    get_finding_summary,
    is_deployment_safe,
)
from dispatchlint.safety.report import build_report, check_project

__all__ = [
    "evaluate_operation",
    "evaluate_operations",
    "is_deployment_safe",
    "get_finding_summary",
    "build_report",
    "check_project",
]
