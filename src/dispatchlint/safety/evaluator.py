"""Authentication-exposure rules over normalized operations.

Each rule is an independent pure function taking one
:class:`~dispatchlint.models.NormalizedOperation` and returning a
:class:`~dispatchlint.models.Finding` or ``None``. There is no priority chain:
every rule is checked for every operation and the results are concatenated,
so adding a rule to :data:`RULES` never changes what the existing ones report.

Rules:

* ``unauthenticated-write`` (block) -- a POST/PUT/PATCH/DELETE that accepts a
  body or targets a resource by path parameter, with neither a security
  scheme nor a public override.
* ``public-without-reason`` (warn) -- ``x-public: true`` without ``x-reason``.
* ``unauthenticated-read`` (warn) -- a GET/HEAD/OPTIONS on a parameterized
  path with no authentication. Unparameterized reads are never flagged.

The evaluator never raises.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from dispatchlint.models import Finding, FindingSummary, NormalizedOperation, Severity

WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
READ_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})

Rule = Callable[[NormalizedOperation], Optional[Finding]]


# --- Predicates ---


def is_write_operation(operation: NormalizedOperation) -> bool:
    return operation.method in WRITE_METHODS


def is_read_operation(operation: NormalizedOperation) -> bool:
    return operation.method in READ_METHODS


def has_authentication(operation: NormalizedOperation) -> bool:
    """Return True if the operation declares security or is deliberately public.

    A public override counts regardless of whether a reason was given.
    """
    return bool(operation.security) or operation.is_public_override


def has_request_surface(operation: NormalizedOperation) -> bool:
    """Return True if the operation accepts caller-supplied data."""
    return operation.has_request_body or operation.has_path_params


# --- Rules ---


def check_unauthenticated_write(operation: NormalizedOperation) -> Optional[Finding]:
    if not (
        is_write_operation(operation)
        and has_request_surface(operation)
        and not has_authentication(operation)
    ):
        return None

    return Finding(
        route=operation.path,
        method=operation.method,
        severity=Severity.BLOCK,
        rule="unauthenticated-write",
        message=(
            f"Write operation {operation.method} {operation.path} must declare "
            "authentication. Add a security scheme or mark it public with "
            "x-public: true and a documented x-reason."
        ),
    )


def check_public_without_reason(operation: NormalizedOperation) -> Optional[Finding]:
    if not operation.is_public_override or operation.public_reason is not None:
        return None

    return Finding(
        route=operation.path,
        method=operation.method,
        severity=Severity.WARN,
        rule="public-without-reason",
        message=(
            f"Public operation {operation.method} {operation.path} should include "
            "x-reason to document why authentication is not required."
        ),
    )


def check_unauthenticated_read(operation: NormalizedOperation) -> Optional[Finding]:
    if not (
        is_read_operation(operation)
        and not has_authentication(operation)
        and operation.has_path_params
    ):
        return None

    return Finding(
        route=operation.path,
        method=operation.method,
        severity=Severity.WARN,
        rule="unauthenticated-read",
        message=(
            f"Read operation {operation.method} {operation.path} with path parameters "
            "has no authentication. Consider whether it exposes sensitive data, and "
            "declare a security scheme or mark it public with x-public and x-reason."
        ),
    )


RULES: tuple[Rule, ...] = (
    check_unauthenticated_write,
    check_public_without_reason,
    check_unauthenticated_read,
)
"""Every rule applied by :func:`evaluate_operation`."""


# --- Aggregation ---


def evaluate_operation(operation: NormalizedOperation) -> list[Finding]:
    """Apply every rule in :data:`RULES` to a single operation."""
    findings: list[Finding] = []
    for rule in RULES:
        finding = rule(operation)
        if finding is not None:
            findings.append(finding)
    return findings


def evaluate_operations(operations: Iterable[NormalizedOperation]) -> list[Finding]:
    """Evaluate each operation independently and return all findings.

    Findings are sorted by route and then by method. The sort is stable, so
    findings for the same operation keep rule order.

    Args:
        operations: Normalized operations, typically from
            :func:`~dispatchlint.parser.normalizer.normalize_spec`.

    Returns:
        A new list of findings; empty when nothing was flagged.
    """
    findings: list[Finding] = []
    for operation in operations:
        findings.extend(evaluate_operation(operation))

    findings.sort(key=lambda f: (f.route, f.method))
    return findings


def is_deployment_safe(findings: Iterable[Finding]) -> bool:
    """Return True iff no finding has ``block`` severity. Warnings never block."""
    return not any(f.severity == Severity.BLOCK for f in findings)


def get_finding_summary(findings: Iterable[Finding]) -> FindingSummary:
    """Count findings by severity. Unknown severities are not counted."""
    block = 0
    warn = 0
    for finding in findings:
        if finding.severity == Severity.BLOCK:
            block += 1
        elif finding.severity == Severity.WARN:
            warn += 1
    return FindingSummary(block=block, warn=warn)
