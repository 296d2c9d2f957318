"""Flatten an OpenAPI document into canonical, sorted operation records.

This module walks the ``paths`` object of a validated OpenAPI 3.x document and
builds one :class:`~dispatchlint.models.NormalizedOperation` per supported
path + HTTP method combination. Each raw operation object is first decoded into
an :class:`~dispatchlint.models.OperationObject`; the private helpers then read
the handful of fields the safety rules care about:

* ``_has_path_params`` -- templated path or an ``in: path`` parameter.
* ``_resolve_security`` -- operation-level ``security`` overrides the
  document default, even when it is an empty list.
* ``_flatten_security`` -- scheme names of every requirement, in order.
* ``_public_override`` -- the ``x-public`` / ``x-reason`` vendor pair.

The normalizer never raises. Malformed entries (a path item or operation that
is not a mapping, a ``parameters`` value that is not a list) contribute
nothing instead of aborting the whole document.
"""

from __future__ import annotations

from typing import Any, Optional

from dispatchlint.models import HTTPMethod, NormalizedOperation, OperationObject

_SUPPORTED_METHODS = frozenset(m.value for m in HTTPMethod)


def normalize_spec(spec: dict[str, Any]) -> list[NormalizedOperation]:
    """Normalize every supported operation in *spec*.

    Args:
        spec: A document accepted by
            :func:`~dispatchlint.parser.loader.validate_spec`.

    Returns:
        One record per (path, method) pair, sorted by path and then by
        method. Calling this twice on the same document yields equal lists.

    Example::

        ops = normalize_spec(load_spec("."))
        for op in ops:
            print(op.method, op.path, op.security or "-")
    """
    default_security = spec.get("security")
    if not isinstance(default_security, list):
        default_security = []

    paths = spec.get("paths")
    if not isinstance(paths, dict):
        return []

    operations: list[NormalizedOperation] = []

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        for method, operation in path_item.items():
            if str(method).lower() not in _SUPPORTED_METHODS:
                continue
            if not isinstance(operation, dict):
                continue

            operations.append(
                _normalize_operation(str(path), str(method), operation, default_security)
            )

    operations.sort(key=lambda op: (op.path, op.method))
    return operations


def _normalize_operation(
    path: str,
    method: str,
    raw: dict[str, Any],
    default_security: list[Any],
) -> NormalizedOperation:
    """Build the canonical record for one raw operation object."""
    operation = OperationObject.model_validate(raw)
    is_public, reason = _public_override(operation)

    return NormalizedOperation(
        method=method.upper(),
        path=path,
        has_request_body="request_body" in operation.model_fields_set,
        has_path_params=_has_path_params(path, operation),
        security=_flatten_security(_resolve_security(operation, default_security)),
        is_public_override=is_public,
        public_reason=reason,
    )


def _has_path_params(path: str, operation: OperationObject) -> bool:
    """Return True if the path is templated or the operation declares a path parameter.

    Only operation-level ``parameters`` are inspected; either condition alone
    is sufficient.
    """
    if "{" in path and "}" in path:
        return True

    parameters = operation.parameters
    if not isinstance(parameters, list):
        return False

    return any(
        isinstance(param, dict) and param.get("in") == "path" for param in parameters
    )


def _resolve_security(operation: OperationObject, default_security: list[Any]) -> Any:
    """Pick the security requirement list that applies to *operation*.

    A ``security`` key on the operation replaces the document default, even
    when its value is an empty list (an explicit "no auth").
    """
    if "security" in operation.model_fields_set:
        return operation.security
    return default_security


def _flatten_security(requirements: Any) -> list[str]:
    """Concatenate the scheme names of every requirement object, in order.

    Alternatives are not modelled: ``[{"a": []}, {"a": [], "b": []}]``
    flattens to ``["a", "a", "b"]``.
    """
    if not isinstance(requirements, list):
        return []

    names: list[str] = []
    for requirement in requirements:
        if isinstance(requirement, dict):
            names.extend(str(name) for name in requirement)
    return names


def _public_override(operation: OperationObject) -> tuple[bool, Optional[str]]:
    """Read the ``x-public`` / ``x-reason`` pair.

    Only the boolean ``true`` counts as public; the string ``"true"`` does
    not. The reason is kept only for public operations and only when truthy.
    """
    is_public = operation.x_public is True
    if not is_public or not operation.x_reason:
        return is_public, None

    reason = operation.x_reason
    return True, reason if isinstance(reason, str) else str(reason)
