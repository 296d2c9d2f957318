"""Canonical Pydantic models shared across all dispatchlint modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Raw document view** -- a tolerant, alias-keyed window onto one OpenAPI
operation object:
    :class:`OperationObject`.

**Pipeline records** -- produced by the normalizer and the rule evaluator,
frozen after creation:
    :class:`HTTPMethod`, :class:`Severity`, :class:`NormalizedOperation`,
    :class:`Finding`, :class:`FindingSummary`, and :class:`SafetyReport`.

**Configuration** -- the effective settings for one CLI invocation:
    :class:`LintConfig`.

All models use Pydantic v2.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


# --- Raw document view ---


class OperationObject(BaseModel):
    """The fields of an OpenAPI *Operation Object* the safety rules look at.

    Every field is typed ``Any`` so that decoding a hand-written document
    never fails; the normalizer checks the shape of each value itself. Unknown
    keys (``summary``, ``responses``, other vendor extensions) are ignored,
    and so are the Python field names: ``x_public`` in a document is not
    ``x-public``.

    Whether a key was present in the source is available through
    ``model_fields_set``: an operation with ``security: []`` and one without
    a ``security`` key at all resolve differently.

    Example::

        op = OperationObject.model_validate({"x-public": True, "security": []})
        "security" in op.model_fields_set   # True
        "request_body" in op.model_fields_set  # False
    """

    model_config = ConfigDict(extra="ignore")

    request_body: Any = Field(default=None, alias="requestBody")
    parameters: Any = None
    security: Any = None
    x_public: Any = Field(default=None, alias="x-public")
    x_reason: Any = Field(default=None, alias="x-reason")


# --- Pipeline records ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods the normalizer accepts from OpenAPI path-item objects.

    ``trace`` is not accepted: path-item keys outside this set are
    skipped, as are non-method keys such as ``parameters`` or ``summary``.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"


class Severity(str, enum.Enum):
    """Severity of a :class:`Finding`.

    ``BLOCK`` findings refuse deployment; ``WARN`` findings are advisory.
    """

    BLOCK = "block"
    WARN = "warn"


class NormalizedOperation(BaseModel):
    """One canonical record per (path, method) pair in the source document."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(description="Uppercase HTTP verb, e.g. 'POST'")
    path: str = Field(description="Path template, unmodified")
    has_request_body: bool = False
    has_path_params: bool = False
    security: list[str] = Field(
        default_factory=list,
        description="Resolved security scheme names; empty means no auth requirement",
    )
    is_public_override: bool = False
    public_reason: Optional[str] = None


class Finding(BaseModel):
    """A single diagnostic emitted by the rule evaluator."""

    model_config = ConfigDict(frozen=True)

    route: str
    method: str
    severity: Severity
    message: str
    rule: str = Field(default="", description="Identifier of the rule that fired")


class FindingSummary(BaseModel):
    """Counts of findings by severity. Always derived from a finding list."""

    model_config = ConfigDict(frozen=True)

    block: int = 0
    warn: int = 0

    @property
    def total(self) -> int:
        return self.block + self.warn


class SafetyReport(BaseModel):
    """Complete outcome of linting one project.

    Produced by :func:`~dispatchlint.safety.report.check_project` and consumed
    by the CLI renderers. ``skipped`` reports are returned only when the
    caller opted into tolerating a project without any specification.

    See Also:
        :func:`~dispatchlint.safety.report.build_report`: Build a report from
        an already-loaded document.
    """

    model_config = ConfigDict(frozen=True)

    spec_path: Optional[Path] = None
    openapi_version: Optional[str] = None
    operations: list[NormalizedOperation] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)
    summary: FindingSummary = Field(default_factory=FindingSummary)
    safe: bool = True
    skipped: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def protected_routes(self) -> int:
        """Operations with a resolved security scheme and no public override."""
        return sum(
            1 for op in self.operations if op.security and not op.is_public_override
        )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def public_routes(self) -> int:
        """Operations without a resolved security scheme, or marked public."""
        return sum(
            1 for op in self.operations if not op.security or op.is_public_override
        )

    def is_blocking(self, strict: bool = False) -> bool:
        """Return True when this report must stop a deployment.

        Args:
            strict: Treat warnings as blocking as well.
        """
        if strict:
            return bool(self.findings)
        return not self.safe


# --- Configuration ---

_OUTPUT_FORMATS = ("auto", "json", "plain", "rich")


class LintConfig(BaseModel):
    """Effective settings for one invocation.

    Resolved by :func:`~dispatchlint.config.resolve_config` from CLI flags,
    environment variables, the project's ``dispatch.yaml`` and these
    defaults. The core pipeline never reads this model; only the CLI does.
    """

    model_config = ConfigDict(extra="forbid")

    project_root: str = Field(default=".", description="Directory holding the spec")
    strict: bool = Field(default=False, description="Fail on warnings too")
    allow_missing_spec: bool = Field(
        default=False, description="Skip checks instead of failing when no spec exists"
    )
    output_format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )

    @field_validator("output_format")
    @classmethod
    def _check_output_format(cls, value: str) -> str:
        value = value.lower()
        if value not in _OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {', '.join(_OUTPUT_FORMATS)}, got '{value}'"
            )
        return value
