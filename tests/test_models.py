"""Tests for dispatchlint.models and the exception hierarchy."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from dispatchlint.exceptions import (
    ConfigError,
    DispatchLintError,
    InvalidSpecError,
    InvalidUsageError,
    ProjectNotFoundError,
    SpecNotFoundError,
    SpecParseError,
    UnsupportedFormatError,
)
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
from dispatchlint.models import (
    Finding,
    LintConfig,
    NormalizedOperation,
    OperationObject,
    SafetyReport,
    Severity,
)


class TestOperationObject:
    def test_aliases(self) -> None:
        op = OperationObject.model_validate(
            {"requestBody": {}, "x-public": True, "x-reason": "why", "security": []}
        )
        assert op.request_body == {}
        assert op.x_public is True
        assert op.x_reason == "why"
        assert op.security == []

    def test_unknown_keys_ignored(self) -> None:
        op = OperationObject.model_validate({"summary": "s", "responses": {}, "x-other": 1})
        assert op.model_fields_set == set()

    def test_field_names_are_not_document_keys(self) -> None:
        op = OperationObject.model_validate(
            {"request_body": {}, "x_public": True, "x_reason": "why"}
        )
        assert op.model_fields_set == set()
        assert op.x_public is None

    def test_presence_is_tracked(self) -> None:
        assert "security" in OperationObject.model_validate({"security": None}).model_fields_set
        assert "security" not in OperationObject.model_validate({}).model_fields_set

    def test_loose_values_accepted(self) -> None:
        op = OperationObject.model_validate({"parameters": "nope", "x-public": "yes"})
        assert op.parameters == "nope"
        assert op.x_public == "yes"


class TestRecords:
    def test_normalized_operation_is_frozen(self) -> None:
        op = NormalizedOperation(method="GET", path="/a")
        with pytest.raises(ValidationError):
            op.method = "POST"

    def test_finding_equality(self) -> None:
        a = Finding(route="/a", method="GET", severity=Severity.WARN, message="m")
        b = Finding(route="/a", method="GET", severity=Severity.WARN, message="m")
        assert a == b

    def test_empty_report_defaults(self) -> None:
        report = SafetyReport()
        assert report.safe is True
        assert report.skipped is False
        assert report.protected_routes == 0
        assert report.public_routes == 0
        assert report.summary.total == 0

    def test_public_override_counts_as_public_even_with_security(self) -> None:
        report = SafetyReport(
            operations=[
                NormalizedOperation(method="GET", path="/a", security=["k"], is_public_override=True),
                NormalizedOperation(method="GET", path="/b", security=["k"]),
            ]
        )
        assert report.protected_routes == 1
        assert report.public_routes == 1

    def test_spec_path_serialises_as_string(self) -> None:
        dumped = SafetyReport(spec_path=Path("/srv/openapi.json")).model_dump(mode="json")
        assert dumped["spec_path"] == str(Path("/srv/openapi.json"))


class TestLintConfig:
    def test_defaults(self) -> None:
        cfg = LintConfig()
        assert (cfg.project_root, cfg.strict, cfg.allow_missing_spec, cfg.output_format) == (
            ".",
            False,
            False,
            "auto",
        )

    def test_output_format_lowercased(self) -> None:
        assert LintConfig(output_format="Rich").output_format == "rich"

    def test_output_format_rejected(self) -> None:
        with pytest.raises(ValidationError, match="output_format must be one of"):
            LintConfig(output_format="yaml")

    def test_extra_keys_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            LintConfig.model_validate({"strictt": True})


class TestExceptions:
    @pytest.mark.parametrize(
        ("exc_type", "code"),
        [
            (DispatchLintError, EXIT_GENERIC_FAILURE),
            (InvalidUsageError, EXIT_INVALID_USAGE),
            (ConfigError, EXIT_CONFIG_ERROR),
            (ProjectNotFoundError, EXIT_NOT_FOUND),
            (SpecNotFoundError, EXIT_SPEC_NOT_FOUND),
            (UnsupportedFormatError, EXIT_UNSUPPORTED_FORMAT),
            (SpecParseError, EXIT_SPEC_PARSE_ERROR),
            (InvalidSpecError, EXIT_INVALID_SPEC),
        ],
    )
    def test_default_exit_codes(self, exc_type: type[DispatchLintError], code: int) -> None:
        err = exc_type("boom")
        assert err.exit_code == code
        assert str(err) == "boom"
        assert isinstance(err, DispatchLintError)

    def test_explicit_exit_code(self) -> None:
        assert DispatchLintError("x", exit_code=42).exit_code == 42

    def test_spec_parse_error_path(self) -> None:
        err = SpecParseError("bad", path="openapi.json")
        assert err.path == Path("openapi.json")
        assert SpecParseError("bad").path is None
