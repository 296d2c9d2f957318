"""Discover, parse, and validate the OpenAPI specification of a project.

This module handles all I/O of the safety pipeline: it locates exactly one
specification file in a project directory, decodes it as JSON or YAML based on
its extension, and checks that the result is a structurally sound OpenAPI 3.x
document.

The public functions are:

* :func:`discover_spec_file` -- Find the first candidate spec file.
* :func:`find_spec_file` -- The same, raising when there is none.
* :func:`parse_spec_file` -- Decode a spec file into a Python object.
* :func:`validate_spec` -- Check the top-level OpenAPI 3.x structure.
* :func:`load_spec` -- Compose the three steps for a project directory.

After loading, the raw dict should be passed to
:func:`~dispatchlint.parser.normalizer.normalize_spec`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from dispatchlint.exceptions import (
    InvalidSpecError,
    ProjectNotFoundError,
    SpecNotFoundError,
    SpecParseError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)

SPEC_FILE_CANDIDATES = (
    "openapi.json",
    "openapi.yaml",
    "openapi.yml",
    "swagger.json",
    "swagger.yaml",
    "swagger.yml",
)
"""File names searched in the project root, in priority order."""

_JSON_SUFFIXES = frozenset({".json"})
_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def discover_spec_file(project_root: Union[str, Path]) -> Optional[Path]:
    """Find the specification file in *project_root*.

    Candidates from :data:`SPEC_FILE_CANDIDATES` are checked in order and the
    first one that exists as a regular file wins. Directories named like a
    candidate are ignored.

    Args:
        project_root: The project directory to search.

    Returns:
        The path of the first matching file, or ``None`` when there is none.

    Raises:
        ProjectNotFoundError: If *project_root* does not exist or is not a
            directory.
    """
    root = Path(project_root).resolve()

    if not root.exists():
        raise ProjectNotFoundError(f"Project root directory does not exist: {project_root}")

    if not root.is_dir():
        raise ProjectNotFoundError(f"Project root is not a directory: {project_root}")

    for candidate in SPEC_FILE_CANDIDATES:
        path = root / candidate
        if path.is_file():
            logger.debug("Discovered spec file %s", path)
            return path

    logger.debug("No spec file found in %s", root)
    return None


def find_spec_file(project_root: Union[str, Path]) -> Path:
    """Like :func:`discover_spec_file`, but a missing spec is an error.

    Raises:
        ProjectNotFoundError: If *project_root* is missing or not a directory.
        SpecNotFoundError: If no candidate spec file exists.
    """
    path = discover_spec_file(project_root)
    if path is None:
        raise SpecNotFoundError(
            "No OpenAPI specification found. "
            "An OpenAPI v3 contract is required to verify API safety "
            f"(looked for {', '.join(SPEC_FILE_CANDIDATES)} in {project_root})."
        )
    return path


def parse_spec_file(path: Union[str, Path]) -> Any:
    """Read *path* and decode it according to its extension.

    ``.json`` files are decoded as JSON, ``.yaml`` and ``.yml`` files as YAML
    (``yaml.safe_load``). Extension matching is case-insensitive. The decoded
    value is returned as-is; :func:`validate_spec` rejects anything that is
    not a mapping.

    Args:
        path: The specification file.

    Returns:
        The decoded document.

    Raises:
        UnsupportedFormatError: If the extension is not JSON or YAML.
        SpecParseError: If the file cannot be read or decoded. The message
            includes the file path and the underlying decoder message.
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()

    if suffix not in _JSON_SUFFIXES and suffix not in _YAML_SUFFIXES:
        raise UnsupportedFormatError(
            f"Unsupported file extension '{file_path.suffix}' for {file_path}. "
            "Expected .json, .yaml, or .yml"
        )

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SpecParseError(
            f"Failed to read OpenAPI file '{file_path}': {exc}", path=file_path
        ) from exc

    try:
        if suffix in _JSON_SUFFIXES:
            return json.loads(content)
        return yaml.safe_load(content)
    except json.JSONDecodeError as exc:
        raise SpecParseError(
            f"Failed to parse OpenAPI file '{file_path}': {exc}", path=file_path
        ) from exc
    except yaml.YAMLError as exc:
        raise SpecParseError(
            f"Failed to parse OpenAPI file '{file_path}': {exc}", path=file_path
        ) from exc


def validate_spec(document: Any) -> str:
    """Check that *document* is a structurally sound OpenAPI 3.x document.

    The checks run in a fixed order and the first violation is reported:

    1. the ``openapi`` field is present,
    2. it is a string,
    3. it starts with ``"3."`` (Swagger 2.0 is rejected, never coerced),
    4. the ``info`` block is present,
    5. the ``paths`` map is present (an empty map is fine).

    Args:
        document: The decoded specification.

    Returns:
        The OpenAPI version string (e.g. ``'3.0.3'``).

    Raises:
        InvalidSpecError: On the first structural violation found.
    """
    if not isinstance(document, dict):
        kind = "empty document" if document is None else type(document).__name__
        raise InvalidSpecError(
            f"Invalid OpenAPI specification: expected a mapping at the top level, got {kind}."
        )

    version = document.get("openapi")
    if version is None or (not version and isinstance(version, (str, int, float))):
        msg = "Invalid OpenAPI specification: missing required top-level field 'openapi'."
        if "swagger" in document:
            msg += (
                f" Found 'swagger: {document['swagger']}'; "
                "OpenAPI v2 / Swagger 2.0 is not supported."
            )
        raise InvalidSpecError(msg)

    if not isinstance(version, str):
        raise InvalidSpecError(
            "Invalid OpenAPI specification: 'openapi' field must be a string, "
            f"got {type(version).__name__}."
        )

    if not version.startswith("3."):
        if version.startswith("2"):
            raise InvalidSpecError(
                "Invalid OpenAPI specification: OpenAPI v2 / Swagger 2.0 is not supported. "
                f"Found version '{version}', but OpenAPI v3.x is required."
            )
        raise InvalidSpecError(
            f"Invalid OpenAPI specification: unsupported version '{version}'. "
            "OpenAPI v3.x is required."
        )

    if document.get("info") is None:
        raise InvalidSpecError(
            "Invalid OpenAPI specification: missing required top-level field 'info'."
        )

    if document.get("paths") is None:
        raise InvalidSpecError(
            "Invalid OpenAPI specification: missing required top-level field 'paths'."
        )

    return version


def load_spec(project_root: Union[str, Path] = ".") -> dict[str, Any]:
    """Discover, parse, and validate the specification of a project.

    Args:
        project_root: The project directory. Defaults to the current
            directory.

    Returns:
        The validated specification document.

    Raises:
        ProjectNotFoundError: If *project_root* is missing or not a directory.
        SpecNotFoundError: If no candidate spec file exists.
        UnsupportedFormatError: If the spec file has an unknown extension.
        SpecParseError: If the spec file cannot be decoded.
        InvalidSpecError: If the document fails structural validation.
    """
    path = find_spec_file(project_root)
    document = parse_spec_file(path)
    version = validate_spec(document)
    logger.debug("Loaded OpenAPI %s document from %s", version, path)
    return document
