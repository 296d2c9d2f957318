"""Shared test fixtures for dispatchlint.

Provides reusable fixtures for loading spec fixtures, building throwaway
project directories, isolating environment-driven configuration and managing
output state. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Callable, Optional

import pytest
import yaml
from rich.logging import RichHandler

from dispatchlint.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and package logger after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use, and drops
    any logging handler bound to such a stream.
    """
    yield
    reset_output()
    logger = logging.getLogger("dispatchlint")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from fixture files)
# ---------------------------------------------------------------------------


@pytest.fixture
def mixed_api_raw() -> dict[str, Any]:
    """Spec with one route per rule outcome (block, warns, clean)."""
    with open(FIXTURES_DIR / "mixed_api.json") as f:
        return json.load(f)


@pytest.fixture
def secured_api_raw() -> dict[str, Any]:
    """OpenAPI 3.1 spec in which every route is authenticated or documented public."""
    with open(FIXTURES_DIR / "secured_api.yaml") as f:
        return yaml.safe_load(f)


@pytest.fixture
def minimal_spec() -> dict[str, Any]:
    """Smallest valid document: no paths at all."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Empty", "version": "1.0.0"},
        "paths": {},
    }


# ---------------------------------------------------------------------------
# Project directory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a spec document into a fresh project directory.

    Usage::

        root = make_project({"openapi": "3.0.3", ...})                 # openapi.json
        root = make_project(doc, filename="openapi.yaml")              # YAML dump
        root = make_project(fixture="secured_api.yaml")                # copy fixture
        root = make_project(text="openapi: [", filename="openapi.yml") # raw text

    Returns:
        A callable returning the project root.
    """
    counter = {"n": 0}

    def _make(
        document: Optional[dict[str, Any]] = None,
        filename: Optional[str] = None,
        fixture: Optional[str] = None,
        text: Optional[str] = None,
    ) -> Path:
        counter["n"] += 1
        root = tmp_path / f"project{counter['n']}"
        root.mkdir()

        if fixture is not None:
            shutil.copy(FIXTURES_DIR / fixture, root / (filename or _default_name(fixture)))
        elif text is not None:
            (root / (filename or "openapi.json")).write_text(text, encoding="utf-8")
        elif document is not None:
            filename = filename or "openapi.json"
            if filename.endswith(".json"):
                content = json.dumps(document, indent=2)
            else:
                content = yaml.safe_dump(document, sort_keys=False)
            (root / filename).write_text(content, encoding="utf-8")
        return root

    return _make


def _default_name(fixture: str) -> str:
    """Candidate spec name matching a fixture's extension."""
    suffix = Path(fixture).suffix
    return f"openapi{suffix}"


# ---------------------------------------------------------------------------
# Environment isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and crash logs from the real user environment.

    Points XDG_DATA_HOME into tmp_path, clears every DISPATCHLINT_* variable
    and NO_COLOR, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in [
        "DISPATCHLINT_PROJECT",
        "DISPATCHLINT_STRICT",
        "DISPATCHLINT_ALLOW_MISSING_SPEC",
        "DISPATCHLINT_FORMAT",
        "NO_COLOR",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a PLAIN-format, colourless OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    yield output
    reset_output()

