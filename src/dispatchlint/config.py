"""Configuration resolution with a fixed precedence chain.

The core pipeline takes no configuration at all; this module only serves the
CLI. Settings are merged from, highest precedence first:

1. CLI flags (``--project``, ``--strict``, ``--allow-missing-spec``,
   ``--json`` / ``--plain``)
2. Environment variables (``DISPATCHLINT_PROJECT``, ``DISPATCHLINT_STRICT``,
   ``DISPATCHLINT_ALLOW_MISSING_SPEC``, ``DISPATCHLINT_FORMAT``)
3. The ``safety:`` section of the project's ``dispatch.yaml``
4. Defaults declared on :class:`~dispatchlint.models.LintConfig`

Example ``dispatch.yaml``::

    project: payments-api
    runtime: python3.12
    safety:
      strict: true
      allow_missing_spec: false

Keys outside ``safety:`` belong to the deployment tooling and are ignored.

:func:`get_data_dir` provides the XDG-aware directory for crash logs.
"""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Any, Optional

import yaml

from dispatchlint.exceptions import ConfigError
from dispatchlint.models import LintConfig

_APP_NAME = "dispatchlint"
PROJECT_CONFIG_FILENAME = "dispatch.yaml"
_SECTION = "safety"

_ENV_PROJECT = "DISPATCHLINT_PROJECT"
_ENV_STRICT = "DISPATCHLINT_STRICT"
_ENV_ALLOW_MISSING = "DISPATCHLINT_ALLOW_MISSING_SPEC"
_ENV_FORMAT = "DISPATCHLINT_FORMAT"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/dispatchlint/`` (default
    ``~/.local/share/dispatchlint/``). Elsewhere: ``~/.dispatchlint/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project-local config ---


def load_project_config(project_root: str | Path) -> dict[str, Any]:
    """Load the ``safety:`` section of ``<project_root>/dispatch.yaml``.

    Args:
        project_root: The project directory.

    Returns:
        The section as a dict; empty when the file or the section is absent.

    Raises:
        ConfigError: If the file is not valid YAML, or the file or section is
            not a mapping.
    """
    path = Path(project_root) / PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a mapping")

    section = data.get(_SECTION)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Invalid project config at {path}: '{_SECTION}' must be a mapping"
        )
    if "project_root" in section:
        raise ConfigError(
            f"Invalid project config at {path}: 'project_root' cannot be set "
            "from inside the project"
        )
    return dict(section)


# --- Environment ---


def _env_bool(name: str) -> Optional[bool]:
    """Read a boolean environment variable, or None when unset or empty."""
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return None
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable {name} must be a boolean, got '{raw}'")


# --- Precedence resolution ---


def resolve_config(
    cli_project: Optional[str] = None,
    cli_strict: Optional[bool] = None,
    cli_allow_missing_spec: Optional[bool] = None,
    cli_format: Optional[str] = None,
) -> LintConfig:
    """Resolve the effective configuration.

    The project root is resolved first (CLI > env > ``"."``) because it
    decides which ``dispatch.yaml`` is read. ``None`` for any ``cli_*``
    argument means the flag was not given.

    Returns:
        The validated :class:`~dispatchlint.models.LintConfig`.

    Raises:
        ConfigError: If ``dispatch.yaml`` or an environment value is invalid.
    """
    project_root = cli_project or os.environ.get(_ENV_PROJECT) or "."

    # 3. Project config
    values: dict[str, Any] = load_project_config(project_root)

    # 2. Environment
    env_strict = _env_bool(_ENV_STRICT)
    if env_strict is not None:
        values["strict"] = env_strict
    env_allow_missing = _env_bool(_ENV_ALLOW_MISSING)
    if env_allow_missing is not None:
        values["allow_missing_spec"] = env_allow_missing
    env_format = os.environ.get(_ENV_FORMAT)
    if env_format:
        values["output_format"] = env_format

    # 1. CLI flags
    if cli_strict is not None:
        values["strict"] = cli_strict
    if cli_allow_missing_spec is not None:
        values["allow_missing_spec"] = cli_allow_missing_spec
    if cli_format is not None:
        values["output_format"] = cli_format

    values["project_root"] = project_root

    try:
        return LintConfig.model_validate(values)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
