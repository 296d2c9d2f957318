"""OpenAPI spec parser -- discover, load, validate, and normalize operations.

This sub-package is the first half of the dispatchlint pipeline: it turns the
OpenAPI 3.x document of a project directory (JSON or YAML) into the flat list
of :class:`~dispatchlint.models.NormalizedOperation` records the safety rules
consume.

Typical usage::

    from dispatchlint.parser import load_spec, normalize_spec

    raw = load_spec("path/to/project")
    operations = normalize_spec(raw)

Sub-modules:

* :mod:`~dispatchlint.parser.loader` -- file discovery, JSON/YAML decoding and
  OpenAPI 3.x structural validation. The only part of the pipeline that
  raises.
* :mod:`~dispatchlint.parser.normalizer` -- walks ``paths`` and produces
  sorted :class:`~dispatchlint.models.NormalizedOperation` records.
"""

from dispatchlint.parser.loader import (
    discover_spec_file,
    find_spec_file,
    load_spec,
    parse_spec_file,
    validate_spec,
)
from dispatchlint.parser.normalizer import normalize_spec

__all__ = [
    "discover_spec_file",
    "find_spec_file",
    "parse_spec_file",
    "validate_spec",
    "load_spec",
    "normalize_spec",
]
