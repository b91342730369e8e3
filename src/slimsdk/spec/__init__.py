"""OpenAPI input -- load the full spec and compute the effective scope.

Typical usage::

    from slimsdk.spec import load_spec, resolve_scope
    from slimsdk.models import PathAllowlist

    raw = load_spec("https://example.com/openapi.yaml")
    scope = resolve_scope(raw, PathAllowlist(patterns=("/me/**",)))

Sub-modules:

* :mod:`~slimsdk.spec.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~slimsdk.spec.scope` -- Allow-list matching and operation
  filtering.
"""

from slimsdk.spec.loader import load_spec, validate_openapi_version
from slimsdk.spec.scope import (
    extract_operations,
    filter_operations,
    pattern_matches,
    resolve_scope,
    unmatched_patterns,
)

__all__ = [
    "load_spec",
    "validate_openapi_version",
    "extract_operations",
    "filter_operations",
    "pattern_matches",
    "resolve_scope",
    "unmatched_patterns",
]
