"""Tests for slimsdk.exceptions -- exit code mapping and diagnostics."""

from __future__ import annotations

import pytest

from slimsdk.exceptions import (
    BuildFailure,
    ConfigError,
    EmptyScopeError,
    ExternalToolError,
    GenerationFailure,
    InvalidUsageError,
    OutputConflictError,
    SlimsdkError,
    SpecLoadError,
    ToolingUnavailable,
)
from slimsdk.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE, EXIT_SPEC_ERROR


@pytest.mark.parametrize(
    ("exc_type", "code"),
    [
        (SlimsdkError, EXIT_GENERIC_FAILURE),
        (InvalidUsageError, EXIT_INVALID_USAGE),
        (OutputConflictError, EXIT_INVALID_USAGE),
        (ConfigError, EXIT_GENERIC_FAILURE),
        (SpecLoadError, EXIT_SPEC_ERROR),
        (EmptyScopeError, EXIT_SPEC_ERROR),
        (ToolingUnavailable, EXIT_GENERIC_FAILURE),
        (GenerationFailure, EXIT_GENERIC_FAILURE),
        (BuildFailure, EXIT_GENERIC_FAILURE),
    ],
)
def test_exit_codes(exc_type: type[SlimsdkError], code: int) -> None:
    assert exc_type("x").exit_code == code


def test_exit_code_override() -> None:
    assert SpecLoadError("x", exit_code=3).exit_code == 3


class TestExternalToolError:
    def test_diagnostics_default_empty(self) -> None:
        assert GenerationFailure("failed").diagnostics == ""

    def test_diagnostics_kept_verbatim(self) -> None:
        raw = "line 1\n  line 2 [markup]\n"
        exc = BuildFailure("failed", diagnostics=raw)
        assert exc.diagnostics == raw
        assert str(exc) == "failed"

    @pytest.mark.parametrize("exc_type", [ToolingUnavailable, GenerationFailure, BuildFailure])
    def test_tool_errors_share_base(self, exc_type: type[ExternalToolError]) -> None:
        assert issubclass(exc_type, ExternalToolError)
        assert issubclass(exc_type, SlimsdkError)
