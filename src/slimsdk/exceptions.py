"""Exception hierarchy for slimsdk.

All exceptions inherit from :class:`SlimsdkError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`slimsdk.exit_codes`.
The top-level error handler in :func:`slimsdk.app.main` catches
``SlimsdkError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SlimsdkError (exit 1)
    +-- InvalidUsageError      (exit 2)
    |   +-- OutputConflictError (exit 2)
    +-- ConfigError            (exit 1)
    +-- SpecLoadError          (exit 7)
    |   +-- EmptyScopeError     (exit 7)
    +-- ExternalToolError      (exit 1)
        +-- ToolingUnavailable  (exit 1)
        +-- GenerationFailure   (exit 1)
        +-- BuildFailure        (exit 1)
"""

from slimsdk.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_ERROR,
)


class SlimsdkError(Exception):
    """Base exception for all slimsdk errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`slimsdk.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SlimsdkError):
    """Raised for invalid arguments, unknown targets or malformed allow-list patterns."""

    exit_code = EXIT_INVALID_USAGE


class OutputConflictError(InvalidUsageError):
    """Raised when the output directory is non-empty and neither clean nor merge was requested."""


class ConfigError(SlimsdkError):
    """Raised for configuration problems (invalid ``slimsdk.json``, bad overrides)."""

    exit_code = EXIT_GENERIC_FAILURE


class SpecLoadError(SlimsdkError):
    """Raised when the OpenAPI spec cannot be fetched, parsed or is not OpenAPI 3.x."""

    exit_code = EXIT_SPEC_ERROR


class EmptyScopeError(SpecLoadError):
    """Raised when the allow-list matches no operation in the spec."""


class ExternalToolError(SlimsdkError):
    """Base class for failures reported by an external process.

    The tool's raw output is kept verbatim in :attr:`diagnostics` so the CLI
    can show it to the operator. No further interpretation is attempted.

    Args:
        message: Short summary of what failed.
        diagnostics: Raw stdout/stderr text captured from the tool.
        exit_code: Optional override for the class-level exit code.
    """

    def __init__(
        self,
        message: str,
        diagnostics: str = "",
        exit_code: int | None = None,
    ):
        super().__init__(message, exit_code=exit_code)
        self.diagnostics = diagnostics


class ToolingUnavailable(ExternalToolError):
    """Raised when the generator is not installed and auto-install failed."""


class GenerationFailure(ExternalToolError):
    """Raised when the generator ran but exited with a non-zero status."""


class BuildFailure(ExternalToolError):
    """Raised when the downstream build exited with a non-zero status."""
