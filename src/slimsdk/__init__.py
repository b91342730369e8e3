"""slimsdk -- Generate reduced, drop-in-compatible SDKs from large OpenAPI specs.

This package turns a full-surface OpenAPI description into a *slim* client
library. It keeps only an allow-list of endpoint path prefixes, delegates the
actual code generation to Kiota, and then writes two derived artifacts into
the generated tree: a build descriptor and a compatibility shim that restores
the convenience constructors and disposal behaviour callers of the full
library rely on.

Typical workflow::

    slimsdk scope                    # preview the endpoints that will be kept
    slimsdk generate --clean         # regenerate from scratch and build

Modules:
    app: Typer application and CLI entry point.
    pipeline: The staged controller that sequences a run.
    models: Pydantic models shared across the package.
    defaults: Fixed spec URL, allow-list, manifests and compatibility contract.
    config: Project-local overrides, XDG paths and atomic writes.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
