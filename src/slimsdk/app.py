"""Command line for slimsdk.

``slimsdk generate`` runs the whole regeneration: Kiota over the allow-listed
paths, then the build descriptor and compatibility shim, then the build
(unless ``--skip-build``). ``slimsdk scope`` only lists what the allow-list
selects from the spec.

Commands report their own :class:`~slimsdk.exceptions.SlimsdkError` failures
and exit with the error's code. :func:`main` catches what escapes: Ctrl-C
exits 130 and any other exception leaves a crash log behind.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn

import typer

from slimsdk import __version__
from slimsdk.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="slimsdk",
    help="Generate a reduced Microsoft Graph client from an endpoint allow-list.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"slimsdk {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the slimsdk version.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Write command data to stdout as JSON."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Write command data as tab-separated text."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Never style terminal output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only report warnings and errors."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug lines and tool command lines."
    ),
) -> None:
    """Install the output manager chosen by the global flags.

    ``--verbose`` additionally routes ``logging`` at DEBUG to stderr, which
    is where subprocess command lines and exit codes are logged.
    """
    from slimsdk.output import OutputFormat, OutputManager, set_output

    if json_output:
        data_format = OutputFormat.JSON
    elif plain_output:
        data_format = OutputFormat.PLAIN
    else:
        data_format = OutputFormat.AUTO

    set_output(
        OutputManager(format=data_format, no_color=no_color, quiet=quiet, verbose=verbose)
    )

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


@app.command("generate")
def generate_command(
    clean: bool = typer.Option(
        False, "--clean", help="Delete the output directory before generating."
    ),
    skip_build: bool = typer.Option(
        False, "--skip-build", help="Stop after writing the descriptor and shim."
    ),
) -> None:
    """Regenerate the slim client, synthesize its project files and build it.

    Raises:
        typer.Exit: With the failing error's exit code. Generator and build
            failures exit 1 after printing the tail of the tool's output.

    Example::

        slimsdk generate --clean
        slimsdk generate --skip-build
    """
    from slimsdk.config import resolve_config
    from slimsdk.exceptions import ExternalToolError, SlimsdkError
    from slimsdk.output import diagnostics, error, info, success, suggest
    from slimsdk.pipeline import PipelineController
    from slimsdk.targets import get_target

    try:
        run_config = resolve_config()
        result = PipelineController(
            run_config, clean=clean, skip_build=skip_build
        ).run()
    except ExternalToolError as exc:
        error(str(exc))
        diagnostics(exc.diagnostics)
        raise typer.Exit(code=exc.exit_code) from None
    except SlimsdkError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Generated {result.tree}")
    if result.artifact is not None:
        size_mb = result.artifact.size_bytes / (1024 * 1024)
        info(f"Artifact: {result.artifact.path} ({size_mb:.2f} MB)")
    elif not skip_build:
        info("Build succeeded but no artifact was found at the expected location.")

    if skip_build:
        target = get_target(run_config.generation.language)
        command = target.build_command(run_config.generation, run_config.manifest)
        suggest(f"Build it later with: {' '.join(command)}")


@app.command("scope")
def scope_command() -> None:
    """Print the operations selected by the allow-list.

    Loads the configured spec and lists every operation whose path matches
    an allow-list pattern, in document order. Nothing is generated.

    Example::

        slimsdk scope
        slimsdk --json scope
    """
    from slimsdk.config import resolve_config
    from slimsdk.exceptions import SlimsdkError
    from slimsdk.output import OutputFormat, error, get_output, info, progress, warning
    from slimsdk.spec import (
        extract_operations,
        load_spec,
        resolve_scope,
        unmatched_patterns,
        validate_openapi_version,
    )

    try:
        run_config = resolve_config()
        progress(f"Loading spec from {run_config.spec} ...")
        raw = load_spec(run_config.spec)
        validate_openapi_version(raw)
        operations = resolve_scope(raw, run_config.allowlist)
    except SlimsdkError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    for pattern in unmatched_patterns(extract_operations(raw), run_config.allowlist):
        warning(f"Allow-list pattern matches no operation: {pattern}")

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.print_json([op.model_dump(mode="json") for op in operations])
    else:
        output.print_table(
            ["Method", "Path", "Operation ID"],
            [[op.method.value.upper(), op.path, op.operation_id or ""] for op in operations],
            title="Effective scope",
        )
    info(f"{len(operations)} operations in scope.")


def _setup_signal_handlers() -> None:
    """Turn SIGINT into a clean exit with status 130."""

    def _on_interrupt(signum: int, frame: Any) -> None:  # noqa: ANN401
        _cancel()

    signal.signal(signal.SIGINT, _on_interrupt)


def _cancel() -> NoReturn:
    print("\nCancelled.", file=sys.stderr, flush=True)
    sys.exit(EXIT_CANCELLED)


def _write_crash_log(exc: BaseException) -> Path:
    """Save the traceback of *exc* as ``logs/crash-<timestamp>.log`` in the data dir."""
    from slimsdk.config import atomic_write, get_data_dir

    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    path = get_data_dir() / "logs" / f"crash-{stamp}.log"
    atomic_write(path, "".join(traceback.format_exception(exc)))
    return path


def main() -> None:
    """Console-script entry point. Always ends in ``SystemExit``."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        _cancel()
    except Exception as exc:
        from slimsdk.exceptions import SlimsdkError
        from slimsdk.output import error

        if not isinstance(exc, SlimsdkError):
            path = _write_crash_log(exc)
            error(f"slimsdk crashed. The traceback was saved to {path}")
            sys.exit(EXIT_GENERIC_FAILURE)
        error(str(exc))
        sys.exit(exc.exit_code)
