"""Build and run the ``kiota generate`` command.

:func:`build_command` is deterministic: the same spec source, allow-list and
:class:`~slimsdk.models.GenerationConfig` always produce the same argument
vector, with one ``--include-path`` per allow-list pattern in allow-list
order.

:func:`invoke_generator` runs that command and only distinguishes success
from failure. The generator's own output is handed back verbatim inside
:class:`~slimsdk.exceptions.GenerationFailure`; it is never parsed.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from slimsdk.exceptions import GenerationFailure, ToolingUnavailable
from slimsdk.models import GenerationConfig, GeneratorSettings, PathAllowlist
from slimsdk.output import debug, info
from slimsdk.process import combined_output, run_tool, timeout_output
from slimsdk.targets import get_target

logger = logging.getLogger(__name__)


def find_generator(executable: str) -> Optional[str]:
    """Locate *executable* on ``PATH`` or in the dotnet global tools directory.

    ``dotnet tool install --global`` drops tools into ``~/.dotnet/tools``,
    which is frequently missing from ``PATH`` in fresh CI shells.
    """
    found = shutil.which(executable)
    if found:
        return found
    tools_dir = Path.home() / ".dotnet" / "tools"
    found = shutil.which(executable, path=str(tools_dir))
    return found


def ensure_generator(settings: GeneratorSettings) -> str:
    """Return the path of the generator, installing it first if allowed.

    Raises:
        ToolingUnavailable: If the generator is missing and either
            auto-install is disabled, the install command fails, or the
            generator still cannot be found afterwards.
    """
    found = find_generator(settings.executable)
    if found:
        return found

    if not settings.auto_install or not settings.install_command:
        raise ToolingUnavailable(
            f"'{settings.executable}' was not found on PATH and auto-install is disabled."
        )

    command = settings.install_command
    info(f"'{settings.executable}' not found, installing: {' '.join(command)}")
    try:
        result = run_tool(command, settings.timeout_seconds)
    except FileNotFoundError as exc:
        raise ToolingUnavailable(
            f"Cannot install '{settings.executable}': '{command[0]}' is not available.",
            diagnostics=str(exc),
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise ToolingUnavailable(
            f"Installing '{settings.executable}' timed out after {settings.timeout_seconds}s.",
            diagnostics=timeout_output(exc),
        ) from exc

    if result.returncode != 0:
        raise ToolingUnavailable(
            f"Installing '{settings.executable}' failed (exit {result.returncode}).",
            diagnostics=combined_output(result),
        )

    found = find_generator(settings.executable)
    if not found:
        raise ToolingUnavailable(
            f"'{settings.executable}' was installed but cannot be found on PATH.",
            diagnostics=combined_output(result),
        )
    return found


def build_command(
    executable: str,
    spec_source: str,
    allowlist: PathAllowlist,
    config: GenerationConfig,
    log_level: str = "Warning",
) -> list[str]:
    """Return the ``kiota generate`` argument vector for one invocation.

    Example::

        build_command("kiota", "spec.yaml", PathAllowlist(patterns=("/me/**",)), config)
        # ['kiota', 'generate', '--openapi', 'spec.yaml', '--language', 'CSharp',
        #  '--class-name', 'GraphServiceClient', '--namespace-name', 'Microsoft.Graph',
        #  '--output', 'out', '--include-path', '/me/**', '--backing-store',
        #  '--exclude-backward-compatible', '--log-level', 'Warning']
    """
    target = get_target(config.language)
    command = [
        executable, "generate",
        "--openapi", spec_source,
        "--language", target.generator_language,
        "--class-name", config.class_name,
        "--namespace-name", config.namespace,
        "--output", str(target.source_dir(config)),
    ]
    for pattern in allowlist.patterns:
        command.extend(["--include-path", pattern])
    if config.backing_store:
        command.append("--backing-store")
    if config.exclude_backward_compatible:
        command.append("--exclude-backward-compatible")
    command.extend(["--log-level", log_level])
    return command


def invoke_generator(
    spec_source: str,
    allowlist: PathAllowlist,
    config: GenerationConfig,
    settings: Optional[GeneratorSettings] = None,
) -> Path:
    """Run the generator and return the directory it wrote into.

    Blocks until the generator exits. Re-running into a non-empty directory
    is left to the generator; callers decide whether to clean first.

    Raises:
        ToolingUnavailable: If the generator cannot be found or installed.
        GenerationFailure: If the generator exits non-zero or times out.
    """
    settings = settings or GeneratorSettings()
    executable = ensure_generator(settings)
    command = build_command(executable, spec_source, allowlist, config, settings.log_level)
    debug(f"Generator command: {' '.join(command)}")

    try:
        result = run_tool(command, settings.timeout_seconds)
    except FileNotFoundError as exc:
        raise ToolingUnavailable(
            f"Generator '{executable}' disappeared before it could run.",
            diagnostics=str(exc),
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise GenerationFailure(
            f"Generator timed out after {settings.timeout_seconds}s.",
            diagnostics=timeout_output(exc),
        ) from exc

    if result.returncode != 0:
        logger.debug("generator failed with exit %s", result.returncode)
        raise GenerationFailure(
            f"Generator exited with status {result.returncode}.",
            diagnostics=combined_output(result),
        )
    return get_target(config.language).source_dir(config)
