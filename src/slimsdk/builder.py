"""Downstream build of the generated tree.

Runs the target's build command (``dotnet build`` or ``python -m build``)
against the tree once the descriptor and shim are in place, then looks for
the produced artifact. The build tool's output is never interpreted; on
failure it is carried verbatim inside :class:`~slimsdk.exceptions.BuildFailure`.
"""

from __future__ import annotations

import subprocess
from typing import Optional

from slimsdk.exceptions import BuildFailure
from slimsdk.models import ArtifactInfo, DependencyManifest, GenerationConfig
from slimsdk.output import debug
from slimsdk.process import combined_output, run_tool, timeout_output
from slimsdk.targets import get_target


def run_build(
    config: GenerationConfig,
    manifest: DependencyManifest,
    timeout: Optional[int] = None,
) -> Optional[ArtifactInfo]:
    """Build the generated tree and return the artifact, if one can be found.

    Returns:
        The located artifact with its size, or ``None`` when the build
        succeeded but the artifact is not where the target expects it.

    Raises:
        BuildFailure: If the build tool is missing, times out or exits
            non-zero.
    """
    target = get_target(config.language)
    command = target.build_command(config, manifest)
    debug(f"Build command: {' '.join(command)}")

    try:
        result = run_tool(command, timeout)
    except FileNotFoundError as exc:
        raise BuildFailure(
            f"Build tool '{command[0]}' was not found.", diagnostics=str(exc)
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise BuildFailure(
            f"Build timed out after {timeout}s.", diagnostics=timeout_output(exc)
        ) from exc

    if result.returncode != 0:
        raise BuildFailure(
            f"Build exited with status {result.returncode}.",
            diagnostics=combined_output(result),
        )

    artifact = target.locate_artifact(config, manifest)
    if artifact is None:
        return None
    return ArtifactInfo(path=artifact, size_bytes=artifact.stat().st_size)
