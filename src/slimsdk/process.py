"""Blocking execution of external tools.

Every external process slimsdk starts (generator install, generator, build)
goes through :func:`run_tool`, which captures stdout and stderr as text and
blocks until the process exits. There is no timeout unless the caller
passes one.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import Optional

logger = logging.getLogger(__name__)


def run_tool(
    command: list[str], timeout: Optional[int] = None
) -> subprocess.CompletedProcess[str]:
    """Run *command* to completion and return the captured result.

    Raises:
        FileNotFoundError: If the executable does not exist.
        subprocess.TimeoutExpired: If *timeout* is set and exceeded.
    """
    logger.debug("exec: %s", shlex.join(command))
    result = subprocess.run(
        command,
        capture_output=True,
        text=True,
        timeout=timeout,
    )
    logger.debug("exit %s: %s", result.returncode, command[0])
    return result


def combined_output(result: subprocess.CompletedProcess[str]) -> str:
    """Join stdout and stderr of *result* into one diagnostic text.

    Kiota and ``dotnet`` write most of their errors to stdout, so both
    streams are kept, stdout first.
    """
    parts = [text.rstrip() for text in (result.stdout, result.stderr) if text and text.strip()]
    return "\n".join(parts)


def timeout_output(exc: subprocess.TimeoutExpired) -> str:
    """Return whatever output a timed-out process produced before it was killed."""
    parts = []
    for chunk in (exc.stdout, exc.stderr):
        if not chunk:
            continue
        text = chunk.decode(errors="replace") if isinstance(chunk, bytes) else chunk
        if text.strip():
            parts.append(text.rstrip())
    return "\n".join(parts)
