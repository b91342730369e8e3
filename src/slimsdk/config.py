"""Configuration resolution, XDG paths and atomic writes.

This module handles everything slimsdk reads from or writes to disk outside
the generated tree itself:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.slimsdk/`` on macOS and Windows. Only the data directory is used, for
  crash logs. See :func:`get_data_dir`.
* **Project config** -- An optional ``./slimsdk.json`` deserialised into a
  :class:`~slimsdk.models.ProjectConfig`. See :func:`load_project_config`.
* **Precedence resolution** -- :func:`resolve_config` merges environment
  variables, project config and the fixed constants of
  :mod:`slimsdk.defaults` into one :class:`~slimsdk.models.RunConfig`.
* **Atomic writes** -- :func:`atomic_write` is used for every derived
  artifact so a crash never leaves a half-written descriptor or shim behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from slimsdk import defaults
from slimsdk.exceptions import ConfigError, InvalidUsageError
from slimsdk.models import (
    GenerationConfig,
    PathAllowlist,
    ProjectConfig,
    RunConfig,
)

_APP_NAME = "slimsdk"
_PROJECT_CONFIG_FILENAME = "slimsdk.json"

ENV_SPEC = "SLIMSDK_SPEC"
ENV_OUTPUT = "SLIMSDK_OUTPUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory, creating it if necessary.

    Crash logs are written to its ``logs/`` subdirectory.

    On Linux/BSD: ``$XDG_DATA_HOME/slimsdk/`` (default ``~/.local/share/slimsdk/``).
    On macOS/Windows: ``~/.slimsdk/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. Newlines are written
    verbatim (no platform translation) so repeated writes of the same text
    produce byte-identical files everywhere.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
            newline="",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Project-local config ---


def load_project_config(directory: Optional[Path] = None) -> ProjectConfig:
    """Load project-local overrides from ``slimsdk.json``.

    Args:
        directory: Directory to look in. Defaults to the current working
            directory.

    Returns:
        The parsed :class:`~slimsdk.models.ProjectConfig`, or an empty one
        if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            validation.
    """
    path = (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return ProjectConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ProjectConfig.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc


# --- Precedence resolution ---


def resolve_config(directory: Optional[Path] = None) -> RunConfig:
    """Resolve the inputs of a pipeline run.

    Precedence (high to low):
        1. Environment variables (``SLIMSDK_SPEC``, ``SLIMSDK_OUTPUT``)
        2. Project config (``./slimsdk.json``)
        3. Fixed constants in :mod:`slimsdk.defaults`

    Relative output directories are resolved against *directory* (the
    current working directory by default).

    Raises:
        ConfigError: If the project config is invalid.
        InvalidUsageError: If it names an unknown language or contains a
            malformed allow-list pattern.
    """
    base = directory or Path.cwd()
    project = load_project_config(base)

    language = project.language or defaults.LANGUAGE
    if language not in defaults.MANIFESTS:
        known = ", ".join(sorted(defaults.MANIFESTS))
        raise InvalidUsageError(f"Unknown language '{language}' (expected one of: {known})")

    spec = os.environ.get(ENV_SPEC) or project.spec or defaults.SPEC_URL
    output = (
        os.environ.get(ENV_OUTPUT)
        or project.output_dir
        or defaults.OUTPUT_DIRS[language]
    )
    output_dir = Path(output).expanduser()
    if not output_dir.is_absolute():
        output_dir = base / output_dir

    include_paths = project.include_paths
    if include_paths is None:
        include_paths = list(defaults.INCLUDE_PATHS)

    try:
        allowlist = PathAllowlist(patterns=tuple(include_paths))
    except ValidationError as exc:
        raise InvalidUsageError(f"Invalid include_paths: {exc}") from exc

    generation = GenerationConfig(
        language=language,
        class_name=project.class_name or defaults.CLASS_NAME,
        namespace=project.namespace or defaults.NAMESPACES[language],
        output_dir=output_dir,
        backing_store=(
            True if project.backing_store is None else project.backing_store
        ),
        exclude_backward_compatible=(
            True
            if project.exclude_backward_compatible is None
            else project.exclude_backward_compatible
        ),
    )

    manifest = defaults.MANIFESTS[language]
    if project.package_version:
        manifest = manifest.model_copy(update={"version": project.package_version})

    return RunConfig(
        spec=spec,
        allowlist=allowlist,
        generation=generation,
        manifest=manifest,
        compat=defaults.COMPAT_SPECS[language],
        generator=project.generator,
    )
