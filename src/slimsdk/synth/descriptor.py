"""Build descriptor synthesis.

Writes the file the downstream build tool reads to compile the generated
tree: a ``.csproj`` for C# or a ``pyproject.toml`` for Python. It declares
the package identity, version, target runtime and the exact dependency
version ranges taken from a :class:`~slimsdk.models.DependencyManifest`.

The descriptor is derived output. It is overwritten unconditionally on every
successful generation and must never be edited by hand; change the manifest
in :mod:`slimsdk.defaults` instead.
"""

from __future__ import annotations

from pathlib import Path

from slimsdk.config import atomic_write
from slimsdk.models import DependencyManifest, GenerationConfig
from slimsdk.synth.render import render
from slimsdk.targets import get_target


def render_descriptor(config: GenerationConfig, manifest: DependencyManifest) -> str:
    """Return the descriptor text for *config* and *manifest*.

    Pure: identical inputs always give byte-identical output.
    """
    target = get_target(config.language)
    package_path = target.source_dir(config).relative_to(config.output_dir).as_posix()
    return render(
        target.descriptor_template,
        {
            "config": config,
            "manifest": manifest,
            "package_path": package_path,
        },
    )


def write_descriptor(config: GenerationConfig, manifest: DependencyManifest) -> Path:
    """Render the descriptor and write it into the generated tree.

    Returns:
        Path of the written descriptor.
    """
    path = get_target(config.language).descriptor_path(config, manifest)
    atomic_write(path, render_descriptor(config, manifest))
    return path
