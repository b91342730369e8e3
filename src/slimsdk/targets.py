"""Output targets -- where each language puts its generated files.

A :class:`Target` answers every language-specific question the pipeline
asks: which language identifier the generator expects, where the generated
sources land inside the tree, what the build descriptor and the shim are
called, and how the downstream build is run and its artifact found.

Two targets are built in:

=========  ==========================  ===========================  ==============================
language   descriptor                  shim                         artifact
=========  ==========================  ===========================  ==============================
csharp     ``<PackageId>.csproj``      ``<ClassName>.Compat.cs``    ``bin/Release/<tfm>/<id>.dll``
python     ``pyproject.toml``          ``<namespace>/compat.py``    ``dist/<name>-<ver>-*.whl``
=========  ==========================  ===========================  ==============================
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from slimsdk.exceptions import InvalidUsageError
from slimsdk.models import DependencyManifest, GenerationConfig


class Target(ABC):
    """Language-specific layout of a generated tree."""

    name: str
    generator_language: str
    descriptor_template: str
    shim_template: str

    def validate(self, config: GenerationConfig) -> None:
        """Reject configurations the target cannot express.

        Raises:
            InvalidUsageError: If the class name or a namespace segment is not
                a valid identifier.
        """
        if not config.class_name.isidentifier():
            raise InvalidUsageError(f"Invalid root type name: {config.class_name!r}")
        for part in config.namespace.split("."):
            if not part.isidentifier():
                raise InvalidUsageError(f"Invalid namespace: {config.namespace!r}")

    def source_dir(self, config: GenerationConfig) -> Path:
        """Directory the generator writes its sources into."""
        return config.output_dir

    @abstractmethod
    def descriptor_path(self, config: GenerationConfig, manifest: DependencyManifest) -> Path:
        """Location of the build descriptor inside the tree."""

    @abstractmethod
    def shim_path(self, config: GenerationConfig) -> Path:
        """Location of the compatibility shim inside the tree."""

    @abstractmethod
    def build_command(
        self, config: GenerationConfig, manifest: DependencyManifest
    ) -> list[str]:
        """Argument vector of the downstream build."""

    @abstractmethod
    def locate_artifact(
        self, config: GenerationConfig, manifest: DependencyManifest
    ) -> Optional[Path]:
        """Return the built artifact, or ``None`` when it cannot be found."""


class CSharpTarget(Target):
    """.NET class library built with ``dotnet build``."""

    name = "csharp"
    generator_language = "CSharp"
    descriptor_template = "project.csproj.j2"
    shim_template = "compat.cs.j2"

    def descriptor_path(self, config: GenerationConfig, manifest: DependencyManifest) -> Path:
        return config.output_dir / f"{manifest.package_id}.csproj"

    def shim_path(self, config: GenerationConfig) -> Path:
        return config.output_dir / f"{config.class_name}.Compat.cs"

    def build_command(
        self, config: GenerationConfig, manifest: DependencyManifest
    ) -> list[str]:
        return [
            "dotnet", "build",
            str(self.descriptor_path(config, manifest)),
            "--configuration", "Release",
            "--nologo",
        ]

    def locate_artifact(
        self, config: GenerationConfig, manifest: DependencyManifest
    ) -> Optional[Path]:
        dll = (
            config.output_dir / "bin" / "Release" / manifest.runtime
            / f"{manifest.package_id}.dll"
        )
        return dll if dll.is_file() else None


class PythonTarget(Target):
    """Python distribution built into a wheel with ``python -m build``."""

    name = "python"
    generator_language = "Python"
    descriptor_template = "pyproject.toml.j2"
    shim_template = "compat.py.j2"

    def source_dir(self, config: GenerationConfig) -> Path:
        return config.output_dir.joinpath(*config.namespace.split("."))

    def descriptor_path(self, config: GenerationConfig, manifest: DependencyManifest) -> Path:
        return config.output_dir / "pyproject.toml"

    def shim_path(self, config: GenerationConfig) -> Path:
        return self.source_dir(config) / "compat.py"

    def build_command(
        self, config: GenerationConfig, manifest: DependencyManifest
    ) -> list[str]:
        return [
            sys.executable, "-m", "build",
            "--wheel",
            "--outdir", str(config.output_dir / "dist"),
            str(config.output_dir),
        ]

    def locate_artifact(
        self, config: GenerationConfig, manifest: DependencyManifest
    ) -> Optional[Path]:
        dist_name = manifest.package_id.replace("-", "_").replace(".", "_")
        wheels = sorted(
            (config.output_dir / "dist").glob(f"{dist_name}-{manifest.version}-*.whl")
        )
        return wheels[-1] if wheels else None


TARGETS: dict[str, Target] = {
    target.name: target for target in (CSharpTarget(), PythonTarget())
}


def get_target(language: str) -> Target:
    """Return the built-in :class:`Target` for *language*.

    Raises:
        InvalidUsageError: If no target is registered under that name.
    """
    try:
        return TARGETS[language]
    except KeyError:
        known = ", ".join(sorted(TARGETS))
        raise InvalidUsageError(
            f"Unknown target language '{language}' (expected one of: {known})"
        ) from None
