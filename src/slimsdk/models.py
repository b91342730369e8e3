"""Canonical Pydantic models shared across all slimsdk modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Run inputs** -- immutable for the lifetime of a pipeline run:
    :class:`PathAllowlist`, :class:`GenerationConfig`,
    :class:`DependencyPin`, :class:`DependencyManifest`,
    :class:`CompatibilitySpec` and :class:`GeneratorSettings`.

**Configuration** -- deserialised from the optional project-local
``slimsdk.json``:
    :class:`ProjectConfig`.

**Pipeline output** -- produced while a run progresses:
    :class:`HTTPMethod`, :class:`Operation`, :class:`Stage`,
    :class:`ArtifactInfo` and :class:`PipelineResult`.

Run inputs are frozen (``ConfigDict(frozen=True)``) so that one instance is
shared by every stage without any stage being able to alter it.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Allow-list ---


RECURSIVE_WILDCARD = "/**"
"""Suffix marking a pattern that matches its fixed prefix and every deeper path."""


class PathAllowlist(BaseModel):
    """Ordered set of path-prefix patterns selecting the endpoints to keep.

    Patterns are prefixes, never regular expressions. A trailing ``/**``
    selects the fixed prefix and everything below it. Overlapping patterns
    are allowed and simply union their matches; duplicates are dropped while
    preserving first-seen order.

    Example::

        PathAllowlist(patterns=["/me/**", "/users/{user-id}/messages/**"])
    """

    model_config = ConfigDict(frozen=True)

    patterns: tuple[str, ...] = Field(
        default=(), description="Path-prefix patterns, optionally ending in /**"
    )

    @field_validator("patterns")
    @classmethod
    def _normalise(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        seen: list[str] = []
        for raw in value:
            pattern = raw.strip()
            if not pattern.startswith("/"):
                raise ValueError(f"Allow-list pattern must start with '/': {raw!r}")
            if pattern not in seen:
                seen.append(pattern)
        return tuple(seen)


# --- Generation inputs ---


class GenerationConfig(BaseModel):
    """Declarative configuration for one generator invocation.

    Captures everything that determines the generated tree apart from the
    spec and the allow-list. Immutable once constructed.
    """

    model_config = ConfigDict(frozen=True)

    language: str = Field(description="Target identifier: csharp or python")
    class_name: str = Field(description="Name of the root client type")
    namespace: str = Field(description="Root namespace (or package name) of the output")
    output_dir: Path = Field(description="Root of the generated tree")
    backing_store: bool = Field(
        default=True, description="Generate models with a persisted backing store"
    )
    exclude_backward_compatible: bool = Field(
        default=True, description="Omit backward-compatible aliases from the output"
    )


class DependencyPin(BaseModel):
    """A support library the generated source imports, with its accepted versions."""

    model_config = ConfigDict(frozen=True)

    name: str
    version_range: str


class DependencyManifest(BaseModel):
    """Fixed inputs for the build descriptor of the generated tree.

    The ``dependencies`` tuple must cover every support library the generated
    source statically imports. Nothing checks this mechanically; the
    manifests in :mod:`slimsdk.defaults` are kept in sync by hand with the
    generator version in use.
    """

    model_config = ConfigDict(frozen=True)

    runtime: str = Field(description="Target runtime (TFM or requires-python)")
    package_id: str
    version: str
    description: str = ""
    dependencies: tuple[DependencyPin, ...] = ()
    compat_flags: dict[str, str] = Field(
        default_factory=dict,
        description="Extra descriptor properties, emitted in insertion order",
    )


class CompatibilitySpec(BaseModel):
    """Versioned contract the shim restores on the root client type.

    Hand-maintained against the public surface of the full library. Bump
    ``contract_version`` whenever the full library changes its constructor
    shapes or version-header format so that drift shows up in a single diff.
    """

    model_config = ConfigDict(frozen=True)

    contract_version: str = Field(description="Version of this contract definition")
    target_surface: str = Field(description="Release channel tag, e.g. v1.0")
    version_prefix: str = Field(
        description="Library identifier prefixed to the client version string"
    )
    default_base_url: str
    auth_provider_overload: bool = True
    transport_overload: bool = True
    dispose_request_adapter: bool = True


class GeneratorSettings(BaseModel):
    """How the external generator is located, installed and run."""

    executable: str = Field(default="kiota", description="Generator command name")
    auto_install: bool = Field(
        default=True, description="Install the generator when it is not on PATH"
    )
    install_command: list[str] = Field(
        default_factory=lambda: [
            "dotnet", "tool", "install", "--global", "Microsoft.OpenApi.Kiota",
        ],
    )
    log_level: str = Field(default="Warning", description="Generator log level")
    timeout_seconds: Optional[int] = Field(
        default=None, description="Kill external processes after this many seconds"
    )
    verify_scope: bool = Field(
        default=True, description="Load the spec and reject empty allow-list matches"
    )
    on_existing_output: Literal["error", "merge"] = Field(
        default="error",
        description="What to do with a non-empty output directory when not cleaning",
    )


# --- Project config ---


class ProjectConfig(BaseModel):
    """Overrides read from ``./slimsdk.json``.

    Every field is optional; unset fields fall back to the constants in
    :mod:`slimsdk.defaults`. Unknown keys are rejected so typos surface as a
    :class:`~slimsdk.exceptions.ConfigError` instead of being ignored.
    """

    model_config = ConfigDict(extra="forbid")

    spec: Optional[str] = None
    include_paths: Optional[list[str]] = None
    language: Optional[str] = None
    class_name: Optional[str] = None
    namespace: Optional[str] = None
    output_dir: Optional[str] = None
    package_version: Optional[str] = None
    backing_store: Optional[bool] = None
    exclude_backward_compatible: Optional[bool] = None
    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)


# --- Pipeline output ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised as operations under an OpenAPI path item."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class Operation(BaseModel):
    """One path + method pair of the OpenAPI document."""

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    path: str
    operation_id: Optional[str] = None


class Stage(str, enum.Enum):
    """Stages of the pipeline, in execution order."""

    INIT = "init"
    RESOLVE_SCOPE = "resolve_scope"
    CLEAN_IF_REQUESTED = "clean_if_requested"
    ENSURE_OUTPUT_DIR = "ensure_output_dir"
    GENERATE = "generate"
    SYNTHESIZE_DESCRIPTOR = "synthesize_descriptor"
    SYNTHESIZE_SHIM = "synthesize_shim"
    BUILD_IF_REQUESTED = "build_if_requested"
    DONE = "done"
    FAILED = "failed"


class ArtifactInfo(BaseModel):
    """A build artifact located after a successful downstream build."""

    path: Path
    size_bytes: int


class PipelineResult(BaseModel):
    """Summary of a completed pipeline run."""

    stage: Stage
    tree: Path
    scope: list[Operation] = Field(default_factory=list)
    descriptor_path: Optional[Path] = None
    shim_path: Optional[Path] = None
    artifact: Optional[ArtifactInfo] = None


class RunConfig(BaseModel):
    """Fully resolved inputs for one pipeline run.

    Produced by :func:`~slimsdk.config.resolve_config` from the fixed
    defaults, the project-local config file and environment variables.
    """

    model_config = ConfigDict(frozen=True)

    spec: str
    allowlist: PathAllowlist
    generation: GenerationConfig
    manifest: DependencyManifest
    compat: CompatibilitySpec
    generator: GeneratorSettings = Field(default_factory=GeneratorSettings)
