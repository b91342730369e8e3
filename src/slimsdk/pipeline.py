"""Pipeline controller -- sequences one slim SDK regeneration.

Stages run strictly in order, each completing before the next starts::

    INIT -> RESOLVE_SCOPE -> CLEAN_IF_REQUESTED -> ENSURE_OUTPUT_DIR
         -> GENERATE -> SYNTHESIZE_DESCRIPTOR -> SYNTHESIZE_SHIM
         -> BUILD_IF_REQUESTED -> DONE

Any exception moves the controller to the absorbing ``FAILED`` stage and is
re-raised unchanged, so later stages never run. In particular a generator
failure leaves no descriptor or shim behind.

Two decisions are made here rather than left to the generator:

* The scope is resolved *before* anything is deleted, so an allow-list that
  matches nothing fails fast with :class:`~slimsdk.exceptions.EmptyScopeError`
  and leaves the previous tree intact.
* A non-empty output directory is only reused when ``clean`` is set (it is
  wiped first) or when merging was explicitly configured. Otherwise
  :class:`~slimsdk.exceptions.OutputConflictError` is raised, because what
  the generator does with stale files is not defined.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any, Callable, Optional

from slimsdk.builder import run_build
from slimsdk.exceptions import InvalidUsageError, OutputConflictError
from slimsdk.generator import invoke_generator
from slimsdk.models import (
    ArtifactInfo,
    Operation,
    PipelineResult,
    RunConfig,
    Stage,
)
from slimsdk.output import debug, info, progress, success, warning
from slimsdk.spec import (
    extract_operations,
    load_spec,
    resolve_scope,
    unmatched_patterns,
    validate_openapi_version,
)
from slimsdk.synth import write_descriptor, write_shim
from slimsdk.targets import get_target

logger = logging.getLogger(__name__)

SpecLoader = Callable[[str], dict[str, Any]]


class PipelineController:
    """Run the stages of one regeneration against a single output directory.

    The controller owns the output directory for the duration of
    :meth:`run`. Concurrent runs against the same directory are not
    supported and no lock is taken.

    Args:
        run_config: Resolved inputs (spec, allow-list, generation config,
            manifest, compatibility contract, generator settings).
        clean: Delete the existing tree before generating.
        skip_build: Stop after the shim is written.
        spec_loader: Callable used to read the spec during scope
            resolution. Defaults to :func:`~slimsdk.spec.load_spec`.
    """

    def __init__(
        self,
        run_config: RunConfig,
        *,
        clean: bool = False,
        skip_build: bool = False,
        spec_loader: Optional[SpecLoader] = None,
    ) -> None:
        self.run_config = run_config
        self.clean = clean
        self.skip_build = skip_build
        self._spec_loader = spec_loader or load_spec
        self.stage = Stage.INIT
        self.history: list[Stage] = [Stage.INIT]
        self.scope: list[Operation] = []

    @property
    def output_dir(self) -> Path:
        return self.run_config.generation.output_dir

    # ------------------------------------------------------------------ #
    # Driver
    # ------------------------------------------------------------------ #

    def run(self) -> PipelineResult:
        """Execute every stage and return a summary of the run.

        Raises:
            SlimsdkError: Whatever the failing stage raised, after moving to
                ``FAILED``.
        """
        descriptor_path: Optional[Path] = None
        shim_path: Optional[Path] = None
        artifact: Optional[ArtifactInfo] = None
        try:
            get_target(self.run_config.generation.language).validate(
                self.run_config.generation
            )
            self._resolve_scope()
            self._clean_if_requested()
            self._ensure_output_dir()
            self._generate()
            descriptor_path = self._synthesize_descriptor()
            shim_path = self._synthesize_shim()
            artifact = self._build_if_requested()
        except BaseException:
            failed_at = self.stage
            self._enter(Stage.FAILED)
            logger.debug("pipeline failed during %s", failed_at.value)
            raise

        self._enter(Stage.DONE)
        return PipelineResult(
            stage=self.stage,
            tree=self.output_dir,
            scope=self.scope,
            descriptor_path=descriptor_path,
            shim_path=shim_path,
            artifact=artifact,
        )

    def _enter(self, stage: Stage) -> None:
        self.stage = stage
        self.history.append(stage)
        logger.debug("stage: %s", stage.value)

    # ------------------------------------------------------------------ #
    # Stages
    # ------------------------------------------------------------------ #

    def _resolve_scope(self) -> None:
        self._enter(Stage.RESOLVE_SCOPE)
        settings = self.run_config.generator
        if not settings.verify_scope:
            debug("Scope verification disabled, trusting the allow-list.")
            return

        progress(f"Loading spec from {self.run_config.spec} ...")
        raw = self._spec_loader(self.run_config.spec)
        validate_openapi_version(raw)

        allowlist = self.run_config.allowlist
        self.scope = resolve_scope(raw, allowlist)
        for pattern in unmatched_patterns(extract_operations(raw), allowlist):
            warning(f"Allow-list pattern matches no operation: {pattern}")
        info(f"Scope: {len(self.scope)} operations selected by "
             f"{len(allowlist.patterns)} patterns.")

    def _clean_if_requested(self) -> None:
        self._enter(Stage.CLEAN_IF_REQUESTED)
        if not self.clean or not self.output_dir.exists():
            return
        if not self.output_dir.is_dir():
            raise OutputConflictError(
                f"Output path exists and is not a directory: {self.output_dir}"
            )
        _check_safe_to_delete(self.output_dir)
        info(f"Cleaning {self.output_dir}")
        shutil.rmtree(self.output_dir)

    def _ensure_output_dir(self) -> None:
        self._enter(Stage.ENSURE_OUTPUT_DIR)
        out = self.output_dir
        if out.exists() and not out.is_dir():
            raise OutputConflictError(f"Output path exists and is not a directory: {out}")
        out.mkdir(parents=True, exist_ok=True)

        if any(out.iterdir()):
            if self.run_config.generator.on_existing_output == "merge":
                warning(f"Generating into non-empty {out}; existing files are merged "
                        "by the generator.")
                return
            raise OutputConflictError(
                f"Output directory is not empty: {out}. Re-run with --clean to "
                "regenerate from scratch, or set generator.on_existing_output to "
                "\"merge\" in slimsdk.json."
            )

    def _generate(self) -> None:
        self._enter(Stage.GENERATE)
        cfg = self.run_config
        info(f"Generating {cfg.generation.language} client "
             f"{cfg.generation.namespace}.{cfg.generation.class_name} ...")
        invoke_generator(cfg.spec, cfg.allowlist, cfg.generation, cfg.generator)

    def _synthesize_descriptor(self) -> Path:
        self._enter(Stage.SYNTHESIZE_DESCRIPTOR)
        path = write_descriptor(self.run_config.generation, self.run_config.manifest)
        debug(f"Wrote descriptor {path}")
        return path

    def _synthesize_shim(self) -> Path:
        self._enter(Stage.SYNTHESIZE_SHIM)
        path = write_shim(self.run_config.generation, self.run_config.compat)
        debug(f"Wrote compatibility shim {path}")
        return path

    def _build_if_requested(self) -> Optional[ArtifactInfo]:
        self._enter(Stage.BUILD_IF_REQUESTED)
        if self.skip_build:
            info("Skipping build.")
            return None
        info("Building generated tree ...")
        artifact = run_build(
            self.run_config.generation,
            self.run_config.manifest,
            self.run_config.generator.timeout_seconds,
        )
        success("Build succeeded.")
        return artifact


def _check_safe_to_delete(path: Path) -> None:
    """Refuse to delete a directory that contains the working directory or home."""
    resolved = path.resolve()
    for protected in (Path.cwd().resolve(), Path.home().resolve()):
        if resolved == protected or resolved in protected.parents:
            raise InvalidUsageError(
                f"Refusing to clean {path}: it contains {protected}."
            )
