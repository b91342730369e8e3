"""Fixtures shared by the slimsdk test suite."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from slimsdk import defaults
from slimsdk.models import (
    GenerationConfig,
    GeneratorSettings,
    PathAllowlist,
    RunConfig,
)
from slimsdk.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _fresh_output_manager():
    """Drop the global manager after each test.

    A manager created under CliRunner holds the runner's redirected streams,
    which are closed once the invocation ends.
    """
    yield
    reset_output()


# --- Spec documents ---


@pytest.fixture
def mail_spec_path() -> Path:
    """OpenAPI 3.0 JSON document with a handful of Graph-like paths."""
    return FIXTURES_DIR / "mail_3.0.json"


@pytest.fixture
def mail_spec_raw(mail_spec_path: Path) -> dict[str, Any]:
    return json.loads(mail_spec_path.read_text(encoding="utf-8"))


# --- Run inputs ---


@pytest.fixture
def generation_config(tmp_path: Path) -> GenerationConfig:
    return GenerationConfig(
        language="csharp",
        class_name="GraphServiceClient",
        namespace="Microsoft.Graph",
        output_dir=tmp_path / "out",
    )


@pytest.fixture
def python_generation_config(tmp_path: Path) -> GenerationConfig:
    return GenerationConfig(
        language="python",
        class_name="GraphServiceClient",
        namespace="msgraph_slim",
        output_dir=tmp_path / "out",
    )


@pytest.fixture
def run_config(mail_spec_path: Path, generation_config: GenerationConfig) -> RunConfig:
    """C# run over the mail fixture, scoped to ``/me/**``.

    Auto-install is off so nothing here can shell out to ``dotnet``.
    """
    return RunConfig(
        spec=str(mail_spec_path),
        allowlist=PathAllowlist(patterns=("/me/**",)),
        generation=generation_config,
        manifest=defaults.CSHARP_MANIFEST,
        compat=defaults.COMPAT_SPECS["csharp"],
        generator=GeneratorSettings(auto_install=False),
    )


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run from ``tmp_path`` with no SLIMSDK_* overrides.

    ``XDG_DATA_HOME`` points at ``tmp_path/data`` so crash logs stay out of
    the real home directory. Returns ``tmp_path``.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("SLIMSDK_SPEC", raising=False)
    monkeypatch.delenv("SLIMSDK_OUTPUT", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# --- Output ---


@pytest.fixture
def quiet_output() -> OutputManager:
    manager = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(manager)
    yield manager
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    manager = OutputManager(format=OutputFormat.JSON)
    set_output(manager)
    yield manager
    reset_output()


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
