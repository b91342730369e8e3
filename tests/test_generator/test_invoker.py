"""Tests for slimsdk.generator.invoker -- Kiota command line and execution."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from slimsdk.exceptions import GenerationFailure, ToolingUnavailable
from slimsdk.generator import build_command, ensure_generator, find_generator, invoke_generator
from slimsdk.models import GenerationConfig, GeneratorSettings, PathAllowlist


ALLOWLIST = PathAllowlist(patterns=("/me/**", "/users/{user-id}/sendMail"))


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


# ---------------------------------------------------------------------------
# build_command
# ---------------------------------------------------------------------------


class TestBuildCommand:
    def test_full_argument_vector(self, generation_config: GenerationConfig) -> None:
        command = build_command("kiota", "spec.yaml", ALLOWLIST, generation_config)
        assert command == [
            "kiota", "generate",
            "--openapi", "spec.yaml",
            "--language", "CSharp",
            "--class-name", "GraphServiceClient",
            "--namespace-name", "Microsoft.Graph",
            "--output", str(generation_config.output_dir),
            "--include-path", "/me/**",
            "--include-path", "/users/{user-id}/sendMail",
            "--backing-store",
            "--exclude-backward-compatible",
            "--log-level", "Warning",
        ]

    def test_deterministic(self, generation_config: GenerationConfig) -> None:
        first = build_command("kiota", "spec.yaml", ALLOWLIST, generation_config)
        second = build_command("kiota", "spec.yaml", ALLOWLIST, generation_config)
        assert first == second

    def test_include_paths_follow_allowlist_order(self, generation_config: GenerationConfig) -> None:
        allowlist = PathAllowlist(patterns=("/z/**", "/a/**", "/m"))
        command = build_command("kiota", "s", allowlist, generation_config)
        includes = [command[i + 1] for i, arg in enumerate(command) if arg == "--include-path"]
        assert includes == ["/z/**", "/a/**", "/m"]

    def test_flags_omitted_when_disabled(self, generation_config: GenerationConfig) -> None:
        config = generation_config.model_copy(
            update={"backing_store": False, "exclude_backward_compatible": False}
        )
        command = build_command("kiota", "s", ALLOWLIST, config)
        assert "--backing-store" not in command
        assert "--exclude-backward-compatible" not in command

    def test_python_output_is_package_dir(self, python_generation_config: GenerationConfig) -> None:
        command = build_command("kiota", "s", ALLOWLIST, python_generation_config, log_level="Debug")
        assert command[command.index("--language") + 1] == "Python"
        assert command[command.index("--output") + 1] == str(
            python_generation_config.output_dir / "msgraph_slim"
        )
        assert command[-2:] == ["--log-level", "Debug"]


# ---------------------------------------------------------------------------
# find_generator / ensure_generator
# ---------------------------------------------------------------------------


class TestFindGenerator:
    def test_on_path(self) -> None:
        with patch("slimsdk.generator.invoker.shutil.which", return_value="/usr/bin/kiota"):
            assert find_generator("kiota") == "/usr/bin/kiota"

    def test_dotnet_tools_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        tools = str(tmp_path / ".dotnet" / "tools")

        def _which(name, path=None):
            return f"{tools}/kiota" if path == tools else None

        with patch("slimsdk.generator.invoker.shutil.which", side_effect=_which):
            assert find_generator("kiota") == f"{tools}/kiota"

    def test_not_found(self) -> None:
        with patch("slimsdk.generator.invoker.shutil.which", return_value=None):
            assert find_generator("kiota") is None


class TestEnsureGenerator:
    def test_already_installed(self, quiet_output) -> None:
        with patch("slimsdk.generator.invoker.find_generator", return_value="/bin/kiota"), \
                patch("slimsdk.generator.invoker.run_tool") as mock_run:
            assert ensure_generator(GeneratorSettings()) == "/bin/kiota"
        mock_run.assert_not_called()

    def test_auto_install_disabled(self, quiet_output) -> None:
        with patch("slimsdk.generator.invoker.find_generator", return_value=None):
            with pytest.raises(ToolingUnavailable, match="auto-install is disabled"):
                ensure_generator(GeneratorSettings(auto_install=False))

    def test_installs_then_finds(self, quiet_output) -> None:
        settings = GeneratorSettings()
        with patch("slimsdk.generator.invoker.find_generator", side_effect=[None, "/home/u/.dotnet/tools/kiota"]), \
                patch("slimsdk.generator.invoker.run_tool", return_value=_completed()) as mock_run:
            assert ensure_generator(settings) == "/home/u/.dotnet/tools/kiota"
        mock_run.assert_called_once_with(settings.install_command, None)

    def test_install_fails(self, quiet_output) -> None:
        with patch("slimsdk.generator.invoker.find_generator", return_value=None), \
                patch("slimsdk.generator.invoker.run_tool", return_value=_completed(1, stderr="NU1101")):
            with pytest.raises(ToolingUnavailable) as exc_info:
                ensure_generator(GeneratorSettings())
        assert "NU1101" in exc_info.value.diagnostics

    def test_installer_missing(self, quiet_output) -> None:
        with patch("slimsdk.generator.invoker.find_generator", return_value=None), \
                patch("slimsdk.generator.invoker.run_tool", side_effect=FileNotFoundError("dotnet")):
            with pytest.raises(ToolingUnavailable, match="'dotnet' is not available"):
                ensure_generator(GeneratorSettings())

    def test_still_missing_after_install(self, quiet_output) -> None:
        with patch("slimsdk.generator.invoker.find_generator", return_value=None), \
                patch("slimsdk.generator.invoker.run_tool", return_value=_completed()):
            with pytest.raises(ToolingUnavailable, match="cannot be found"):
                ensure_generator(GeneratorSettings())


# ---------------------------------------------------------------------------
# invoke_generator
# ---------------------------------------------------------------------------


class TestInvokeGenerator:
    def test_success_returns_source_dir(self, generation_config: GenerationConfig, quiet_output) -> None:
        with patch("slimsdk.generator.invoker.ensure_generator", return_value="kiota"), \
                patch("slimsdk.generator.invoker.run_tool", return_value=_completed()) as mock_run:
            result = invoke_generator("spec.yaml", ALLOWLIST, generation_config)
        assert result == generation_config.output_dir
        command = mock_run.call_args.args[0]
        assert command == build_command("kiota", "spec.yaml", ALLOWLIST, generation_config)

    def test_nonzero_exit_carries_raw_output(self, generation_config: GenerationConfig, quiet_output) -> None:
        result = _completed(1, stdout="crit: OpenAPI document has errors", stderr="stack trace")
        with patch("slimsdk.generator.invoker.ensure_generator", return_value="kiota"), \
                patch("slimsdk.generator.invoker.run_tool", return_value=result):
            with pytest.raises(GenerationFailure) as exc_info:
                invoke_generator("spec.yaml", ALLOWLIST, generation_config)
        assert exc_info.value.diagnostics == "crit: OpenAPI document has errors\nstack trace"
        assert exc_info.value.exit_code == 1

    def test_timeout(self, generation_config: GenerationConfig, quiet_output) -> None:
        settings = GeneratorSettings(timeout_seconds=3)
        exc = subprocess.TimeoutExpired(cmd=["kiota"], timeout=3)
        with patch("slimsdk.generator.invoker.ensure_generator", return_value="kiota"), \
                patch("slimsdk.generator.invoker.run_tool", side_effect=exc):
            with pytest.raises(GenerationFailure, match="timed out after 3s"):
                invoke_generator("spec.yaml", ALLOWLIST, generation_config, settings)

    def test_timeout_passed_to_process(self, generation_config: GenerationConfig, quiet_output) -> None:
        settings = GeneratorSettings(timeout_seconds=30)
        with patch("slimsdk.generator.invoker.ensure_generator", return_value="kiota"), \
                patch("slimsdk.generator.invoker.run_tool", return_value=_completed()) as mock_run:
            invoke_generator("spec.yaml", ALLOWLIST, generation_config, settings)
        assert mock_run.call_args.args[1] == 30
