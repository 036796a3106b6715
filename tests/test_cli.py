from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, patch

import click
import pytest
from click.testing import CliRunner

from depbreakpoint.__version__ import __version__
from depbreakpoint.cli import cli, main
from depbreakpoint.config import DepBreakpointConfig
from depbreakpoint.models import SearchParams, SearchResult
from depbreakpoint.utils.console import reconfigure_console
from depbreakpoint.utils.logger import disable_logging


# ==============================================================================
# Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolate_cli_state() -> Generator[None, None, None]:
    """Keep logging handlers, consoles and NO_COLOR from leaking across tests."""
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop("DEPBREAKPOINT_CONFIG", None)
        os.environ.pop("DEPBREAKPOINT_COLOR", None)
        yield
    disable_logging()
    reconfigure_console()


@pytest.fixture
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.chdir(tmp_path)
    return CliRunner()


@pytest.fixture
def found() -> SearchResult:
    return SearchResult(
        success=True,
        version="2.0.0",
        message="Version 2.0.0 (stable release) - All instances of 'minimist' "
        "meet the minimum version requirement (>= 1.2.6)",
        details=["jest@2.0.0 > mkdirp@0.5.6 > minimist@1.2.8"],
        candidates_evaluated=3,
    )


@pytest.fixture
def not_found() -> SearchResult:
    return SearchResult.failure(
        "No compatible version found for the given requirements "
        "(6 candidate(s) evaluated)",
        candidates_evaluated=6,
        skipped_edges=2,
    )


def _patch_finder(result: SearchResult):
    return patch(
        "depbreakpoint.commands.search.find_compatible_version",
        new_callable=AsyncMock,
        return_value=result,
    )


# ==============================================================================
# Group options
# ==============================================================================


@pytest.mark.unit
class TestCliGroup:
    """Tests for the top-level command group."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert f"depbreakpoint {__version__}" in result.output

    def test_help_lists_search(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "search" in result.output

    def test_invalid_config_exits_one(self, runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "depbreakpoint.toml"
        config.write_text("[depbreakpoint]\nmax_nodes = 0\n", encoding="utf-8")

        result = runner.invoke(cli, ["search", "jest", "minimist", "-r"])

        assert result.exit_code == 1
        assert "max_nodes must be >= 1" in result.output

    def test_no_color_sets_env(self, runner: CliRunner, found: SearchResult) -> None:
        with _patch_finder(found):
            runner.invoke(cli, ["--no-color", "search", "jest", "minimist@1.2.6"])

        assert os.environ.get("NO_COLOR") == "1"


# ==============================================================================
# search command
# ==============================================================================


@pytest.mark.unit
class TestSearchCommand:
    """Tests for the search subcommand."""

    def test_found_exits_zero(self, runner: CliRunner, found: SearchResult) -> None:
        with _patch_finder(found) as mock_find:
            result = runner.invoke(cli, ["search", "jest@25", "minimist@1.2.6"])

        assert result.exit_code == 0
        assert "[OK] Version 2.0.0 (stable release)" in result.output
        assert "Earliest parent version: jest@2.0.0" in result.output
        assert "Details (1):" in result.output

        params = mock_find.await_args.args[0]
        assert params == SearchParams(
            parent_package="jest",
            parent_min_version="25",
            child_package="minimist",
            child_min_version="1.2.6",
        )

    def test_not_found_exits_two(
        self, runner: CliRunner, not_found: SearchResult
    ) -> None:
        with _patch_finder(not_found):
            result = runner.invoke(cli, ["search", "jest", "minimist@9"])

        assert result.exit_code == 2
        assert "[ERROR] No compatible version found" in result.output
        assert "2 dependency edge(s) could not be followed" in result.output

    def test_scoped_packages(self, runner: CliRunner, found: SearchResult) -> None:
        with _patch_finder(found) as mock_find:
            runner.invoke(cli, ["search", "@babel/core@7", "@babel/types", "--removed"])

        params = mock_find.await_args.args[0]
        assert params.parent_package == "@babel/core"
        assert params.parent_min_version == "7"
        assert params.child_package == "@babel/types"
        assert params.package_removed is True

    def test_missing_child_minimum_exits_one(self, runner: CliRunner) -> None:
        with _patch_finder(SearchResult.failure("unused")) as mock_find:
            result = runner.invoke(cli, ["search", "jest", "minimist"])

        assert result.exit_code == 1
        assert "Child minimum version is required" in result.output
        mock_find.assert_not_awaited()

    def test_invalid_version_exits_one(self, runner: CliRunner) -> None:
        with _patch_finder(SearchResult.failure("unused")) as mock_find:
            result = runner.invoke(cli, ["search", "jest@abc", "minimist", "-r"])

        assert result.exit_code == 1
        assert "Invalid version 'abc'" in result.output
        mock_find.assert_not_awaited()

    def test_json_output(self, runner: CliRunner, found: SearchResult) -> None:
        with _patch_finder(found):
            result = runner.invoke(
                cli, ["search", "jest", "minimist@1.2.6", "--format", "json"]
            )

        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["success"] is True
        assert payload["version"] == "2.0.0"
        assert payload["details"] == ["jest@2.0.0 > mkdirp@0.5.6 > minimist@1.2.8"]
        assert payload["candidatesEvaluated"] == 3
        assert payload["truncated"] is False

    def test_overrides_applied_to_config(
        self, runner: CliRunner, tmp_path: Path, found: SearchResult
    ) -> None:
        (tmp_path / "depbreakpoint.toml").write_text(
            "[depbreakpoint]\ntimeout = 5\nmax_nodes = 100\n", encoding="utf-8"
        )

        with _patch_finder(found) as mock_find:
            runner.invoke(
                cli,
                [
                    "search",
                    "jest",
                    "minimist",
                    "-r",
                    "--registry",
                    "https://npm.example.com",
                    "--max-nodes",
                    "50",
                ],
            )

        config = mock_find.await_args.kwargs["config"]
        assert isinstance(config, DepBreakpointConfig)
        assert config.registry_url == "https://npm.example.com"
        assert config.max_nodes == 50
        assert config.timeout == 5

    def test_max_nodes_must_be_positive(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["search", "jest", "minimist", "-r", "--max-nodes", "0"])

        assert result.exit_code == 2
        assert "--max-nodes" in result.output


# ==============================================================================
# main() exit-code mapping
# ==============================================================================


@pytest.mark.unit
class TestMainExitCodes:
    """Tests for main() running the group without standalone mode."""

    def test_found(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        found: SearchResult,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            "sys.argv", ["find-dep-breakpoint", "search", "jest", "minimist@1.2.6"]
        )

        with _patch_finder(found):
            assert main() == 0

    def test_not_found(
        self,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        not_found: SearchResult,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            "sys.argv", ["find-dep-breakpoint", "search", "jest", "minimist@9"]
        )

        with _patch_finder(not_found):
            assert main() == 2

    def test_usage_error_maps_to_one(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("sys.argv", ["find-dep-breakpoint", "search", "jest"])

        assert main() == 1

    def test_keyboard_interrupt(self) -> None:
        with patch("depbreakpoint.cli.cli", side_effect=KeyboardInterrupt):
            assert main() == 130

    def test_unexpected_error(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            "sys.argv", ["find-dep-breakpoint", "search", "jest", "minimist", "-r"]
        )

        with patch(
            "depbreakpoint.commands.search.find_compatible_version",
            new_callable=AsyncMock,
            side_effect=RuntimeError("kaboom"),
        ):
            assert main() == 99

    def test_abort_maps_to_interrupted(self) -> None:
        with patch("depbreakpoint.cli.cli", side_effect=click.Abort()):
            assert main() == 130
