from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest

from depbreakpoint.__main__ import _print_startup_error, main


@pytest.mark.unit
class TestMain:
    """Tests for the ``python -m depbreakpoint`` entry point."""

    @pytest.mark.parametrize(
        "exit_code",
        [0, 1, 2, 130],
        ids=["found", "error", "not-found", "interrupted"],
    )
    def test_main_returns_cli_exit_code(self, exit_code: int) -> None:
        mock_cli_module = MagicMock()
        mock_cli_module.main = MagicMock(return_value=exit_code)

        with patch.dict(sys.modules, {"depbreakpoint.cli": mock_cli_module}):
            result = main()

        assert result == exit_code
        mock_cli_module.main.assert_called_once_with()

    def test_main_import_error_returns_one(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        # A None entry in sys.modules makes the import raise ImportError
        with patch.dict(sys.modules, {"depbreakpoint.cli": None}):
            result = main()

        assert result == 1
        captured = capsys.readouterr()
        assert "depbreakpoint CLI could not be started." in captured.err
        assert "ImportError:" in captured.err
        assert captured.out == ""


@pytest.mark.unit
class TestPrintStartupError:
    """Tests for _print_startup_error helper function."""

    def test_prints_version_when_available(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        version_module = MagicMock(__version__="9.8.7")

        with patch.dict(sys.modules, {"depbreakpoint.__version__": version_module}):
            _print_startup_error(ImportError("No module named 'httpx'"))

        err = capsys.readouterr().err
        assert "depbreakpoint version: 9.8.7" in err
        assert "ImportError: No module named 'httpx'" in err

    def test_unknown_version_when_import_fails(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        with patch.dict(sys.modules, {"depbreakpoint.__version__": None}):
            _print_startup_error(ImportError("boom"))

        err = capsys.readouterr().err
        assert "depbreakpoint version: <unknown>" in err
        assert "ImportError: boom" in err

    def test_blank_line_before_error(self, capsys: pytest.CaptureFixture) -> None:
        _print_startup_error(ImportError("boom"))

        lines = capsys.readouterr().err.split("\n")
        error_index = lines.index("ImportError: boom")
        assert lines[error_index - 1] == ""
