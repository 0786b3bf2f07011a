"""Tests for wren.cli — entry point and argument parsing."""

import pytest

from wren.cli import main


class TestCLIHelp:
    @pytest.mark.parametrize("command", [[], ["run"], ["routes"], ["resolve"]])
    def test_help_exits_zero(self, command: list[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([*command, "--help"])
        assert exc_info.value.code == 0


class TestCLIMissingArgs:
    @pytest.mark.parametrize("argv", [["run"], ["routes"], ["resolve", "app:app"]])
    def test_missing_positional(self, argv: list[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        assert exc_info.value.code == 2


class TestCLINoCommand:
    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "wren" in capsys.readouterr().out
