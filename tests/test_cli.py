"""
Tests for CLI functionality.

These tests verify the command-line interface logic.
"""

from __future__ import annotations

import argparse
from io import StringIO
from pathlib import Path
from unittest.mock import patch

import pytest

from inat_rarity.cli import cmd_info, cmd_render, cmd_report, cmd_run, create_parser, main
from inat_rarity.config import Settings
from inat_rarity.errors import ConfigurationError, TransportError

SUMMARY = {"scanned": 3, "cached": 1}


def _report_args(**overrides: object) -> argparse.Namespace:
    values: dict[str, object] = {
        "username": "jay",
        "output_dir": None,
        "sleep": None,
        "max_pages": None,
        "batch": None,
        "top": None,
        "debug": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


class TestCreateParser:
    """Tests for create_parser function."""

    def test_creates_parser(self) -> None:
        parser = create_parser()
        assert isinstance(parser, argparse.ArgumentParser)
        assert parser.prog == "inat-rarity"

    def test_parser_has_version(self) -> None:
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["--version"])

    def test_parser_has_debug_flag(self) -> None:
        args = create_parser().parse_args(["--debug", "info"])
        assert args.debug is True

    def test_report_defaults(self) -> None:
        args = create_parser().parse_args(["report", "jay"])
        assert args.command == "report"
        assert args.username == "jay"
        assert args.output_dir is None
        assert args.sleep is None
        assert args.max_pages is None
        assert args.batch is None

    def test_report_tuning_flags(self) -> None:
        args = create_parser().parse_args(
            ["report", "jay", "./out", "--sleep=0.5", "--max-pages=6", "--batch=100", "--top", "10"]
        )
        assert args.output_dir == Path("./out")
        assert args.sleep == 0.5
        assert args.max_pages == 6
        assert args.batch == 100
        assert args.top == 10

    def test_render_command(self) -> None:
        args = create_parser().parse_args(["render", "jay", "out", "--sleep", "0.2"])
        assert args.command == "render"
        assert args.sleep == 0.2

    def test_missing_username_exits_nonzero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["report"])
        assert exc_info.value.code != 0


class TestCmdReport:
    def test_uses_settings_defaults(self) -> None:
        settings = Settings(output_dir=Path("data"), min_delay=1.5, max_pages=4, batch_size=20, top_n=7)
        with (
            patch("inat_rarity.cli.get_settings", return_value=settings),
            patch("inat_rarity.cli.rarity_report", return_value=SUMMARY) as mock_flow,
        ):
            assert cmd_report(_report_args()) == 0
        mock_flow.assert_called_once_with(
            "jay", Path("data"), min_delay=1.5, max_pages=4, batch_size=20, top_n=7
        )

    def test_flags_override_settings(self) -> None:
        args = _report_args(output_dir=Path("out"), sleep=0.0, max_pages=2, batch=10, top=5)
        with patch("inat_rarity.cli.rarity_report", return_value=SUMMARY) as mock_flow:
            assert cmd_report(args) == 0
        mock_flow.assert_called_once_with(
            "jay", Path("out"), min_delay=0.0, max_pages=2, batch_size=10, top_n=5
        )

    def test_configuration_error_returns_one(self) -> None:
        with (
            patch("inat_rarity.cli.rarity_report", side_effect=ConfigurationError("bad dir")),
            patch("sys.stderr", new=StringIO()) as mock_stderr,
        ):
            assert cmd_report(_report_args()) == 1
        assert "bad dir" in mock_stderr.getvalue()

    def test_transport_error_propagates(self) -> None:
        with (
            patch("inat_rarity.cli.rarity_report", side_effect=TransportError("down", url="x")),
            pytest.raises(TransportError),
        ):
            cmd_report(_report_args())


class TestCmdRender:
    def test_passes_render_delay(self) -> None:
        settings = Settings(render_min_delay=0.3)
        args = argparse.Namespace(username="jay", output_dir=Path("out"), sleep=None)
        with (
            patch("inat_rarity.cli.get_settings", return_value=settings),
            patch("inat_rarity.cli.render_report") as mock_flow,
        ):
            assert cmd_render(args) == 0
        mock_flow.assert_called_once_with("jay", Path("out"), min_delay=0.3)

    def test_missing_tables_returns_one(self) -> None:
        args = argparse.Namespace(username="jay", output_dir=Path("out"), sleep=None)
        with (
            patch("inat_rarity.cli.render_report", side_effect=ConfigurationError("Missing")),
            patch("sys.stderr", new=StringIO()),
        ):
            assert cmd_render(args) == 1


class TestCmdRun:
    def test_report_then_render(self) -> None:
        call_order: list[str] = []

        def fake_report(*_args: object, **_kwargs: object) -> dict[str, int]:
            call_order.append("report")
            return SUMMARY

        def fake_render(*_args: object, **_kwargs: object) -> dict[str, str]:
            call_order.append("render")
            return {}

        with (
            patch("inat_rarity.cli.rarity_report", side_effect=fake_report),
            patch("inat_rarity.cli.render_report", side_effect=fake_render),
        ):
            assert cmd_run(_report_args()) == 0
        assert call_order == ["report", "render"]

    def test_render_skipped_when_report_fails(self) -> None:
        with (
            patch("inat_rarity.cli.rarity_report", side_effect=ConfigurationError("nope")),
            patch("inat_rarity.cli.render_report") as mock_render,
            patch("sys.stderr", new=StringIO()),
        ):
            assert cmd_run(_report_args()) == 1
        mock_render.assert_not_called()


class TestCmdInfo:
    def test_prints_app_info(self) -> None:
        with patch("sys.stdout", new=StringIO()) as mock_stdout:
            assert cmd_info(argparse.Namespace()) == 0
        output = mock_stdout.getvalue()
        assert "Application" in output
        assert "max_pages" in output


class TestMain:
    def test_no_command_prints_help(self) -> None:
        with patch("sys.stdout", new=StringIO()) as mock_stdout:
            assert main([]) == 0
        assert "usage" in mock_stdout.getvalue()

    def test_dispatches_report(self) -> None:
        with patch("inat_rarity.cli.rarity_report", return_value=SUMMARY) as mock_flow:
            assert main(["report", "jay", "out", "--sleep", "0"]) == 0
        assert mock_flow.call_args.args == ("jay", Path("out"))
