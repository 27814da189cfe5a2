"""
Tests for main.py (CLI). No Textual app is launched.
"""
import json
from unittest.mock import patch, MagicMock

import pytest
from confighelper.errors import CacheRemovalError
from confighelper.main import _build_parser, run
from confighelper.parsing.diagnostics import DiagnosticRecord, Severity, VisualColumn


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"log_file": str(tmp_path / "log.txt")}))
    return str(path)


class TestArgParser:

    def test_defaults(self):
        args = _build_parser().parse_args([])
        assert args.config is None
        assert not args.once
        assert not args.restart
        assert not args.force

    def test_flags(self):
        args = _build_parser().parse_args(["--config", "c.json", "--restart", "--force"])
        assert args.config == "c.json"
        assert args.restart and args.force


class TestRun:

    def test_no_flags_runs_tui(self, config_path):
        mock_run_tui = MagicMock()
        with patch("sys.argv", ["confighelper", "--config", config_path]):
            with patch("confighelper.main.run_tui", mock_run_tui):
                run()
        mock_run_tui.assert_called_once()

    def test_ping(self, config_path, capsys):
        with patch("sys.argv", ["confighelper", "--config", config_path, "--ping"]):
            with pytest.raises(SystemExit) as exc_info:
                run()
        assert exc_info.value.code == 0
        assert capsys.readouterr().out.strip() == "Pong"

    def test_force_without_restart_is_rejected(self, config_path):
        with patch("sys.argv", ["confighelper", "--config", config_path, "--force"]):
            with pytest.raises(SystemExit) as exc_info:
                run()
        assert exc_info.value.code == 2

    def test_once_json(self, config_path, capsys):
        engine = MagicMock()
        engine.recompile.return_value = (
            DiagnosticRecord("f.hs", 3, VisualColumn(5), Severity.ERROR, "boom"),
        )
        engine.state.has_errors = True
        with patch("sys.argv", ["confighelper", "--config", config_path, "--once", "--json"]):
            with patch("confighelper.main.ConfigHelperEngine", return_value=engine):
                with pytest.raises(SystemExit) as exc_info:
                    run()
        assert exc_info.value.code == 1
        items = json.loads(capsys.readouterr().out)
        assert items == [{"filename": "f.hs", "lnum": 3, "col": 5, "vcol": 1, "text": "boom", "type": "E"}]

    def test_once_clean_build_exits_zero(self, config_path):
        engine = MagicMock()
        engine.recompile.return_value = ()
        engine.state.has_errors = False
        with patch("sys.argv", ["confighelper", "--config", config_path, "--once"]):
            with patch("confighelper.main.ConfigHelperEngine", return_value=engine):
                with pytest.raises(SystemExit) as exc_info:
                    run()
        assert exc_info.value.code == 0

    def test_restart_force(self, config_path):
        engine = MagicMock()
        with patch("sys.argv", ["confighelper", "--config", config_path, "--restart", "--force"]):
            with patch("confighelper.main.ConfigHelperEngine", return_value=engine):
                with pytest.raises(SystemExit):
                    run()
        engine.restart.assert_called_once_with(force_clear_cache=True)

    def test_restart_cache_failure_is_a_hard_error(self, config_path):
        engine = MagicMock()
        engine.restart.side_effect = CacheRemovalError("permission denied")
        with patch("sys.argv", ["confighelper", "--config", config_path, "--restart", "--force"]):
            with patch("confighelper.main.ConfigHelperEngine", return_value=engine):
                with pytest.raises(SystemExit) as exc_info:
                    run()
        assert exc_info.value.code == 1

    def test_tui_crash_exits_one(self, config_path):
        with patch("sys.argv", ["confighelper", "--config", config_path]):
            with patch("confighelper.main.run_tui", side_effect=RuntimeError("boom")):
                with pytest.raises(SystemExit) as exc_info:
                    run()
        assert exc_info.value.code == 1
