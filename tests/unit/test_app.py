"""
Tests for app.py
================
Runs ConfigHelperApp headless with a real engine whose build driver is
mocked, so recompile/restart go through the TextualHost messages.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from confighelper.compiler.driver import BuildDriver, CachePaths
from confighelper.errors import CacheRemovalError
from confighelper.ui.app import ConfigHelperApp, DiagnosticScroll, TextualHost
from confighelper.ui.widgets import DiagnosticLine, StatusBar
from confighelper.utils.config import ConfigManager

LOG = (
    "src/Config.hs:3:5: error: boom\n"
    "\n"
    "src/Config.hs:7:1: Warning:\n"
    "    Defined but not used: x\n"
)


def _app(tmp_path: Path, error_text=LOG) -> ConfigHelperApp:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "project_name": "demo",
        "project_dir": str(tmp_path),
        "cache_dir": str(tmp_path / "cache"),
        "restart_command": ["demo-host"],
        "log_file": str(tmp_path / "log.txt"),
    }))
    app = ConfigHelperApp(ConfigManager(str(path)))
    driver = MagicMock(spec=BuildDriver)
    driver.get_error_string.return_value = error_text
    driver.resolve_cache_paths.return_value = CachePaths(tmp_path / "cache", tmp_path / "cache" / "errors.log")
    app.engine.driver = driver
    return app


class TestAppWiring:

    def test_engine_uses_textual_host(self, tmp_path):
        app = _app(tmp_path)
        assert isinstance(app.engine.host, TextualHost)

    @pytest.mark.asyncio
    async def test_list_hidden_before_first_build(self, tmp_path):
        async with _app(tmp_path).run_test(size=(120, 40)) as pilot:
            await pilot.pause()
            scroll = pilot.app.query_one("#diagnostic-list", DiagnosticScroll)
            assert scroll.display is False


class TestRecompileAction:

    @pytest.mark.asyncio
    async def test_recompile_populates_list(self, tmp_path):
        async with _app(tmp_path).run_test(size=(120, 40)) as pilot:
            await pilot.press("r")
            await pilot.pause()
            lines = pilot.app.query(DiagnosticLine)
            assert len(lines) == 2
            assert pilot.app.query_one("#diagnostic-list", DiagnosticScroll).display is True
            sb = pilot.app.query_one("#status-bar", StatusBar)
            assert sb._errors == 1
            assert sb._warnings == 1

    @pytest.mark.asyncio
    async def test_clean_build_hides_list(self, tmp_path):
        app = _app(tmp_path)
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("r")
            await pilot.pause()
            app.engine.driver.get_error_string.return_value = None
            await pilot.press("r")
            await pilot.pause()
            assert len(pilot.app.query(DiagnosticLine)) == 0
            assert pilot.app.query_one("#diagnostic-list", DiagnosticScroll).display is False
            assert pilot.app.query_one("#status-bar", StatusBar)._status == "ok"

    @pytest.mark.asyncio
    async def test_cursor_moves_between_records(self, tmp_path):
        async with _app(tmp_path).run_test(size=(120, 40)) as pilot:
            await pilot.press("r")
            await pilot.pause()
            assert pilot.app.current_record.line == 3
            await pilot.press("j")
            assert pilot.app.current_record.line == 7
            await pilot.press("j")
            assert pilot.app.current_record.line == 7
            await pilot.press("k")
            assert pilot.app.current_record.line == 3


class TestRestartAction:

    @pytest.mark.asyncio
    async def test_restart_schedules_exec(self, tmp_path):
        app = _app(tmp_path)
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("R")
        assert app.restart_command == ("demo-host",)
        app.engine.driver.compile.assert_called_once()

    @pytest.mark.asyncio
    async def test_force_restart_failure_reported(self, tmp_path):
        app = _app(tmp_path)
        app.engine.driver.remove_cache.side_effect = CacheRemovalError("permission denied")
        async with app.run_test(size=(120, 40)) as pilot:
            await pilot.press("exclamation_mark")
            await pilot.pause()
            sb = pilot.app.query_one("#status-bar", StatusBar)
            assert sb._status.startswith("restart failed")
        assert app.restart_command is None
        app.engine.driver.compile.assert_not_called()
