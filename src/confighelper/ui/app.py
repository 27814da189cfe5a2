from typing import Optional, Sequence
from textual.app import App, ComposeResult
from textual.widgets import Footer
from textual.containers import VerticalScroll, Vertical
from textual.binding import Binding
from textual.message import Message
from ..engine import ConfigHelperEngine
from ..errors import ConfigHelperError
from ..parsing.diagnostics import DiagnosticRecord
from ..utils.config import ConfigManager
from ..utils.host import PublishMode, exec_process
from .source_peek import SourcePeekPanel
from .widgets import DiagnosticLine, StatusBar

# User Palette
C_BG = "#EBEEEE"
C_TEXT = "#191A1A"
C_ACCENT1 = "#45d3ee" # Cyan
C_ACCENT2 = "#9FBFC5" # Muted Blue

class DiagnosticScroll(VerticalScroll): BINDINGS = []


class TextualHost:
    """
    Host side of the engine for the TUI. Everything goes through
    post_message so the watcher thread can call it too.
    """

    def __init__(self, app: "ConfigHelperApp"):
        self.app = app

    def publish_diagnostic_list(self, records: Sequence[DiagnosticRecord], mode: PublishMode = PublishMode.REPLACE) -> None:
        self.app.post_message(ConfigHelperApp.DiagnosticsPublished(tuple(records), mode))

    def focus_diagnostic_window(self) -> None:
        self.app.post_message(ConfigHelperApp.FocusRequested())

    def request_process_restart(self, command: Sequence[str]) -> None:
        # The exec happens in run_tui once the terminal has been restored
        self.app.post_message(ConfigHelperApp.RestartRequested(tuple(command)))


class ConfigHelperApp(App):
    """Diagnostics list for the last rebuild, with recompile and restart commands."""

    CSS = f"""
    Screen {{
        background: {C_BG};
        color: {C_TEXT};
    }}

    #main-layout {{ height: 1fr; width: 100%; }}

    #diagnostic-list {{
        height: 1fr;
        border: solid {C_ACCENT2};
        margin: 1 1;
        display: none;
    }}

    DiagnosticLine {{ width: 100%; height: 1; }}
    DiagnosticLine.cursor {{ background: {C_ACCENT2}; }}

    StatusBar {{ dock: top; height: 1; padding: 0 1; }}
    Footer {{ background: {C_TEXT}; color: {C_ACCENT1}; }}
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
        Binding("r", "recompile", "Recompile", show=True),
        Binding("R", "restart", "Restart", show=True),
        Binding("exclamation_mark", "force_restart", "Restart (clear cache)", show=True),
        Binding("up", "cursor_up", "Up", show=False, priority=True),
        Binding("down", "cursor_down", "Down", show=False, priority=True),
        Binding("k", "cursor_up", show=False, priority=True),
        Binding("j", "cursor_down", show=False, priority=True),
    ]

    class DiagnosticsPublished(Message):
        def __init__(self, records: Sequence[DiagnosticRecord], mode: PublishMode) -> None:
            super().__init__()
            self.records = records
            self.mode = mode

    class FocusRequested(Message):
        pass

    class RestartRequested(Message):
        def __init__(self, command: Sequence[str]) -> None:
            super().__init__()
            self.command = command

    def __init__(self, config_manager: Optional[ConfigManager] = None, engine: Optional[ConfigHelperEngine] = None):
        super().__init__()
        self.engine = engine if engine else ConfigHelperEngine(config_manager, host=TextualHost(self))
        self.restart_command: Optional[Sequence[str]] = None
        self._records: list[DiagnosticRecord] = []
        self._cursor = 0
        self._generation = 0

    def compose(self) -> ComposeResult:
        yield StatusBar()
        with Vertical(id="main-layout"):
            yield DiagnosticScroll(id="diagnostic-list")
        params = self.engine.state.build_parameters
        yield SourcePeekPanel(
            base_dir=params.project_dir,
            tabstop=int(self.engine.config.get("tabstop", 8)),
            id="source-peek",
        )
        yield Footer()

    def on_mount(self) -> None:
        self._status(status="idle")
        self.query_one("#source-peek", SourcePeekPanel).show_record(None)
        try:
            self.engine.start()
        except FileNotFoundError as e:
            self._status(status=f"not watching: {e}")

    def on_unmount(self) -> None: self.engine.stop()

    def _status(self, **kwargs) -> None:
        self.query_one("#status-bar", StatusBar).set_status(
            project=self.engine.state.build_parameters.project_name, **kwargs
        )

    # ── Host messages ───────────────────────────────────────

    def on_config_helper_app_diagnostics_published(self, message: DiagnosticsPublished) -> None:
        if message.mode == PublishMode.APPEND:
            self._records.extend(message.records)
        else:
            self._records = list(message.records)
            self._cursor = 0
        self._populate_list()
        errors = sum(1 for r in self._records if r.is_error)
        self._status(
            status="build failed" if errors else "ok",
            errors=errors,
            warnings=len(self._records) - errors,
        )

    def on_config_helper_app_focus_requested(self, message: FocusRequested) -> None:
        # Only open the list when there is something in it
        scroll = self.query_one("#diagnostic-list", DiagnosticScroll)
        scroll.display = bool(self._records)
        if self._records:
            scroll.focus()
        self._sync_peek()

    def on_config_helper_app_restart_requested(self, message: RestartRequested) -> None:
        self.restart_command = message.command
        self.exit()

    # ── List rendering ──────────────────────────────────────

    def _populate_list(self) -> None:
        scroll = self.query_one("#diagnostic-list", DiagnosticScroll)
        scroll.query(DiagnosticLine).remove()
        self._generation += 1
        widgets = []
        for i, record in enumerate(self._records):
            widget = DiagnosticLine(record, id=f"diag-line-{self._generation}-{i}")
            if i == self._cursor: widget.add_class("cursor")
            widgets.append(widget)
        if widgets: scroll.mount(*widgets)

    def _move_cursor(self, new: int) -> None:
        if new < 0 or new >= len(self._records): return
        old, self._cursor = self._cursor, new
        for idx in (old, new):
            matches = self.query(f"#diag-line-{self._generation}-{idx}")
            for w in matches:
                if idx == new:
                    w.add_class("cursor")
                    w.scroll_visible()
                else:
                    w.remove_class("cursor")
        self._sync_peek()

    def _sync_peek(self) -> None:
        self.query_one("#source-peek", SourcePeekPanel).show_record(self.current_record)

    @property
    def current_record(self) -> Optional[DiagnosticRecord]:
        if 0 <= self._cursor < len(self._records):
            return self._records[self._cursor]
        return None

    # ── Actions ─────────────────────────────────────────────

    def action_cursor_up(self) -> None: self._move_cursor(self._cursor - 1)
    def action_cursor_down(self) -> None: self._move_cursor(self._cursor + 1)

    def action_recompile(self) -> None:
        self._status(status="compiling…")
        self.engine.recompile()

    def action_restart(self) -> None:
        self._restart(force_clear_cache=False)

    def action_force_restart(self) -> None:
        self._restart(force_clear_cache=True)

    def _restart(self, force_clear_cache: bool) -> None:
        self._status(status="restarting…")
        try:
            self.engine.restart(force_clear_cache=force_clear_cache)
        except ConfigHelperError as e:
            self._status(status=f"restart failed: {e}")


def run_tui(config_manager: Optional[ConfigManager] = None):
    app = ConfigHelperApp(config_manager)
    app.run()
    if app.restart_command:
        exec_process(app.restart_command)
