"""
Source Peek Widget
==================
Shows the source line a diagnostic points at, with a caret under the
reported column and the full message below it.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from rich.text import Text
from textual.widgets import Static

from ..parsing.diagnostics import DiagnosticRecord
from ..utils.highlighter import highlight_description, severity_style


class SourcePeekPanel(Static):
    """
    Bottom panel for the diagnostic under the cursor.

    Paths in the log are relative to the directory the build ran in, so the
    panel resolves them against ``base_dir``.
    """

    DEFAULT_CSS = """
    SourcePeekPanel {
        height: 10;
        dock: bottom;
        background: #252526;
        color: #d4d4d4;
        border-top: solid #3c3c3c;
        padding: 0 1;
    }
    """

    def __init__(self, base_dir: Optional[Path] = None, tabstop: int = 8, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_dir = base_dir
        self.tabstop = tabstop
        self._record: Optional[DiagnosticRecord] = None

    # ── Public API ──────────────────────────────────────────

    def show_record(self, record: Optional[DiagnosticRecord]) -> None:
        self._record = record
        if record is None:
            self._render_empty()
            return
        self.update(self.render_record(record))

    def render_record(self, record: DiagnosticRecord) -> Text:
        context = Text()
        context.append(f"{record.file_path}:{record.line}:{int(record.column)} ", style="bold")
        context.append(record.severity.value, style=severity_style(record.severity))
        context.append("\n")

        source_line = self._read_line(record.file_path, record.line)
        if source_line is not None:
            # Expand tabs so the caret lines up with the visual column
            expanded = source_line.expandtabs(self.tabstop)
            offset = record.column.to_offset(source_line, self.tabstop)
            visual_offset = len(source_line[:offset].expandtabs(self.tabstop))
            context.append(f"► {record.line:>4} │ ", style="bold yellow")
            context.append(expanded, style="bold white")
            context.append("\n")
            context.append(" " * (9 + visual_offset) + "^", style="bold red")
            context.append("\n")

        context.append_text(highlight_description(record.description))
        return context

    # ── Internal ────────────────────────────────────────────

    def _read_line(self, file_path: str, line: int) -> Optional[str]:
        path = Path(file_path)
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        try:
            lines: List[str] = path.read_text(errors="replace").splitlines()
        except OSError:
            return None
        if 1 <= line <= len(lines):
            return lines[line - 1]
        return None

    def _render_empty(self) -> None:
        t = Text()
        t.append("Diagnostics ", style="bold cyan")
        t.append("│ ", style="dim")
        t.append("(no problems reported)", style="dim italic")
        self.update(t)
