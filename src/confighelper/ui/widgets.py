"""
Custom Widgets
==============
Exposes: DiagnosticLine, StatusBar
"""

from __future__ import annotations

from textual.widgets import Static

from ..parsing.diagnostics import DiagnosticRecord
from ..utils.highlighter import highlight_diagnostic


class DiagnosticLine(Static):
    """One entry of the diagnostics list."""

    def __init__(self, record: DiagnosticRecord, **kwargs) -> None:
        super().__init__(highlight_diagnostic(record), **kwargs)
        self.record = record
        self.add_class("error" if record.is_error else "warning")


class StatusBar(Static):
    """
    Top bar: project, build status, error and warning counts.
    ID: #status-bar
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(id="status-bar", **kwargs)
        self._project: str = ""
        self._status: str = "idle"
        self._errors: int = 0
        self._warnings: int = 0

    def set_status(
        self,
        *,
        project: str | None = None,
        status: str | None = None,
        errors: int | None = None,
        warnings: int | None = None,
    ) -> None:
        if project is not None:
            self._project = project
        if status is not None:
            self._status = status
        if errors is not None:
            self._errors = errors
        if warnings is not None:
            self._warnings = warnings
        self._render_bar()

    def _render_bar(self) -> None:
        parts = []
        if self._project:
            parts.append(f"📦 {self._project}")
        parts.append(f"● {self._status}")
        if self._errors:
            parts.append(f"❌ {self._errors} error(s)")
        if self._warnings:
            parts.append(f"⚠ {self._warnings} warning(s)")
        self.update("  │  ".join(parts))
