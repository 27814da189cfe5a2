"""
The host side of a recompile: somewhere to show the diagnostics and a way
to replace the running process.
"""
import os
from enum import Enum
from typing import Optional, Protocol, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..errors import RestartError
from ..parsing.diagnostics import DiagnosticRecord


class PublishMode(str, Enum):
    REPLACE = "r"
    APPEND = "a"
    NEW = " "


class Host(Protocol):
    def publish_diagnostic_list(self, records: Sequence[DiagnosticRecord], mode: PublishMode) -> None: ...

    def focus_diagnostic_window(self) -> None: ...

    def request_process_restart(self, command: Sequence[str]) -> None: ...


def exec_process(command: Sequence[str]):
    """Replace the current process. Only returns by raising RestartError."""
    if not command:
        raise RestartError("No restart command configured.")
    try:
        os.execvp(command[0], list(command))
    except OSError as e:
        raise RestartError(f"Could not restart with '{command[0]}': {e}") from e


class ConsoleHost:
    """Prints the diagnostics list to the terminal with rich."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self.records: list = []

    def publish_diagnostic_list(self, records: Sequence[DiagnosticRecord], mode: PublishMode = PublishMode.REPLACE):
        if mode == PublishMode.APPEND:
            self.records.extend(records)
        else:
            self.records = list(records)

    def focus_diagnostic_window(self):
        # Like :cwindow, only show the list when there is something in it
        if not self.records:
            return
        self.console.print(render_table(self.records))

    def request_process_restart(self, command: Sequence[str]):
        self.console.print(Text(f"Restarting: {' '.join(command)}", style="dim"))
        exec_process(command)


def render_table(records: Sequence[DiagnosticRecord]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Location")
    table.add_column("Type")
    table.add_column("Message")
    for record in records:
        style = "bold red" if record.is_error else "yellow"
        table.add_row(
            f"{record.file_path}:{record.line}:{int(record.column)}",
            Text(record.severity.value, style=style),
            record.description,
        )
    return table
