import time
from dataclasses import dataclass, field
from typing import Iterable, NamedTuple, Tuple

from ..compiler.driver import BuildParameters
from ..parsing.diagnostics import DiagnosticRecord, Severity
from .environment import EnvironmentOverride


class DiagnosticSnapshot(NamedTuple):
    records: Tuple[DiagnosticRecord, ...]
    timestamp: float


@dataclass
class ConfigHelperState:
    """
    Process-wide state shared by the orchestrator and the UI.

    The diagnostics are held in one immutable snapshot that is replaced as a
    whole, so a reader on another thread sees either the old list or the new
    one.
    """
    build_parameters: BuildParameters
    environment_overrides: Tuple[EnvironmentOverride, ...] = ()
    _snapshot: DiagnosticSnapshot = field(
        default=DiagnosticSnapshot((), 0.0), repr=False, compare=False
    )

    @property
    def last_diagnostics(self) -> Tuple[DiagnosticRecord, ...]:
        return self._snapshot.records

    @property
    def last_update(self) -> float:
        return self._snapshot.timestamp

    def replace_diagnostics(self, records: Iterable[DiagnosticRecord]) -> Tuple[DiagnosticRecord, ...]:
        snapshot = DiagnosticSnapshot(tuple(records), time.time())
        self._snapshot = snapshot
        return snapshot.records

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.last_diagnostics if d.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for d in self.last_diagnostics if d.severity == Severity.WARNING)

    @property
    def has_errors(self) -> bool:
        """Returns True if any diagnostic is marked as an error."""
        return self.error_count > 0
