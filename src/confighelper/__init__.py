from .engine import ConfigHelperEngine
from .parsing import DiagnosticRecord, Severity, VisualColumn, parse_diagnostics

__all__ = [
    "ConfigHelperEngine",
    "DiagnosticRecord",
    "Severity",
    "VisualColumn",
    "parse_diagnostics",
]
