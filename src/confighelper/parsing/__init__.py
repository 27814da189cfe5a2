from .diagnostics import (
    DiagnosticRecord,
    Severity,
    VisualColumn,
    parse_diagnostics,
    parse_record,
)

__all__ = [
    "DiagnosticRecord",
    "Severity",
    "VisualColumn",
    "parse_diagnostics",
    "parse_record",
]
