import re

from rich.text import Text

from ..parsing.diagnostics import DiagnosticRecord, Severity

# Quoted identifiers in compiler messages: `foo', 'bar', ‘baz’
QUOTED = re.compile(r"(`[^`'\n]*'|'[^'\n]*'|‘[^’\n]*’|`[^`\n]*`)")


def severity_style(severity: Severity) -> str:
    if severity == Severity.WARNING:
        return "bold #b8860b"
    return "bold #a80000"


def highlight_description(description: str) -> Text:
    """Dim continuation lines and emphasize quoted names."""
    text = Text(description)
    first_break = description.find("\n")
    if first_break != -1:
        text.stylize("dim", first_break)
    for match in QUOTED.finditer(description):
        text.stylize("bold", match.start(), match.end())
    return text


def highlight_diagnostic(record: DiagnosticRecord, first_line_only: bool = True) -> Text:
    """
    One row of the diagnostics list:

        src/Config.hs:12:7  error  Variable not in scope: foo
    """
    row = Text()
    row.append(f"{record.file_path}:{record.line}:{int(record.column)}", style="underline")
    row.append("  ")
    row.append(record.severity.value, style=severity_style(record.severity))
    row.append("  ")
    description = record.description
    if first_line_only:
        lines = [line.strip() for line in description.splitlines() if line.strip()]
        description = lines[0] if lines else ""
    row.append_text(highlight_description(description))
    return row
