"""
Compiler diagnostic parsing.

Turns a compiler error log into structured records. The log is expected to
be a sequence of blocks separated by blank lines, each block starting with a
location marker:

    src/Config.hs:12:7: error:
        Variable not in scope: foo

    src/Config.hs:20:1: Warning: Top-level binding with no type signature

Every parser here takes ``(text, pos)`` and returns ``(value, new_pos)`` on
success or ``None`` on failure, so a failed attempt never moves the caller's
cursor.

Line breaks may be LF or CRLF; descriptions are returned with LF only.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, TypeVar

T = TypeVar("T")
Parsed = Optional[Tuple[T, int]]

# path:line:col: followed by optional tabs/spaces
RE_LOCATION = re.compile(r"([^:\t\r\n]+):([0-9]+):([0-9]+):[ \t]*")
RE_BLANK_LINE = re.compile(r"[ \t]*\r?\n")
RE_TAB_OR_SPACE = re.compile(r"[ \t]*")
# a line break immediately followed by a blank line
RE_PARAGRAPH_END = re.compile(r"\r?\n[ \t]*\r?\n")
RE_BLANK_REST = re.compile(r"\s*\Z")


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


# Order matters: the first keyword that matches wins.
SEVERITY_KEYWORDS: Tuple[Tuple[str, Severity], ...] = (
    ("Warning:", Severity.WARNING),
    ("error:", Severity.ERROR),
)


class VisualColumn(int):
    """
    A 1-based column as the compiler counts it: tabs advance to the next
    tab stop instead of counting as one character.
    """

    def to_offset(self, line_text: str, tabstop: int = 8) -> int:
        """Return the 0-based character index in ``line_text`` this column points at."""
        visual = 1
        for idx, ch in enumerate(line_text):
            if visual >= self:
                return idx
            if ch == "\t":
                visual += tabstop - ((visual - 1) % tabstop)
            else:
                visual += 1
        return len(line_text)

    def __repr__(self) -> str:
        return f"VisualColumn({int(self)})"


@dataclass(frozen=True)
class DiagnosticRecord:
    file_path: str
    line: int
    column: VisualColumn
    severity: Severity = Severity.ERROR
    description: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_quickfix(self) -> dict:
        """Render as a quickfix-list item (the dict shape editors consume)."""
        return {
            "filename": self.file_path,
            "lnum": self.line,
            "col": int(self.column),
            "vcol": 1,
            "text": self.description,
            "type": "E" if self.is_error else "W",
        }


# --- Combinators ---

def _first_of(text: str, pos: int, *alternatives: Callable[[str, int], Parsed]) -> Parsed:
    """Ordered choice: each alternative starts again from ``pos``."""
    for alternative in alternatives:
        result = alternative(text, pos)
        if result is not None:
            return result
    return None


def _skip_blank_lines(text: str, pos: int) -> int:
    match = RE_BLANK_LINE.match(text, pos)
    while match:
        pos = match.end()
        match = RE_BLANK_LINE.match(text, pos)
    return pos


def _skip_tabs_and_spaces(text: str, pos: int) -> int:
    return RE_TAB_OR_SPACE.match(text, pos).end()


def _starts_blank_line(text: str, pos: int) -> bool:
    return RE_BLANK_LINE.match(text, pos) is not None


def _is_blank(text: str, pos: int) -> bool:
    return RE_BLANK_REST.match(text, pos) is not None


# --- Record grammar ---

def parse_location(text: str, pos: int) -> Parsed[Tuple[str, int, int]]:
    """
    Parse ``/some/path/to/a/file.hs:42:88:`` and the whitespace after it.
    Line and column must both be at least 1.
    """
    match = RE_LOCATION.match(text, pos)
    if not match:
        return None
    line, column = int(match.group(2)), int(match.group(3))
    if line < 1 or column < 1:
        return None
    return (match.group(1), line, column), match.end()


def parse_severity(text: str, pos: int) -> Tuple[Severity, int]:
    """Never fails: a missing keyword means ERROR and consumes nothing."""
    for keyword, severity in SEVERITY_KEYWORDS:
        if text.startswith(keyword, pos):
            return severity, _skip_tabs_and_spaces(text, pos + len(keyword))
    return Severity.ERROR, pos


def parse_short_description(text: str, pos: int) -> Parsed[str]:
    """A description that fits on the current line and is followed by a blank line or EOF."""
    if pos >= len(text) or _starts_blank_line(text, pos):
        return None

    line_end = text.find("\n", pos)
    if line_end == -1:
        return text[pos:].rstrip("\r"), len(text)

    after = line_end + 1
    if after < len(text) and not _starts_blank_line(text, after):
        return None
    return text[pos:line_end].rstrip("\r"), _skip_blank_lines(text, after)


def parse_long_description(text: str, pos: int) -> Parsed[str]:
    """A description running up to a line break followed by a blank line, or EOF."""
    match = RE_PARAGRAPH_END.search(text, pos)
    if match:
        desc, end = text[pos:match.start()], match.end()
    else:
        desc, end = text[pos:].rstrip("\r\n"), len(text)

    desc = desc.replace("\r\n", "\n")
    # GHC starts multi-line messages on the line after the severity keyword
    if desc.startswith("\n"):
        desc = desc[1:]
    return desc, end


def parse_record(text: str, pos: int = 0) -> Parsed[DiagnosticRecord]:
    """Try to parse one complete diagnostic starting at ``pos``."""
    cursor = _skip_blank_lines(text, pos)

    location = parse_location(text, cursor)
    if location is None:
        return None
    (file_path, line, column), cursor = location

    cursor = _skip_tabs_and_spaces(text, cursor)
    severity, cursor = parse_severity(text, cursor)

    description = _first_of(text, cursor, parse_short_description, parse_long_description)
    if description is None:
        return None
    desc, cursor = description

    record = DiagnosticRecord(
        file_path=file_path,
        line=line,
        column=VisualColumn(column),
        severity=severity,
        description=desc,
    )
    return record, cursor


# --- Scanner ---

def parse_diagnostics(log_text: str, resync: bool = False) -> List[DiagnosticRecord]:
    """
    Parses a whole compiler log into records, in the order they appear.

    A log that does not follow the ``path:line:col:`` convention yields an
    empty list rather than an error. With ``resync`` set, unparseable lines
    are skipped instead and every record that does parse is kept.
    """
    records: List[DiagnosticRecord] = []
    pos = 0

    while not _is_blank(log_text, pos):
        result = parse_record(log_text, pos)
        if result is not None:
            record, new_pos = result
            records.append(record)
            pos = new_pos
            continue

        if not resync:
            return []

        next_line = log_text.find("\n", pos)
        if next_line == -1:
            break
        pos = next_line + 1

    return records
