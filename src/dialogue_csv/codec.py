"""
Delimited Text Codec (Layer 1: Raw Text <-> Table).

Converts raw CSV text to a table of rows and back.

Table Format:
    List[List[str]], first row conventionally the header.

Syntax Notes:
    - Cells are separated by ','
    - Rows end at CRLF, LF or a lone CR
    - A quoted span may hold ',', '"' (doubled) and line breaks
    - Whitespace at the head of a line is dropped

The scanner is a two-mode automaton. Every step looks up
(mode, character class) in TRANSITIONS and performs the action found
there, so the whole grammar is visible in one table.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple


Row = List[str]
Table = List[Row]

CRLF = "\r\n"
LF = "\n"
LINE_TERMINATORS = (CRLF, LF)

_NEEDS_QUOTING = (",", '"', "\r", "\n")


class DialogueCSVError(Exception):
    """Base class for errors raised by dialogue_csv."""
    pass


class MalformedQuotingError(DialogueCSVError):
    """Raised in strict mode when a quoted span is never closed."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"Unterminated quoted field starting at offset {position}")


class ParsingMode(Enum):
    """Scanner modes."""

    UNQUOTED = "unquoted"
    QUOTED = "quoted"


class CharClass(Enum):
    """
    Character classes seen by the scanner.

    QUOTE_PAIR and CRLF are two-character classes decided with one
    character of lookahead.
    """

    QUOTE = "quote"
    QUOTE_PAIR = "quote_pair"
    COMMA = "comma"
    CRLF = "crlf"
    LINE_BREAK = "line_break"
    OTHER = "other"


class Action(Enum):
    """What the scanner does with the current character(s)."""

    APPEND = "append"
    APPEND_QUOTE = "append_quote"
    OPEN_QUOTE = "open_quote"
    CLOSE_QUOTE = "close_quote"
    END_CELL = "end_cell"
    END_ROW = "end_row"


# (mode, class) -> (action, next mode, characters consumed)
TRANSITIONS: Dict[Tuple[ParsingMode, CharClass], Tuple[Action, ParsingMode, int]] = {
    (ParsingMode.UNQUOTED, CharClass.QUOTE): (Action.OPEN_QUOTE, ParsingMode.QUOTED, 1),
    (ParsingMode.UNQUOTED, CharClass.QUOTE_PAIR): (Action.OPEN_QUOTE, ParsingMode.QUOTED, 1),
    (ParsingMode.UNQUOTED, CharClass.COMMA): (Action.END_CELL, ParsingMode.UNQUOTED, 1),
    (ParsingMode.UNQUOTED, CharClass.CRLF): (Action.END_ROW, ParsingMode.UNQUOTED, 2),
    (ParsingMode.UNQUOTED, CharClass.LINE_BREAK): (Action.END_ROW, ParsingMode.UNQUOTED, 1),
    (ParsingMode.UNQUOTED, CharClass.OTHER): (Action.APPEND, ParsingMode.UNQUOTED, 1),
    (ParsingMode.QUOTED, CharClass.QUOTE): (Action.CLOSE_QUOTE, ParsingMode.UNQUOTED, 1),
    (ParsingMode.QUOTED, CharClass.QUOTE_PAIR): (Action.APPEND_QUOTE, ParsingMode.QUOTED, 2),
    (ParsingMode.QUOTED, CharClass.COMMA): (Action.APPEND, ParsingMode.QUOTED, 1),
    (ParsingMode.QUOTED, CharClass.CRLF): (Action.APPEND, ParsingMode.QUOTED, 1),
    (ParsingMode.QUOTED, CharClass.LINE_BREAK): (Action.APPEND, ParsingMode.QUOTED, 1),
    (ParsingMode.QUOTED, CharClass.OTHER): (Action.APPEND, ParsingMode.QUOTED, 1),
}


def classify(c: str, n: Optional[str]) -> CharClass:
    """Classify character `c` given lookahead `n` (None at end of input)."""
    if c == '"':
        return CharClass.QUOTE_PAIR if n == '"' else CharClass.QUOTE
    if c == ",":
        return CharClass.COMMA
    if c == "\r" and n == "\n":
        return CharClass.CRLF
    if c in ("\r", "\n"):
        return CharClass.LINE_BREAK
    return CharClass.OTHER


class _Scanner:
    """Mutable state of a single parse call."""

    def __init__(self, text: str, strict: bool):
        self.text = text
        self.strict = strict
        self.rows: Table = []
        self.cols: Row = []
        self.buffer: List[str] = []
        self.mode = ParsingMode.UNQUOTED
        self.trim_line_head = False
        self.quote_start = -1

    def end_cell(self) -> None:
        self.cols.append("".join(self.buffer))
        self.buffer = []

    def end_row(self) -> None:
        self.end_cell()
        self.rows.append(self.cols)
        self.cols = []

    def has_pending(self) -> bool:
        return bool(self.cols or self.buffer)

    def step(self, pos: int) -> int:
        """Apply one transition at `pos` and return the next position."""
        text = self.text
        c = text[pos]
        n = text[pos + 1] if pos + 1 < len(text) else None

        action, self.mode, width = TRANSITIONS[(self.mode, classify(c, n))]

        if action is Action.APPEND:
            self.buffer.append(c)
        elif action is Action.APPEND_QUOTE:
            self.buffer.append('"')
        elif action is Action.OPEN_QUOTE:
            self.quote_start = pos
        elif action is Action.END_CELL:
            self.end_cell()
        elif action is Action.END_ROW:
            self.end_row()
            self.trim_line_head = True

        return pos + width

    def finish_last(self, c: str) -> None:
        """Handle the final character of the input."""
        if self.mode is ParsingMode.QUOTED:
            if c != '"':
                self._unterminated()
                self.buffer.append(c)
            self.mode = ParsingMode.UNQUOTED
            self.end_row()
            return

        if c == ",":
            self.end_cell()
            self.end_row()
            return

        if not self.has_pending() and c.isspace():
            # blank final line
            return

        if c in ("\r", "\n"):
            self.end_row()
            return

        self.buffer.append(c)
        self.end_row()

    def finish(self) -> None:
        """Close whatever is still open after the scan ran off the end."""
        if self.mode is ParsingMode.QUOTED:
            self._unterminated()
        if self.has_pending():
            self.end_row()

    def _unterminated(self) -> None:
        if self.strict:
            raise MalformedQuotingError(self.quote_start)

    def run(self) -> Table:
        text = self.text
        last = len(text) - 1
        pos = 0

        while pos <= last:
            c = text[pos]

            if self.trim_line_head:
                if c.isspace():
                    pos += 1
                    continue
                self.trim_line_head = False

            if pos == last:
                self.finish_last(c)
                return self.rows

            pos = self.step(pos)

        self.finish()
        return self.rows


def parse(text: str, strict: bool = False) -> Table:
    """
    Parse CSV text into a table.

    Malformed input never raises by default: an unterminated quoted
    field is closed at end of input, and rows are not padded to the
    header width. Input that ends on an escaped quote pair or a CRLF
    still yields the row in progress, e.g. '"a""' gives [['a"']].

    Args:
        text: Raw CSV contents
        strict: Raise instead of tolerating an unterminated quote

    Returns:
        List of rows, each a list of cell strings

    Raises:
        MalformedQuotingError: If strict and a quoted span is not closed
    """
    if not text:
        return []
    return _Scanner(text, strict).run()


def escape_cell(cell: str) -> str:
    """Quote a cell if it contains a delimiter, quote or line break."""
    if any(ch in cell for ch in _NEEDS_QUOTING):
        return '"' + cell.replace('"', '""') + '"'
    return cell


def _format_row(row: Row) -> str:
    if not row:
        raise ValueError("cannot format a row with no cells")
    if len(row) == 1 and row[0] == "":
        # an empty line would be skipped by the line-head trim
        return '""'

    cells = [escape_cell(cell) for cell in row]
    if row[0][:1].isspace() and not cells[0].startswith('"'):
        cells[0] = '"' + row[0] + '"'
    return ",".join(cells)


def format_table(rows: Table, line_terminator: str = CRLF) -> str:
    """
    Format a table as CSV text.

    Rows are joined with `line_terminator`; no terminator follows the
    last row.

    Args:
        rows: Table to format
        line_terminator: "\\r\\n" (default, the dialogue editor's save
            format) or "\\n"

    Returns:
        CSV text

    Raises:
        ValueError: If line_terminator is not supported or a row has no cells
    """
    if line_terminator not in LINE_TERMINATORS:
        raise ValueError(f"Unsupported line terminator: {line_terminator!r}")
    return line_terminator.join(_format_row(row) for row in rows)


def parse_file(filepath: str, encoding: str = "utf-8", strict: bool = False) -> Table:
    """
    Parse a CSV file into a table.

    Args:
        filepath: Path to CSV file
        encoding: Text encoding of the file
        strict: See parse()

    Returns:
        Table

    Raises:
        FileNotFoundError: If file doesn't exist
        MalformedQuotingError: If strict and a quoted span is not closed
    """
    try:
        with open(filepath, "r", encoding=encoding, newline="") as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"CSV file not found: {filepath}")

    return parse(content, strict=strict)


def write_file(filepath: str, rows: Table, encoding: str = "utf-8",
               line_terminator: str = CRLF) -> None:
    """Write a table to a CSV file."""
    content = format_table(rows, line_terminator=line_terminator)
    with open(filepath, "w", encoding=encoding, newline="") as f:
        f.write(content)


__all__ = [
    "Row",
    "Table",
    "CRLF",
    "LF",
    "DialogueCSVError",
    "MalformedQuotingError",
    "ParsingMode",
    "CharClass",
    "Action",
    "TRANSITIONS",
    "classify",
    "parse",
    "escape_cell",
    "format_table",
    "parse_file",
    "write_file",
]
