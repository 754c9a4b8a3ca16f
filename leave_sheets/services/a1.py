"""
A1 notation helpers ("A2:K2", "B5", "A:C").
"""
import re
from typing import NamedTuple, Optional

_CELL_RE = re.compile(r"^([A-Za-z]*)(\d*)$")


class CellRef(NamedTuple):
    col: Optional[int]  # zero-based, None when only a row is given
    row: Optional[int]  # one-based, None when only a column is given


class GridRange(NamedTuple):
    start_col: int
    start_row: int
    end_col: Optional[int]  # inclusive, None = unbounded
    end_row: Optional[int]  # inclusive, None = unbounded


def column_letter(index: int) -> str:
    """Zero-based column index -> letters (0 -> A, 25 -> Z, 26 -> AA)."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")
    letters = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(65 + rem) + letters
    return letters


def column_index(letters: str) -> int:
    """Letters -> zero-based column index (A -> 0, AA -> 26)."""
    if not letters or not letters.isalpha():
        raise ValueError(f"Invalid column letters: {letters!r}")
    index = 0
    for ch in letters.upper():
        index = index * 26 + (ord(ch) - 64)
    return index - 1


def parse_cell(ref: str) -> CellRef:
    match = _CELL_RE.match(ref.strip())
    if not match or not (match.group(1) or match.group(2)):
        raise ValueError(f"Invalid cell reference: {ref!r}")
    letters, digits = match.groups()
    col = column_index(letters) if letters else None
    row = int(digits) if digits else None
    if row is not None and row < 1:
        raise ValueError(f"Row numbers start at 1: {ref!r}")
    return CellRef(col, row)


def parse_range(expression: Optional[str]) -> GridRange:
    """
    Parse a range expression without the sheet prefix.
    None means the whole sheet.
    """
    if not expression:
        return GridRange(0, 1, None, None)
    if ":" in expression:
        first, last = expression.split(":", 1)
    else:
        first = last = expression
    start = parse_cell(first)
    end = parse_cell(last)
    return GridRange(
        start_col=start.col if start.col is not None else 0,
        start_row=start.row if start.row is not None else 1,
        end_col=end.col,
        end_row=end.row,
    )


def row_range(row_number: int, width: int) -> str:
    """Range covering one full record row, e.g. row_range(2, 11) -> 'A2:K2'."""
    return f"A{row_number}:{column_letter(width - 1)}{row_number}"


def block_range(first_row: int, height: int, width: int) -> str:
    """Range covering height rows of width columns starting at column A."""
    last_row = first_row + max(height, 1) - 1
    return f"A{first_row}:{column_letter(width - 1)}{last_row}"
