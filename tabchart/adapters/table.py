from __future__ import annotations

import csv
import io

from tabchart.errors import TableParseError


_BOM = "\ufeff"


def parse_rows(text: str, *, delimiter: str = ",") -> list[list[str]]:
    """Split delimited text into rows of raw string cells.

    Quoted fields may hold the delimiter and literal newlines; a doubled quote inside a
    quoted field is a single quote character. Rows keep whatever width the text gives
    them, and a blank line is a row with one empty cell. Empty text yields no rows.
    """
    if text.startswith(_BOM):
        text = text[len(_BOM) :]
    if not text:
        return []
    # No cell can be longer than the whole text.
    previous_limit = csv.field_size_limit(max(csv.field_size_limit(), len(text)))
    try:
        reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, quotechar='"', doublequote=True)
        try:
            return [row if row else [""] for row in reader]
        except csv.Error as exc:
            raise TableParseError(f"could not parse table text at line {reader.line_num}: {exc}") from exc
    finally:
        csv.field_size_limit(previous_limit)
