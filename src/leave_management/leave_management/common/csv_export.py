from __future__ import annotations

import csv
import io
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, Sequence


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return value.isoformat(sep=" ", timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def to_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """Serialize uniform records as CSV.

    Header comes from the first record's keys. Every field is quoted and
    embedded quotes are doubled, so commas/quotes/newlines survive a standard
    CSV reader.
    """
    if not rows:
        return ""

    headers = list(rows[0].keys())
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_cell(row.get(h)) for h in headers])
    return buf.getvalue()
