"""
Record model and the value normalisation shared by filters and aggregations.

A record is a mapping from column name to an untyped value. Every consumer
decides "is this value empty?" through :func:`is_empty` and turns values into
numbers or strings through :func:`to_number` / :func:`to_display_string`, so
the filter and aggregation layers never disagree about a value.
"""

import math
import re
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any

import polars as pl
from pydantic import Field, field_validator

from statcards.models.components.types import ValueKind
from statcards.models.logging import logger
from statcards.models.models.base import StatcardsModel

NAN = float("nan")

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_INFINITY_RE = re.compile(r"^([+-]?)Infinity$")
_RADIX_RE = {
    16: re.compile(r"^0[xX]([0-9a-fA-F]+)$"),
    8: re.compile(r"^0[oO]([0-7]+)$"),
    2: re.compile(r"^0[bB]([01]+)$"),
}


class Record(StatcardsModel):
    """
    One row of a collection.

    Examples:
        >>> Record(id="r1", data={"Weight": 12.5, "Approved": True})
        >>> Record(id=7, data={"Status": ""})  # ids are stored as strings
    """

    id: str
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def get(self, column_name: str) -> Any:
        """Raw value for a column name; None when absent."""
        return self.data.get(column_name)


def is_empty(value: Any) -> bool:
    """Tri-state emptiness: absent, None and the empty string are all empty."""
    return value is None or (isinstance(value, str) and value == "")


def classify_value(value: Any) -> ValueKind:
    """Normalise a raw value into its kind; booleans are checked before numbers."""
    if is_empty(value):
        return ValueKind.EMPTY
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int | float | Decimal):
        return ValueKind.NUMBER
    if isinstance(value, date | datetime | time):
        return ValueKind.DATE_LIKE
    return ValueKind.STRING


def _epoch_millis(value: date | datetime) -> float:
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    elif value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp() * 1000


def _parse_number(text: str) -> float:
    stripped = text.strip()
    if stripped == "":
        # A whitespace-only string is not empty, and converts like the browser does
        return 0.0
    if _DECIMAL_RE.match(stripped):
        return float(stripped)
    infinity = _INFINITY_RE.match(stripped)
    if infinity:
        return -math.inf if infinity.group(1) == "-" else math.inf
    for radix, pattern in _RADIX_RE.items():
        match = pattern.match(stripped)
        if match:
            return float(int(match.group(1), radix))
    return NAN


def to_number(value: Any) -> float:
    """
    Numeric coercion with browser ``Number()`` semantics.

    Empty values and anything non-numeric become NaN; booleans become 1/0;
    dates become epoch milliseconds. Python spellings that the browser does
    not accept (``"nan"``, ``"inf"``, ``"1_000"``) are NaN as well.
    """
    kind = classify_value(value)
    if kind == ValueKind.EMPTY:
        return NAN
    if kind == ValueKind.BOOLEAN:
        return 1.0 if value else 0.0
    if kind == ValueKind.NUMBER:
        return float(value)
    if kind == ValueKind.DATE_LIKE:
        return _epoch_millis(value) if isinstance(value, date) else NAN
    if isinstance(value, str):
        return _parse_number(value)
    return NAN


def _format_float(value: float) -> str:
    # Number.prototype.toString: shortest round-trip digits, fixed notation
    # for decimal exponents in [-6, 21), exponential otherwise
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    k = len(digits)
    n = k + exponent
    prefix = "-" if sign else ""

    if k <= n <= 21:
        return prefix + digits + "0" * (n - k)
    if 0 < n <= 21:
        return f"{prefix}{digits[:n]}.{digits[n:]}"
    if -6 < n <= 0:
        return f"{prefix}0.{'0' * -n}{digits}"

    mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{prefix}{mantissa}e{'+' if n - 1 >= 0 else '-'}{abs(n - 1)}"


def to_display_string(value: Any) -> str:
    """Stringify a value the way the browser client does (``String(v ?? '')``)."""
    kind = classify_value(value)
    if kind == ValueKind.EMPTY:
        return ""
    if kind == ValueKind.BOOLEAN:
        return "true" if value else "false"
    if kind == ValueKind.NUMBER and isinstance(value, float):
        return _format_float(value)
    if kind == ValueKind.DATE_LIKE:
        return value.isoformat()
    return str(value)


def records_from_dataframe(df: pl.DataFrame, id_column: str | None = None) -> list[Record]:
    """
    Convert a polars DataFrame into records.

    Args:
        df: Source frame, one row per record
        id_column: Column holding the record id; when None the row position is
            used and every column goes into ``data``

    Returns:
        list[Record]: One record per row, in frame order
    """
    if id_column is not None and id_column not in df.columns:
        raise ValueError(f"Column '{id_column}' not found in DataFrame")

    records = []
    for position, row in enumerate(df.iter_rows(named=True)):
        if id_column is None:
            record_id = str(position)
        else:
            record_id = str(row.pop(id_column))
        records.append(Record(id=record_id, data=row))
    logger.debug(f"Built {len(records)} records from a {df.width}-column frame")
    return records
