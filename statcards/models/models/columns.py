"""
Schema model: user-defined, typed columns.

Columns are owned by the record backend; this package only reads them. The
column ``name`` is the key used to read a value out of ``Record.data``.
"""

from collections.abc import Iterable, Sequence

import polars as pl
from pydantic import Field, field_validator

from statcards.models.components.types import ColumnType
from statcards.models.logging import logger
from statcards.models.models.base import StatcardsModel


class Column(StatcardsModel):
    """
    A user-defined column.

    Examples:
        >>> Column(id="c1", name="Weight", type="number")
        >>> Column(id="c2", name="Approved", type=ColumnType.BOOLEAN, order=3)
    """

    id: str
    name: str = Field(..., min_length=1)
    type: ColumnType = ColumnType.TEXT
    required: bool = False
    order: int = 0

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Column name cannot be blank")
        return v


def find_column(columns: Iterable[Column], column_id: str) -> Column | None:
    """Resolve a column by id; None when it no longer exists."""
    for column in columns:
        if column.id == column_id:
            return column
    return None


def sort_columns(columns: Iterable[Column]) -> list[Column]:
    """Columns in display order (``order``, then name)."""
    return sorted(columns, key=lambda c: (c.order, c.name.lower()))


def infer_column_type(dtype: pl.DataType) -> ColumnType:
    """Map a polars dtype onto the closed column type set."""
    if dtype == pl.Boolean:
        return ColumnType.BOOLEAN
    if dtype.is_numeric():
        return ColumnType.NUMBER
    if dtype.is_temporal():
        return ColumnType.DATE
    return ColumnType.TEXT


def columns_from_dataframe(df: pl.DataFrame, exclude: Sequence[str] = ()) -> list[Column]:
    """
    Describe a polars DataFrame as a column list.

    Column ids are the column names, and ``order`` follows the frame's
    column order.
    """
    columns = [
        Column(id=name, name=name, type=infer_column_type(dtype), order=position)
        for position, (name, dtype) in enumerate(df.schema.items())
        if name not in exclude
    ]
    logger.debug(f"Inferred {len(columns)} columns from DataFrame schema")
    return columns
