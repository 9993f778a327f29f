"""Unit tests for the column schema model."""

from datetime import date

import polars as pl
import pytest
from pydantic import ValidationError

from statcards.models.components.types import ColumnType
from statcards.models.models.columns import (
    Column,
    columns_from_dataframe,
    find_column,
    infer_column_type,
    sort_columns,
)


class TestColumn:
    """Test suite for the Column model."""

    def test_wire_values(self):
        """Column types validate from the stored lowercase strings."""
        column = Column.model_validate({"id": "c1", "name": "Weight", "type": "number", "required": True})
        assert column.type == ColumnType.NUMBER
        assert column.required is True
        assert column.order == 0

    def test_default_type_is_text(self):
        """Columns default to TEXT."""
        assert Column(id="c1", name="Notes").type == ColumnType.TEXT

    def test_blank_name_rejected(self):
        """A blank column name is invalid."""
        with pytest.raises(ValidationError):
            Column(id="c1", name="   ")

    def test_unknown_type_rejected(self):
        """Types outside the closed set are invalid."""
        with pytest.raises(ValidationError):
            Column(id="c1", name="Blob", type="binary")


class TestColumnHelpers:
    """Tests for find_column and sort_columns."""

    def test_find_column(self, columns):
        """Columns resolve by id."""
        assert find_column(columns, "col-done").name == "done"
        assert find_column(columns, "gone") is None

    def test_sort_columns(self):
        """Display order follows order, then name; the input is untouched."""
        columns = [
            Column(id="a", name="zeta", order=1),
            Column(id="b", name="Alpha", order=1),
            Column(id="c", name="mid", order=0),
        ]

        ordered = sort_columns(columns)

        assert [c.id for c in ordered] == ["c", "b", "a"]
        assert [c.id for c in columns] == ["a", "b", "c"]


class TestPolarsSchema:
    """Tests for building columns from a polars schema."""

    def test_infer_column_type(self):
        """Polars dtypes map onto the closed type set."""
        assert infer_column_type(pl.Int64()) == ColumnType.NUMBER
        assert infer_column_type(pl.Float32()) == ColumnType.NUMBER
        assert infer_column_type(pl.Boolean()) == ColumnType.BOOLEAN
        assert infer_column_type(pl.Date()) == ColumnType.DATE
        assert infer_column_type(pl.Datetime()) == ColumnType.DATE
        assert infer_column_type(pl.String()) == ColumnType.TEXT

    def test_columns_from_dataframe(self):
        """Every frame column becomes a Column, in frame order."""
        df = pl.DataFrame(
            {
                "id": ["d1"],
                "weight": [1.5],
                "approved": [True],
                "due": [date(2024, 1, 1)],
                "status": ["open"],
            }
        )

        columns = columns_from_dataframe(df, exclude=["id"])

        assert [(c.name, c.type) for c in columns] == [
            ("weight", ColumnType.NUMBER),
            ("approved", ColumnType.BOOLEAN),
            ("due", ColumnType.DATE),
            ("status", ColumnType.TEXT),
        ]
        assert all(c.id == c.name for c in columns)
