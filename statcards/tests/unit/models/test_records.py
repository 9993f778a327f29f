"""Unit tests for the record model and value normalisation."""

import math
from datetime import date, datetime, time, timezone

import polars as pl
import pytest

from statcards.models.components.types import ValueKind
from statcards.models.models.records import (
    Record,
    classify_value,
    is_empty,
    records_from_dataframe,
    to_display_string,
    to_number,
)


class TestIsEmpty:
    """Tests for the shared tri-state emptiness rule."""

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_values(self, value):
        """None and the empty string are empty."""
        assert is_empty(value) is True

    @pytest.mark.parametrize("value", [0, 0.0, False, " ", "0", [], "false"])
    def test_falsy_but_present_values(self, value):
        """Falsy values other than None/'' are not empty."""
        assert is_empty(value) is False

    def test_absent_key_reads_as_empty(self):
        """A missing key reads as None, which is empty."""
        record = Record(id="r1", data={})
        assert is_empty(record.get("anything")) is True


class TestClassifyValue:
    """Tests for classify_value."""

    def test_kinds(self):
        """Each raw value maps to one kind."""
        assert classify_value(None) == ValueKind.EMPTY
        assert classify_value("") == ValueKind.EMPTY
        assert classify_value("abc") == ValueKind.STRING
        assert classify_value(3) == ValueKind.NUMBER
        assert classify_value(2.5) == ValueKind.NUMBER
        assert classify_value(date(2024, 1, 1)) == ValueKind.DATE_LIKE
        assert classify_value(datetime(2024, 1, 1, 12)) == ValueKind.DATE_LIKE

    def test_booleans_are_not_numbers(self):
        """bool is an int subclass but classifies as BOOLEAN."""
        assert classify_value(True) == ValueKind.BOOLEAN
        assert classify_value(False) == ValueKind.BOOLEAN

    def test_date_strings_stay_strings(self):
        """No date parsing happens on strings."""
        assert classify_value("2024-01-01") == ValueKind.STRING


class TestToNumber:
    """Tests for browser-style numeric coercion."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (5, 5.0),
            (2.5, 2.5),
            ("42", 42.0),
            ("  7.5 ", 7.5),
            ("-3", -3.0),
            (".5", 0.5),
            ("1e3", 1000.0),
            ("0x10", 16.0),
            ("0b101", 5.0),
            ("0o17", 15.0),
            (True, 1.0),
            (False, 0.0),
            ("   ", 0.0),
        ],
    )
    def test_numeric_values(self, value, expected):
        """Numbers and numeric strings convert."""
        assert to_number(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "12abc", "nan", "inf", "1_000", "2024-01-01", [1]])
    def test_non_numeric_values_are_nan(self, value):
        """Empty and non-numeric values convert to NaN."""
        assert math.isnan(to_number(value))

    def test_infinity_spelling(self):
        """Only the browser spelling of infinity is accepted."""
        assert to_number("Infinity") == math.inf
        assert to_number("-Infinity") == -math.inf

    def test_dates_are_epoch_millis(self):
        """Date values convert to milliseconds since the epoch (UTC)."""
        assert to_number(date(1970, 1, 2)) == 86_400_000.0
        assert to_number(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc)) == 1000.0

    def test_time_of_day_is_nan(self):
        assert math.isnan(to_number(time(12, 30)))


class TestToDisplayString:
    """Tests for browser-style stringification."""

    def test_values(self):
        """Stringification matches the browser client."""
        assert to_display_string(None) == ""
        assert to_display_string("") == ""
        assert to_display_string(True) == "true"
        assert to_display_string(False) == "false"
        assert to_display_string(5) == "5"
        assert to_display_string(5.0) == "5"
        assert to_display_string(2.5) == "2.5"
        assert to_display_string("Open") == "Open"
        assert to_display_string(date(2024, 3, 1)) == "2024-03-01"

    @pytest.mark.parametrize(
        "value, expected",
        [
            (0.1, "0.1"),
            (-2.5, "-2.5"),
            (100.0, "100"),
            (-0.0, "0"),
            (1e-5, "0.00001"),
            (1e-7, "1e-7"),
            (1.5e-10, "1.5e-10"),
            (1e20, "100000000000000000000"),
            (1.2345678901234568e20, "123456789012345680000"),
            (1e21, "1e+21"),
            (-3.25e25, "-3.25e+25"),
            (math.nan, "NaN"),
            (math.inf, "Infinity"),
            (-math.inf, "-Infinity"),
        ],
    )
    def test_float_notation(self, value, expected):
        """Floats switch to exponent notation where the browser does."""
        assert to_display_string(value) == expected


class TestRecord:
    """Tests for the Record model."""

    def test_integer_ids_become_strings(self):
        """Integer ids are stored as strings."""
        assert Record(id=7, data={}).id == "7"

    def test_get_reads_by_column_name(self):
        """get() reads a raw value by column name."""
        record = Record(id="r1", data={"Weight": 12})
        assert record.get("Weight") == 12
        assert record.get("Missing") is None


class TestRecordsFromDataFrame:
    """Tests for records_from_dataframe."""

    def test_row_position_ids(self):
        """Without an id column the row position is the id."""
        df = pl.DataFrame({"n": [1, None], "status": ["a", "b"]})

        records = records_from_dataframe(df)

        assert [r.id for r in records] == ["0", "1"]
        assert records[0].data == {"n": 1, "status": "a"}
        assert records[1].get("n") is None

    def test_id_column(self):
        """An id column is used as the id and kept out of data."""
        df = pl.DataFrame({"drawing_id": ["d1", "d2"], "n": [3, 4]})

        records = records_from_dataframe(df, id_column="drawing_id")

        assert [r.id for r in records] == ["d1", "d2"]
        assert records[0].data == {"n": 3}

    def test_missing_id_column(self):
        """An unknown id column raises."""
        df = pl.DataFrame({"n": [1]})
        with pytest.raises(ValueError, match="not found"):
            records_from_dataframe(df, id_column="nope")
