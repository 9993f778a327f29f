"""
Closed vocabularies shared by columns, filters and cards.

Enum values are the strings stored by the browser client, so saved
configurations and column payloads validate without translation.
"""

from enum import Enum


class ColumnType(str, Enum):
    """Declared type of a user-defined column."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"


class AggregationType(str, Enum):
    """Aggregations a stat card can apply to its column."""

    COUNT = "COUNT"
    SUM = "SUM"
    AVERAGE = "AVERAGE"
    MIN = "MIN"
    MAX = "MAX"
    COUNT_TRUE = "COUNT_TRUE"
    COUNT_FALSE = "COUNT_FALSE"


class FilterOperator(str, Enum):
    """Comparison operators of a single filter condition."""

    EQUALS = "EQUALS"
    NOT_EQUALS = "NOT_EQUALS"
    CONTAINS = "CONTAINS"
    GREATER_THAN = "GREATER_THAN"
    LESS_THAN = "LESS_THAN"
    GREATER_THAN_OR_EQUAL = "GREATER_THAN_OR_EQUAL"
    LESS_THAN_OR_EQUAL = "LESS_THAN_OR_EQUAL"
    IS_TRUE = "IS_TRUE"
    IS_FALSE = "IS_FALSE"
    IS_EMPTY = "IS_EMPTY"
    IS_NOT_EMPTY = "IS_NOT_EMPTY"


class ValueKind(str, Enum):
    """Normalised kind of a raw record value."""

    EMPTY = "empty"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE_LIKE = "date_like"
