"""
Shared domain constants for column-type compatibility.

Legality rules are data, not control flow: every lookup in the filter and
aggregation layers goes through these tables. The first entry of each list is
the default selected when a user targets a column of that type.
"""

from statcards.models.components.types import AggregationType, ColumnType, FilterOperator

# ---------------------------------------------------------------------------
# Filter operator × column_type compatibility
# ---------------------------------------------------------------------------

OPERATOR_COMPATIBILITY: dict[ColumnType, list[FilterOperator]] = {
    ColumnType.NUMBER: [
        FilterOperator.EQUALS,
        FilterOperator.NOT_EQUALS,
        FilterOperator.GREATER_THAN,
        FilterOperator.LESS_THAN,
        FilterOperator.GREATER_THAN_OR_EQUAL,
        FilterOperator.LESS_THAN_OR_EQUAL,
        FilterOperator.IS_EMPTY,
        FilterOperator.IS_NOT_EMPTY,
    ],
    ColumnType.BOOLEAN: [
        FilterOperator.IS_TRUE,
        FilterOperator.IS_FALSE,
    ],
    ColumnType.TEXT: [
        FilterOperator.EQUALS,
        FilterOperator.NOT_EQUALS,
        FilterOperator.CONTAINS,
        FilterOperator.IS_EMPTY,
        FilterOperator.IS_NOT_EMPTY,
    ],
    ColumnType.DATE: [
        FilterOperator.EQUALS,
        FilterOperator.NOT_EQUALS,
        FilterOperator.GREATER_THAN,
        FilterOperator.LESS_THAN,
        FilterOperator.IS_EMPTY,
        FilterOperator.IS_NOT_EMPTY,
    ],
}

# Any type outside the table above
FALLBACK_OPERATORS: list[FilterOperator] = [FilterOperator.EQUALS, FilterOperator.NOT_EQUALS]

# Operators evaluated without a comparison value
VALUELESS_OPERATORS: frozenset[FilterOperator] = frozenset(
    {
        FilterOperator.IS_TRUE,
        FilterOperator.IS_FALSE,
        FilterOperator.IS_EMPTY,
        FilterOperator.IS_NOT_EMPTY,
    }
)

OPERATOR_LABELS: dict[FilterOperator, str] = {
    FilterOperator.EQUALS: "=",
    FilterOperator.NOT_EQUALS: "≠",
    FilterOperator.CONTAINS: "contains",
    FilterOperator.GREATER_THAN: ">",
    FilterOperator.LESS_THAN: "<",
    FilterOperator.GREATER_THAN_OR_EQUAL: "≥",
    FilterOperator.LESS_THAN_OR_EQUAL: "≤",
    FilterOperator.IS_TRUE: "is true",
    FilterOperator.IS_FALSE: "is false",
    FilterOperator.IS_EMPTY: "is empty",
    FilterOperator.IS_NOT_EMPTY: "is not empty",
}

# ---------------------------------------------------------------------------
# Card aggregation × column_type compatibility
# ---------------------------------------------------------------------------

AGGREGATION_COMPATIBILITY: dict[ColumnType, list[AggregationType]] = {
    ColumnType.NUMBER: [
        AggregationType.COUNT,
        AggregationType.SUM,
        AggregationType.AVERAGE,
        AggregationType.MIN,
        AggregationType.MAX,
    ],
    ColumnType.BOOLEAN: [
        AggregationType.COUNT,
        AggregationType.COUNT_TRUE,
        AggregationType.COUNT_FALSE,
    ],
    ColumnType.TEXT: [AggregationType.COUNT],
    ColumnType.DATE: [AggregationType.COUNT],
}

FALLBACK_AGGREGATIONS: list[AggregationType] = [AggregationType.COUNT]

AGGREGATION_LABELS: dict[AggregationType, str] = {
    AggregationType.COUNT: "Count",
    AggregationType.SUM: "Sum",
    AggregationType.AVERAGE: "Average",
    AggregationType.MIN: "Minimum",
    AggregationType.MAX: "Maximum",
    AggregationType.COUNT_TRUE: "Count (True)",
    AggregationType.COUNT_FALSE: "Count (False)",
}

# Value reported by MIN/MAX when no numeric value is left
NO_VALUE_SENTINEL = "-"

# Label for a reference to a column that no longer exists
UNKNOWN_COLUMN_LABEL = "Unknown"
