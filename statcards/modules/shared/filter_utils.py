"""
Type-aware filter evaluation for stat cards.

Covers:
- Operator legality per column type
- Single-condition and conjunction evaluation against a record
- Record-set filtering
- Human-readable filter summaries

Nothing in here raises on bad references: a condition pointing at a deleted
column passes every record, so a stale filter widens a card instead of
breaking it.
"""

import math
import operator as op
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Optional

from statcards.configs.logging_init import logger
from statcards.models.components.constants import (
    FALLBACK_OPERATORS,
    OPERATOR_COMPATIBILITY,
    OPERATOR_LABELS,
    UNKNOWN_COLUMN_LABEL,
    VALUELESS_OPERATORS,
)
from statcards.models.components.types import ColumnType, FilterOperator
from statcards.models.models.columns import Column, find_column
from statcards.models.models.filters import FilterCondition
from statcards.models.models.records import Record, is_empty, to_display_string, to_number

_ORDERING: dict[FilterOperator, Callable[[float, float], bool]] = {
    FilterOperator.GREATER_THAN: op.gt,
    FilterOperator.LESS_THAN: op.lt,
    FilterOperator.GREATER_THAN_OR_EQUAL: op.ge,
    FilterOperator.LESS_THAN_OR_EQUAL: op.le,
}


def legal_operators(column_type: ColumnType | str | None) -> list[FilterOperator]:
    """Ordered operators allowed for a column type; the first one is the default."""
    try:
        key = ColumnType(column_type)
    except ValueError:
        return list(FALLBACK_OPERATORS)
    return list(OPERATOR_COMPATIBILITY.get(key, FALLBACK_OPERATORS))


def default_operator(column_type: ColumnType | str | None) -> FilterOperator:
    return legal_operators(column_type)[0]


def operator_requires_value(operator: FilterOperator | str) -> bool:
    """False only for the operators that test the value on its own."""
    try:
        return FilterOperator(operator) not in VALUELESS_OPERATORS
    except ValueError:
        return True


def retarget_condition(condition: FilterCondition, column: Column) -> FilterCondition:
    """
    Point a condition at another column.

    The operator is reset to the new column type's default and the comparison
    value is cleared.
    """
    return condition.model_copy(
        update={
            "column_id": column.id,
            "operator": default_operator(column.type),
            "value": None,
        }
    )


def _compare_text(value: Any, expected: Optional[str]) -> tuple[str, str]:
    return to_display_string(value).lower(), (expected or "").lower()


def evaluate(record: Record, condition: FilterCondition, columns: Sequence[Column]) -> bool:
    """
    Evaluate one condition against a record.

    Args:
        record: Record to test
        condition: Condition to apply
        columns: Live column list used to resolve ``condition.column_id``

    Returns:
        bool: True when the record passes; always True when the column is gone
    """
    column = find_column(columns, condition.column_id)
    if column is None:
        logger.debug(f"Filter column '{condition.column_id}' not found; condition passes")
        return True

    value = record.get(column.name)
    operator = condition.operator

    if operator == FilterOperator.EQUALS:
        actual, expected = _compare_text(value, condition.value)
        return actual == expected
    if operator == FilterOperator.NOT_EQUALS:
        actual, expected = _compare_text(value, condition.value)
        return actual != expected
    if operator == FilterOperator.CONTAINS:
        actual, expected = _compare_text(value, condition.value)
        return expected in actual
    if operator in _ORDERING:
        # NaN on either side makes every ordering comparison False
        left, right = to_number(value), to_number(condition.value)
        if math.isnan(left) or math.isnan(right):
            return False
        return _ORDERING[operator](left, right)
    if operator == FilterOperator.IS_TRUE:
        return value is True
    if operator == FilterOperator.IS_FALSE:
        return value is False
    if operator == FilterOperator.IS_EMPTY:
        return is_empty(value)
    if operator == FilterOperator.IS_NOT_EMPTY:
        return not is_empty(value)

    logger.debug(f"Unsupported operator '{operator}'; condition passes")
    return True


def matches_all(
    record: Record,
    conditions: Optional[Iterable[FilterCondition]],
    columns: Sequence[Column],
) -> bool:
    """Conjunction of every condition; no conditions matches everything."""
    if not conditions:
        return True
    return all(evaluate(record, condition, columns) for condition in conditions)


def filter_records(
    records: Iterable[Record],
    conditions: Optional[Sequence[FilterCondition]],
    columns: Sequence[Column],
) -> list[Record]:
    """Records passing every condition, in input order."""
    if not conditions:
        return list(records)
    return [record for record in records if matches_all(record, conditions, columns)]


def describe_condition(condition: FilterCondition, columns: Sequence[Column]) -> str:
    """
    Human-readable form of a condition.

    Examples:
        >>> describe_condition(FilterCondition(column_id="c1", operator="GREATER_THAN", value="6"), cols)
        'n > 6'
        >>> describe_condition(FilterCondition(column_id="c2", operator="IS_TRUE"), cols)
        'done is true'
    """
    column = find_column(columns, condition.column_id)
    name = column.name if column is not None else UNKNOWN_COLUMN_LABEL
    label = OPERATOR_LABELS.get(condition.operator, str(condition.operator))
    if not operator_requires_value(condition.operator):
        return f"{name} {label}"
    return f"{name} {label} {condition.value or ''}".rstrip()


def summarize_filters(
    conditions: Optional[Sequence[FilterCondition]], columns: Sequence[Column]
) -> Optional[str]:
    """Filter indicator text for a card, or None when it has no filters."""
    if not conditions:
        return None
    return " AND ".join(describe_condition(condition, columns) for condition in conditions)


def filtered_column_names(
    conditions: Optional[Sequence[FilterCondition]], columns: Sequence[Column]
) -> list[str]:
    """Distinct names of the live columns a filter list refers to, in filter order."""
    names: list[str] = []
    for condition in conditions or []:
        column = find_column(columns, condition.column_id)
        if column is not None and column.name not in names:
            names.append(column.name)
    return names
