import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from statcards.configs.logging_init import logger
from statcards.models.components.constants import (
    AGGREGATION_COMPATIBILITY,
    AGGREGATION_LABELS,
    FALLBACK_AGGREGATIONS,
    NO_VALUE_SENTINEL,
)
from statcards.models.components.types import AggregationType, ColumnType
from statcards.models.models.columns import Column
from statcards.models.models.filters import FilterCondition
from statcards.models.models.records import Record, is_empty, to_display_string, to_number
from statcards.modules.shared.filter_utils import filter_records, filtered_column_names

CardValue = int | float | str


def legal_aggregations(column_type: ColumnType | str | None) -> list[AggregationType]:
    """Ordered aggregations allowed for a column type; the first one is the default."""
    try:
        key = ColumnType(column_type)
    except ValueError:
        return list(FALLBACK_AGGREGATIONS)
    return list(AGGREGATION_COMPATIBILITY.get(key, FALLBACK_AGGREGATIONS))


def default_aggregation(column_type: ColumnType | str | None) -> AggregationType:
    return legal_aggregations(column_type)[0]


def is_aggregation_legal(column_type: ColumnType | str | None, aggregation: AggregationType | str) -> bool:
    try:
        return AggregationType(aggregation) in legal_aggregations(column_type)
    except ValueError:
        return False


def resolve_aggregation(
    column_type: ColumnType | str | None, current: Optional[AggregationType | str]
) -> AggregationType:
    """Keep ``current`` when the column type allows it, otherwise fall back to the default."""
    if current is not None and is_aggregation_legal(column_type, current):
        return AggregationType(current)
    return default_aggregation(column_type)


def aggregation_label(aggregation: AggregationType | str) -> str:
    try:
        return AGGREGATION_LABELS[AggregationType(aggregation)]
    except ValueError:
        return str(aggregation)


def default_card_title(
    column: Column,
    aggregation: AggregationType,
    filters: Optional[Sequence[FilterCondition]] = None,
    columns: Sequence[Column] = (),
) -> str:
    """
    Generated card title: ``"{AggregationLabel} {ColumnName}"``.

    With filters, the names of the filtered columns are appended, e.g.
    ``"Sum Weight (Status, Approved)"``.
    """
    title = f"{aggregation_label(aggregation)} {column.name}"
    names = filtered_column_names(filters, columns)
    if names:
        title = f"{title} ({', '.join(names)})"
    return title


def card_description(column: Column, aggregation: AggregationType) -> str:
    """Subtitle shown under a card value, e.g. ``"Average of Weight"``."""
    return f"{aggregation_label(aggregation)} of {column.name}"


def to_fixed(value: float, digits: int = 2) -> str:
    """
    Fixed-point formatting rounding half away from zero on the exact binary value.

    ``to_fixed(7.5) == "7.50"``; ``to_fixed(0.125) == "0.13"``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _sum_as_zero_filled(values: Sequence[Any]) -> float:
    # Non-numeric entries contribute zero
    total = 0.0
    for value in values:
        number = to_number(value)
        total += 0.0 if math.isnan(number) else number
    return total


def _numeric_only(values: Sequence[Any]) -> list[float]:
    # Non-numeric entries are dropped; a zero would corrupt a minimum
    return [number for number in map(to_number, values) if not math.isnan(number)]


def _as_whole(number: float) -> int | float:
    return int(number) if number.is_integer() else number


def reduce_values(values: Sequence[Any], aggregation: AggregationType | str) -> CardValue:
    """
    Reduce already-filtered, non-empty values to a single card value.

    SUM and AVERAGE count non-numeric values as zero, MIN and MAX ignore them.
    """
    try:
        aggregation = AggregationType(aggregation)
    except ValueError:
        logger.error(f"Aggregation '{aggregation}' is not supported.")
        return 0

    if aggregation == AggregationType.COUNT:
        return len(values)

    if aggregation == AggregationType.SUM:
        total = _sum_as_zero_filled(values)
        if math.isfinite(total) and total.is_integer():
            return int(total)
        return to_fixed(total)

    if aggregation == AggregationType.AVERAGE:
        if not values:
            return 0
        return to_fixed(_sum_as_zero_filled(values) / len(values))

    if aggregation in (AggregationType.MIN, AggregationType.MAX):
        numbers = _numeric_only(values)
        if not numbers:
            return NO_VALUE_SENTINEL
        picked = min(numbers) if aggregation == AggregationType.MIN else max(numbers)
        return _as_whole(picked) if math.isfinite(picked) else to_display_string(picked)

    if aggregation == AggregationType.COUNT_TRUE:
        return sum(1 for value in values if value is True)

    if aggregation == AggregationType.COUNT_FALSE:
        return sum(1 for value in values if value is False)

    return 0


def compute_value(
    records: Sequence[Record],
    column: Column,
    aggregation: AggregationType | str,
    filters: Optional[Sequence[FilterCondition]] = None,
    columns: Sequence[Column] = (),
) -> CardValue:
    """
    Compute a card value over a record set.

    Args:
        records: Live record set of the collection
        column: Column to aggregate
        aggregation: Aggregation to apply
        filters: Optional conditions restricting the records first
        columns: Live column list used to resolve filter columns

    Returns:
        int | float | str: Count or whole-number result, a 2-decimal string for
        fractional SUM/AVERAGE, or ``"-"`` when MIN/MAX has nothing numeric
    """
    logger.debug(f"Computing {aggregation} for column '{column.name}' over {len(records)} records")

    filtered = filter_records(records, filters, columns)
    values = [value for value in (record.get(column.name) for record in filtered) if not is_empty(value)]

    result = reduce_values(values, aggregation)
    logger.debug(
        f"Computed {aggregation} for '{column.name}': {result!r} "
        f"({len(filtered)}/{len(records)} records, {len(values)} values)"
    )
    return result
