"""
Column-type vocabularies and compatibility tables.

Usage:
    from statcards.models.components import (
        ColumnType,
        AggregationType,
        FilterOperator,
        ValueKind,
    )
"""

from statcards.models.components.types import (
    AggregationType,
    ColumnType,
    FilterOperator,
    ValueKind,
)

__all__ = [
    "AggregationType",
    "ColumnType",
    "FilterOperator",
    "ValueKind",
]
