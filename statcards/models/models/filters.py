"""
Filter condition model.

A condition targets a column by id and keeps the comparison value as the raw
string the user typed; coercion happens at evaluation time according to the
target column's type.
"""

from typing import Any, Optional

from pydantic import field_validator

from statcards.models.components.types import FilterOperator
from statcards.models.models.base import StatcardsModel
from statcards.models.models.records import to_display_string


class FilterCondition(StatcardsModel):
    """
    A single ``column <operator> value`` condition.

    Examples:
        >>> FilterCondition(column_id="c1", operator="GREATER_THAN", value="6")
        >>> FilterCondition(column_id="c2", operator=FilterOperator.IS_TRUE)
    """

    column_id: str
    operator: FilterOperator
    value: Optional[str] = None

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, v: Any) -> Any:
        """Comparison values are stored as strings, whatever the caller passed."""
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, bool | int | float):
            return to_display_string(v)
        return v
