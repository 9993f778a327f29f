"""
Render projection of a card configuration.

Values are computed on demand and never stored. The output is the ordered
list the display layer walks: ungrouped cards in flat order, each group as
one block at the flat position of its earliest member.
"""

from collections.abc import Sequence
from typing import Optional

from statcards.configs.logging_init import logger
from statcards.models.components.types import AggregationType
from statcards.models.models.base import StatcardsModel
from statcards.models.models.cards import CardConfig, StatsConfiguration
from statcards.models.models.columns import Column, find_column
from statcards.models.models.records import Record
from statcards.modules.card_component.utils import (
    CardValue,
    aggregation_label,
    card_description,
    compute_value,
)
from statcards.modules.shared.filter_utils import summarize_filters


class RenderedCard(StatcardsModel):
    card_id: str
    title: str
    value: CardValue
    aggregation: AggregationType
    aggregation_label: str
    column_name: str
    description: str
    has_filters: bool = False
    filter_summary: Optional[str] = None
    group_id: Optional[str] = None


class RenderedGroup(StatcardsModel):
    group_id: str
    name: str
    cards: list[RenderedCard]


RenderItem = RenderedCard | RenderedGroup


def render_card(
    card: CardConfig, records: Sequence[Record], columns: Sequence[Column]
) -> Optional[RenderedCard]:
    """Computed display data for one card; None when its column was deleted."""
    column = find_column(columns, card.column_id)
    if column is None:
        logger.debug(f"Skipping card '{card.title}': column '{card.column_id}' not found")
        return None

    return RenderedCard(
        card_id=card.id,
        title=card.title,
        value=compute_value(records, column, card.aggregation, card.filters, columns),
        aggregation=card.aggregation,
        aggregation_label=aggregation_label(card.aggregation),
        column_name=column.name,
        description=card_description(column, card.aggregation),
        has_filters=card.has_filters,
        filter_summary=summarize_filters(card.filters, columns),
        group_id=card.group_id,
    )


def build_render_items(
    configuration: StatsConfiguration,
    records: Sequence[Record],
    columns: Sequence[Column],
) -> list[RenderItem]:
    """
    Ordered render items for a configuration.

    Args:
        configuration: Cards and groups of the collection
        records: Live record set
        columns: Live column list

    Returns:
        list[RenderedCard | RenderedGroup]: Cards whose column is gone are
        left out, as are groups with no renderable member
    """
    items: list[RenderItem] = []
    emitted_groups: set[str] = set()

    for card in configuration.cards:
        if card.group_id is None:
            rendered = render_card(card, records, columns)
            if rendered is not None:
                items.append(rendered)
            continue

        if card.group_id in emitted_groups:
            continue
        emitted_groups.add(card.group_id)

        group = configuration.get_group(card.group_id)
        if group is None:
            continue
        members = []
        for member_id in group.card_ids:
            member = configuration.get_card(member_id)
            rendered = render_card(member, records, columns) if member is not None else None
            if rendered is not None:
                members.append(rendered)
        if members:
            items.append(RenderedGroup(group_id=group.id, name=group.name, cards=members))
        else:
            logger.debug(f"Skipping group '{group.name}': no renderable cards")

    return items
