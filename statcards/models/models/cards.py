"""
Card and group configuration models.

A configuration belongs to one collection (a job) and holds the ordered card
list plus the groups clustering some of those cards. The invariants below are
enforced on every validation, so a stored payload that violates them is
rejected as a whole:

- card ids and group ids are unique;
- a group lists at least two distinct, existing cards;
- a card belongs to at most one group, and ``CardConfig.group_id`` names it.
"""

from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from statcards.models.components.types import AggregationType
from statcards.models.models.base import StatcardsModel, generate_id, normalize_label
from statcards.models.models.filters import FilterCondition

MIN_GROUP_SIZE = 2


class CardConfig(StatcardsModel):
    """
    A saved (column, aggregation, optional filters) metric.

    Examples:
        >>> CardConfig(title="Sum Weight", column_id="c1", aggregation="SUM")
        >>> CardConfig(
        ...     title="Approved heavy items",
        ...     column_id="c2",
        ...     aggregation=AggregationType.COUNT_TRUE,
        ...     filters=[FilterCondition(column_id="c1", operator="GREATER_THAN", value="10")],
        ... )
    """

    id: str = Field(default_factory=generate_id)
    title: str
    column_id: str
    aggregation: AggregationType
    filters: Optional[list[FilterCondition]] = None
    group_id: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        label = normalize_label(v)
        if label is None:
            raise ValueError("Card title cannot be empty")
        return label

    @property
    def has_filters(self) -> bool:
        return bool(self.filters)


class GroupConfig(StatcardsModel):
    """A named cluster of two or more cards rendered side by side."""

    id: str = Field(default_factory=generate_id)
    name: str
    card_ids: list[str]

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        label = normalize_label(v)
        if label is None:
            raise ValueError("Group name cannot be empty")
        return label

    @field_validator("card_ids")
    @classmethod
    def validate_card_ids(cls, v: list[str]) -> list[str]:
        if len(v) < MIN_GROUP_SIZE:
            raise ValueError(f"A group needs at least {MIN_GROUP_SIZE} cards, got {len(v)}")
        if len(set(v)) != len(v):
            raise ValueError("A group cannot list the same card twice")
        return v


class StatsConfiguration(StatcardsModel):
    """
    Per-collection card configuration.

    ``cards`` order is the flat render order; groups render as a block at the
    position of their earliest member.
    """

    cards: list[CardConfig] = Field(default_factory=list)
    groups: list[GroupConfig] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def fill_group_ids(cls, data: Any) -> Any:
        """Older payloads carry no ``groupId`` on cards; derive it from the groups."""
        if not isinstance(data, dict):
            return data
        groups = data.get("groups")
        cards = data.get("cards")
        # Shapes other than lists of objects with string ids are left to field validation
        if not isinstance(groups, list) or not isinstance(cards, list):
            return data
        membership: dict[str, str] = {}
        for group in groups:
            if not isinstance(group, dict) or not isinstance(group.get("id"), str):
                continue
            member_ids = group.get("cardIds", group.get("card_ids"))
            if not isinstance(member_ids, list):
                continue
            for card_id in member_ids:
                if isinstance(card_id, str):
                    membership.setdefault(card_id, group["id"])
        filled = []
        for card in cards:
            if isinstance(card, dict) and isinstance(card.get("id"), str):
                key = "group_id" if "group_id" in card else "groupId"
                if card.get(key) is None and card["id"] in membership:
                    card = {**card, key: membership[card["id"]]}
            filled.append(card)
        return {**data, "cards": filled}

    @model_validator(mode="after")
    def validate_invariants(self):
        card_ids = [card.id for card in self.cards]
        if len(set(card_ids)) != len(card_ids):
            raise ValueError("Card ids must be unique")

        group_ids = [group.id for group in self.groups]
        if len(set(group_ids)) != len(group_ids):
            raise ValueError("Group ids must be unique")

        known = set(card_ids)
        owner: dict[str, str] = {}
        for group in self.groups:
            for card_id in group.card_ids:
                if card_id not in known:
                    raise ValueError(f"Group '{group.name}' references unknown card '{card_id}'")
                if card_id in owner:
                    raise ValueError(f"Card '{card_id}' belongs to more than one group")
                owner[card_id] = group.id

        for card in self.cards:
            if card.group_id != owner.get(card.id):
                raise ValueError(
                    f"Card '{card.id}' group reference '{card.group_id}' does not match "
                    f"group membership '{owner.get(card.id)}'"
                )
        return self

    @property
    def is_empty(self) -> bool:
        return not self.cards

    def get_card(self, card_id: str) -> Optional[CardConfig]:
        return next((card for card in self.cards if card.id == card_id), None)

    def get_group(self, group_id: str) -> Optional[GroupConfig]:
        return next((group for group in self.groups if group.id == group_id), None)

    def group_of(self, card_id: str) -> Optional[GroupConfig]:
        return next((group for group in self.groups if card_id in group.card_ids), None)

    def ungrouped_cards(self) -> list[CardConfig]:
        return [card for card in self.cards if card.group_id is None]
