"""
Mutation operations on a collection's card configuration.

``StatCardsManager`` owns one collection's configuration, applies
add/remove/reorder/group operations and writes the result back through the
injected store after every successful change. Contract violations (unknown
ids, illegal aggregation, a card joining a second group) raise before any
state changes.
"""

from collections.abc import Sequence
from typing import Any, Optional

from statcards.configs.logging_init import format_pydantic, logger
from statcards.models.components.types import AggregationType
from statcards.models.models.base import MAX_LABEL_LENGTH, normalize_label
from statcards.models.models.cards import (
    MIN_GROUP_SIZE,
    CardConfig,
    GroupConfig,
    StatsConfiguration,
)
from statcards.models.models.columns import Column, find_column
from statcards.models.models.filters import FilterCondition
from statcards.models.models.records import Record
from statcards.modules.card_component.rendering import RenderItem, build_render_items
from statcards.modules.card_component.utils import (
    default_aggregation,
    default_card_title,
    is_aggregation_legal,
    legal_aggregations,
)
from statcards.storage.stores import ConfigurationStore

_UNSET: Any = object()


class CardConfigurationError(ValueError):
    """A configuration operation was called with arguments that break the contract."""


class CardNotFoundError(CardConfigurationError):
    def __init__(self, card_id: str):
        super().__init__(f"Card '{card_id}' not found")
        self.card_id = card_id


class GroupNotFoundError(CardConfigurationError):
    def __init__(self, group_id: str):
        super().__init__(f"Group '{group_id}' not found")
        self.group_id = group_id


def _user_label(value: Optional[str]) -> Optional[str]:
    """Trimmed label from a user edit; None when blank, rejected when too long."""
    label = normalize_label(value)
    if label is not None and len(label) > MAX_LABEL_LENGTH:
        raise CardConfigurationError(
            f"Label is {len(label)} characters long (maximum {MAX_LABEL_LENGTH})"
        )
    return label


class StatCardsManager:
    """
    Card configuration of one collection.

    Examples:
        >>> manager = StatCardsManager("job-42", MemoryConfigurationStore())
        >>> weight = manager.add_card(weight_column, AggregationType.SUM)
        >>> count = manager.add_card(weight_column)
        >>> manager.create_group("Weights", [weight.id, count.id])
        >>> manager.render(records, columns)
    """

    def __init__(self, collection_id: str, store: ConfigurationStore) -> None:
        self.collection_id = collection_id
        self.store = store
        self._configuration = self._load()
        self._collapsed = store.load_collapsed(collection_id)

    def _load(self) -> StatsConfiguration:
        configuration = self.store.load(self.collection_id)
        if configuration is None:
            logger.debug(f"No stored configuration for '{self.collection_id}'; starting empty")
            return StatsConfiguration()
        return configuration

    def reload(self) -> StatsConfiguration:
        """Re-read the configuration and collapse flag from the store."""
        self._configuration = self._load()
        self._collapsed = self.store.load_collapsed(self.collection_id)
        return self._configuration

    def _commit(self, cards: list[CardConfig], groups: list[GroupConfig]) -> StatsConfiguration:
        configuration = StatsConfiguration(cards=cards, groups=groups)
        self.store.save(self.collection_id, configuration)
        self._configuration = configuration
        return configuration

    # Read access --------------------------------------------------------

    @property
    def configuration(self) -> StatsConfiguration:
        return self._configuration

    @property
    def cards(self) -> list[CardConfig]:
        return list(self._configuration.cards)

    @property
    def groups(self) -> list[GroupConfig]:
        return list(self._configuration.groups)

    def _require_card(self, card_id: str) -> CardConfig:
        card = self._configuration.get_card(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        return card

    def _require_group(self, group_id: str) -> GroupConfig:
        group = self._configuration.get_group(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        return group

    # Cards --------------------------------------------------------------

    def add_card(
        self,
        column: Column,
        aggregation: Optional[AggregationType | str] = None,
        filters: Optional[Sequence[FilterCondition]] = None,
        title: Optional[str] = None,
        columns: Sequence[Column] = (),
    ) -> CardConfig:
        """
        Append a new card.

        Args:
            column: Column the card aggregates
            aggregation: Aggregation to apply; the column type's default when None
            filters: Optional conditions restricting the records
            title: Display title; generated from aggregation, column and
                filtered column names when blank
            columns: Live column list, used to name filtered columns in the
                generated title

        Raises:
            CardConfigurationError: If the aggregation is not legal for the column type
        """
        if aggregation is None:
            aggregation = default_aggregation(column.type)
        if not is_aggregation_legal(column.type, aggregation):
            allowed = ", ".join(a.value for a in legal_aggregations(column.type))
            raise CardConfigurationError(
                f"Aggregation '{aggregation}' is not available for {column.type.value} "
                f"column '{column.name}' (allowed: {allowed})"
            )
        aggregation = AggregationType(aggregation)
        filters = list(filters) if filters else None

        label = _user_label(title) or default_card_title(
            column, aggregation, filters, columns or [column]
        )
        card = CardConfig(
            title=label,
            column_id=column.id,
            aggregation=aggregation,
            filters=filters,
        )
        self._commit([*self._configuration.cards, card], list(self._configuration.groups))
        logger.info(f"Added card '{card.title}' to '{self.collection_id}'")
        logger.debug(format_pydantic(card))
        return card

    def update_card(
        self,
        card_id: str,
        *,
        title: Optional[str] = _UNSET,
        aggregation: AggregationType | str = _UNSET,
        filters: Optional[Sequence[FilterCondition]] = _UNSET,
        columns: Sequence[Column] = (),
    ) -> CardConfig:
        """
        Edit a card in place, keeping its position and group.

        Only the keyword arguments that are passed change. ``filters=None``
        clears the filters. When the card's column is among ``columns`` a new
        aggregation is checked against its type; a blank title regenerates
        the default title.
        """
        card = self._require_card(card_id)
        column = find_column(columns, card.column_id)
        updates: dict[str, Any] = {}

        if aggregation is not _UNSET:
            if column is not None and not is_aggregation_legal(column.type, aggregation):
                raise CardConfigurationError(
                    f"Aggregation '{aggregation}' is not available for {column.type.value} "
                    f"column '{column.name}'"
                )
            try:
                updates["aggregation"] = AggregationType(aggregation)
            except ValueError as e:
                raise CardConfigurationError(f"Unknown aggregation '{aggregation}'") from e

        if filters is not _UNSET:
            updates["filters"] = list(filters) if filters else None

        if title is not _UNSET:
            label = _user_label(title)
            if label is None:
                if column is None:
                    raise CardConfigurationError(
                        "A generated title needs the card's column in 'columns'"
                    )
                label = default_card_title(
                    column,
                    updates.get("aggregation", card.aggregation),
                    updates.get("filters", card.filters),
                    columns,
                )
            updates["title"] = label

        updated = card.model_copy(update=updates)
        cards = [updated if c.id == card_id else c for c in self._configuration.cards]
        self._commit(cards, list(self._configuration.groups))
        logger.info(f"Updated card '{updated.title}' in '{self.collection_id}'")
        return updated

    def remove_card(self, card_id: str) -> None:
        """
        Remove a card and drop it from its group.

        A group left with fewer than two members is deleted and its remaining
        member becomes an ungrouped card at its existing position.
        """
        self._require_card(card_id)

        groups: list[GroupConfig] = []
        dissolved: set[str] = set()
        for group in self._configuration.groups:
            if card_id not in group.card_ids:
                groups.append(group)
                continue
            remaining = [member for member in group.card_ids if member != card_id]
            if len(remaining) < MIN_GROUP_SIZE:
                dissolved.add(group.id)
                logger.info(f"Group '{group.name}' dropped below {MIN_GROUP_SIZE} cards; removing it")
            else:
                groups.append(group.model_copy(update={"card_ids": remaining}))

        cards = [
            card.model_copy(update={"group_id": None}) if card.group_id in dissolved else card
            for card in self._configuration.cards
            if card.id != card_id
        ]
        self._commit(cards, groups)
        logger.info(f"Removed card '{card_id}' from '{self.collection_id}'")

    def reorder(self, card_id: str, new_index: int) -> None:
        """
        Move a card within the flat order.

        ``new_index`` is clamped into range. Group membership is untouched.
        """
        card = self._require_card(card_id)
        cards = [c for c in self._configuration.cards if c.id != card_id]
        index = max(0, min(new_index, len(cards)))
        cards.insert(index, card)
        self._commit(cards, list(self._configuration.groups))
        logger.debug(f"Moved card '{card_id}' to position {index}")

    # Groups -------------------------------------------------------------

    def create_group(self, name: str, card_ids: Sequence[str]) -> GroupConfig:
        """
        Cluster two or more ungrouped cards under a name.

        Raises:
            CardConfigurationError: If the name is blank, fewer than two
                distinct cards are given, or a card is already grouped
            CardNotFoundError: If a card id is unknown
        """
        label = _user_label(name)
        if label is None:
            raise CardConfigurationError("Group name cannot be empty")

        member_ids = list(card_ids)
        if len(set(member_ids)) != len(member_ids):
            raise CardConfigurationError("A group cannot list the same card twice")
        if len(member_ids) < MIN_GROUP_SIZE:
            raise CardConfigurationError(
                f"A group needs at least {MIN_GROUP_SIZE} cards, got {len(member_ids)}"
            )
        for member_id in member_ids:
            member = self._require_card(member_id)
            if member.group_id is not None:
                raise CardConfigurationError(
                    f"Card '{member.title}' already belongs to group '{member.group_id}'"
                )

        group = GroupConfig(name=label, card_ids=member_ids)
        members = set(member_ids)
        cards = [
            card.model_copy(update={"group_id": group.id}) if card.id in members else card
            for card in self._configuration.cards
        ]
        self._commit(cards, [*self._configuration.groups, group])
        logger.info(f"Created group '{group.name}' with {len(member_ids)} cards")
        return group

    def remove_group(self, group_id: str) -> None:
        """Delete a group; its cards stay at their flat-order positions, ungrouped."""
        group = self._require_group(group_id)
        cards = [
            card.model_copy(update={"group_id": None}) if card.group_id == group_id else card
            for card in self._configuration.cards
        ]
        groups = [g for g in self._configuration.groups if g.id != group_id]
        self._commit(cards, groups)
        logger.info(f"Removed group '{group.name}'")

    def rename_group(self, group_id: str, name: str) -> GroupConfig:
        group = self._require_group(group_id)
        label = _user_label(name)
        if label is None:
            raise CardConfigurationError("Group name cannot be empty")
        renamed = group.model_copy(update={"name": label})
        groups = [renamed if g.id == group_id else g for g in self._configuration.groups]
        self._commit(list(self._configuration.cards), groups)
        return renamed

    # Collapse flag ------------------------------------------------------

    @property
    def collapsed(self) -> bool:
        return self._collapsed

    def set_collapsed(self, collapsed: bool) -> None:
        self.store.save_collapsed(self.collection_id, collapsed)
        self._collapsed = bool(collapsed)

    def toggle_collapsed(self) -> bool:
        self.set_collapsed(not self._collapsed)
        return self._collapsed

    # Rendering ----------------------------------------------------------

    def render(self, records: Sequence[Record], columns: Sequence[Column]) -> list[RenderItem]:
        return build_render_items(self._configuration, records, columns)
