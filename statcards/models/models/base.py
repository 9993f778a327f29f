import uuid

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from statcards.models.utils import convert_model_to_dict

# Longest title or group name accepted from a user edit
MAX_LABEL_LENGTH = 200


def generate_id() -> str:
    """Fresh unique token for cards and groups."""
    return str(uuid.uuid4())


def normalize_label(value: str | None) -> str | None:
    """
    Trim a user-entered label (card title, group name).

    The text is kept as typed, markup-looking characters included. Returns
    None for blank input so callers can fall back to a generated label.
    """
    if value is None:
        return None
    return value.strip() or None


class StatcardsModel(BaseModel):
    """
    Base model for everything that gets persisted.

    Stored JSON uses camelCase keys (``columnId``, ``cardIds``) while Python
    code keeps snake_case attributes.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=False,
    )

    def to_storage(self) -> dict:
        return convert_model_to_dict(self, exclude_none=True)
