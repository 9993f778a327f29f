"""
Stored payload <-> configuration model.

Stored configurations are JSON documents shaped like
``{"cards": [...], "groups": [...]}``. The first browser client stored a bare
JSON list of cards; that shape is still accepted and read as a configuration
without groups.
"""

import json
from typing import Any, Optional

from pydantic import ValidationError

from statcards.configs.logging_init import logger
from statcards.models.models.cards import StatsConfiguration


def dump_configuration(configuration: StatsConfiguration) -> str:
    return json.dumps(configuration.to_storage(), ensure_ascii=False)


def parse_configuration(raw: Optional[str | bytes]) -> Optional[StatsConfiguration]:
    """
    Parse a stored payload.

    Returns:
        StatsConfiguration | None: None when nothing is stored or the payload
        is malformed; malformed payloads are logged and discarded
    """
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if not raw.strip():
        return None

    try:
        payload: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Discarding stored configuration: invalid JSON ({e})")
        return None

    if isinstance(payload, list):
        payload = {"cards": payload, "groups": []}
    if not isinstance(payload, dict):
        logger.warning(
            f"Discarding stored configuration: expected an object, got {type(payload).__name__}"
        )
        return None

    try:
        return StatsConfiguration.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Discarding stored configuration: {e.error_count()} validation error(s)")
        logger.debug(str(e))
        return None
    except (TypeError, ValueError) as e:
        logger.warning(f"Discarding stored configuration: {type(e).__name__}: {e}")
        return None


def dump_flag(flag: bool) -> str:
    return json.dumps(bool(flag))


def parse_flag(raw: Optional[str | bytes], default: bool = False) -> bool:
    """Stored booleans are JSON literals; anything else reads as ``default``."""
    if raw is None:
        return default
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Discarding stored flag: invalid JSON {raw!r}")
        return default
    if not isinstance(value, bool):
        logger.warning(f"Discarding stored flag: expected a boolean, got {value!r}")
        return default
    return value
