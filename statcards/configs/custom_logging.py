"""
Colored log output for statcards.

Log records whose message is a pydantic model are rendered as a compact
``Model(field=value, ...)`` line (or one field per line when long); other
non-scalar messages go through Rich's pretty printer.
"""

import logging
import re
import sys
from enum import Enum
from io import StringIO
from typing import Any

import pydantic
from colorlog import ColoredFormatter
from rich.console import Console
from rich.pretty import Pretty
from rich.theme import Theme

MAX_SINGLE_LINE_LENGTH = 80
MAX_VALUE_LENGTH = 30
MAX_INLINE_ITEMS = 3

LOG_FORMAT = (
    "%(asctime)s - %(log_color)s%(levelname)s%(reset)s - %(pathname)s:%(bold)s%(lineno)d%(reset)s"
    " - %(bold)s%(funcName)s%(reset)s - %(message)s"
)

LEVEL_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

# ANSI styles for format_pydantic
_STYLES = {
    "model": "1;95",
    "key": "33",
    "none": "2",
    "true": "1;92",
    "false": "1;91",
    "number": "36",
    "string": "32",
    "brace": "1;37",
}

_BRACKETS = {list: ("[", "]"), tuple: ("(", ")"), dict: ("{", "}")}

rich_theme = Theme(
    {
        "repr.tag_name": "bold magenta",
        "repr.attrib_name": "yellow",
        "repr.attrib_value": "green",
        "repr.bool_true": "bold bright_green",
        "repr.bool_false": "bold bright_red",
        "repr.none": "dim",
        "repr.number": "cyan",
        "repr.str": "green",
    }
)


def _paint(text: str, style: str, color: bool) -> str:
    if not color:
        return text
    return f"\033[{_STYLES[style]}m{text}\033[0m"


def _shorten(text: str) -> str:
    if len(text) > MAX_VALUE_LENGTH:
        return text[: MAX_VALUE_LENGTH - 3] + "..."
    return text


def _format_value(value: Any, color: bool) -> str:
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return _paint("None", "none", color)
    if isinstance(value, bool):
        return _paint(str(value), "true" if value else "false", color)
    if isinstance(value, int | float):
        return _paint(str(value), "number", color)
    if isinstance(value, str):
        return _paint(f"'{_shorten(value)}'", "string", color)
    if isinstance(value, list | tuple | dict):
        open_, close = next(pair for kind, pair in _BRACKETS.items() if isinstance(value, kind))
        if len(value) > MAX_INLINE_ITEMS:
            body = f"{len(value)} items"
        elif isinstance(value, dict):
            body = ", ".join(
                f"{_paint(str(k), 'key', color)}: {_format_value(v, color)}" for k, v in value.items()
            )
        else:
            body = ", ".join(_format_value(item, color) for item in value)
        return f"{_paint(open_, 'brace', color)}{body}{_paint(close, 'brace', color)}"
    return _shorten(repr(value))


def format_pydantic(
    model: pydantic.BaseModel, max_line_length: int = MAX_SINGLE_LINE_LENGTH, color: bool = True
) -> str:
    """
    Format a Pydantic model for log messages.

    Args:
        model: A Pydantic model instance; anything else is returned as ``str()``
        max_line_length: Longest plain-text length rendered on one line
        color: Whether to apply ANSI color formatting

    Returns:
        Single-line ``Name(a=1, b='x')`` text, or one field per line when the
        plain rendering exceeds ``max_line_length``
    """
    if not isinstance(model, pydantic.BaseModel):
        return str(model)

    fields = model.model_dump()
    name = type(model).__name__

    plain = f"{name}({', '.join(f'{k}={_format_value(v, False)}' for k, v in fields.items())})"
    if not color and len(plain) <= max_line_length:
        return plain

    items = [f"{_paint(k, 'key', color)}={_format_value(v, color)}" for k, v in fields.items()]
    header = _paint(name, "model", color)
    if len(plain) <= max_line_length:
        return f"{header}({', '.join(items)})"
    return "\n".join([f"{header}(", *(f"    {item}," for item in items), ")"])


class RichReprFormatter(ColoredFormatter):
    """
    ColoredFormatter that renders pydantic models with ``format_pydantic`` and
    other objects with Rich, and shortens paths to start at ``statcards/``.
    """

    _PATH_PATTERN = re.compile(r"(statcards/.*?)$")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.console = Console(highlight=True, width=120, theme=rich_theme, file=StringIO())

    def _pretty(self, obj: Any) -> str:
        with self.console.capture() as capture:
            self.console.print(Pretty(obj))
        return capture.get().strip()

    def format(self, record):
        if isinstance(record.msg, pydantic.BaseModel):
            record.msg = format_pydantic(record.msg)
        elif not isinstance(record.msg, str | int | float | bool | type(None)):
            record.msg = self._pretty(record.msg)

        match = self._PATH_PATTERN.search(record.pathname or "")
        if match:
            record.pathname = match.group(1)

        return super().format(record)


def setup_logging(name=None, level="INFO"):
    """
    Configure and return the shared ``statcards`` logger.

    Every module logs through this one logger; calling again replaces its
    handler and level. ``name`` is accepted for call-site readability only.
    """
    logger = logging.getLogger("statcards")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    logger.propagate = True

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = RichReprFormatter(
        LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        reset=True,
        log_colors=LEVEL_COLORS,
        secondary_log_colors={"bold": {level_name: "bold" for level_name in LEVEL_COLORS}},
        style="%",
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
