"""Unit tests for logging helpers."""

import logging

from statcards.configs.custom_logging import RichReprFormatter, format_pydantic, setup_logging
from statcards.models.models.cards import CardConfig
from statcards.models.models.columns import Column


class TestFormatPydantic:
    """Tests for format_pydantic."""

    def test_single_line(self):
        column = Column(id="c1", name="n")

        text = format_pydantic(column, max_line_length=200, color=False)

        assert "\n" not in text
        assert text.startswith("Column(id='c1', name='n', ")
        assert text.endswith("required=False, order=0)")

    def test_multi_line(self):
        card = CardConfig(id="k1", title="A fairly long card title", column_id="col-n", aggregation="SUM")

        text = format_pydantic(card, max_line_length=40, color=False)

        lines = text.splitlines()
        assert lines[0] == "CardConfig("
        assert "    id='k1'," in lines
        assert "    filters=None," in lines
        assert lines[-1] == ")"

    def test_long_strings_are_truncated(self):
        column = Column(id="c1", name="x" * 50)
        assert "'" + "x" * 27 + "...'" in format_pydantic(column, color=False)

    def test_color(self):
        text = format_pydantic(Column(id="c1", name="n"))
        assert "\033[" in text

    def test_non_model(self):
        assert format_pydantic({"a": 1}) == "{'a': 1}"


class TestRichReprFormatter:
    """Tests for the log formatter."""

    def _record(self, msg, pathname="/srv/app/statcards/storage/stores.py"):
        return logging.LogRecord("statcards", logging.INFO, pathname, 10, msg, None, None, func="save")

    def test_models_and_paths(self):
        formatter = RichReprFormatter("%(pathname)s - %(message)s", no_color=True)

        output = formatter.format(self._record(Column(id="c1", name="n")))

        assert output.startswith("statcards/storage/stores.py - ")
        assert "Column" in output
        assert "'c1'" in output

    def test_containers_are_pretty_printed(self):
        formatter = RichReprFormatter("%(message)s", no_color=True)
        output = formatter.format(self._record(["a", "b"]))
        assert "'a'" in output
        assert "'b'" in output


def test_setup_logging_replaces_handlers():
    """Repeated setup keeps a single handler on the shared logger."""
    setup_logging(level="DEBUG")
    logger = setup_logging(level="WARNING")

    assert logger.name == "statcards"
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_initialize_loggers():
    """Both loggers follow the requested level."""
    from statcards.configs.logging_init import initialize_loggers
    from statcards.models.logging import logger as models_logger

    logger = initialize_loggers(verbose=True, verbose_level="INFO")

    assert logger.level == logging.INFO
    assert models_logger.level == logging.INFO

    initialize_loggers(verbose=False, verbose_level="DEBUG")
    assert models_logger.level == logging.CRITICAL
