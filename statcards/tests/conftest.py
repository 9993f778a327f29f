import pytest

from statcards.models.components.types import ColumnType
from statcards.models.models.columns import Column
from statcards.models.models.records import Record
from statcards.storage.stores import MemoryConfigurationStore


@pytest.fixture
def number_column():
    return Column(id="col-n", name="n", type=ColumnType.NUMBER, order=0)


@pytest.fixture
def boolean_column():
    return Column(id="col-done", name="done", type=ColumnType.BOOLEAN, order=1)


@pytest.fixture
def text_column():
    return Column(id="col-status", name="status", type=ColumnType.TEXT, order=2)


@pytest.fixture
def date_column():
    return Column(id="col-due", name="due", type=ColumnType.DATE, order=3)


@pytest.fixture
def columns(number_column, boolean_column, text_column, date_column):
    return [number_column, boolean_column, text_column, date_column]


@pytest.fixture
def number_records():
    """The three-record set used throughout: 5, 10 and an empty value."""
    return [
        Record(id="r1", data={"n": 5}),
        Record(id="r2", data={"n": 10}),
        Record(id="r3", data={"n": ""}),
    ]


@pytest.fixture
def mixed_records():
    return [
        Record(id="r1", data={"n": 5, "done": True, "status": "Open", "due": "2024-01-10"}),
        Record(id="r2", data={"n": 10, "done": False, "status": "closed", "due": "2024-02-01"}),
        Record(id="r3", data={"n": "abc", "done": True, "status": "Reopened"}),
        Record(id="r4", data={"n": None, "done": "true", "status": ""}),
    ]


@pytest.fixture
def store():
    return MemoryConfigurationStore()
