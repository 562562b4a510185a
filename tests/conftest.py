import pytest
from sqlmodel import Session, create_engine
from sqlmodel.pool import StaticPool

from wingo.core.buffer import DataBuffer
from wingo.core.records import OutcomeRecord
from wingo.db.base import init_db


def _records(digits, start=1):
    # digits listed oldest -> newest, numeric period ids
    return [OutcomeRecord.from_digit(f"{start + i:06d}", d) for i, d in enumerate(digits)]


@pytest.fixture
def make_records():
    return _records


@pytest.fixture
def make_buffer():
    def _make(digits, capacity=200, start=1):
        buf = DataBuffer(capacity)
        buf.ingest(_records(digits, start))
        return buf
    return _make


@pytest.fixture
def session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(engine)
    with Session(engine) as s:
        yield s
