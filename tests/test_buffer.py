from wingo.core.buffer import DataBuffer
from wingo.core.records import BIG, SMALL, OutcomeRecord


def test_record_labels():
    r = OutcomeRecord.from_digit("1", 5)
    assert r.label == BIG and r.bit == 1
    r = OutcomeRecord.from_digit("2", 4)
    assert r.label == SMALL and r.bit == 0


def test_ingest_newest_at_head(make_records):
    buf = DataBuffer()
    assert buf.ingest(make_records([1, 2, 3])) == 3
    assert buf.digits() == [3, 2, 1]
    assert buf.latest.period_id == "000003"


def test_reingest_is_noop(make_records):
    buf = DataBuffer()
    buf.ingest(make_records([1, 2, 3]))
    before = buf.records()
    assert buf.ingest(make_records([9, 9, 9])) == 0
    assert buf.records() == before


def test_duplicates_inside_batch(make_records):
    buf = DataBuffer()
    recs = make_records([4, 5])
    assert buf.ingest(recs + recs) == 2
    assert len(buf) == 2


def test_capacity_evicts_oldest(make_records):
    buf = DataBuffer(capacity=200)
    buf.ingest(make_records(list(range(10)) * 25))
    assert len(buf) == 200
    assert buf.latest.period_id == "000250"
    assert "000050" not in buf
    assert "000051" in buf
    assert buf.period_ids[-1] == "000051"


def test_capacity_across_many_ingests(make_records):
    buf = DataBuffer(capacity=20)
    for start in range(1, 100, 7):
        buf.ingest(make_records([1] * 7, start=start))
        assert len(buf) <= 20


def test_get(make_buffer):
    buf = make_buffer([1, 8])
    assert buf.get("000002").digit == 8
    assert buf.get("999999") is None
