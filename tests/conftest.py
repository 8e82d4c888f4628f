"""Pytest fixtures: a 12-record memory store and the same records in SQLite."""

import pytest

from api.db import Earthquake, create_schema, make_engine, make_session_factory
from api.store import SqlStore
from factories import make_record
from listing.store import MemoryStore


@pytest.fixture
def records():
    """Twelve records with magnitudes 1..12, one day apart."""
    return [make_record(n) for n in range(1, 13)]


@pytest.fixture
def memory_store(records):
    return MemoryStore(records)


@pytest.fixture
def sql_store(tmp_path, records):
    engine = make_engine(f"sqlite:///{tmp_path / 'earthquakes.db'}")
    create_schema(engine)
    session_factory = make_session_factory(engine)
    with session_factory() as s:
        s.add_all([Earthquake(**r.model_dump()) for r in records])
        s.commit()
    try:
        yield SqlStore(session_factory)
    finally:
        engine.dispose()
