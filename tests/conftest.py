"""Shared fixtures for the sqlcomposer test-suite."""

import pytest
from sqlalchemy import create_engine

from sqlcomposer.context import Context
from sqlcomposer.database import Connection
from sqlcomposer.schema import SchemaRegistry


ACCESS_TIME = 1700000000

PAGES_CTRL = {
    "tstamp": "tstamp",
    "versioningWS": True,
    "delete": "deleted",
    "crdate": "crdate",
    "enablecolumns": {
        "disabled": "hidden",
    },
}


@pytest.fixture
def schema():
    """Table control configuration with soft delete and hidden flag on two tables."""
    return SchemaRegistry.from_dict({
        "pages": {"ctrl": PAGES_CTRL},
        "tt_content": {"ctrl": {"delete": "deleted", "enablecolumns": {"disabled": "hidden"}}},
    })


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture
def connection(engine, schema):
    return Connection(engine, schema=schema, context=Context(access_time=ACCESS_TIME))


@pytest.fixture
def plain_connection(connection, monkeypatch):
    """Connection whose identifier quoting returns identifiers unchanged."""
    monkeypatch.setattr(connection, "quote_identifier", lambda identifier: identifier)
    return connection
