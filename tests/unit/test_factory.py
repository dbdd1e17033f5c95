"""Unit tests for settings-configured connections and builders."""

import pytest
from unittest.mock import Mock, patch

from sqlcomposer.query_builder import QueryBuilder, QueryBuilderFactory, factory


@pytest.fixture(autouse=True)
def reset_shared_connection():
    factory._connection = None
    yield
    factory._connection = None


class TestQueryBuilderFactory:

    def test_create_with_connection(self, connection):
        qb = QueryBuilderFactory.create(connection)

        assert isinstance(qb, QueryBuilder)
        assert qb.get_connection() is connection

    def test_create_uses_shared_connection(self, connection):
        with patch.object(QueryBuilderFactory, "create_connection", return_value=connection) as create:
            first = factory.get_query_builder()
            second = factory.get_query_builder()

        create.assert_called_once_with()
        assert first is not second
        assert first.get_connection() is second.get_connection() is connection

    def test_force_reload_disposes_previous_connection(self, connection):
        previous = Mock()
        factory._connection = previous

        with patch.object(QueryBuilderFactory, "create_connection", return_value=connection):
            assert factory.get_connection(force_reload=True) is connection

        previous.dispose.assert_called_once_with()

    def test_create_connection_from_settings(self):
        connection = QueryBuilderFactory.create_connection()
        try:
            assert connection.get_database_platform().value == "sqlite"
        finally:
            connection.dispose()
