"""Integration tests for Connection against an in-memory SQLite database."""

import pytest
from sqlalchemy import text

from sqlcomposer.common.exceptions import ErrorCode, QueryBuilderError
from sqlcomposer.constants import ParameterType, Platform
from sqlcomposer.database import Connection, QueryResult
from sqlcomposer.database.connection import _to_text_sql
from sqlcomposer.settings import _Settings


@pytest.fixture
def pages(connection):
    with connection.engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE pages ("
            "uid INTEGER PRIMARY KEY, pid INTEGER, title TEXT, "
            "deleted INTEGER DEFAULT 0, hidden INTEGER DEFAULT 0)"
        ))
        conn.execute(text(
            "INSERT INTO pages (uid, pid, title, deleted, hidden) VALUES "
            "(1, 0, 'Home', 0, 0), (2, 1, 'About', 0, 0), "
            "(3, 1, 'Hidden', 0, 1), (4, 1, 'Deleted', 1, 0)"
        ))
    return connection


class TestToTextSql:

    def test_replaces_placeholders_in_order(self):
        assert _to_text_sql("a = ? AND b = ?", [0, 1]) == "a = :__position0 AND b = :__position1"

    def test_ignores_quoted_question_marks(self):
        assert _to_text_sql("a = '?' AND \"b?\" = ?", [3]) == "a = '?' AND \"b?\" = :__position3"

    def test_escapes_colons_in_quoted_literals(self):
        assert _to_text_sql("title = ':x' AND pid = :pid", []) == "title = '\\:x' AND pid = :pid"

    def test_leaves_casts_outside_quotes(self):
        assert _to_text_sql("CAST(a AS TEXT) = a::text", []) == "CAST(a AS TEXT) = a::text"


class TestExecuteQuery:

    def test_select_applies_restrictions(self, pages):
        qb = pages.create_query_builder()
        result = qb.select("uid").from_("pages").order_by("uid").execute_query()

        assert isinstance(result, QueryResult)
        assert result.columns == ["uid"]
        assert result.fetch_first_column() == [1, 2]

    def test_select_without_restrictions(self, pages):
        qb = pages.create_query_builder()
        qb.get_restrictions().remove_all()

        result = qb.select("uid").from_("pages").order_by("uid").execute_query()

        assert result.fetch_first_column() == [1, 2, 3, 4]

    def test_named_parameter(self, pages):
        qb = pages.create_query_builder()
        qb.select("title").from_("pages").where(
            qb.expr().eq("uid", qb.create_named_parameter(2, ParameterType.INTEGER))
        )

        assert qb.execute_query().scalar() == "About"

    def test_positional_parameters(self, pages):
        qb = pages.create_query_builder()
        expr = qb.expr()
        qb.select("uid").from_("pages").where(
            expr.eq("pid", qb.create_positional_parameter(1, ParameterType.INTEGER)),
            expr.lt("uid", qb.create_positional_parameter(4, ParameterType.INTEGER)),
        )

        assert qb.execute_query().fetch_first_column() == [2]

    def test_array_parameter(self, pages):
        qb = pages.create_query_builder()
        qb.get_restrictions().remove_all()
        qb.select("uid").from_("pages").where(
            qb.expr().in_("uid", qb.create_named_parameter([1, 3, 4], ParameterType.INTEGER_ARRAY))
        ).order_by("uid")

        assert qb.execute_query().fetch_first_column() == [1, 3, 4]

    def test_count(self, pages):
        qb = pages.create_query_builder()
        assert qb.count("*").from_("pages").execute_query().scalar() == 2

    def test_left_join_restricts_joined_rows(self, pages):
        qb = pages.create_query_builder()
        qb.select("parent.uid").add_select_literal('COUNT("child"."uid") AS children')
        qb.from_("pages", "parent").left_join(
            "parent", "pages", "child", qb.expr().eq("child.pid", qb.quote_identifier("parent.uid"))
        ).group_by("parent.uid").order_by("parent.uid")

        rows = qb.execute_query().fetch_all()

        assert rows == [{"uid": 1, "children": 1}, {"uid": 2, "children": 0}]

    def test_invalid_sql_is_wrapped(self, pages):
        with pytest.raises(QueryBuilderError) as exc_info:
            pages.execute_query("SELECT * FROM missing_table")

        assert exc_info.value.error_code == ErrorCode.QUERY_EXECUTION_ERROR
        assert exc_info.value.details["query"] == "SELECT * FROM missing_table"
        assert exc_info.value.cause is not None


class TestExecuteStatement:

    def test_insert_update_delete(self, pages):
        qb = pages.create_query_builder()
        qb.insert("pages").values({"uid": 5, "pid": 0, "title": "New"})
        assert qb.execute_statement() == 1

        qb = pages.create_query_builder()
        qb.update("pages").set("title", "Renamed").where(
            qb.expr().eq("uid", qb.create_named_parameter(5, ParameterType.INTEGER))
        )
        assert qb.execute_statement() == 1

        qb = pages.create_query_builder()
        title = qb.select("title").from_("pages").where("uid = 5").execute_query().scalar()
        assert title == "Renamed"

        qb = pages.create_query_builder()
        qb.delete("pages").where(qb.expr().gt("uid", 3))
        assert qb.execute_statement() == 2

    def test_inlined_literal_with_colon(self, pages):
        qb = pages.create_query_builder()
        qb.insert("pages").values({"uid": 6, "pid": 0, "title": qb.quote(":x")}, create_named_parameters=False)
        assert qb.execute_statement() == 1

        qb = pages.create_query_builder()
        qb.update("pages").set("title", qb.quote("10:30"), create_named_parameter=False).where(
            qb.expr().eq("uid", qb.create_named_parameter(6, ParameterType.INTEGER))
        )
        assert qb.execute_statement() == 1

        qb = pages.create_query_builder()
        qb.select("title").from_("pages").where(
            qb.expr().eq("title", qb.quote("10:30")),
            qb.expr().eq("uid", qb.create_positional_parameter(6, ParameterType.INTEGER)),
        )
        assert qb.execute_query().scalar() == "10:30"

    def test_failed_statement_is_wrapped(self, pages):
        with pytest.raises(QueryBuilderError) as exc_info:
            pages.execute_statement("UPDATE missing_table SET a = 1")
        assert exc_info.value.error_code == ErrorCode.QUERY_EXECUTION_ERROR


class TestQueryResult:

    def test_accessors(self):
        result = QueryResult(columns=["uid", "title"], rows=[{"uid": 1, "title": "a"}, {"uid": 2, "title": "b"}])

        assert result.row_count == 2
        assert len(result) == 2
        assert result.fetch_one() == {"uid": 1, "title": "a"}
        assert result.fetch_first_column() == [1, 2]
        assert result.scalar() == 1
        assert [row["title"] for row in result] == ["a", "b"]

    def test_empty_result(self):
        result = QueryResult()

        assert result.fetch_one() is None
        assert result.scalar() is None
        assert result.fetch_first_column() == []


class TestConnectionFromSettings:

    def test_creates_engine_and_context(self, tmp_path):
        schema_file = tmp_path / "tca.json"
        schema_file.write_text('{"pages": {"ctrl": {"delete": "deleted"}}}', encoding="utf-8")
        settings = _Settings(
            database={"url": "sqlite://"},
            restrictions={
                "access_time": 60,
                "workspace_id": 2,
                "additional_query_restrictions": {
                    "sqlcomposer.query_builder.restriction.root_level.RootLevelRestriction": {"disabled": True},
                },
            },
            schema_file=schema_file,
        )

        connection = Connection.from_settings(settings)
        try:
            assert connection.platform == Platform.SQLITE
            assert connection.schema.get("pages").delete == "deleted"
            assert connection.context.access_time == 60
            assert connection.context.workspace_id == 2
            assert connection.additional_restrictions == {
                "sqlcomposer.query_builder.restriction.root_level.RootLevelRestriction": {"disabled": True},
            }
        finally:
            connection.dispose()

    def test_configured_workspace_reaches_sql(self, tmp_path):
        schema_file = tmp_path / "tca.json"
        schema_file.write_text('{"pages": {"ctrl": {"versioningWS": true}}}', encoding="utf-8")
        settings = _Settings(
            database={"url": "sqlite://"},
            restrictions={
                "workspace_id": 3,
                "additional_query_restrictions": {
                    "sqlcomposer.query_builder.restriction.WorkspaceRestriction": {},
                },
            },
            schema_file=schema_file,
        )

        connection = Connection.from_settings(settings)
        try:
            qb = connection.create_query_builder()
            qb.select("uid").from_("pages")
            assert '"pages"."t3ver_wsid" IN (0, 3)' in qb.get_sql()
        finally:
            connection.dispose()

    def test_platform_override(self):
        connection = Connection.from_settings(_Settings(database={"url": "sqlite://", "platform": "mysql"}))
        try:
            assert connection.platform == Platform.MYSQL
            assert connection.quote_identifier("uid") == "`uid`"
        finally:
            connection.dispose()

    def test_invalid_url_raises_connection_error(self):
        with pytest.raises(QueryBuilderError) as exc_info:
            Connection.from_settings(_Settings(database={"url": "nosuchdialect://host/db"}))
        assert exc_info.value.error_code == ErrorCode.CONNECTION_ERROR
