"""Unit tests for restriction containers."""

import copy

import pytest

from sqlcomposer.common.exceptions import ErrorCode, QueryBuilderError
from sqlcomposer.context import Context
from sqlcomposer.query_builder.restriction import (
    DefaultRestrictionContainer,
    DeletedRestriction,
    EndTimeRestriction,
    EnforceableQueryRestriction,
    HiddenRestriction,
    RestrictionContainer,
    StartTimeRestriction,
)
from sqlcomposer.schema import SchemaRegistry


class EnforcedRestriction(EnforceableQueryRestriction):
    def __init__(self, enforced=True):
        self.enforced = enforced

    def build_expression(self, table_name, table_alias, ctrl, expr):
        return f"{table_alias}.tenant = 1"

    def is_enforced(self):
        return self.enforced


class TestRestrictionContainer:

    @pytest.fixture
    def expr(self, plain_connection):
        return plain_connection.get_expression_builder()

    def test_add_keeps_insertion_order(self):
        deleted, hidden = DeletedRestriction(), HiddenRestriction()
        container = RestrictionContainer().add(hidden).add(deleted)

        assert container.get_restrictions() == [hidden, deleted]
        assert list(container) == [hidden, deleted]
        assert len(container) == 2

    def test_same_type_can_be_added_twice(self):
        container = RestrictionContainer().add(DeletedRestriction()).add(DeletedRestriction())
        assert len(container) == 2

    def test_add_rejects_non_restrictions(self):
        with pytest.raises(QueryBuilderError) as exc_info:
            RestrictionContainer().add("deleted")
        assert exc_info.value.error_code == ErrorCode.CONFIG_INVALID

    def test_remove_by_type(self):
        container = RestrictionContainer().add(DeletedRestriction()).add(HiddenRestriction())
        container.add(DeletedRestriction())

        container.remove_by_type(DeletedRestriction)

        assert DeletedRestriction not in container
        assert HiddenRestriction in container
        assert len(container) == 1

    def test_remove_by_type_without_match_is_noop(self):
        container = RestrictionContainer().add(HiddenRestriction())
        container.remove_by_type(DeletedRestriction)
        assert len(container) == 1

    def test_remove_all_keeps_enforced_restrictions(self):
        enforced = EnforcedRestriction()
        container = RestrictionContainer().add(DeletedRestriction()).add(enforced)
        container.add(EnforcedRestriction(enforced=False))

        container.remove_all()

        assert container.get_restrictions() == [enforced]

    def test_enforced_restriction_can_be_removed_by_type(self):
        container = RestrictionContainer().add(EnforcedRestriction())
        container.remove_by_type(EnforcedRestriction)
        assert len(container) == 0

    def test_build_expression_groups_per_table(self, expr, schema):
        container = RestrictionContainer(schema=schema).add(DeletedRestriction()).add(HiddenRestriction())

        expression = container.build_expression({"p": "pages", "c": "tt_content"}, expr)

        assert str(expression) == (
            "((((p.deleted = 0) AND (p.hidden = 0))) AND (((c.deleted = 0) AND (c.hidden = 0))))"
        )

    def test_build_expression_skips_unconfigured_tables(self, expr, schema):
        container = RestrictionContainer(schema=schema).add(DeletedRestriction())

        expression = container.build_expression({"p": "pages", "l": "sys_log"}, expr)

        assert str(expression) == "p.deleted = 0"

    def test_build_expression_without_tables_is_empty(self, expr):
        expression = RestrictionContainer().add(DeletedRestriction()).build_expression({}, expr)
        assert expression.count() == 0
        assert str(expression) == ""

    def test_build_expression_falls_back_to_connection_schema(self, expr):
        container = RestrictionContainer().add(DeletedRestriction())
        assert str(container.build_expression({"pages": "pages"}, expr)) == "pages.deleted = 0"

    def test_explicit_schema_wins(self, expr):
        schema = SchemaRegistry.from_dict({"pages": {"delete": "removed"}})
        container = RestrictionContainer(schema=schema).add(DeletedRestriction())
        assert str(container.build_expression({"pages": "pages"}, expr)) == "pages.removed = 0"

    def test_copy_is_independent(self):
        container = RestrictionContainer().add(DeletedRestriction())
        clone = copy.copy(container)
        clone.add(HiddenRestriction())

        assert len(container) == 1
        assert len(clone.clone()) == 2


class TestDefaultRestrictionContainer:

    def test_default_restrictions(self):
        container = DefaultRestrictionContainer(context=Context(access_time=120))

        restrictions = container.get_restrictions()

        assert [type(restriction) for restriction in restrictions] == [
            DeletedRestriction,
            HiddenRestriction,
            StartTimeRestriction,
            EndTimeRestriction,
        ]
        assert restrictions[2].access_time == 120
        assert restrictions[3].access_time == 120

    def test_remove_all_empties_default_container(self):
        container = DefaultRestrictionContainer().remove_all()
        assert len(container) == 0

    def test_applies_time_restrictions(self, plain_connection):
        schema = SchemaRegistry.from_dict({
            "tt_content": {"enablecolumns": {"starttime": "starttime", "endtime": "endtime"}},
        })
        container = DefaultRestrictionContainer(schema=schema, context=Context(access_time=1000))

        expression = container.build_expression(
            {"tt_content": "tt_content"}, plain_connection.get_expression_builder()
        )

        assert str(expression) == (
            "((tt_content.starttime <= 1000) AND "
            "(((tt_content.endtime = 0) OR (tt_content.endtime > 1000))))"
        )
