"""Unit tests for the table control registry."""

import pytest

from sqlcomposer.common.exceptions import ErrorCode, QueryBuilderError
from sqlcomposer.schema import SchemaRegistry, TableControl


class TestTableControl:

    def test_reads_aliased_keys(self):
        ctrl = TableControl.model_validate({"versioningWS": True, "rootLevel": 1, "label": "title"})

        assert ctrl.versioning_ws is True
        assert ctrl.root_level == 1
        assert ctrl.label == "title"

    def test_empty_delete_column_is_none(self):
        assert TableControl(delete=" ").delete is None

    def test_enablecolumns_default_to_none(self):
        ctrl = TableControl()
        assert ctrl.enablecolumns.disabled is None
        assert ctrl.enablecolumns.fe_group is None


class TestSchemaRegistry:

    def test_from_dict_with_ctrl_sections(self, schema):
        assert len(schema) == 2
        assert "pages" in schema
        assert sorted(schema) == ["pages", "tt_content"]
        assert schema.get("pages").delete == "deleted"
        assert schema.get("pages").enablecolumns.disabled == "hidden"
        assert schema.get("pages").versioning_ws is True

    def test_unknown_table_has_empty_control(self, schema):
        ctrl = schema.get("sys_log")
        assert ctrl.delete is None
        assert ctrl.enablecolumns.disabled is None

    def test_from_dict_accepts_models(self):
        registry = SchemaRegistry.from_dict({"pages": TableControl(delete="deleted")})
        assert registry.get("pages").delete == "deleted"

    def test_from_dict_rejects_invalid_section(self):
        with pytest.raises(QueryBuilderError) as exc_info:
            SchemaRegistry.from_dict({"pages": {"enablecolumns": "hidden"}})
        assert exc_info.value.error_code == ErrorCode.CONFIG_INVALID

    def test_from_file(self, tmp_path):
        path = tmp_path / "tca.json"
        path.write_text('{"pages": {"ctrl": {"delete": "deleted"}}}', encoding="utf-8")

        assert SchemaRegistry.from_file(path).get("pages").delete == "deleted"

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(QueryBuilderError) as exc_info:
            SchemaRegistry.from_file(tmp_path / "missing.json")
        assert exc_info.value.error_code == ErrorCode.CONFIG_MISSING

    def test_from_invalid_json(self, tmp_path):
        path = tmp_path / "tca.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(QueryBuilderError) as exc_info:
            SchemaRegistry.from_file(path)
        assert exc_info.value.error_code == ErrorCode.CONFIG_INVALID
