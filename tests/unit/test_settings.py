"""Unit tests for environment driven settings."""

import pytest
from pydantic import ValidationError

from sqlcomposer.constants import Platform
from sqlcomposer.context import Context
from sqlcomposer.settings import RestrictionSettings, _reload_settings, get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in (
        "SQLCOMPOSER_DATABASE__URL",
        "SQLCOMPOSER_DATABASE__PLATFORM",
        "SQLCOMPOSER_RESTRICTIONS__ACCESS_TIME",
        "SQLCOMPOSER_RESTRICTIONS__WORKSPACE_ID",
        "SQLCOMPOSER_RESTRICTIONS__ADDITIONAL_QUERY_RESTRICTIONS",
        "SQLCOMPOSER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    monkeypatch.undo()
    _reload_settings()


class TestSettings:

    def test_defaults(self):
        settings = _reload_settings()

        assert settings.database.url == "sqlite://"
        assert settings.database.platform is None
        assert settings.restrictions.access_time is None
        assert settings.restrictions.additional_query_restrictions == {}
        assert settings.schema_file is None
        assert settings.log_level == "INFO"

    def test_singleton(self):
        settings = get_settings()
        assert get_settings() is settings
        assert get_settings(force_reload=True) is not settings

    def test_nested_environment_variables(self, monkeypatch):
        monkeypatch.setenv("SQLCOMPOSER_DATABASE__URL", "sqlite:///pages.db")
        monkeypatch.setenv("SQLCOMPOSER_DATABASE__PLATFORM", "mariadb")
        monkeypatch.setenv("SQLCOMPOSER_RESTRICTIONS__ACCESS_TIME", "1700000000")
        monkeypatch.setenv("SQLCOMPOSER_RESTRICTIONS__WORKSPACE_ID", "3")

        settings = _reload_settings()

        assert settings.database.url == "sqlite:///pages.db"
        assert settings.database.platform == Platform.MARIADB
        assert settings.restrictions.access_time == 1700000000
        assert settings.restrictions.workspace_id == 3

    def test_additional_restrictions_from_json(self, monkeypatch):
        monkeypatch.setenv(
            "SQLCOMPOSER_RESTRICTIONS__ADDITIONAL_QUERY_RESTRICTIONS",
            '{"myext.restrictions.TenantRestriction": {"disabled": true}}',
        )

        settings = _reload_settings()

        options = settings.restrictions.additional_query_restrictions["myext.restrictions.TenantRestriction"]
        assert options.disabled is True

    def test_log_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("SQLCOMPOSER_LOG_LEVEL", "debug")
        assert _reload_settings().log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("SQLCOMPOSER_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            _reload_settings()


class TestRestrictionSettings:

    def test_rejects_undotted_restriction_path(self):
        with pytest.raises(ValidationError):
            RestrictionSettings(additional_query_restrictions={"TenantRestriction": {}})

    def test_rejects_negative_workspace(self):
        with pytest.raises(ValidationError):
            RestrictionSettings(workspace_id=-1)

    def test_context_from_settings(self):
        context = Context.from_settings(
            RestrictionSettings(access_time=600, workspace_id=1, frontend_group_ids=[0, -2, 7])
        )

        assert context == Context(access_time=600, workspace_id=1, frontend_group_ids=(0, -2, 7))
