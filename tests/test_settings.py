from core import settings


def test_mount_prefix(monkeypatch):
    monkeypatch.delenv("REST_MOUNT_PREFIX", raising=False)
    assert settings.mount_prefix() == "rest"
    monkeypatch.setenv("REST_MOUNT_PREFIX", "/api/")
    assert settings.mount_prefix() == "api"


def test_primary_key_defaults(monkeypatch):
    monkeypatch.delenv("REST_PRIMARY_KEYS", raising=False)
    assert settings.primary_key_overrides() == {"quizzes": "slug"}


def test_column_types(monkeypatch):
    monkeypatch.setenv("REST_COLUMN_TYPES", '{"items": {"stock": "RAW"}, "bad": 3}')
    assert settings.column_types() == {"items": {"stock": "raw"}}


def test_column_types_invalid_json(monkeypatch):
    monkeypatch.setenv("REST_COLUMN_TYPES", "{nope")
    assert settings.column_types() == {}


def test_pool_bounds(monkeypatch):
    monkeypatch.setenv("DB_POOL_MIN_SIZE", "4")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "2")
    assert settings.pool_min_size() == 4
    assert settings.pool_max_size() == 4
    monkeypatch.setenv("DB_COMMAND_TIMEOUT", "x")
    assert settings.command_timeout() == 30.0


def test_flags_and_lists(monkeypatch):
    monkeypatch.setenv("REST_UPDATE_REQUIRES_MATCH", "true")
    assert settings.update_requires_match() is True
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")
    assert settings.cors_allow_origins() == ["https://a.example", "https://b.example"]
