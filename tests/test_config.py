"""Tests for Settings — database URL derivation and origin normalisation."""

from src.config import Settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestDatabaseUrl:
    def test_discrete_fallback(self):
        url = _settings(
            database_url="",
            db_host="db.internal",
            db_port=6543,
            db_user="reader",
            db_password="s3cret",
            db_name="chats",
            db_sslmode="require",
        ).sqlalchemy_database_url

        assert url.drivername == "postgresql+asyncpg"
        assert url.host == "db.internal"
        assert url.port == 6543
        assert url.username == "reader"
        assert url.password == "s3cret"
        assert url.database == "chats"
        assert url.query["ssl"] == "require"

    def test_postgres_scheme_is_rewritten(self):
        url = _settings(database_url="postgres://u:p@host:5432/db").sqlalchemy_database_url

        assert url.drivername == "postgresql+asyncpg"
        assert url.database == "db"

    def test_sslmode_becomes_ssl(self):
        url = _settings(database_url="postgresql://u:p@host/db?sslmode=require").sqlalchemy_database_url

        assert "sslmode" not in url.query
        assert url.query["ssl"] == "require"

    def test_explicit_driver_is_kept(self):
        url = _settings(database_url="sqlite+aiosqlite:///chats.db").sqlalchemy_database_url

        assert url.drivername == "sqlite+aiosqlite"


class TestAllowedOrigin:
    def test_trailing_slash_is_stripped(self):
        assert _settings(chat_url="https://chat.example/").allowed_origin == "https://chat.example"

    def test_unset(self):
        assert _settings(chat_url="").allowed_origin == ""
