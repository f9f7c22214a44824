# backend/tests/unit/core/test_config.py
import pytest

from app.core.config import Settings, split_origins


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('["http://a.test", " http://b.test "]', ["http://a.test", "http://b.test"]),
        ("http://a.test, ,http://b.test", ["http://a.test", "http://b.test"]),
        ("", []),
        (None, []),
    ],
)
def test_split_origins(raw, expected):
    assert split_origins(raw) == expected


def test_postgres_urls_use_asyncpg():
    s = Settings(_env_file=None, DATABASE_URL="postgres://u:p@db/board")
    assert s.ASYNC_DATABASE_URL == "postgresql+asyncpg://u:p@db/board"
    assert s.SYNC_DATABASE_URL == "postgresql://u:p@db/board"


def test_sqlite_url_is_left_alone():
    s = Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite:///./x.db")
    assert s.ASYNC_DATABASE_URL == "sqlite+aiosqlite:///./x.db"
    assert s.SYNC_DATABASE_URL == "sqlite:///./x.db"


def test_debug_forces_verbose_logging():
    s = Settings(_env_file=None, DEBUG=True, LOG_LEVEL="WARNING")
    assert s.LOG_LEVEL == "DEBUG"
    assert s.DB_ECHO is True


def test_save_debounce_seconds():
    assert Settings(_env_file=None, SAVE_DEBOUNCE_MS=250).SAVE_DEBOUNCE_SECONDS == 0.25
