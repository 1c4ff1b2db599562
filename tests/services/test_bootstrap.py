"""Settings and bootstrap — environment parsing and TagsActions wiring."""

from tagshop.config import Settings
from tagshop.infrastructure.database import DatabaseSessionManager
from tagshop.infrastructure.ledger_client import HttpLedgerClient
from tagshop.services.bootstrap import build_tags_actions


def test_postgres_url_rewritten_for_asyncpg():
    settings = Settings(database_url="postgresql://u:p@db:5432/tags")
    assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/tags"


def test_tags_parsed_from_json_env(monkeypatch):
    monkeypatch.setenv("TAGS", '["&6VIP:100", "Legend:500"]')
    monkeypatch.setenv("LEDGER_ENABLED", "true")
    settings = Settings()
    assert settings.tags == ["&6VIP:100", "Legend:500"]
    assert settings.ledger_enabled is True


def test_build_tags_actions_without_ledger():
    settings = Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        tags=["VIP:100"], ledger_enabled=False,
    )
    actions = build_tags_actions(settings, DatabaseSessionManager(settings.database_url))
    assert actions.engine.ledger is None
    assert actions.get_tag_price(0) is None
    assert actions.get_tag_name(0) == "VIP§r"


async def test_build_tags_actions_with_ledger_hides_db_password():
    settings = Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        tags=["VIP:100"], ledger_enabled=True,
        ledger_base_url="http://ledger.test",
    )
    actions = build_tags_actions(settings, DatabaseSessionManager(settings.database_url))
    assert isinstance(actions.engine.ledger, HttpLedgerClient)
    assert actions.get_tag_price(0) == 100
    await actions.aclose()

    pg = Settings(database_url="postgresql://user:hunter2@db/tags")
    hint = build_tags_actions(
        pg, DatabaseSessionManager("sqlite+aiosqlite:///:memory:"),
    ).get_data_location()
    assert "hunter2" not in hint
    assert hint.startswith("postgresql+asyncpg://user:")
