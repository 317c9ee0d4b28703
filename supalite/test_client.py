import logging

import pytest

from supalite import config
from supalite.client import Client, create_client
from supalite.database import DatabaseEngine, ThreadedDatabaseEngine, as_executor
from supalite.relations import RelationKind, RelationRegistry


def test_config_defaults(monkeypatch):
    for name in ("SUPALITE_DATABASE_PATH", "SUPALITE_LOG_LEVEL", "SUPALITE_STRICT_RELATIONS", "SUPALITE_PRIMARY_KEY"):
        monkeypatch.delenv(name, raising=False)
    assert config.database_path() == ":memory:"
    assert config.log_level() == "INFO"
    assert config.strict_relations() is False
    assert config.primary_key() == "id"


def test_config_from_environment(monkeypatch, tmp_path):
    db_file = tmp_path / "books.sqlite"
    monkeypatch.setenv("SUPALITE_DATABASE_PATH", str(db_file))
    monkeypatch.setenv("SUPALITE_STRICT_RELATIONS", "yes")
    monkeypatch.setenv("SUPALITE_PRIMARY_KEY", "uid")

    client = create_client()

    assert client.database.db_path == str(db_file)
    assert client.relations.strict is True
    assert client.primary_key == "uid"
    client.database.close()


def test_create_client_ships_bookkeeping_relations(monkeypatch):
    monkeypatch.delenv("SUPALITE_STRICT_RELATIONS", raising=False)
    client = create_client(":memory:")
    assert len(client.relations) == 15
    assert client.relations.get("invoices", "invoice_items").kind == RelationKind.HAS_MANY
    assert client.relations.strict is False


def test_explicit_registry_keeps_its_own_strictness(monkeypatch):
    monkeypatch.setenv("SUPALITE_STRICT_RELATIONS", "1")
    registry = RelationRegistry(strict=False)
    client = Client(DatabaseEngine(":memory:"), relations=registry)
    assert client.relations is registry
    assert registry.strict is False


def test_as_executor_rejects_non_callables():
    with pytest.raises(TypeError):
        as_executor(42)


@pytest.mark.asyncio
async def test_custom_primary_key():
    engine = DatabaseEngine(":memory:")
    engine.execute("CREATE TABLE notes (uid TEXT PRIMARY KEY, body TEXT)")
    client = Client(engine, primary_key="uid")

    data, error = await client.from_("notes").insert({"body": "call the bank"})

    assert error is None
    assert data[0]["uid"]
    assert "id" not in data[0]


def test_configure_logging_is_opt_in(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    monkeypatch.setenv("SUPALITE_LOG_LEVEL", "debug")

    DatabaseEngine(":memory:").close()
    assert calls == []

    config.configure_logging()
    assert calls == [{"level": "DEBUG"}]


def test_engine_logs_statements(caplog):
    engine = DatabaseEngine(":memory:")
    with caplog.at_level(logging.INFO, logger="supalite.database"):
        engine.execute("SELECT ? AS n", [1])
    engine.close()
    assert "[SQL EXECUTE]: SELECT ? AS n | [PARAMS]: [1]" in caplog.text


@pytest.mark.asyncio
async def test_threaded_engine_runs_off_the_event_loop():
    engine = ThreadedDatabaseEngine(":memory:")
    engine.execute_blocking("CREATE TABLE notes (id TEXT PRIMARY KEY, body TEXT)")
    client = Client(engine)

    inserted, error = await client.from_("notes").insert([{"body": "pay rent"}, {"body": "file taxes"}])
    assert error is None
    assert len(inserted) == 2

    data, error = await client.from_("notes").select("body").order("body")
    assert error is None
    assert data == [{"body": "file taxes"}, {"body": "pay rent"}]
    engine.close()


@pytest.mark.asyncio
async def test_create_client_threaded():
    client = create_client(":memory:", threaded=True)
    assert isinstance(client.database, ThreadedDatabaseEngine)
    rows = await client.execute_sql("SELECT 1 AS one")
    assert rows == [{"one": 1}]
    client.database.close()
