"""Tests for the user and task repositories against a real SQLite file."""

from contextlib import asynccontextmanager
from datetime import date, datetime
from unittest.mock import patch

import pytest
from sqlalchemy import Date, DateTime, text

from config.database import DatabaseSettings
from database.async_engine import create_engine, get_session_factory, init_database
from database.models import Base
from database.query_helpers import as_date, as_datetime, typed_text
from database.repositories import DuplicateEmailError, TaskRepository, UserRepository


@asynccontextmanager
async def open_session(db_path):
    """Fresh schema in ``db_path``; yields one session and disposes the engine."""
    settings = DatabaseSettings(driver="sqlite+aiosqlite", sqlite_path=db_path)
    engine = create_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = get_session_factory(engine, settings)
    try:
        async with factory() as session:
            yield session
            await session.commit()
    finally:
        await engine.dispose()


async def _user(session, name):
    return await UserRepository(session).create(name, f"{name}@example.com", "hash")


def _fields(**overrides):
    fields = {
        "title": "Write report",
        "description": None,
        "due_date": date(2024, 1, 5),
        "priority": "medium",
        "status": "pending",
        "category": None,
    }
    fields.update(overrides)
    return fields


class TestUserRepository:

    @pytest.mark.asyncio
    async def test_create_and_lookup(self, isolated_database):
        async with open_session(isolated_database) as session:
            users = UserRepository(session)
            created = await users.create("alice", "alice@example.com", "hash")

            by_email = await users.get_by_email("alice@example.com")
            by_id = await users.get_by_id(created["id"])

        assert created["username"] == "alice"
        assert "password_hash" not in created
        assert by_email["id"] == created["id"]
        assert by_email["password_hash"] == "hash"
        assert by_id["email"] == "alice@example.com"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, isolated_database):
        async with open_session(isolated_database) as session:
            users = UserRepository(session)
            await users.create("alice", "alice@example.com", "hash")

            with pytest.raises(DuplicateEmailError):
                await users.create("alice2", "alice@example.com", "hash")

    @pytest.mark.asyncio
    async def test_unknown_user(self, isolated_database):
        async with open_session(isolated_database) as session:
            users = UserRepository(session)
            assert await users.get_by_email("nobody@example.com") is None
            assert await users.get_by_id("missing") is None
            assert await users.email_exists("nobody@example.com") is False


class TestTaskRepository:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_owner(self, isolated_database):
        async with open_session(isolated_database) as session:
            alice = await _user(session, "alice")
            bob = await _user(session, "bob")

            task = await TaskRepository(session).create(
                alice["id"], _fields(user_id=bob["id"])
            )

        assert task["id"]
        assert task["user_id"] == alice["id"]
        assert task["due_date"] == date(2024, 1, 5)
        assert isinstance(task["created_at"], datetime)
        assert task["created_at"] == task["updated_at"]

    @pytest.mark.asyncio
    async def test_reads_are_owner_scoped(self, isolated_database):
        async with open_session(isolated_database) as session:
            alice = await _user(session, "alice")
            bob = await _user(session, "bob")
            tasks = TaskRepository(session)
            task = await tasks.create(alice["id"], _fields())

            assert await tasks.get(alice["id"], task["id"]) is not None
            assert await tasks.get(bob["id"], task["id"]) is None
            assert await tasks.list_for_user(bob["id"]) == []

    @pytest.mark.asyncio
    async def test_list_in_creation_order(self, isolated_database):
        async with open_session(isolated_database) as session:
            alice = await _user(session, "alice")
            tasks = TaskRepository(session)
            for title in ("first", "second", "third"):
                await tasks.create(alice["id"], _fields(title=title))

            listed = await tasks.list_for_user(alice["id"])

        assert [t["title"] for t in listed] == ["first", "second", "third"]

    @pytest.mark.asyncio
    async def test_update_by_other_user_matches_nothing(self, isolated_database):
        async with open_session(isolated_database) as session:
            alice = await _user(session, "alice")
            bob = await _user(session, "bob")
            tasks = TaskRepository(session)
            task = await tasks.create(alice["id"], _fields())

            assert await tasks.update(bob["id"], task["id"], {"title": "Hijacked"}) is None
            assert (await tasks.get(alice["id"], task["id"]))["title"] == "Write report"

    @pytest.mark.asyncio
    async def test_update_ignores_owner_and_unknown_columns(self, isolated_database):
        async with open_session(isolated_database) as session:
            alice = await _user(session, "alice")
            bob = await _user(session, "bob")
            tasks = TaskRepository(session)
            task = await tasks.create(alice["id"], _fields())

            updated = await tasks.update(
                alice["id"], task["id"],
                {"user_id": bob["id"], "task_id": "other", "status": "completed"},
            )

        assert updated["id"] == task["id"]
        assert updated["user_id"] == alice["id"]
        assert updated["status"] == "completed"

    @pytest.mark.asyncio
    async def test_delete_is_owner_scoped(self, isolated_database):
        async with open_session(isolated_database) as session:
            alice = await _user(session, "alice")
            bob = await _user(session, "bob")
            tasks = TaskRepository(session)
            task = await tasks.create(alice["id"], _fields())

            assert await tasks.delete(bob["id"], task["id"]) is False
            assert await tasks.delete(alice["id"], task["id"]) is True
            assert await tasks.delete(alice["id"], task["id"]) is False

    @pytest.mark.asyncio
    async def test_deleting_user_removes_their_tasks(self, isolated_database):
        async with open_session(isolated_database) as session:
            alice = await _user(session, "alice")
            tasks = TaskRepository(session)
            await tasks.create(alice["id"], _fields())

            assert await UserRepository(session).delete(alice["id"]) is True
            assert await tasks.list_for_user(alice["id"]) == []

    @pytest.mark.asyncio
    async def test_due_date_update_round_trips_as_date(self, isolated_database):
        async with open_session(isolated_database) as session:
            alice = await _user(session, "alice")
            tasks = TaskRepository(session)
            task = await tasks.create(alice["id"], _fields())

            updated = await tasks.update(alice["id"], task["id"], {"due_date": date(2024, 2, 29)})
            stored = await session.execute(
                text("SELECT due_date FROM tasks WHERE task_id = :task_id"),
                {"task_id": task["id"]},
            )

        assert updated["due_date"] == date(2024, 2, 29)
        assert updated["updated_at"] >= task["updated_at"]
        assert stored.scalar() == "2024-02-29"


class TestTemporalBinding:

    def test_temporal_params_carry_column_types(self):
        params = {"due_date": date(2024, 1, 5), "created_at": datetime(2024, 1, 1), "title": "x"}

        query = typed_text(
            "INSERT INTO tasks (due_date, created_at, title) VALUES (:due_date, :created_at, :title)",
            params,
        )

        assert isinstance(query._bindparams["due_date"].type, Date)
        assert isinstance(query._bindparams["created_at"].type, DateTime)
        assert not isinstance(query._bindparams["title"].type, (Date, DateTime))

    def test_only_present_params_are_typed(self):
        query = typed_text("UPDATE tasks SET title = :title", {"title": "x"})
        assert "due_date" not in query._bindparams

    def test_reads_normalize_sqlite_text(self):
        assert as_date("2024-01-05") == date(2024, 1, 5)
        assert as_date(date(2024, 1, 5)) == date(2024, 1, 5)
        assert as_datetime("2024-01-05 10:30:00.000123") == datetime(2024, 1, 5, 10, 30, 0, 123)
        assert as_datetime(None) is None


class TestSchemaCreation:

    @pytest.mark.asyncio
    async def test_tables_created_for_any_driver(self, isolated_database):
        """A server-backed driver gets the same create_all as SQLite."""
        engine = create_engine(DatabaseSettings(driver="sqlite+aiosqlite", sqlite_path=isolated_database))
        server_settings = DatabaseSettings(driver="postgresql+asyncpg", host="db", name="tasks")

        try:
            with patch("database.async_engine.get_async_engine", return_value=engine):
                await init_database(server_settings)

            async with engine.connect() as conn:
                result = await conn.execute(
                    text("SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name")
                )
                tables = [row[0] for row in result]
        finally:
            await engine.dispose()

        assert {"tasks", "users"} <= set(tables)
