"""Tests for task/user payload models and the status ring."""

from datetime import date

import pytest
from pydantic import ValidationError

from core.models.task import (
    TaskCreate,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    next_status,
)
from core.models.user import LoginRequest, RegisterRequest


class TestStatusRing:

    @pytest.mark.parametrize("current,expected", [
        ("pending", TaskStatus.IN_PROGRESS),
        ("in_progress", TaskStatus.COMPLETED),
        ("completed", TaskStatus.PENDING),
    ])
    def test_next_status(self, current, expected):
        assert next_status(current) == expected

    def test_three_steps_return_to_start(self):
        for status in TaskStatus:
            assert status.next().next().next() is status

    def test_rank_orders_pending_first(self):
        ranked = sorted(TaskStatus, key=lambda s: s.rank)
        assert ranked == [TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED]

    def test_unknown_status(self):
        with pytest.raises(ValueError):
            next_status("done")


class TestTaskCreate:

    def test_defaults(self):
        task = TaskCreate(title="Write report", due_date="2024-01-05")

        assert task.due_date == date(2024, 1, 5)
        assert task.priority is TaskPriority.MEDIUM
        assert task.status is TaskStatus.PENDING
        assert task.category is None

    def test_title_and_category_trimmed(self):
        task = TaskCreate(title="  Pay rent  ", due_date="2024-01-05", category="  ")

        assert task.title == "Pay rent"
        assert task.category is None

    def test_unknown_fields_ignored(self):
        task = TaskCreate(title="x", due_date="2024-01-05", user_id="someone", id="abc")
        assert not hasattr(task, "user_id")

    @pytest.mark.parametrize("kwargs", [
        {"due_date": "2024-01-05"},
        {"title": " ", "due_date": "2024-01-05"},
        {"title": "x"},
        {"title": "x", "due_date": "yesterday"},
        {"title": "x", "due_date": "2024-01-05", "priority": "urgent"},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValidationError):
            TaskCreate(**kwargs)


class TestTaskUpdate:

    def test_only_sent_fields_are_changes(self):
        update = TaskUpdate.model_validate({"status": "completed", "description": None})
        assert update.changes() == {"status": "completed", "description": None}

    def test_empty_update(self):
        assert TaskUpdate().changes() == {}

    def test_owner_is_never_a_change(self):
        update = TaskUpdate.model_validate({"user_id": "other", "title": "New"})
        assert update.changes() == {"title": "New"}

    @pytest.mark.parametrize("field", ["title", "due_date", "priority", "status"])
    def test_required_fields_cannot_be_nulled(self, field):
        with pytest.raises(ValidationError):
            TaskUpdate.model_validate({field: None})


class TestUserPayloads:

    def test_register_normalizes(self):
        request = RegisterRequest(username=" alice ", email=" Alice@Example.com ", password="secret123")

        assert request.username == "alice"
        assert request.email == "alice@example.com"

    @pytest.mark.parametrize("kwargs", [
        {"username": "al", "email": "al@example.com", "password": "secret123"},
        {"username": "alice", "email": "alice@", "password": "secret123"},
        {"username": "alice", "email": "alice@example.com", "password": "short"},
        {"username": "alice", "email": "alice@example.com", "password": "x" * 73},
    ])
    def test_register_invalid(self, kwargs):
        with pytest.raises(ValidationError):
            RegisterRequest(**kwargs)

    def test_login_email_lowercased(self):
        assert LoginRequest(email="BOB@Example.com", password="x").email == "bob@example.com"
