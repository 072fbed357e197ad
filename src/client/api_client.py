"""
HTTP client for the Task Manager API.

Credentials are passed explicitly: every authenticated call takes an
``AuthSession`` and sends its token on that request only. The wrapped
``httpx.Client`` never carries a default Authorization header, so one
client can serve several users.

Usage:
    with httpx.Client(base_url="http://localhost:5000") as http:
        api = TaskClient(http)
        session = api.login("me@example.com", "secret123")
        tasks = api.fetch_view(session, FilterCriteria(status="pending"))
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from core.models.task import Task, TaskStatus
from client.task_view import FilterCriteria, view

logger = logging.getLogger(__name__)


class TaskClientError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(f"{status_code}: {message}")


@dataclass(frozen=True)
class AuthSession:
    token: str
    user: Dict[str, Any]

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def _payload(fields: Dict[str, Any]) -> Dict[str, Any]:
    body = {}
    for key, value in fields.items():
        if isinstance(value, date):
            value = value.isoformat()
        elif hasattr(value, "value"):
            value = value.value
        body[key] = value
    return body


class TaskClient:
    """Thin synchronous wrapper over the REST endpoints."""

    def __init__(self, http: httpx.Client):
        self._http = http

    def close(self) -> None:
        self._http.close()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        session: Optional[AuthSession] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        headers = session.headers if session else None
        try:
            response = self._http.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning(f"{method} {path} failed: {exc}")
            raise TaskClientError(0, "Could not reach the task service") from exc

        if response.is_success:
            return response.json()

        message, code = "An error occurred", None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error") or message
            code = body.get("code")

        logger.info(f"{method} {path} -> {response.status_code} {code or ''}".rstrip())
        raise TaskClientError(response.status_code, message, code)

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        return self._request(
            "POST", "/register",
            json={"username": username, "email": email, "password": password},
        )

    def login(self, email: str, password: str) -> AuthSession:
        body = self._request("POST", "/login", json={"email": email, "password": password})
        return AuthSession(token=body["token"], user=body["user"])

    def profile(self, session: AuthSession) -> Dict[str, Any]:
        return self._request("GET", "/profile", session)

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def list_tasks(self, session: AuthSession) -> List[Task]:
        return [Task(**item) for item in self._request("GET", "/tasks", session)]

    def create_task(self, session: AuthSession, **fields) -> Task:
        return Task(**self._request("POST", "/tasks", session, json=_payload(fields)))

    def update_task(self, session: AuthSession, task_id: str, **fields) -> Task:
        return Task(**self._request("PUT", f"/tasks/{task_id}", session, json=_payload(fields)))

    def delete_task(self, session: AuthSession, task_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/tasks/{task_id}", session)

    def cycle_status(self, session: AuthSession, task: Task) -> Task:
        """Advance the task one step on pending -> in_progress -> completed -> pending."""
        return self.update_task(session, task.id, status=TaskStatus(task.status).next())

    def fetch_view(
        self,
        session: AuthSession,
        criteria: Optional[FilterCriteria] = None,
        today: Optional[date] = None,
    ) -> List[Task]:
        """Fetch the full task set and derive the filtered, ordered view locally."""
        return view(self.list_tasks(session), criteria, today)
