"""Organizer API adapter - HTTP client for task fetching and updates."""

import logging

import requests

from taskboard.config import Config, load_config
from taskboard.core.tasks import Task, changes_to_api

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when the API rejects the configured token."""

    pass


class ApiTaskStore:
    """
    Organizer REST API adapter.

    Implements TaskStore protocol. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None):
        self.config = config or load_config()
        self.base_url = self.config.api_base_url.rstrip("/")
        self._session = requests.Session()

    def _headers(self) -> dict:
        if not self.config.api_token:
            raise AuthenticationError("No API token. Set API_TOKEN in taskboard.conf.")
        return {"Authorization": f"Bearer {self.config.api_token}"}

    def _request(self, method: str, endpoint: str, payload: dict | None = None) -> dict | list:
        """Make authenticated API request."""
        url = f"{self.base_url}/api/tasks{endpoint}"
        logger.debug(f"{method} {url}")
        resp = self._session.request(method, url, headers=self._headers(), json=payload)
        if resp.status_code == 401:
            raise AuthenticationError(f"API rejected token: {resp.text}")
        resp.raise_for_status()
        return resp.json()

    def fetch_all(self) -> list[Task]:
        """Fetch all tasks in manual order."""
        data = self._request("GET", "")
        if isinstance(data, dict):
            data = data.get("tasks", [])
        return [Task.from_api(item) for item in data]

    def update(self, task_id: str, changes: dict) -> None:
        """Send changed fields for one task."""
        self._request("PUT", f"/{task_id}", changes_to_api(changes))

    def reorder(self, task_ids: list[str]) -> None:
        """Send the new manual order as order indexes."""
        self._request(
            "PUT",
            "/reorder",
            {"taskOrders": [{"id": task_id, "orderIndex": i} for i, task_id in enumerate(task_ids)]},
        )
