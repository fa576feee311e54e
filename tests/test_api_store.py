"""Tests for the organizer API task store."""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
import requests

from taskboard.adapters.api_store import ApiTaskStore, AuthenticationError
from taskboard.config import Config
from taskboard.core.tasks import TimeOfDay, to_millis


@pytest.fixture
def config():
    return Config(store="api", api_base_url="https://tasks.example.com/", api_token="secret")


def _response(status=200, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload if payload is not None else {"success": True}
    resp.text = "body"
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error")
    return resp


class TestApiTaskStore:
    @patch("taskboard.adapters.api_store.requests.Session")
    def test_fetch_all(self, mock_session_cls, config):
        session = MagicMock()
        mock_session_cls.return_value = session
        session.request.return_value = _response(
            payload=[
                {"id": "t1", "title": "One", "status": "todo", "type": "admin"},
                {"id": "t2", "title": "Two", "timeOfDay": "evening", "dueDate": to_millis(datetime(2025, 1, 15))},
            ]
        )

        tasks = ApiTaskStore(config).fetch_all()

        assert [t.id for t in tasks] == ["t1", "t2"]
        assert tasks[1].time_of_day is TimeOfDay.EVENING
        method, url = session.request.call_args.args
        assert (method, url) == ("GET", "https://tasks.example.com/api/tasks")
        assert session.request.call_args.kwargs["headers"] == {"Authorization": "Bearer secret"}

    @patch("taskboard.adapters.api_store.requests.Session")
    def test_update_sends_api_fields(self, mock_session_cls, config):
        session = MagicMock()
        mock_session_cls.return_value = session
        session.request.return_value = _response()

        due = datetime(2025, 1, 20)
        ApiTaskStore(config).update("t1", {"due_date": due, "time_of_day": None})

        method, url = session.request.call_args.args
        assert (method, url) == ("PUT", "https://tasks.example.com/api/tasks/t1")
        assert session.request.call_args.kwargs["json"] == {"dueDate": to_millis(due), "timeOfDay": None}

    @patch("taskboard.adapters.api_store.requests.Session")
    def test_reorder_sends_order_indexes(self, mock_session_cls, config):
        session = MagicMock()
        mock_session_cls.return_value = session
        session.request.return_value = _response()

        ApiTaskStore(config).reorder(["b", "a"])

        assert session.request.call_args.args[1].endswith("/api/tasks/reorder")
        assert session.request.call_args.kwargs["json"] == {
            "taskOrders": [{"id": "b", "orderIndex": 0}, {"id": "a", "orderIndex": 1}]
        }

    @patch("taskboard.adapters.api_store.requests.Session")
    def test_unauthorized(self, mock_session_cls, config):
        session = MagicMock()
        mock_session_cls.return_value = session
        session.request.return_value = _response(status=401)

        with pytest.raises(AuthenticationError):
            ApiTaskStore(config).fetch_all()

    @patch("taskboard.adapters.api_store.requests.Session")
    def test_server_error_propagates(self, mock_session_cls, config):
        session = MagicMock()
        mock_session_cls.return_value = session
        session.request.return_value = _response(status=500)

        with pytest.raises(requests.HTTPError):
            ApiTaskStore(config).fetch_all()

    def test_missing_token(self):
        store = ApiTaskStore(Config(store="api", api_token=""))
        with pytest.raises(AuthenticationError):
            store.fetch_all()
