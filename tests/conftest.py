"""
Shared test fixtures and configuration for pytest
"""
import json
import tempfile
from pathlib import Path

import httpx
import pytest

from catchview.utils import logging as cv_logging

# Keep test runs from writing into the real ~/.catchview/logs
cv_logging._LOG_DIR = Path(tempfile.mkdtemp(prefix="catchview-logs-"))
cv_logging.init_logging(console=False)

from catchview.core.api_client import MailboxClient  # noqa: E402
from catchview.utils.config import AppConfig  # noqa: E402

from .test_helpers import MailFixtureHelper  # noqa: E402

BASE_URL = "http://mailcatcher.test"


class FakeBackend:
    """In-memory stand-in for the mail backend's HTTP API."""

    def __init__(self, emails=None):
        self.emails = list(emails or [])
        self.details = {}
        self.requests = []
        self.list_error = None
        self.list_status = 200
        self.detail_status = {}
        self.clear_status = 200
        self.clear_error = None

    def add(self, summary, detail=None):
        self.emails.append(summary)
        if detail is not None:
            self.details[summary["ID"]] = detail

    def requested(self, method, path):
        return [r for r in self.requests if r == (method, path)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append((request.method, path))

        if request.method == "GET" and path == "/api/emails":
            if self.list_error is not None:
                raise self.list_error
            if self.list_status != 200:
                return httpx.Response(self.list_status, text="backend exploded")
            return httpx.Response(200, json=self.emails)

        if request.method == "GET" and path.startswith("/api/emails/"):
            message_id = path[len("/api/emails/"):]
            status = self.detail_status.get(message_id)
            if status is not None:
                return httpx.Response(status, text="Email not found")
            if message_id not in self.details:
                return httpx.Response(404, text="Email not found")
            return httpx.Response(200, json=self.details[message_id])

        if path == "/api/clear":
            if request.method != "POST":
                return httpx.Response(405, text="Method not allowed")
            if self.clear_error is not None:
                raise self.clear_error
            if 200 <= self.clear_status < 300:
                self.emails = []
                self.details = {}
                return httpx.Response(self.clear_status, content=json.dumps({"status": "ok"}))
            return httpx.Response(self.clear_status, text="nope")

        return httpx.Response(404, text="404 page not found")


@pytest.fixture
def backend():
    """Backend holding the two sample messages"""
    fake = FakeBackend()
    for index, subject in enumerate(["Hi", "Weekly report"]):
        message_id = str(index + 1)
        fake.add(
            MailFixtureHelper.summary(ID=message_id, subject=subject),
            MailFixtureHelper.detail(subject=subject, body=f"body {message_id}"),
        )
    return fake


@pytest.fixture
def empty_backend():
    return FakeBackend()


@pytest.fixture
def make_client():
    """Factory for clients talking to a FakeBackend"""
    def _make(fake: FakeBackend) -> MailboxClient:
        return MailboxClient(BASE_URL, transport=httpx.MockTransport(fake.handler))
    return _make


@pytest.fixture
def app_config():
    """Configuration with a poll interval long enough to stay out of the way"""
    return AppConfig(
        server={"base_url": BASE_URL},
        viewer={"poll_interval": 3600},
    )


@pytest.fixture
def temp_config_path():
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir) / "config.json"
