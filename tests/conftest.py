"""Shared test fixtures and helpers for survey relay tests."""

import json
from datetime import datetime, timezone
from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from surveyrelay.components.models import SubmissionRequest
from surveyrelay.config import HandlerSettings
from surveyrelay.delivery import SheetsDelivery
from surveyrelay.handler import SubmissionHandler

ENDPOINT_URL = "https://sheets.example.test/exec"
FIXED_NOW = datetime(2025, 1, 31, 12, 0, 0, tzinfo=timezone.utc)
FIXED_TIMESTAMP = "2025-01-31T12:00:00.000Z"
REQUEST_ID = "req-0001"


def make_request(body: Any, method: str = "POST", **kwargs: Any) -> SubmissionRequest:
    """Build a request, non-string bodies are JSON encoded."""
    if body is not None and not isinstance(body, str):
        body = json.dumps(body)
    return SubmissionRequest(method=method, body=body, request_id=REQUEST_ID, **kwargs)


def sent_fields(session: MagicMock) -> list[tuple[str, tuple[None, str]]]:
    """Multipart fields of the last delivery call."""
    return session.post.call_args.kwargs["files"]


@pytest.fixture
def settings() -> HandlerSettings:
    return HandlerSettings(endpoint_url=ENDPOINT_URL)


@pytest.fixture
def session() -> MagicMock:
    """Mocked requests session whose POST succeeds with 200."""
    mock = MagicMock(spec=requests.Session)
    mock.post.return_value = MagicMock(status_code=200)
    return mock


@pytest.fixture
def handler(settings: HandlerSettings, session: MagicMock) -> SubmissionHandler:
    delivery = SheetsDelivery(settings.endpoint_url, session=session)
    return SubmissionHandler(settings, delivery=delivery, clock=lambda: FIXED_NOW)
