"""Shared fixtures: raw meeting payloads shaped like `GET /meetings` items."""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict

import pytest

from fathom_mcp_server.config import AppConfig
from fathom_mcp_server.schemas import Meeting

_BASE_MEETING: Dict[str, Any] = {
    "title": "Q4 Review",
    "meeting_title": "Quarterly Business Review",
    "recording_id": 123456,
    "url": "https://fathom.video/calls/123456",
    "share_url": "https://fathom.video/share/abc",
    "created_at": "2024-12-01T16:00:00Z",
    "scheduled_start_time": "2024-12-01T15:00:00Z",
    "scheduled_end_time": "2024-12-01T16:00:00Z",
    "recording_start_time": "2024-12-01T15:00:00Z",
    "recording_end_time": "2024-12-01T15:45:32Z",
    "calendar_invitees_domains_type": "one_or_more_external",
    "transcript_language": "en",
    "calendar_invitees": [
        {
            "name": "Alice Smith",
            "email": "alice@acme.com",
            "is_external": False,
            "email_domain": "acme.com",
        },
        {
            "name": "Carlos Diaz",
            "email": "carlos@globex.com",
            "is_external": True,
            "email_domain": "globex.com",
        },
    ],
    "recorded_by": {
        "name": "Alice Smith",
        "email": "alice@acme.com",
        "team": "Sales",
        "email_domain": "acme.com",
    },
    "action_items": [
        {
            "description": "Send revised proposal",
            "user_generated": False,
            "completed": False,
            "recording_timestamp": "00:31:10",
            "recording_playback_url": "https://fathom.video/calls/123456?t=1870",
            "assignee": {"name": "Alice Smith", "email": "alice@acme.com"},
        }
    ],
    "transcript": [
        {
            "speaker": {"display_name": "Alice Smith"},
            "text": "Thanks everyone for joining.",
            "timestamp": "00:00:05",
        },
        {
            "speaker": {"display_name": "Alice Smith"},
            "text": "Let's start with the numbers.",
            "timestamp": "00:00:09",
        },
    ],
}


@pytest.fixture
def meeting_payload() -> Callable[..., Dict[str, Any]]:
    """Factory for raw meeting dicts; keyword arguments override fields."""

    def _make(**overrides: Any) -> Dict[str, Any]:
        data = copy.deepcopy(_BASE_MEETING)
        data.update(overrides)
        return data

    return _make


@pytest.fixture
def make_meeting(meeting_payload) -> Callable[..., Meeting]:
    def _make(**overrides: Any) -> Meeting:
        return Meeting.model_validate(meeting_payload(**overrides))

    return _make


@pytest.fixture
def app_config(tmp_path, monkeypatch) -> AppConfig:
    monkeypatch.chdir(tmp_path)
    return AppConfig(api_key="test-api-key", output_dir=tmp_path)
