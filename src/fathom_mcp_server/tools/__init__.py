"""MCP tools for meetings, transcripts, action items, teams and webhooks.

Each tool is exposed as a plain async Python function to facilitate
testing. An MCP runtime adapter (see `server.py`) registers these with
the FastMCP runtime. The tool functions return Markdown text.
"""

from .meetings import (
    export_all_meetings,
    export_meeting,
    get_action_items,
    get_meeting,
    get_transcript,
    list_meetings,
    search_meetings,
)
from .teams import list_team_members, list_teams
from .webhooks import create_webhook, delete_webhook

__all__ = [
    "list_meetings",
    "get_meeting",
    "get_transcript",
    "export_meeting",
    "export_all_meetings",
    "search_meetings",
    "get_action_items",
    "list_teams",
    "list_team_members",
    "create_webhook",
    "delete_webhook",
]
