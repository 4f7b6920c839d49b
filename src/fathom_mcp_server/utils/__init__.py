"""Utility functions for parsing, formatting and exporting.

This package includes helpers for ISO 8601 date handling, markdown
rendering of Fathom records, and writing markdown exports to disk.
"""

from .date_parser import format_display_date, parse_iso8601, to_date_key, to_utc
from .file_export import write_markdown
from .markdown_export import (
    format_action_item_digest,
    format_action_items,
    format_crm_matches,
    format_duration,
    format_meeting_action_items,
    format_meeting_document,
    format_meeting_list,
    format_participants,
    format_team_list,
    format_team_member_list,
    format_transcript,
    format_webhook_created,
    generate_transcript_filename,
    resolve_title,
    sanitize_filename,
)

__all__ = [
    "format_display_date",
    "parse_iso8601",
    "to_date_key",
    "to_utc",
    "write_markdown",
    "format_action_item_digest",
    "format_action_items",
    "format_crm_matches",
    "format_duration",
    "format_meeting_action_items",
    "format_meeting_document",
    "format_meeting_list",
    "format_participants",
    "format_team_list",
    "format_team_member_list",
    "format_transcript",
    "format_webhook_created",
    "generate_transcript_filename",
    "resolve_title",
    "sanitize_filename",
]
