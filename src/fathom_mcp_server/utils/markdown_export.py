"""Markdown export helpers.

Generates deterministic Markdown for Fathom meetings and related
records, suitable for diffs. Nothing here performs I/O; the only clock
read is the export timestamp in the document footer, which callers may
pin via `exported_at`.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from .date_parser import DateLike, format_display_date, to_date_key, to_iso_z, to_utc

if TYPE_CHECKING:
    from ..schemas import (
        ActionItem,
        CalendarInvitee,
        CRMMatches,
        Meeting,
        Team,
        TeamMember,
        TranscriptItem,
        Webhook,
    )

MAX_FILENAME_LENGTH = 100

NO_TRANSCRIPT = "_No transcript available_"
NO_PARTICIPANTS = "_No participants listed_"
NO_ACTION_ITEMS = "_No action items_"
NO_CRM_DATA = "_No CRM data_"
NO_MEETINGS = "No meetings found."
NO_RECENT_ACTION_ITEMS = "No action items found in recent meetings."
NO_TEAMS = "No teams found."

_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE = re.compile(r"\s+")
_UNDERSCORES = re.compile(r"_+")


def resolve_title(meeting: Meeting) -> str:
    """Display title: `title`, then `meeting_title`, then `Meeting <id>`."""
    return meeting.title or meeting.meeting_title or f"Meeting {meeting.recording_id}"


def _filename_title(meeting: Meeting) -> str:
    return meeting.title or meeting.meeting_title or f"Meeting_{meeting.recording_id}"


def sanitize_filename(name: str) -> str:
    """Make `name` safe for use as a filename stem.

    Example:
        >>> sanitize_filename('Q4: Review / "Plan"   2025')
        'Q4_Review_Plan_2025'
    """
    name = _INVALID_FILENAME_CHARS.sub("", name)
    name = _WHITESPACE.sub("_", name)
    name = _UNDERSCORES.sub("_", name)
    return name.strip("_")[:MAX_FILENAME_LENGTH].rstrip("_")


def generate_transcript_filename(meeting: Meeting) -> str:
    """Filename for an exported meeting: `Title_YYYY-MM-DD.md` (UTC date)."""
    stem = sanitize_filename(_filename_title(meeting))
    if not stem:
        stem = f"Meeting_{meeting.recording_id}"
    return f"{stem}_{to_date_key(meeting.recording_start_time)}.md"


def format_duration(start: DateLike, end: DateLike) -> str:
    """Format elapsed time between two timestamps.

    Examples:
        >>> format_duration("2024-12-01T15:00:00Z", "2024-12-01T15:01:30Z")
        '1m 30s'
        >>> format_duration("2024-12-01T15:00:00Z", "2024-12-01T16:01:01Z")
        '1h 1m'
    """
    total = int((to_utc(end) - to_utc(start)).total_seconds())
    if total <= 0:
        return "0s"
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def format_date(value: Optional[DateLike]) -> str:
    if value is None:
        return "unknown"
    return format_display_date(value)


def format_transcript(transcript: Optional[Sequence[TranscriptItem]]) -> str:
    """Render a transcript, grouping consecutive lines by speaker."""
    if not transcript:
        return NO_TRANSCRIPT

    lines: List[str] = []
    current_speaker: Optional[str] = None
    for item in transcript:
        speaker = item.speaker.display_name or "Unknown Speaker"
        if speaker != current_speaker:
            current_speaker = speaker
            lines.append("")
            lines.append(f"**{speaker}** _[{item.timestamp}]_")
        lines.append(f"> {item.text}")
    return "\n".join(lines)


def format_participants(invitees: Optional[Sequence[CalendarInvitee]]) -> str:
    if not invitees:
        return NO_PARTICIPANTS

    lines = []
    for invitee in invitees:
        external = " _(external)_" if invitee.is_external else ""
        lines.append(f"- **{invitee.name}** <{invitee.email}>{external}")
    return "\n".join(lines)


def format_action_items(action_items: Optional[Sequence[ActionItem]]) -> str:
    if not action_items:
        return NO_ACTION_ITEMS

    lines = []
    for item in action_items:
        status = "[x]" if item.completed else "[ ]"
        assignee = f" _(assigned to {item.assignee.name})_" if item.assignee else ""
        timestamp = f" at {item.recording_timestamp}" if item.recording_timestamp else ""
        lines.append(f"- {status} {item.description}{assignee}{timestamp}")
    return "\n".join(lines)


def _format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def format_crm_matches(crm: Optional[CRMMatches]) -> str:
    if crm is None:
        return NO_CRM_DATA

    lines: List[str] = []
    if crm.contacts:
        lines.append("**Contacts:**")
        for contact in crm.contacts:
            email = f" <{contact.email}>" if contact.email else ""
            lines.append(f"- [{contact.name}]({contact.record_url}){email}")
    if crm.companies:
        lines.append("**Companies:**")
        for company in crm.companies:
            lines.append(f"- [{company.name}]({company.record_url})")
    if crm.deals:
        lines.append("**Deals:**")
        for deal in crm.deals:
            lines.append(
                f"- [{deal.name}]({deal.record_url}) - ${_format_amount(deal.amount)}"
            )
    return "\n".join(lines) if lines else NO_CRM_DATA


def format_meeting_document(
    meeting: Meeting, *, exported_at: Optional[datetime] = None
) -> str:
    """Render a full meeting into a standalone Markdown document.

    Sections appear in a fixed order: title, details table, participants,
    summary, action items, CRM matches, transcript, footer. Summary,
    action items and CRM matches are left out entirely when absent.

    Args:
        meeting: Meeting record, ideally fetched with all include flags.
        exported_at: Timestamp for the footer; defaults to now (UTC).

    Returns:
        Markdown string.
    """
    exported_at = exported_at or datetime.now(timezone.utc)
    recorder = meeting.recorded_by
    recorded_by = f"{recorder.name} <{recorder.email}>" if recorder else "Unknown"

    parts: List[str] = [f"# {resolve_title(meeting)}", ""]

    parts += [
        "## Meeting Details",
        "",
        "| Field | Value |",
        "|-------|-------|",
        f"| **Date** | {format_date(meeting.recording_start_time)} |",
        "| **Duration** | "
        f"{format_duration(meeting.recording_start_time, meeting.recording_end_time)} |",
        f"| **Recorded by** | {recorded_by} |",
        f"| **Recording ID** | {meeting.recording_id} |",
        f"| **Fathom URL** | [View Recording]({meeting.url}) |",
        f"| **Share URL** | [Share Link]({meeting.share_url}) |",
        "",
    ]

    parts += ["## Participants", "", format_participants(meeting.calendar_invitees), ""]

    if meeting.default_summary:
        parts += ["## Summary", "", meeting.default_summary.markdown_formatted, ""]

    if meeting.action_items:
        parts += ["## Action Items", "", format_action_items(meeting.action_items), ""]

    if meeting.crm_matches is not None:
        parts += ["## CRM Matches", "", format_crm_matches(meeting.crm_matches), ""]

    parts += ["## Transcript", "", format_transcript(meeting.transcript), ""]

    parts += ["---", f"_Exported from Fathom.video on {to_iso_z(exported_at)}_"]
    return "\n".join(parts)


def format_meeting_list(meetings: Sequence[Meeting]) -> str:
    """Render meetings as one Markdown table, in input order."""
    if not meetings:
        return NO_MEETINGS

    rows = [
        "| Title | Date | Duration | Recorded By | Participants | ID |",
        "|-------|------|----------|-------------|--------------|-----|",
    ]
    for m in meetings:
        duration = format_duration(m.recording_start_time, m.recording_end_time)
        recorder = m.recorded_by.name if m.recorded_by else "Unknown"
        rows.append(
            f"| {resolve_title(m)} | {format_date(m.recording_start_time)} | {duration} "
            f"| {recorder} | {len(m.calendar_invitees)} | {m.recording_id} |"
        )
    return "\n".join(rows)


def format_meeting_action_items(
    meeting: Meeting, action_items: Sequence[ActionItem]
) -> str:
    return f"## Action Items from: {resolve_title(meeting)}\n\n{format_action_items(action_items)}"


def format_action_item_digest(
    entries: Iterable[Tuple[Meeting, Sequence[ActionItem]]],
) -> str:
    """Action items grouped under one heading per meeting.

    Meetings whose item list is empty are skipped.
    """
    sections = [
        f"### {resolve_title(meeting)}\n"
        f"_{format_date(meeting.recording_start_time)}_\n\n"
        f"{format_action_items(items)}"
        for meeting, items in entries
        if items
    ]
    if not sections:
        return NO_RECENT_ACTION_ITEMS
    return "# Action Items from Recent Meetings\n\n" + "\n\n".join(sections)


def format_team_list(teams: Sequence[Team]) -> str:
    if not teams:
        return NO_TEAMS
    lines = [f"- **{t.name}** (created: {format_date(t.created_at)})" for t in teams]
    return "# Teams\n\n" + "\n".join(lines)


def format_team_member_list(
    members: Sequence[TeamMember], *, team: Optional[str] = None
) -> str:
    if not members:
        return f'No members found in team "{team}".' if team else "No team members found."
    heading = f"Team Members: {team}" if team else "All Team Members"
    lines = [f"- **{m.name}** <{m.email}>" for m in members]
    return f"# {heading}\n\n" + "\n".join(lines)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def format_webhook_created(webhook: Webhook) -> str:
    """Confirmation table for a new webhook, including its one-time secret."""
    rows = [
        "# Webhook Created Successfully",
        "",
        "| Field | Value |",
        "|-------|-------|",
        f"| **ID** | {webhook.id} |",
        f"| **URL** | {webhook.url} |",
        f"| **Secret** | `{webhook.secret or ''}` |",
        f"| **Include Transcript** | {_flag(webhook.include_transcript)} |",
        f"| **Include Summary** | {_flag(webhook.include_summary)} |",
        f"| **Include Action Items** | {_flag(webhook.include_action_items)} |",
        f"| **Include CRM Matches** | {_flag(webhook.include_crm_matches)} |",
        f"| **Triggered For** | {', '.join(webhook.triggered_for)} |",
        "",
        "**Important:** Save the webhook secret securely - you'll need it to "
        "verify incoming webhooks.",
    ]
    return "\n".join(rows)
