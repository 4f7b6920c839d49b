"""Pydantic schemas for Fathom API records, client parameters and tool inputs.

Upstream records are read-only value objects: unknown fields are
ignored and optional fields are explicit. Timestamps (other than the
opaque `HH:MM:SS` transcript offsets) are parsed into aware UTC
datetimes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .utils.date_parser import to_utc

T = TypeVar("T")

TriggerType = Literal[
    "my_recordings",
    "shared_external_recordings",
    "my_shared_with_team_recordings",
    "shared_team_recordings",
]
DomainsType = Literal["only_internal", "one_or_more_external"]
DomainsFilter = Literal["all", "only_internal", "one_or_more_external"]


def _coerce_utc(value: object) -> object:
    if isinstance(value, (str, datetime)):
        return to_utc(value)
    return value


UtcDatetime = Annotated[datetime, BeforeValidator(_coerce_utc)]


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


# Upstream records


class Speaker(_Record):
    display_name: Optional[str] = None
    matched_calendar_invitee_email: Optional[str] = None


class TranscriptItem(_Record):
    """One utterance; `timestamp` is an `HH:MM:SS` offset shown verbatim."""

    speaker: Speaker = Field(default_factory=Speaker)
    text: str = ""
    timestamp: str = ""


class MeetingSummary(_Record):
    template_name: Optional[str] = None
    markdown_formatted: str = ""


class Assignee(_Record):
    name: str
    email: Optional[str] = None
    team: Optional[str] = None


class ActionItem(_Record):
    description: str
    completed: bool = False
    user_generated: bool = False
    recording_timestamp: Optional[str] = None
    recording_playback_url: Optional[str] = None
    assignee: Optional[Assignee] = None


class CalendarInvitee(_Record):
    name: str = ""
    email: str = ""
    is_external: bool = False
    email_domain: Optional[str] = None
    matched_speaker_display_name: Optional[str] = None


class FathomUser(_Record):
    name: str = ""
    email: str = ""
    team: Optional[str] = None
    email_domain: Optional[str] = None


class CRMContact(_Record):
    name: str
    record_url: str
    email: Optional[str] = None


class CRMCompany(_Record):
    name: str
    record_url: str


class CRMDeal(_Record):
    name: str
    record_url: str
    amount: float = 0


class CRMMatches(_Record):
    contacts: Optional[List[CRMContact]] = None
    companies: Optional[List[CRMCompany]] = None
    deals: Optional[List[CRMDeal]] = None


class Meeting(_Record):
    """A recorded meeting as returned by `GET /meetings`.

    Attributes:
        recording_id: Stable integer identifier of the recording.
        title: Title, falling back to `meeting_title` then `Meeting <id>`.
        recording_start_time: Start of the recording (UTC).
        recording_end_time: End of the recording (UTC).
        transcript: Present only when requested with `include_transcript`.
        default_summary: Present only when requested with `include_summary`.
        action_items: Present only when requested with `include_action_items`.
        crm_matches: Present only when requested with `include_crm_matches`.
    """

    recording_id: int
    title: Optional[str] = None
    meeting_title: Optional[str] = None
    url: str = ""
    share_url: str = ""
    created_at: Optional[UtcDatetime] = None
    scheduled_start_time: Optional[UtcDatetime] = None
    scheduled_end_time: Optional[UtcDatetime] = None
    recording_start_time: UtcDatetime
    recording_end_time: UtcDatetime
    calendar_invitees_domains_type: Optional[DomainsType] = None
    transcript_language: Optional[str] = None
    transcript: Optional[List[TranscriptItem]] = None
    default_summary: Optional[MeetingSummary] = None
    action_items: Optional[List[ActionItem]] = None
    calendar_invitees: List[CalendarInvitee] = Field(default_factory=list)
    recorded_by: Optional[FathomUser] = None
    crm_matches: Optional[CRMMatches] = None


class Team(_Record):
    name: str
    created_at: Optional[UtcDatetime] = None


class TeamMember(_Record):
    name: str
    email: str = ""
    created_at: Optional[UtcDatetime] = None


class Webhook(_Record):
    """Webhook record; `secret` is only ever returned on creation."""

    id: str
    url: str
    secret: Optional[str] = None
    created_at: Optional[UtcDatetime] = None
    include_transcript: bool = False
    include_summary: bool = False
    include_action_items: bool = False
    include_crm_matches: bool = False
    triggered_for: List[str] = Field(default_factory=list)


class Page(_Record, Generic[T]):
    """Paginated list envelope. A falsy `next_cursor` means last page."""

    items: List[T] = Field(default_factory=list)
    limit: Optional[int] = None
    next_cursor: Optional[str] = None


class TranscriptResponse(_Record):
    transcript: List[TranscriptItem] = Field(default_factory=list)


# Client parameters


class ListMeetingsParams(BaseModel):
    """Filters accepted by `GET /meetings`. Unset options are never sent."""

    model_config = ConfigDict(extra="forbid")

    include_transcript: Optional[bool] = None
    include_summary: Optional[bool] = None
    include_action_items: Optional[bool] = None
    include_crm_matches: Optional[bool] = None
    created_after: Optional[str] = None
    created_before: Optional[str] = None
    recorded_by: Optional[List[str]] = None
    teams: Optional[List[str]] = None
    calendar_invitees: Optional[List[str]] = None
    calendar_invitees_domains: Optional[List[str]] = None
    calendar_invitees_domains_type: Optional[DomainsFilter] = None
    cursor: Optional[str] = None


class CreateWebhookParams(BaseModel):
    model_config = ConfigDict(extra="forbid")

    destination_url: str
    include_transcript: Optional[bool] = None
    include_summary: Optional[bool] = None
    include_action_items: Optional[bool] = None
    include_crm_matches: Optional[bool] = None
    triggered_for: Optional[List[TriggerType]] = None


# Tool inputs


class ListMeetingsInput(BaseModel):
    limit: Optional[int] = Field(
        default=10,
        ge=0,
        description="Maximum number of meetings to return (default: 10, use 0 for all)",
    )
    created_after: Optional[str] = Field(
        default=None, description="ISO 8601 timestamp - only meetings after this date"
    )
    created_before: Optional[str] = Field(
        default=None, description="ISO 8601 timestamp - only meetings before this date"
    )
    include_external_only: bool = Field(
        default=False, description="Only include meetings with external participants"
    )


class GetMeetingInput(BaseModel):
    recording_id: int = Field(description="Recording ID of the meeting to retrieve")
    include_transcript: bool = True
    include_summary: bool = True
    include_action_items: bool = True
    include_crm_matches: bool = True


class GetTranscriptInput(BaseModel):
    recording_id: int


class ExportMeetingInput(BaseModel):
    recording_id: int
    output_dir: Optional[str] = Field(
        default=None, description="Directory to save the file (defaults to <output>/transcripts)"
    )


class ExportAllMeetingsInput(BaseModel):
    created_after: Optional[str] = None
    created_before: Optional[str] = None
    output_dir: Optional[str] = None


class SearchMeetingsInput(BaseModel):
    participant_emails: Optional[List[str]] = Field(
        default=None, description="Email addresses of participants to search for"
    )
    domains: Optional[List[str]] = Field(
        default=None, description="Company domains to search for (e.g., acme.com)"
    )
    teams: Optional[List[str]] = None
    recorded_by: Optional[List[str]] = Field(
        default=None, description="Emails of the users who recorded the meeting"
    )
    created_after: Optional[str] = None
    created_before: Optional[str] = None


class GetActionItemsInput(BaseModel):
    recording_id: Optional[int] = Field(
        default=None, description="Get action items from a specific meeting"
    )
    include_completed: bool = True
    limit: Optional[int] = Field(
        default=10,
        ge=0,
        description="Number of recent meetings to check when no recording_id is given (0 uses the default of 10)",
    )


class ListTeamMembersInput(BaseModel):
    team: Optional[str] = Field(default=None, description="Filter by team name")


class CreateWebhookInput(BaseModel):
    destination_url: str = Field(description="URL to receive webhook events")
    include_transcript: Optional[bool] = None
    include_summary: Optional[bool] = None
    include_action_items: Optional[bool] = None
    include_crm_matches: Optional[bool] = None
    triggered_for: Optional[List[TriggerType]] = Field(
        default=None, description="Which recordings trigger the webhook"
    )


class DeleteWebhookInput(BaseModel):
    webhook_id: str
