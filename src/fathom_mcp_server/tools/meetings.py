"""Meetings-related tool functions.

These functions implement the meetings surface: list, get, transcript,
export (single and bulk), search, and action items. Each returns
Markdown text; a recording id that matches nothing raises NotFoundError,
while upstream failures propagate as FathomAPIError.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

import structlog

from ..client import FathomClient
from ..config import AppConfig
from ..errors import NotFoundError
from ..schemas import (
    ActionItem,
    ExportAllMeetingsInput,
    ExportMeetingInput,
    GetActionItemsInput,
    GetMeetingInput,
    GetTranscriptInput,
    ListMeetingsInput,
    ListMeetingsParams,
    Meeting,
    SearchMeetingsInput,
)
from ..utils import (
    format_action_item_digest,
    format_meeting_action_items,
    format_meeting_document,
    format_meeting_list,
    format_transcript,
    generate_transcript_filename,
    write_markdown,
)

logger = structlog.get_logger(__name__)

_FULL_DETAIL = ListMeetingsParams(
    include_transcript=True,
    include_summary=True,
    include_action_items=True,
    include_crm_matches=True,
)


def _export_dir(config: AppConfig, output_dir: Optional[str]) -> Path:
    if output_dir:
        return Path(output_dir).expanduser()
    return config.export_dir


async def _require_meeting(
    client: FathomClient, recording_id: int, params: ListMeetingsParams
) -> Meeting:
    meeting = await client.find_meeting(recording_id, params)
    if meeting is None:
        raise NotFoundError(
            f"Meeting with recording ID {recording_id} not found.",
            {"recording_id": recording_id},
        )
    return meeting


async def list_meetings(
    config: AppConfig, client: FathomClient, params: ListMeetingsInput
) -> str:
    """List recent meetings as a Markdown table.

    A `limit` of 0 walks every page; otherwise the first page is
    truncated to `limit` rows.
    """

    filters = ListMeetingsParams(
        created_after=params.created_after,
        created_before=params.created_before,
        calendar_invitees_domains_type=(
            "one_or_more_external" if params.include_external_only else None
        ),
    )
    if params.limit == 0:
        meetings = await client.get_all_meetings(filters)
    else:
        meetings = (await client.list_meetings(filters)).items
        if params.limit:
            meetings = meetings[: params.limit]

    logger.info("meetings.listed", count=len(meetings))
    return format_meeting_list(meetings)


async def get_meeting(
    config: AppConfig, client: FathomClient, params: GetMeetingInput
) -> str:
    """Render one meeting as a full Markdown document."""

    filters = ListMeetingsParams(
        include_transcript=params.include_transcript,
        include_summary=params.include_summary,
        include_action_items=params.include_action_items,
        include_crm_matches=params.include_crm_matches,
    )
    meeting = await _require_meeting(client, params.recording_id, filters)
    logger.info("meetings.found", recording_id=meeting.recording_id)
    return format_meeting_document(meeting)


async def get_transcript(
    config: AppConfig, client: FathomClient, params: GetTranscriptInput
) -> str:
    response = await client.get_transcript(params.recording_id)
    logger.info(
        "meetings.transcript_fetched",
        recording_id=params.recording_id,
        lines=len(response.transcript),
    )
    return format_transcript(response.transcript)


async def export_meeting(
    config: AppConfig, client: FathomClient, params: ExportMeetingInput
) -> str:
    """Export one meeting to `<dir>/<Title>_<YYYY-MM-DD>.md`."""

    target_dir = _export_dir(config, params.output_dir)
    meeting = await _require_meeting(client, params.recording_id, _FULL_DETAIL)

    filepath = write_markdown(
        target_dir,
        generate_transcript_filename(meeting),
        format_meeting_document(meeting),
    )
    logger.info("meetings.exported", recording_id=meeting.recording_id, path=str(filepath))
    return f"Exported meeting to: {filepath}"


async def export_all_meetings(
    config: AppConfig, client: FathomClient, params: ExportAllMeetingsInput
) -> str:
    """Export every meeting in the date window, one file each.

    Files are written sequentially; a failure leaves earlier files in
    place. Meetings sharing a title and day map to one file, the later
    overwriting the earlier; the summary says so.
    """

    target_dir = _export_dir(config, params.output_dir)
    filters = _FULL_DETAIL.model_copy(
        update={
            "created_after": params.created_after,
            "created_before": params.created_before,
        }
    )
    meetings = await client.get_all_meetings(filters)

    exported: List[str] = []
    for meeting in meetings:
        filename = generate_transcript_filename(meeting)
        write_markdown(target_dir, filename, format_meeting_document(meeting))
        exported.append(filename)
        logger.info("meetings.exported", recording_id=meeting.recording_id, filename=filename)

    lines = [f"Exported {len(exported)} meetings to {target_dir}:"]
    lines += [f"- {name}" for name in exported]
    overwritten = len(exported) - len(set(exported))
    if overwritten:
        logger.warning("meetings.export_overwrote", count=overwritten)
        lines.append(
            f"\nNote: {overwritten} file(s) were overwritten by later meetings "
            "with the same title and date."
        )
    return "\n".join(lines)


async def search_meetings(
    config: AppConfig, client: FathomClient, params: SearchMeetingsInput
) -> str:
    """Search meetings by participants, domains, teams, recorder and dates."""

    filters = ListMeetingsParams(
        calendar_invitees=params.participant_emails,
        calendar_invitees_domains=params.domains,
        teams=params.teams,
        recorded_by=params.recorded_by,
        created_after=params.created_after,
        created_before=params.created_before,
    )
    page = await client.list_meetings(filters)
    logger.info("meetings.searched", count=len(page.items))
    return format_meeting_list(page.items)


async def get_action_items(
    config: AppConfig, client: FathomClient, params: GetActionItemsInput
) -> str:
    """Action items for one meeting, or a digest of recent meetings."""

    filters = ListMeetingsParams(include_action_items=True)

    def keep(items: Optional[Sequence[ActionItem]]) -> List[ActionItem]:
        if params.include_completed:
            return list(items or [])
        return [i for i in items or [] if not i.completed]

    if params.recording_id is not None:
        meeting = await _require_meeting(client, params.recording_id, filters)
        return format_meeting_action_items(meeting, keep(meeting.action_items))

    page = await client.list_meetings(filters)
    recent = page.items[: params.limit or 10]
    return format_action_item_digest((m, keep(m.action_items)) for m in recent)
