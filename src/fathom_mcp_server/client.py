"""Async HTTP client for the Fathom external REST API.

Provides FathomClient, a thin wrapper over httpx that builds query
strings from filter objects, attaches the API key header, decodes JSON
and raises FathomAPIError on any non-2xx status. Every paginated
resource (meetings, teams, team members) has a single-page method and a
"get all" variant that follows `next_cursor` until it is exhausted.

Requests are issued one at a time; there is no retry or backoff.
"""

from __future__ import annotations

from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)
from urllib.parse import quote

import httpx
import structlog

from .config.env import FATHOM_API_BASE
from .errors import FathomAPIError
from .schemas import (
    CreateWebhookParams,
    ListMeetingsParams,
    Meeting,
    Page,
    Team,
    TeamMember,
    TranscriptResponse,
    Webhook,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

QueryParams = List[Tuple[str, str]]

_FLAG_OPTIONS = (
    "include_transcript",
    "include_summary",
    "include_action_items",
    "include_crm_matches",
)
_SCALAR_OPTIONS = (
    "created_after",
    "created_before",
    "cursor",
    "calendar_invitees_domains_type",
)
_ARRAY_OPTIONS = (
    "recorded_by",
    "teams",
    "calendar_invitees",
    "calendar_invitees_domains",
)


def build_meetings_query(params: ListMeetingsParams) -> QueryParams:
    """Translate meeting filters into ordered query parameters.

    Boolean flags are sent as the literal "true" only when set to True.
    Array options become repeated `name[]` parameters in input order.
    Unset or empty options are left out.
    """

    query: QueryParams = []
    for name in _FLAG_OPTIONS:
        if getattr(params, name) is True:
            query.append((name, "true"))
    for name in _SCALAR_OPTIONS:
        value = getattr(params, name)
        if value:
            query.append((name, value))
    for name in _ARRAY_OPTIONS:
        for value in getattr(params, name) or ():
            query.append((f"{name}[]", value))
    return query


async def iter_pages(
    fetch_page: Callable[[Optional[str]], Awaitable[Page[T]]],
) -> AsyncIterator[Page[T]]:
    """Yield pages starting with no cursor until `next_cursor` is falsy."""

    cursor: Optional[str] = None
    while True:
        page = await fetch_page(cursor)
        yield page
        cursor = page.next_cursor
        if not cursor:
            return


async def collect_pages(
    fetch_page: Callable[[Optional[str]], Awaitable[Page[T]]],
) -> List[T]:
    """Concatenate `items` of every page, preserving order."""

    items: List[T] = []
    async for page in iter_pages(fetch_page):
        items.extend(page.items)
    return items


class FathomClient:
    """Async client for the Fathom external API.

    Args:
        api_key: Fathom API key, sent as `X-Api-Key`.
        base_url: API root, without trailing slash.
        timeout: httpx timeout in seconds.
        headers: Extra headers merged over the defaults.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = FATHOM_API_BASE,
        timeout: float = 30.0,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers: Dict[str, str] = {
            "X-Api-Key": api_key,
            "Content-Type": "application/json",
            **(headers or {}),
        }

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(headers=self._headers, timeout=self._timeout)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Sequence[Tuple[str, str]]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        async with self._client() as client:
            response = await client.request(
                method,
                f"{self._base_url}{path}",
                params=list(params) if params else None,
                json=json,
            )

        logger.debug(
            "fathom.request",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        if not response.is_success:
            logger.warning(
                "fathom.request_failed",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise FathomAPIError(response.status_code, response.text)
        if response.status_code == 204:
            return {}
        return response.json()

    # ---------------------- Meetings ----------------------

    async def list_meetings(
        self, params: Optional[ListMeetingsParams] = None
    ) -> Page[Meeting]:
        """Fetch one page of meetings matching `params`."""
        query = build_meetings_query(params or ListMeetingsParams())
        data = await self._request("GET", "/meetings", params=query)
        return Page[Meeting].model_validate(data)

    async def iter_meeting_pages(
        self, params: Optional[ListMeetingsParams] = None
    ) -> AsyncIterator[Page[Meeting]]:
        base = params or ListMeetingsParams()

        async def fetch(cursor: Optional[str]) -> Page[Meeting]:
            return await self.list_meetings(base.model_copy(update={"cursor": cursor}))

        async for page in iter_pages(fetch):
            yield page

    async def get_all_meetings(
        self, params: Optional[ListMeetingsParams] = None
    ) -> List[Meeting]:
        """Fetch every page of meetings; any `cursor` in `params` is ignored."""
        meetings: List[Meeting] = []
        async for page in self.iter_meeting_pages(params):
            meetings.extend(page.items)
        logger.info("fathom.meetings_fetched", count=len(meetings))
        return meetings

    async def find_meeting(
        self, recording_id: int, params: Optional[ListMeetingsParams] = None
    ) -> Optional[Meeting]:
        """Walk meeting pages until `recording_id` is found.

        Returns:
            The meeting, or None when no page contains it.
        """
        async for page in self.iter_meeting_pages(params):
            for meeting in page.items:
                if meeting.recording_id == recording_id:
                    return meeting
        return None

    async def get_transcript(self, recording_id: int) -> TranscriptResponse:
        data = await self._request("GET", f"/recordings/{recording_id}/transcript")
        return TranscriptResponse.model_validate(data)

    # ---------------------- Teams ----------------------

    async def list_teams(self, cursor: Optional[str] = None) -> Page[Team]:
        query = [("cursor", cursor)] if cursor else None
        data = await self._request("GET", "/teams", params=query)
        return Page[Team].model_validate(data)

    async def get_all_teams(self) -> List[Team]:
        return await collect_pages(self.list_teams)

    async def list_team_members(
        self, team: Optional[str] = None, cursor: Optional[str] = None
    ) -> Page[TeamMember]:
        query: QueryParams = []
        if team:
            query.append(("team", team))
        if cursor:
            query.append(("cursor", cursor))
        data = await self._request("GET", "/team_members", params=query)
        return Page[TeamMember].model_validate(data)

    async def get_all_team_members(self, team: Optional[str] = None) -> List[TeamMember]:
        async def fetch(cursor: Optional[str]) -> Page[TeamMember]:
            return await self.list_team_members(team, cursor)

        return await collect_pages(fetch)

    # ---------------------- Webhooks ----------------------

    async def create_webhook(self, params: CreateWebhookParams) -> Webhook:
        """Create a webhook. The returned record holds the one-time secret."""
        data = await self._request(
            "POST", "/webhooks", json=params.model_dump(exclude_none=True)
        )
        webhook = Webhook.model_validate(data)
        logger.info("fathom.webhook_created", webhook_id=webhook.id)
        return webhook

    async def delete_webhook(self, webhook_id: str) -> None:
        await self._request("DELETE", f"/webhooks/{quote(webhook_id, safe='')}")
        logger.info("fathom.webhook_deleted", webhook_id=webhook_id)
