"""FastMCP server entrypoint.

Registers tools for the Fathom MCP Server. This module intentionally
keeps the tool implementations decoupled so they can be unit-tested
without the runtime. Application errors are surfaced to the host as
MCP tool errors carrying their error code.
"""

from __future__ import annotations

from typing import Awaitable

import structlog
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from .client import FathomClient
from .config import AppConfig, load_config
from .errors import AppError, ConfigError, to_error_payload
from .logging_config import configure_logging
from .schemas import (
    CreateWebhookInput,
    DeleteWebhookInput,
    ExportAllMeetingsInput,
    ExportMeetingInput,
    GetActionItemsInput,
    GetMeetingInput,
    GetTranscriptInput,
    ListMeetingsInput,
    ListTeamMembersInput,
    SearchMeetingsInput,
)
from .tools import (
    create_webhook,
    delete_webhook,
    export_all_meetings,
    export_meeting,
    get_action_items,
    get_meeting,
    get_transcript,
    list_meetings,
    list_team_members,
    list_teams,
    search_meetings,
)

logger = structlog.get_logger(__name__)


async def run_tool(name: str, result: Awaitable[str]) -> str:
    """Await a tool call, turning AppError into an MCP tool error."""

    try:
        return await result
    except AppError as exc:
        payload = to_error_payload(exc)
        logger.warning("tool.failed", tool=name, code=payload["code"], error=payload["message"])
        raise ToolError(f"{payload['code']}: {payload['message']}") from exc


def _register_fastmcp_tools(app: FastMCP, config: AppConfig, client: FathomClient) -> None:
    @app.tool(name="list_meetings", description="List recent Fathom meetings.")
    async def list_meetings_tool(params: ListMeetingsInput) -> str:
        return await run_tool("list_meetings", list_meetings(config, client, params))

    @app.tool(
        name="get_meeting",
        description="Get a meeting with transcript, summary, action items and CRM matches.",
    )
    async def get_meeting_tool(params: GetMeetingInput) -> str:
        return await run_tool("get_meeting", get_meeting(config, client, params))

    @app.tool(name="get_transcript", description="Get the transcript of a recording.")
    async def get_transcript_tool(params: GetTranscriptInput) -> str:
        return await run_tool("get_transcript", get_transcript(config, client, params))

    @app.tool(name="export_meeting", description="Export one meeting to a markdown file.")
    async def export_meeting_tool(params: ExportMeetingInput) -> str:
        return await run_tool("export_meeting", export_meeting(config, client, params))

    @app.tool(
        name="export_all_meetings",
        description="Export every meeting in a date range to markdown files.",
    )
    async def export_all_meetings_tool(params: ExportAllMeetingsInput) -> str:
        return await run_tool(
            "export_all_meetings", export_all_meetings(config, client, params)
        )

    @app.tool(
        name="search_meetings",
        description="Search meetings by participant emails, domains, teams or recorder.",
    )
    async def search_meetings_tool(params: SearchMeetingsInput) -> str:
        return await run_tool("search_meetings", search_meetings(config, client, params))

    @app.tool(
        name="get_action_items",
        description="Get action items for one meeting or across recent meetings.",
    )
    async def get_action_items_tool(params: GetActionItemsInput) -> str:
        return await run_tool("get_action_items", get_action_items(config, client, params))

    @app.tool(name="list_teams", description="List all teams.")
    async def list_teams_tool() -> str:
        return await run_tool("list_teams", list_teams(config, client))

    @app.tool(name="list_team_members", description="List team members, optionally by team.")
    async def list_team_members_tool(params: ListTeamMembersInput) -> str:
        return await run_tool("list_team_members", list_team_members(config, client, params))

    @app.tool(
        name="create_webhook",
        description="Create a webhook; the secret is only shown once.",
    )
    async def create_webhook_tool(params: CreateWebhookInput) -> str:
        return await run_tool("create_webhook", create_webhook(config, client, params))

    @app.tool(name="delete_webhook", description="Delete a webhook by id.")
    async def delete_webhook_tool(params: DeleteWebhookInput) -> str:
        return await run_tool("delete_webhook", delete_webhook(config, client, params))


def create_app(config: AppConfig) -> FastMCP:
    """Build the FastMCP application with every tool registered."""

    client = FathomClient(
        config.api_key,
        base_url=config.api_base,
        timeout=config.timeout_seconds,
    )
    app = FastMCP("fathom-mcp-server")
    _register_fastmcp_tools(app, config, client)
    return app


def main() -> None:
    """Run the FastMCP application over stdio.

    A missing API key is fatal at startup. Any fault escaping the
    runtime is logged and terminates the process.
    """

    try:
        config = load_config()
    except ConfigError as exc:
        configure_logging()
        logger.error("server.config_invalid", error=exc.message)
        raise SystemExit(1) from exc

    configure_logging(config.log_level, json_logs=config.log_json)
    app = create_app(config)
    logger.info("server.starting", export_dir=str(config.export_dir))

    try:
        app.run()
    except Exception:
        logger.exception("server.crashed")
        raise SystemExit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
