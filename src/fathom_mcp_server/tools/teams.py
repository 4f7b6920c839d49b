"""Team and team member tool functions."""

from __future__ import annotations

import structlog

from ..client import FathomClient
from ..config import AppConfig
from ..schemas import ListTeamMembersInput
from ..utils import format_team_list, format_team_member_list

logger = structlog.get_logger(__name__)


async def list_teams(config: AppConfig, client: FathomClient) -> str:
    """List every team visible to the API key."""

    teams = await client.get_all_teams()
    logger.info("teams.listed", count=len(teams))
    return format_team_list(teams)


async def list_team_members(
    config: AppConfig, client: FathomClient, params: ListTeamMembersInput
) -> str:
    """List members of one team, or of all teams when none is given."""

    members = await client.get_all_team_members(params.team)
    logger.info("teams.members_listed", team=params.team, count=len(members))
    return format_team_member_list(members, team=params.team)
