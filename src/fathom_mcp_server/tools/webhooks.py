"""Webhook management tool functions."""

from __future__ import annotations

import structlog

from ..client import FathomClient
from ..config import AppConfig
from ..errors import BadRequestError
from ..schemas import CreateWebhookInput, CreateWebhookParams, DeleteWebhookInput
from ..utils import format_webhook_created

logger = structlog.get_logger(__name__)


async def create_webhook(
    config: AppConfig, client: FathomClient, params: CreateWebhookInput
) -> str:
    """Register a webhook and show its one-time secret.

    Options left unset are not sent, so the API applies its own defaults.
    """

    if not params.destination_url:
        raise BadRequestError("'destination_url' is required")
    webhook = await client.create_webhook(
        CreateWebhookParams.model_validate(params.model_dump(exclude_none=True))
    )
    return format_webhook_created(webhook)


async def delete_webhook(
    config: AppConfig, client: FathomClient, params: DeleteWebhookInput
) -> str:
    if not params.webhook_id:
        raise BadRequestError("'webhook_id' is required")
    await client.delete_webhook(params.webhook_id)
    return f"Webhook {params.webhook_id} deleted successfully."
