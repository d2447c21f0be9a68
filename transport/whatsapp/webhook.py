"""
WhatsApp Webhook Receiver

One global endpoint for every registered student:
- GET  /webhook/  subscription handshake (global secret)
- POST /webhook/  message relay, always answered 200 "OK"
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from infra.bootstrap import AppContext, get_app_context

from .security import verify_webhook_challenge

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["WhatsApp Webhook"])


# ============================================================================
# WEBHOOK CHALLENGE (Setup only)
# ============================================================================

@router.get("/", response_class=PlainTextResponse)
async def whatsapp_webhook_challenge(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
    context: AppContext = Depends(get_app_context),
) -> PlainTextResponse:
    """
    Verify webhook subscription challenge from Meta.

    Returns:
        The challenge string (plain text, 200), or "Forbidden" (403)
    """
    try:
        challenge = verify_webhook_challenge(
            hub_mode, hub_verify_token, hub_challenge, context.webhook_verify_token
        )
    except HTTPException as e:
        logger.warning(f"Webhook challenge rejected: mode={hub_mode}")
        return PlainTextResponse(e.detail, status_code=e.status_code)

    logger.info("Webhook subscription verified")
    return PlainTextResponse(challenge, status_code=200)


# ============================================================================
# WEBHOOK RECEIVER (Message relay)
# ============================================================================

@router.post("/", response_class=PlainTextResponse)
async def whatsapp_webhook_receiver(
    request: Request,
    context: AppContext = Depends(get_app_context),
) -> PlainTextResponse:
    """
    Relay WhatsApp messages to each student's flow.

    Rules:
    - Malformed JSON, unknown tenants, store and flow failures are logged
      and absorbed
    - The response is sent after every forward in the batch has settled
    - Always 200: a non-2xx makes the provider retry or disable the
      subscription
    """
    try:
        body = await request.body()
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Webhook body is not JSON: {e}")
        return PlainTextResponse("OK", status_code=200)

    try:
        await context.relay().relay(payload)
    except Exception as e:
        logger.error(f"Unexpected relay error: {e}", exc_info=True)

    # Always return 200 to acknowledge the webhook
    return PlainTextResponse("OK", status_code=200)
