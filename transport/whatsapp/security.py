"""
WhatsApp Subscription Handshake

SECURITY BOUNDARY - single process-wide verify token.
Per-student webhookVerifyTokens are for edit authentication only and are
never accepted here.
"""

from typing import Optional

from fastapi import HTTPException, status

from students.credentials import tokens_match


def verify_webhook_challenge(
    hub_mode: Optional[str],
    hub_verify_token: Optional[str],
    hub_challenge: Optional[str],
    expected_token: Optional[str],
) -> str:
    """
    Verify webhook subscription challenge from WhatsApp.

    WhatsApp calls GET /webhook/ with:
    - hub.mode=subscribe
    - hub.challenge=random_string
    - hub.verify_token=configured_token

    Args:
        hub_mode: Should be "subscribe"
        hub_verify_token: Token to verify
        hub_challenge: String to echo back
        expected_token: The global WEBHOOK_VERIFY_TOKEN

    Returns:
        The challenge string, verbatim

    Raises:
        HTTPException(403): Wrong mode or token (the challenge is not echoed)
    """
    if hub_mode != "subscribe" or not tokens_match(hub_verify_token, expected_token):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )

    return hub_challenge or ""
