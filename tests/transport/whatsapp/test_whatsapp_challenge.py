"""
WhatsApp Subscription Handshake Tests

Only the global verify token with mode "subscribe" echoes the challenge.
"""

import pytest
from fastapi import HTTPException

from transport.whatsapp.security import verify_webhook_challenge

SECRET = "global-secret"


class TestWebhookChallenge:

    def test_valid_handshake_echoes_challenge(self):
        assert verify_webhook_challenge("subscribe", SECRET, "1158201444", SECRET) == "1158201444"

    def test_missing_challenge_echoes_empty(self):
        assert verify_webhook_challenge("subscribe", SECRET, None, SECRET) == ""

    def test_wrong_token(self):
        with pytest.raises(HTTPException) as exc_info:
            verify_webhook_challenge("subscribe", "secretA", "123", SECRET)

        assert exc_info.value.status_code == 403

    @pytest.mark.parametrize("mode", [None, "", "unsubscribe", "SUBSCRIBE"])
    def test_wrong_mode(self, mode):
        with pytest.raises(HTTPException) as exc_info:
            verify_webhook_challenge(mode, SECRET, "123", SECRET)

        assert exc_info.value.status_code == 403

    def test_unset_global_secret_rejects_everything(self):
        with pytest.raises(HTTPException):
            verify_webhook_challenge("subscribe", "", "123", "")
        with pytest.raises(HTTPException):
            verify_webhook_challenge("subscribe", None, "123", None)
