"""
Two-tier secret resolution for edit authentication.

A record's own webhookVerifyToken wins; records registered without one
fall back to the process-wide WEBHOOK_VERIFY_TOKEN.
"""

import hmac
from typing import Optional

from students.models import StudentConfig


def resolve_secret(record: StudentConfig, global_secret: Optional[str]) -> str:
    """Pure: record.webhookVerifyToken ?? global secret."""
    return record.webhook_verify_token or global_secret or ""


def tokens_match(provided: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison. An empty expected secret matches nothing."""
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
