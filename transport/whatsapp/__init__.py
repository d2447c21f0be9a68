"""WhatsApp Relay Layer - Module Exports

The FastAPI router lives in transport.whatsapp.webhook and is imported by
main directly (it depends on infra, which depends on this package).
"""

from .forwarder import FlowForwarder
from .normalize import (
    MalformedPayload,
    build_context,
    compose_question,
    describe_message,
    extract_phone_number_id,
    filter_user_messages,
    is_business_initiated,
    iter_message_changes,
)
from .relay import WebhookRelay
from .schemas import (
    Delivered,
    Failed,
    FlowPayload,
    ForwardResult,
    MessageChange,
    RelayReport,
    SkippedChange,
    WhatsAppContext,
)
from .security import verify_webhook_challenge

__all__ = [
    # Schemas
    "MessageChange",
    "SkippedChange",
    "WhatsAppContext",
    "FlowPayload",
    "Delivered",
    "Failed",
    "ForwardResult",
    "RelayReport",
    # Normalization
    "iter_message_changes",
    "extract_phone_number_id",
    "is_business_initiated",
    "filter_user_messages",
    "describe_message",
    "build_context",
    "compose_question",
    "MalformedPayload",
    # Relay
    "FlowForwarder",
    "WebhookRelay",
    # Security
    "verify_webhook_challenge",
]
