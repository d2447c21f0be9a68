"""
WhatsApp Relay - Data Models

PURE DATA MODELS - NO LOGIC
The provider payload stays a loose dict; these types describe what the relay
pulls out of it and what it sends downstream.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# EXTRACTED FROM THE PROVIDER PAYLOAD (INPUT)
# ============================================================================

@dataclass(frozen=True)
class MessageChange:
    """
    One `entry[].changes[]` item with field == "messages" that survived
    shape checks.
    """

    entry_id: Optional[str]
    value: dict
    messages: list


@dataclass(frozen=True)
class SkippedChange:
    """A nesting level that was missing or malformed."""

    reason: str


# ============================================================================
# FLOW CONTEXT + PAYLOAD (OUTPUT)
# ============================================================================

class WhatsAppContext(BaseModel):
    """
    Context prepended to every question so the flow knows who is writing.

    Field order is the serialized order.
    """

    model_config = ConfigDict(frozen=True)

    whatsapp_from: str
    whatsapp_message_id: str
    whatsapp_phone_number_id: str
    whatsapp_message_type: str
    whatsapp_timestamp: str
    contact_name: str
    contact_wa_id: str
    display_phone_number: str
    webhook_entry_id: str
    student_name: str
    student_phone_id: str


class FlowPayload(BaseModel):
    """Body POSTed to `<flowBaseUrl>/api/v1/prediction/<flowId>`."""

    question: str = Field(..., description="Serialized context header + user message")


# ============================================================================
# FORWARD OUTCOME
# ============================================================================

@dataclass(frozen=True)
class Delivered:
    status_code: int


@dataclass(frozen=True)
class Failed:
    reason: str
    status_code: Optional[int] = None


ForwardResult = Union[Delivered, Failed]


@dataclass
class RelayReport:
    """
    What one webhook delivery did. Observability only; the provider always
    gets 200 regardless of its contents.
    """

    forwarded: list = field(default_factory=list)  # (phone_number_id, ForwardResult)
    skipped: list = field(default_factory=list)    # SkippedChange

    @property
    def delivered_count(self) -> int:
        return sum(1 for _, result in self.forwarded if isinstance(result, Delivered))

    @property
    def failed_count(self) -> int:
        return sum(1 for _, result in self.forwarded if isinstance(result, Failed))

    def summary(self) -> dict[str, Any]:
        return {
            "forwarded": len(self.forwarded),
            "delivered": self.delivered_count,
            "failed": self.failed_count,
            "skipped": len(self.skipped),
        }
