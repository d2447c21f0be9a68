"""
WhatsApp Payload Normalization

PURE CONVERSION - NO I/O

Walks the loosely-typed provider payload:
  entry[] → changes[] (field == "messages") → value.messages[]

Every nesting level either yields a MessageChange or an explicit
SkippedChange with the reason. Nothing here raises to the caller.
"""

import json
import time
from typing import Any, Iterator, Optional, Union

from students.models import StudentConfig

from .schemas import MessageChange, SkippedChange, WhatsAppContext

BUSINESS_INITIATED = "business_initiated"
INVALID_PHONE_IDS = {"", "undefined", "null"}


class MalformedPayload(Exception):
    """A nesting level of the provider payload is missing or has the wrong type."""
    pass


def iter_message_changes(payload: Any) -> Iterator[Union[MessageChange, SkippedChange]]:
    """
    Yield one result per `changes[]` item, plus one per malformed level.

    Args:
        payload: Parsed JSON body of the webhook POST

    Yields:
        MessageChange for each usable change, SkippedChange otherwise
    """
    if not isinstance(payload, dict):
        yield SkippedChange("payload is not an object")
        return

    entries = payload.get("entry")
    if not isinstance(entries, list):
        yield SkippedChange("payload.entry missing or not a list")
        return

    for entry in entries:
        if not isinstance(entry, dict):
            yield SkippedChange("entry is not an object")
            continue

        changes = entry.get("changes")
        if not isinstance(changes, list):
            yield SkippedChange("entry.changes missing or not a list")
            continue

        entry_id = entry.get("id")

        for change in changes:
            try:
                yield _parse_change(change, entry_id)
            except MalformedPayload as e:
                yield SkippedChange(str(e))


def _parse_change(change: Any, entry_id: Any) -> MessageChange:
    if not isinstance(change, dict):
        raise MalformedPayload("change is not an object")

    if change.get("field") != "messages":
        raise MalformedPayload(f"change.field is {change.get('field')!r}, not 'messages'")

    value = change.get("value")
    if not isinstance(value, dict):
        raise MalformedPayload("change.value missing or not an object")

    messages = value.get("messages")
    if not isinstance(messages, list):
        raise MalformedPayload("value.messages missing or not a list")

    return MessageChange(
        entry_id=str(entry_id) if entry_id is not None else None,
        value=value,
        messages=messages,
    )


def extract_phone_number_id(value: dict) -> Optional[str]:
    """
    Resolve the tenant key for a change.

    value.metadata.phone_number_id first, then value.phone_number_id.
    Empty strings and the literals "undefined"/"null" count as absent.
    """
    candidates = []
    metadata = value.get("metadata")
    if isinstance(metadata, dict):
        candidates.append(metadata.get("phone_number_id"))
    candidates.append(value.get("phone_number_id"))

    for candidate in candidates:
        if candidate is None or isinstance(candidate, (dict, list)):
            continue
        phone_number_id = str(candidate).strip()
        if phone_number_id:
            break
    else:
        return None

    if phone_number_id in INVALID_PHONE_IDS:
        return None
    return phone_number_id


def is_business_initiated(value: dict) -> bool:
    """True for echoes of the bot's own outbound sends."""
    metadata = value.get("metadata")
    if not isinstance(metadata, dict):
        return False
    origin = metadata.get("origin")
    return isinstance(origin, dict) and origin.get("type") == BUSINESS_INITIATED


def filter_user_messages(change: MessageChange) -> list:
    """Drop echoes and non-object entries. Echo status applies to the whole change."""
    if is_business_initiated(change.value):
        return []
    return [message for message in change.messages if isinstance(message, dict)]


def describe_message(message: dict) -> str:
    """
    Text the flow will see for this message.

    Rules:
    - text.body verbatim when present
    - media and other types become a bracketed placeholder
    """
    text = message.get("text")
    if isinstance(text, dict) and text.get("body"):
        return str(text["body"])

    message_type = message.get("type")

    if message_type == "image":
        return f"[Imagen] {_nested(message, 'image', 'caption') or 'Sin descripción'}"

    if message_type == "audio":
        return "[Audio recibido]"

    if message_type == "document":
        return f"[Documento] {_nested(message, 'document', 'filename') or 'Sin nombre'}"

    return f"[Mensaje tipo: {message_type}]"


def build_context(
    message: dict,
    change: MessageChange,
    phone_number_id: str,
    student: StudentConfig,
) -> WhatsAppContext:
    """Collect sender, message and tenant identifiers for the flow prompt."""
    sender = _str_or(message.get("from"), "unknown")
    metadata = change.value.get("metadata") if isinstance(change.value.get("metadata"), dict) else {}

    return WhatsAppContext(
        whatsapp_from=sender,
        whatsapp_message_id=_str_or(message.get("id"), "unknown"),
        whatsapp_phone_number_id=phone_number_id,
        whatsapp_message_type=_str_or(message.get("type"), "text"),
        whatsapp_timestamp=_str_or(message.get("timestamp"), str(int(time.time() * 1000))),
        contact_name=_str_or(_first_contact_name(change.value), "Usuario"),
        contact_wa_id=sender,
        display_phone_number=_str_or(metadata.get("display_phone_number"), phone_number_id),
        webhook_entry_id=_str_or(change.entry_id, "unknown"),
        student_name=student.student_name,
        student_phone_id=student.phone_number_id,
    )


def compose_question(context: WhatsAppContext, message_text: str) -> str:
    """Serialized context header, blank line, then the raw user text."""
    header = json.dumps(context.model_dump(), ensure_ascii=False, separators=(",", ":"))
    return f"CONTEXTO_WHATSAPP: {header}\n\nMENSAJE_USUARIO: {message_text}"


def _first_contact_name(value: dict) -> Optional[str]:
    contacts = value.get("contacts")
    if not isinstance(contacts, list) or not contacts or not isinstance(contacts[0], dict):
        return None
    return _nested(contacts[0], "profile", "name")


def _nested(obj: dict, outer: str, inner: str) -> Any:
    container = obj.get(outer)
    if not isinstance(container, dict):
        return None
    return container.get(inner)


def _str_or(value: Any, default: str) -> str:
    if value is None or value == "":
        return default
    return str(value)
