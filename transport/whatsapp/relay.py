"""
WhatsApp Relay

Routes each inbound message to the flow endpoint of the student that owns
the receiving phone number.

Flow per change:
  phone_number_id → StudentConfig lookup → echo filter → describe →
  context + question → forward

Rules:
- Read-only against the store
- Forwards within one delivery run concurrently; all settle before return
- Nothing raised here reaches the provider-facing response
"""

import asyncio
import logging
from typing import Any

from store.base import ConfigStore, StoreUnavailableError
from students.repository import load_student_config

from .forwarder import FlowForwarder
from .normalize import (
    build_context,
    compose_question,
    describe_message,
    extract_phone_number_id,
    filter_user_messages,
    iter_message_changes,
)
from .schemas import Failed, FlowPayload, MessageChange, RelayReport, SkippedChange

logger = logging.getLogger(__name__)


class WebhookRelay:
    """Lookup-and-dispatch for the shared webhook."""

    def __init__(self, store: ConfigStore, forwarder: FlowForwarder):
        self.store = store
        self.forwarder = forwarder

    async def relay(self, payload: Any) -> RelayReport:
        """
        Process one webhook delivery.

        Args:
            payload: Parsed JSON body (any shape)

        Returns:
            RelayReport with forward outcomes and skipped changes
        """
        report = RelayReport()
        pending = []

        for item in iter_message_changes(payload):
            if isinstance(item, SkippedChange):
                logger.debug(f"Skipping change: {item.reason}")
                report.skipped.append(item)
                continue

            pending.extend(await self._prepare_change(item, report))

        if pending:
            results = await asyncio.gather(
                *(self.forwarder.forward(url, body) for _, url, body in pending),
                return_exceptions=True,
            )
            for (phone_number_id, url, _), result in zip(pending, results):
                if isinstance(result, Exception):
                    logger.error(f"Forward raised for {url}: {result!r}")
                    result = Failed(reason=f"unexpected error: {type(result).__name__}")
                report.forwarded.append((phone_number_id, result))

        logger.info("Webhook delivery processed", extra=report.summary())
        return report

    async def _prepare_change(self, change: MessageChange, report: RelayReport) -> list:
        """Return (phone_number_id, url, FlowPayload) for each message worth forwarding."""
        phone_number_id = extract_phone_number_id(change.value)
        if phone_number_id is None:
            report.skipped.append(SkippedChange("no usable phone_number_id"))
            return []

        try:
            student = await load_student_config(self.store, phone_number_id)
        except StoreUnavailableError as e:
            logger.warning(f"Config lookup failed: phone_number_id={phone_number_id}, {e}")
            report.skipped.append(SkippedChange(f"lookup failed for {phone_number_id}"))
            return []

        if student is None:
            logger.info(f"No student registered for phone_number_id={phone_number_id}")
            report.skipped.append(SkippedChange(f"unregistered phone_number_id {phone_number_id}"))
            return []

        messages = filter_user_messages(change)
        if not messages:
            report.skipped.append(SkippedChange(f"no user messages for {phone_number_id}"))
            return []

        url = student.prediction_url
        prepared = []
        for message in messages:
            context = build_context(message, change, phone_number_id, student)
            question = compose_question(context, describe_message(message))
            prepared.append((phone_number_id, url, FlowPayload(question=question)))
        return prepared
