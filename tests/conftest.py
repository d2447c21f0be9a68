"""Pytest configuration and fixtures."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from store.memory import InMemoryConfigStore  # noqa: E402
from students.models import StudentConfig  # noqa: E402


@pytest.fixture
def store():
    """Empty in-memory store."""
    return InMemoryConfigStore()


@pytest.fixture
def ana_record():
    """The example student from the registration walkthrough."""
    return StudentConfig(
        student_name="Ana",
        phone_number_id="555",
        flow_base_url="https://f.io",
        flow_id="abc-123",
        complete_flow_url="https://f.io/api/v1/prediction/abc-123",
        access_token="EAAF-token",
        webhook_verify_token="secretA",
        registered_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def seeded_store(store, ana_record):
    """Store holding Ana's record under "555"."""
    store.storage["555"] = ana_record.to_json()
    return store


@pytest.fixture
def flow_calls():
    """
    Recording stand-in for flow endpoints.

    Returns (calls, transport): every request the forwarder sends lands in
    `calls`; the transport answers 200 with a canned flow reply.
    """
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"text": "respuesta del flujo"})

    return calls, httpx.MockTransport(handler)


@pytest.fixture
def webhook_payload():
    """Factory for provider-shaped webhook bodies."""

    def build(
        phone_number_id="555",
        messages=None,
        origin=None,
        contact_name="Luis",
        field="messages",
        entry_id="WABA_1",
    ):
        metadata = {"display_phone_number": "15550000"}
        if phone_number_id is not None:
            metadata["phone_number_id"] = phone_number_id
        if origin is not None:
            metadata["origin"] = {"type": origin}

        if messages is None:
            messages = [{
                "from": "5215550001",
                "id": "wamid.1",
                "timestamp": "1707500000",
                "type": "text",
                "text": {"body": "hola"},
            }]

        return {
            "object": "whatsapp_business_account",
            "entry": [{
                "id": entry_id,
                "changes": [{
                    "field": field,
                    "value": {
                        "messaging_product": "whatsapp",
                        "metadata": metadata,
                        "contacts": [{"profile": {"name": contact_name}, "wa_id": "5215550001"}],
                        "messages": messages,
                    },
                }],
            }],
        }

    return build
