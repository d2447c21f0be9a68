"""Typed access to StudentConfig records in a ConfigStore."""

import logging
from typing import Optional

from pydantic import ValidationError

from store.base import ConfigStore, StoreUnavailableError
from students.models import StudentConfig

logger = logging.getLogger(__name__)


async def load_student_config(store: ConfigStore, phone_number_id: str) -> Optional[StudentConfig]:
    """
    Fetch and parse a record.

    Returns:
        The record, or None if no record exists for the key.

    Raises:
        StoreUnavailableError: backend failure or a stored value that does
            not parse as a StudentConfig.
    """
    raw = await store.get(phone_number_id)
    if raw is None:
        return None
    try:
        return StudentConfig.from_json(raw)
    except ValidationError as e:
        logger.error(f"Corrupted config record: key={phone_number_id}, {e.error_count()} errors")
        raise StoreUnavailableError(f"Corrupted config record for {phone_number_id}") from e


async def save_student_config(store: ConfigStore, record: StudentConfig) -> None:
    """Persist under the record's own phone_number_id (key and field always agree)."""
    await store.put(record.phone_number_id, record.to_json())
