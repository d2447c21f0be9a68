"""
Student registration.

One-shot creation of a StudentConfig per phone-number id:
  derive flow endpoint → required-field check → duplicate check → put

The duplicate check and the put are two separate store calls; two
concurrent registrations for the same id can both pass the check. The
store offers no compare-and-set, so that window stays open.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from store.base import ConfigStore
from students.errors import DuplicatePhoneNumberId, MissingRequiredField
from students.flow_url import derive_flow_endpoint
from students.models import StudentConfig, StudentConfigForm, utc_now
from students.repository import load_student_config, save_student_config

logger = logging.getLogger(__name__)


class RegistrationService:
    """Creates records and answers the read-only registration probes."""

    def __init__(self, store: ConfigStore, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    async def register(self, form: StudentConfigForm) -> StudentConfig:
        """
        Validate and persist a new registration.

        Raises:
            InvalidFlowUrl: completeFlowiseUrl has no prediction/<id> pair
            MissingRequiredField: a required field is empty after derivation
            DuplicatePhoneNumberId: a record already exists for the id
            StoreUnavailableError: backend failure
        """
        endpoint = derive_flow_endpoint(form.complete_flow_url)

        record = StudentConfig(
            student_name=form.student_name,
            phone_number_id=form.phone_number_id,
            flow_base_url=endpoint.base_url,
            flow_id=endpoint.flow_id,
            complete_flow_url=form.complete_flow_url,
            access_token=form.access_token,
            webhook_verify_token=form.webhook_verify_token or None,
            registered_at=self.clock(),
        )

        missing = record.missing_fields()
        if missing:
            raise MissingRequiredField(missing)

        existing = await self._existing_owner(record.phone_number_id)
        if existing is not None:
            logger.info(f"Duplicate registration rejected: phone_number_id={record.phone_number_id}")
            raise DuplicatePhoneNumberId(record.phone_number_id, existing)

        await save_student_config(self.store, record)
        logger.info(
            f"Student registered: phone_number_id={record.phone_number_id}",
            extra={"student_name": record.student_name, "flow_id": record.flow_id},
        )
        return record

    async def _existing_owner(self, phone_number_id: str) -> Optional[str]:
        raw = await self.store.get(phone_number_id)
        if raw is None:
            return None
        try:
            return StudentConfig.from_json(raw).student_name
        except ValueError:
            # Unreadable records still occupy the key.
            return "desconocido"

    async def check_phone_exists(self, phone_number_id: str) -> Dict[str, Any]:
        """Live-validation probe: {exists, studentName?}. Never writes."""
        record = await load_student_config(self.store, phone_number_id)
        if record is None:
            return {"exists": False}
        return {"exists": True, "studentName": record.student_name}

    async def verify_registration(self, phone_number_id: str) -> Dict[str, Any]:
        """
        Post-write confirmation: {exists, valid, studentName?, registeredAt?}.

        valid is True only when all five required fields are non-empty in
        the stored record. Never writes.
        """
        record = await load_student_config(self.store, phone_number_id)
        if record is None:
            return {"exists": False, "valid": False}

        result: Dict[str, Any] = {
            "exists": True,
            "valid": record.is_complete(),
            "studentName": record.student_name,
        }
        if record.registered_at is not None:
            result["registeredAt"] = record.to_public_dict()["registeredAt"]
        return result
