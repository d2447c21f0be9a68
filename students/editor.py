"""
Configuration editor.

Two phases, each authenticating on its own:
  authenticate(phone_number_id, token) → current record (pre-fills the form)
  update(phone_number_id, token, form)  → overwritten record

authenticate returns the access token and the per-record secret in
cleartext. Anyone holding the (id, secret) pair can already overwrite
both, so nothing is masked.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from store.base import ConfigStore
from students.credentials import resolve_secret, tokens_match
from students.errors import InvalidToken, MissingRequiredField, NotFound
from students.flow_url import derive_flow_endpoint
from students.models import StudentConfig, StudentConfigForm, utc_now
from students.repository import load_student_config, save_student_config

logger = logging.getLogger(__name__)


class ConfigEditor:
    """Authenticate-then-overwrite for an existing record."""

    def __init__(
        self,
        store: ConfigStore,
        global_secret: Optional[str],
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.global_secret = global_secret
        self.clock = clock

    async def authenticate(self, phone_number_id: str, token: str) -> StudentConfig:
        """
        Check (phone_number_id, token) against the stored record.

        Raises:
            MissingRequiredField: id or token empty
            NotFound: no record for the id
            InvalidToken: token does not match the resolved secret
        """
        missing = [
            name
            for name, value in (("phoneNumberId", phone_number_id), ("verifyToken", token))
            if not value
        ]
        if missing:
            raise MissingRequiredField(missing)

        record = await load_student_config(self.store, phone_number_id)
        if record is None:
            raise NotFound(phone_number_id)

        if not tokens_match(token, resolve_secret(record, self.global_secret)):
            logger.warning(f"Edit authentication failed: phone_number_id={phone_number_id}")
            raise InvalidToken()

        return record

    async def update(self, phone_number_id: str, token: str, form: StudentConfigForm) -> StudentConfig:
        """
        Re-authenticate, re-derive the flow endpoint, overwrite mutable fields.

        phone_number_id and registered_at are carried over from the stored
        record; whatever the form says about them is ignored. A blank
        webhookVerifyToken keeps the record's current secret.

        Raises:
            NotFound, InvalidToken, MissingRequiredField, InvalidFlowUrl
        """
        current = await self.authenticate(phone_number_id, token)
        endpoint = derive_flow_endpoint(form.complete_flow_url)

        now = self.clock()
        updated = current.model_copy(
            update={
                "student_name": form.student_name,
                "flow_base_url": endpoint.base_url,
                "flow_id": endpoint.flow_id,
                "complete_flow_url": form.complete_flow_url,
                "access_token": form.access_token,
                "webhook_verify_token": form.webhook_verify_token or current.webhook_verify_token,
                "last_update": now,
                "last_token_update": now,
            }
        )

        missing = updated.missing_fields()
        if missing:
            raise MissingRequiredField(missing)

        await save_student_config(self.store, updated)
        logger.info(f"Config updated: phone_number_id={phone_number_id}")
        return updated
