"""
Student configuration record.

Stored as a JSON string keyed by phone_number_id. Keys are camelCase on
the wire; records written by the first deployment used the Flowise-specific
names (flowiseUrl, chatflowId, completeFlowiseUrl), which are still accepted.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from students.flow_url import build_prediction_url

REQUIRED_FIELDS = ("studentName", "phoneNumberId", "flowBaseUrl", "flowId", "accessToken")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StudentConfig(BaseModel):
    """One tenant: a phone-number id bound to one flow endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    student_name: str = Field("", alias="studentName")
    phone_number_id: str = Field("", alias="phoneNumberId")
    flow_base_url: str = Field(
        "",
        alias="flowBaseUrl",
        validation_alias=AliasChoices("flowBaseUrl", "flowiseUrl", "flow_base_url"),
    )
    flow_id: str = Field(
        "",
        alias="flowId",
        validation_alias=AliasChoices("flowId", "chatflowId", "flow_id"),
    )
    complete_flow_url: str = Field(
        "",
        alias="completeFlowUrl",
        validation_alias=AliasChoices("completeFlowUrl", "completeFlowiseUrl", "complete_flow_url"),
    )
    access_token: str = Field("", alias="accessToken")
    webhook_verify_token: Optional[str] = Field(None, alias="webhookVerifyToken")
    registered_at: Optional[datetime] = Field(None, alias="registeredAt")
    last_update: Optional[datetime] = Field(None, alias="lastUpdate")
    last_token_update: Optional[datetime] = Field(None, alias="lastTokenUpdate")

    @property
    def prediction_url(self) -> str:
        return build_prediction_url(self.flow_base_url, self.flow_id)

    def missing_fields(self) -> list[str]:
        """Names of required fields that are empty."""
        values = {
            "studentName": self.student_name,
            "phoneNumberId": self.phone_number_id,
            "flowBaseUrl": self.flow_base_url,
            "flowId": self.flow_id,
            "accessToken": self.access_token,
        }
        return [name for name in REQUIRED_FIELDS if not values[name]]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_public_dict(self) -> dict:
        """camelCase dict with unset optionals dropped (the stored shape)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    @classmethod
    def from_json(cls, raw: str) -> "StudentConfig":
        return cls.model_validate_json(raw)


class StudentConfigForm(BaseModel):
    """Fields a student submits on the registration and edit forms."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    student_name: str = Field("", alias="studentName")
    phone_number_id: str = Field("", alias="phoneNumberId")
    complete_flow_url: str = Field(
        "",
        alias="completeFlowiseUrl",
        validation_alias=AliasChoices("completeFlowiseUrl", "completeFlowUrl", "complete_flow_url"),
    )
    access_token: str = Field("", alias="accessToken")
    webhook_verify_token: Optional[str] = Field(None, alias="webhookVerifyToken")
