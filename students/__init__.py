"""Student tenants: records, registration and editing."""

from students.credentials import resolve_secret, tokens_match
from students.editor import ConfigEditor
from students.errors import (
    DuplicatePhoneNumberId,
    InvalidFlowUrl,
    InvalidToken,
    MissingRequiredField,
    NotFound,
    StudentConfigError,
)
from students.flow_url import FlowEndpoint, build_prediction_url, derive_flow_endpoint
from students.models import StudentConfig, StudentConfigForm
from students.registration import RegistrationService
from students.repository import load_student_config, save_student_config

__all__ = [
    "StudentConfig",
    "StudentConfigForm",
    "RegistrationService",
    "ConfigEditor",
    "FlowEndpoint",
    "derive_flow_endpoint",
    "build_prediction_url",
    "resolve_secret",
    "tokens_match",
    "load_student_config",
    "save_student_config",
    "StudentConfigError",
    "MissingRequiredField",
    "DuplicatePhoneNumberId",
    "InvalidFlowUrl",
    "NotFound",
    "InvalidToken",
]
