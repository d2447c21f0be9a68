"""
StudentConfig record tests.

Stored shape, legacy field names, secret resolution.
"""

import json

from students.credentials import resolve_secret, tokens_match
from students.models import StudentConfig


class TestStoredShape:

    def test_serializes_camel_case_without_unset_optionals(self, ana_record):
        stored = json.loads(ana_record.to_json())

        assert stored["studentName"] == "Ana"
        assert stored["phoneNumberId"] == "555"
        assert stored["flowBaseUrl"] == "https://f.io"
        assert stored["flowId"] == "abc-123"
        assert stored["completeFlowUrl"] == "https://f.io/api/v1/prediction/abc-123"
        assert stored["registeredAt"].startswith("2024-05-01T12:00:00")
        assert "lastUpdate" not in stored

    def test_prediction_url(self, ana_record):
        assert ana_record.prediction_url == "https://f.io/api/v1/prediction/abc-123"

    def test_reads_legacy_flowise_field_names(self):
        raw = json.dumps({
            "studentName": "Beto",
            "phoneNumberId": "777",
            "flowiseUrl": "https://old.io",
            "chatflowId": "cf-1",
            "completeFlowiseUrl": "https://old.io/api/v1/prediction/cf-1",
            "accessToken": "tok",
            "registeredAt": "2024-01-02T03:04:05.000Z",
        })

        record = StudentConfig.from_json(raw)

        assert record.flow_base_url == "https://old.io"
        assert record.flow_id == "cf-1"
        assert record.complete_flow_url == "https://old.io/api/v1/prediction/cf-1"
        assert record.is_complete()

    def test_unknown_keys_survive_a_rewrite(self):
        raw = json.dumps({
            "studentName": "Beto",
            "phoneNumberId": "777",
            "flowBaseUrl": "https://f.io",
            "flowId": "x",
            "accessToken": "tok",
            "cohort": "2024-B",
        })

        record = StudentConfig.from_json(raw)

        assert json.loads(record.to_json())["cohort"] == "2024-B"

    def test_numeric_phone_number_id_coerced(self):
        record = StudentConfig.model_validate({"phoneNumberId": 555})
        assert record.phone_number_id == "555"

    def test_missing_fields_listed_in_order(self):
        record = StudentConfig(student_name="Ana", phone_number_id="555")
        assert record.missing_fields() == ["flowBaseUrl", "flowId", "accessToken"]


class TestSecretResolution:

    def test_record_secret_wins(self, ana_record):
        assert resolve_secret(ana_record, "global") == "secretA"

    def test_falls_back_to_global(self, ana_record):
        record = ana_record.model_copy(update={"webhook_verify_token": None})
        assert resolve_secret(record, "global") == "global"

    def test_empty_record_secret_falls_back(self, ana_record):
        record = ana_record.model_copy(update={"webhook_verify_token": ""})
        assert resolve_secret(record, "global") == "global"

    def test_tokens_match(self):
        assert tokens_match("abc", "abc")
        assert not tokens_match("abc", "abd")

    def test_empty_expected_matches_nothing(self):
        assert not tokens_match("", "")
        assert not tokens_match("anything", "")
        assert not tokens_match(None, None)
