"""
Flow URL derivation tests.

`<scheme>://<host>/.../prediction/<flowId>` → (scheme://host, flowId)
"""

import pytest

from students.errors import InvalidFlowUrl
from students.flow_url import build_prediction_url, derive_flow_endpoint


class TestDeriveFlowEndpoint:

    @pytest.mark.parametrize(
        "url, base_url, flow_id",
        [
            ("https://f.io/api/v1/prediction/abc-123", "https://f.io", "abc-123"),
            ("http://localhost:3000/api/v1/prediction/xyz", "http://localhost:3000", "xyz"),
            ("https://flows.example.com/prefix/prediction/id-9/extra", "https://flows.example.com", "id-9"),
            ("https://f.io/api/v1/prediction/abc?streaming=true", "https://f.io", "abc"),
        ],
    )
    def test_valid_urls(self, url, base_url, flow_id):
        endpoint = derive_flow_endpoint(url)

        assert endpoint.base_url == base_url
        assert endpoint.flow_id == flow_id

    @pytest.mark.parametrize(
        "url",
        [
            "https://f.io/api/v1/chatflows/abc",
            "https://f.io/api/v1/prediction",
            "https://f.io/api/v1/predictions/abc",
            "not a url",
            "/api/v1/prediction/abc",
            "",
        ],
    )
    def test_invalid_urls_raise(self, url):
        with pytest.raises(InvalidFlowUrl):
            derive_flow_endpoint(url)

    def test_first_prediction_segment_wins(self):
        endpoint = derive_flow_endpoint("https://f.io/prediction/first/prediction/second")
        assert endpoint.flow_id == "first"

    def test_surrounding_whitespace_ignored(self):
        endpoint = derive_flow_endpoint("  https://f.io/api/v1/prediction/abc  ")
        assert endpoint.flow_id == "abc"

    def test_rebuilt_url_round_trips(self):
        url = "https://f.io/api/v1/prediction/abc-123"
        endpoint = derive_flow_endpoint(url)

        assert build_prediction_url(endpoint.base_url, endpoint.flow_id) == url
