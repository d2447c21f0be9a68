"""Split a complete flow prediction URL into base URL and flow id."""

from typing import NamedTuple
from urllib.parse import urlsplit

from students.errors import InvalidFlowUrl

PREDICTION_PATH = "/api/v1/prediction/"


class FlowEndpoint(NamedTuple):
    base_url: str
    flow_id: str


def derive_flow_endpoint(complete_url: str) -> FlowEndpoint:
    """
    Parse `scheme://host/.../prediction/<flowId>[/...]`.

    The flow id is the path segment right after the first segment equal to
    "prediction"; the base URL is `scheme://host[:port]`.

    Raises:
        InvalidFlowUrl: not an absolute URL, no "prediction" segment, or
            "prediction" is the last segment.
    """
    try:
        parts = urlsplit((complete_url or "").strip())
    except ValueError:
        raise InvalidFlowUrl(complete_url)

    if not parts.scheme or not parts.netloc:
        raise InvalidFlowUrl(complete_url)

    segments = parts.path.split("/")
    try:
        index = segments.index("prediction")
    except ValueError:
        raise InvalidFlowUrl(complete_url)

    if index >= len(segments) - 1:
        raise InvalidFlowUrl(complete_url)

    return FlowEndpoint(
        base_url=f"{parts.scheme}://{parts.netloc}",
        flow_id=segments[index + 1],
    )


def build_prediction_url(base_url: str, flow_id: str) -> str:
    """Rebuild the downstream endpoint from its stored halves."""
    return f"{base_url}{PREDICTION_PATH}{flow_id}"
