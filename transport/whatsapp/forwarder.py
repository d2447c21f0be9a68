"""
Flow Forwarder

POSTs a composed question to a student's flow endpoint.
No retries. No response parsing. Never raises.
"""

import logging
from typing import Optional

import httpx

from .schemas import Delivered, Failed, FlowPayload, ForwardResult

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "WhatsApp-Webhook-Proxy/1.0"


class FlowForwarder:
    """
    Fire-and-forget HTTP client for flow endpoints.

    Every outcome (2xx, non-2xx, timeout, connection error) comes back as a
    ForwardResult. The flow's answer body is discarded.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            timeout: Per-request timeout in seconds
            user_agent: User-Agent header sent downstream
            transport: Optional httpx transport (tests inject MockTransport)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    async def forward(self, url: str, payload: FlowPayload) -> ForwardResult:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.post(url, json=payload.model_dump(), headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"Flow request timed out: {url}", extra={"error": str(e)})
            return Failed(reason=f"timeout: {e}")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Flow request failed: {url}: {e}", extra={"error": str(e)})
            return Failed(reason=f"request error: {e}")
        except UnicodeEncodeError as e:
            # Lone surrogates from truncated emoji cannot be sent as UTF-8
            logger.warning(f"Flow payload not encodable: {url}: {e}")
            return Failed(reason=f"payload not encodable: {e.reason}")

        if not response.is_success:
            logger.warning(
                f"Flow returned {response.status_code}: {url}",
                extra={
                    "status_code": response.status_code,
                    "error_body": response.text[:500],
                },
            )
            return Failed(reason=f"HTTP {response.status_code}", status_code=response.status_code)

        logger.info(f"Flow accepted message: {url}", extra={"status_code": response.status_code})
        return Delivered(status_code=response.status_code)
