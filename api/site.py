"""
Service-level routes.

- GET /health    liveness with service name and timestamp
- GET /policies  static usage policy
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from config import Config

from .pages import render_policies_page

router = APIRouter(tags=["Service"])


@router.get("/health")
async def health():
    """Health check. Does not touch the store or any flow endpoint."""
    return {
        "status": "healthy",
        "service": Config.SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }


@router.get("/policies", response_class=HTMLResponse)
async def policies() -> HTMLResponse:
    return HTMLResponse(render_policies_page(Config.SERVICE_NAME))
