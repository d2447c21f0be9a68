"""Student-facing HTTP routes: registration, editing, service pages."""

from .edit import router as edit_router
from .registration import router as registration_router
from .site import router as site_router

__all__ = ["registration_router", "edit_router", "site_router"]
