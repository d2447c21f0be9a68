"""
Registration routes.

- GET  /                         registration form
- POST /                         create a StudentConfig (form-encoded)
- POST /api/check-phone          live duplicate probe
- POST /api/verify-registration  post-write confirmation
"""

import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, Field

from config import Config
from infra.bootstrap import AppContext, get_app_context
from store.base import StoreUnavailableError
from students.errors import StudentConfigError
from students.models import StudentConfigForm

from .pages import render_error_page, render_registration_page, render_success_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Registration"])


class PhoneLookupRequest(BaseModel):
    phone_number_id: Optional[Union[str, int]] = Field(None, alias="phoneNumberId")

    @property
    def key(self) -> str:
        if self.phone_number_id is None:
            return ""
        return str(self.phone_number_id).strip()


def public_webhook_url(request: Request) -> str:
    """Shared webhook URL students paste into the Meta dashboard."""
    base = Config.PUBLIC_BASE_URL or str(request.base_url)
    return f"{base.rstrip('/')}/webhook/"


@router.get("/", response_class=HTMLResponse)
async def registration_form() -> HTMLResponse:
    return HTMLResponse(render_registration_page())


@router.post("/", response_class=HTMLResponse)
async def register_student(
    request: Request,
    studentName: str = Form(""),
    phoneNumberId: str = Form(""),
    completeFlowiseUrl: str = Form(""),
    accessToken: str = Form(""),
    webhookVerifyToken: Optional[str] = Form(None),
    context: AppContext = Depends(get_app_context),
) -> HTMLResponse:
    """Validate and store a registration; render the success or error page."""
    form = StudentConfigForm(
        studentName=studentName,
        phoneNumberId=phoneNumberId,
        completeFlowiseUrl=completeFlowiseUrl,
        accessToken=accessToken,
        webhookVerifyToken=webhookVerifyToken,
    )

    try:
        record = await context.registration().register(form)
    except StudentConfigError as e:
        logger.info(f"Registration rejected: {type(e).__name__}")
        return HTMLResponse(render_error_page(e.message), status_code=status.HTTP_400_BAD_REQUEST)
    except StoreUnavailableError as e:
        logger.error(f"Registration failed, store unavailable: {e}")
        return HTMLResponse(
            render_error_page("El almacenamiento no está disponible. Intenta de nuevo."),
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return HTMLResponse(render_success_page(record, public_webhook_url(request)))


@router.post("/api/check-phone")
async def check_phone(
    body: PhoneLookupRequest,
    context: AppContext = Depends(get_app_context),
) -> JSONResponse:
    """{exists, studentName?} for live validation. 400 if phoneNumberId is missing."""
    if not body.key:
        return JSONResponse(
            {"error": "Phone Number ID requerido"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        result = await context.registration().check_phone_exists(body.key)
    except StoreUnavailableError as e:
        logger.error(f"check-phone failed: {e}")
        return JSONResponse(
            {"error": "Error verificando Phone Number ID"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return JSONResponse(result)


@router.post("/api/verify-registration")
async def verify_registration(
    body: PhoneLookupRequest,
    context: AppContext = Depends(get_app_context),
) -> JSONResponse:
    """{exists, valid, studentName?, registeredAt?} for the stored record."""
    if not body.key:
        return JSONResponse(
            {"error": "Phone Number ID requerido"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        result = await context.registration().verify_registration(body.key)
    except StoreUnavailableError as e:
        logger.error(f"verify-registration failed: {e}")
        return JSONResponse(
            {"exists": False, "valid": False, "error": "Error verificando registro"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return JSONResponse(result)
