"""
Configuration edit routes.

- GET  /edit   edit form
- POST /edit   JSON {action: "authenticate", phoneNumberId, verifyToken}
               → current record (200) or {error} with 400/401/404
               form  action=update + full field set
               → success page, or {error} with 400
"""

import json
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response

from infra.bootstrap import AppContext, get_app_context
from store.base import StoreUnavailableError
from students.errors import StudentConfigError
from students.models import StudentConfigForm

from .pages import render_edit_page, render_success_page
from .registration import public_webhook_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Edit"])


@router.get("/edit", response_class=HTMLResponse)
async def edit_form() -> HTMLResponse:
    return HTMLResponse(render_edit_page())


@router.post("/edit")
async def edit_config(
    request: Request,
    context: AppContext = Depends(get_app_context),
) -> Response:
    """Dispatch on content type: JSON authenticates, form data updates."""
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            body = json.loads(await request.body())
        except (json.JSONDecodeError, UnicodeDecodeError):
            return _error("JSON inválido", status.HTTP_400_BAD_REQUEST)

        if isinstance(body, dict) and body.get("action") == "authenticate":
            return await _authenticate(body, context)
    else:
        form = await request.form()
        if form.get("action") == "update":
            return await _update(request, form, context)

    return PlainTextResponse("Bad Request", status_code=status.HTTP_400_BAD_REQUEST)


async def _authenticate(body: dict, context: AppContext) -> JSONResponse:
    phone_number_id = str(body.get("phoneNumberId") or "").strip()
    verify_token = str(body.get("verifyToken") or "")

    try:
        record = await context.editor().authenticate(phone_number_id, verify_token)
    except StudentConfigError as e:
        return _error(e.message, e.status_code)
    except StoreUnavailableError as e:
        logger.error(f"Edit authentication failed, store unavailable: {e}")
        return _error("El almacenamiento no está disponible", status.HTTP_503_SERVICE_UNAVAILABLE)

    # Full record, secrets included, so the page can pre-fill every field.
    return JSONResponse(record.to_public_dict())


async def _update(request: Request, form, context: AppContext) -> Response:
    phone_number_id = str(form.get("phoneNumberId") or "").strip()
    verify_token = str(form.get("verifyToken") or "")
    submitted = StudentConfigForm(
        studentName=str(form.get("studentName") or ""),
        phoneNumberId=phone_number_id,
        completeFlowiseUrl=str(form.get("completeFlowiseUrl") or ""),
        accessToken=str(form.get("accessToken") or ""),
        webhookVerifyToken=str(form.get("webhookVerifyToken") or ""),
    )

    try:
        record = await context.editor().update(phone_number_id, verify_token, submitted)
    except StudentConfigError as e:
        logger.info(f"Edit rejected: {type(e).__name__}, phone_number_id={phone_number_id}")
        return _error(e.message, status.HTTP_400_BAD_REQUEST)
    except StoreUnavailableError as e:
        logger.error(f"Edit failed, store unavailable: {e}")
        return _error("El almacenamiento no está disponible", status.HTTP_503_SERVICE_UNAVAILABLE)

    return HTMLResponse(render_success_page(record, public_webhook_url(request)))


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)
