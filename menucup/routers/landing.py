"""
Marketing landing page, locale switch and the demo-request form.
"""

import logging
from typing import Optional
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError

from menucup.core.config import get_settings
from menucup.i18n import resolve_locale
from menucup.schemas import LeadRequest, LeadResponse
from menucup.services.email import BaseEmailService, Lead, get_email_service
from menucup.templating import render

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(tags=["Landing"])

LOCALE_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


def get_email() -> BaseEmailService:
    return get_email_service()


@router.get("/", include_in_schema=False)
async def landing_page(request: Request):
    return render(request, "landing.html", {
        "languages": [
            {"code": "en", "label": "English", "flag": "🇬🇧"},
            {"code": "mk", "label": "Macedonian", "flag": "🇲🇰"},
        ],
    })


def same_site_path(referer: Optional[str]) -> str:
    """Path and query of a Referer, never another host."""
    if not referer:
        return "/"
    parts = urlsplit(referer)
    path = parts.path
    if not path.startswith("/") or path.startswith("//") or "\\" in path:
        return "/"
    return f"{path}?{parts.query}" if parts.query else path


@router.get("/locale/{code}", include_in_schema=False)
async def set_locale(code: str, request: Request) -> RedirectResponse:
    """Store the chosen locale and go back where the visitor came from."""
    locale = resolve_locale(code)
    target = same_site_path(request.headers.get("referer"))
    response = RedirectResponse(target, status_code=303)
    response.set_cookie(
        settings.locale_cookie_name,
        locale,
        max_age=LOCALE_COOKIE_MAX_AGE,
        samesite="lax",
    )
    return response


@router.post("/contact", response_model=LeadResponse, tags=["Landing"])
async def contact(
    full_name: str = Form("", alias="fullName"),
    email: str = Form(""),
    company_name: str = Form("", alias="companyName"),
    email_service: BaseEmailService = Depends(get_email),
):
    """Send a demo request to the leads inbox."""
    try:
        lead = LeadRequest(fullName=full_name.strip(), email=email.strip(), companyName=company_name.strip())
    except PydanticValidationError:
        return JSONResponse(status_code=400, content={"success": False})

    if not settings.leads_recipient:
        logger.error("LEADS_RECIPIENT is not configured; lead dropped")
        return JSONResponse(status_code=500, content={"success": False})

    result = await email_service.send_lead_email(
        settings.leads_recipient,
        Lead(full_name=lead.full_name, email=lead.email, company_name=lead.company_name),
    )
    if not result.success:
        logger.error(f"Lead email failed: {result.error_message}")
        return JSONResponse(status_code=502, content={"success": False})

    logger.info(f"Lead from {lead.company_name} delivered")
    return {"success": True}
