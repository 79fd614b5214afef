"""
Login and logout pages (cookie session).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from menucup.core.config import get_settings
from menucup.dependencies import extract_token, get_optional_session, get_store
from menucup.session import SessionContext, SessionStore
from menucup.templating import render

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(tags=["Auth"])

DASHBOARD_URL = "/dashboard/menu-builder"


@router.get("/login", include_in_schema=False)
async def login_page(
    request: Request,
    session: Optional[SessionContext] = Depends(get_optional_session),
):
    if session is not None:
        return RedirectResponse(DASHBOARD_URL, status_code=303)
    return render(request, "login.html", {"error": None, "email": ""})


@router.post("/login", include_in_schema=False)
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    store: SessionStore = Depends(get_store),
):
    result, session = await store.sign_in(email.strip(), password)
    if session is None:
        logger.info(f"Login failed for {email}")
        return render(
            request,
            "login.html",
            {"error": result.error_message or "Invalid login credentials", "email": email},
            status_code=401,
        )

    response = RedirectResponse(DASHBOARD_URL, status_code=303)
    response.set_cookie(
        settings.session_cookie_name,
        session.access_token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60,
    )
    return response


@router.post("/logout", include_in_schema=False)
async def logout(request: Request, store: SessionStore = Depends(get_store)):
    await store.close(extract_token(request))
    response = RedirectResponse("/login", status_code=303)
    response.delete_cookie(settings.session_cookie_name)
    return response
