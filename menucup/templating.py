"""
Jinja2 template configuration shared by the HTML routers.
"""

from pathlib import Path
from typing import Any, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from menucup.core.config import get_settings
from menucup.i18n import Translator, resolve_locale
from menucup.public_menu import format_price

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["price"] = format_price


def request_locale(request: Request) -> str:
    """Locale chosen by the locale middleware, or resolved from the cookie."""
    locale = getattr(request.state, "locale", None)
    if locale:
        return locale
    return resolve_locale(request.cookies.get(get_settings().locale_cookie_name))


def render(
    request: Request,
    name: str,
    context: Optional[dict[str, Any]] = None,
    status_code: int = 200,
):
    locale = request_locale(request)
    page = {
        "locale": locale,
        "t": Translator(locale),
        "app_name": get_settings().app_name,
        **(context or {}),
    }
    return templates.TemplateResponse(request, name, page, status_code=status_code)
