"""
Public themed menu pages. Registered last: both routes are catch-alls.
"""

import logging

from fastapi import APIRouter, Depends, Request

from menucup.core.config import get_settings
from menucup.dependencies import get_repository
from menucup.errors import NotFoundError
from menucup.public_menu import build_category_page, build_restaurant_menu
from menucup.repository import MenuRepository
from menucup.templating import render

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(tags=["Public Menu"])


def not_found_page(request: Request, message: str):
    return render(request, "not_found.html", {"message": message}, status_code=404)


@router.get("/{restaurant_slug}", include_in_schema=False)
async def restaurant_menu(
    restaurant_slug: str,
    request: Request,
    repository: MenuRepository = Depends(get_repository),
):
    try:
        menu = await build_restaurant_menu(
            repository,
            restaurant_slug,
            show_unavailable=settings.public_menu_show_unavailable,
        )
    except NotFoundError as e:
        return not_found_page(request, e.message)
    return render(request, "restaurant_menu.html", {"menu": menu})


@router.get("/{restaurant_slug}/{category_slug}", include_in_schema=False)
async def category_page(
    restaurant_slug: str,
    category_slug: str,
    request: Request,
    repository: MenuRepository = Depends(get_repository),
):
    try:
        menu = await build_category_page(repository, restaurant_slug, category_slug)
    except NotFoundError as e:
        return not_found_page(request, e.message)
    return render(request, "category_page.html", {
        "menu": menu,
        "category": menu.categories[0],
    })
