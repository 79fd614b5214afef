"""
Dashboard: menu-builder page and its JSON actions.

Every JSON endpoint drives the session's MenuBuilder and answers with
its ActionResult. The HTML page redirects to /login without a session;
the JSON endpoints answer 401.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError

from menucup.core.config import get_settings
from menucup.dependencies import (
    get_menu_builder,
    get_optional_session,
    get_repository,
    get_storage,
    get_store,
)
from menucup.errors import NotFoundError, ValidationError
from menucup.menu_builder import ActionResult, MenuBuilder
from menucup.repository import MenuRepository
from menucup.schemas import (
    CategoryUpdate,
    ItemCreate,
    ItemUpdate,
    MenuSnapshot,
    MoveRequest,
    ReorderRequest,
    RestaurantSettingsUpdate,
)
from menucup.services.storage import BaseStorageService, Upload
from menucup.session import SessionContext, SessionStore
from menucup.templating import render

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


# =============================================================================
# HELPERS
# =============================================================================

def action_response(result: ActionResult, failure_status: int = 400) -> JSONResponse:
    return JSONResponse(
        status_code=200 if result.success else failure_status,
        content=result.to_dict(),
    )


async def open_restaurant(builder: MenuBuilder, restaurant_id: str, refresh: bool = False) -> None:
    result = await builder.ensure_selected(restaurant_id, refresh=refresh)
    if not result.success:
        if result.error == "Restaurant not found":
            raise NotFoundError(result.error)
        raise ValidationError(result.error)


def snapshot(builder: MenuBuilder) -> MenuSnapshot:
    return MenuSnapshot(
        restaurant=builder.selected_restaurant,
        categories=builder.categories,
        items=builder.items,
        filtered_items=builder.filtered_items,
        search_term=builder.search_term,
        active_filter=builder.active_filter,
        order_dirty=builder.order_dirty,
    )


async def read_upload(upload: Optional[UploadFile]) -> Optional[Upload]:
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    return Upload(
        filename=upload.filename,
        content=content,
        content_type=upload.content_type or "application/octet-stream",
    )


def _require_category(builder: MenuBuilder, category_id: str) -> None:
    if not any(c.id == category_id for c in builder.categories):
        raise NotFoundError("Category not found")


# =============================================================================
# PAGES
# =============================================================================

@router.get("", include_in_schema=False)
async def dashboard_root() -> RedirectResponse:
    return RedirectResponse("/dashboard/menu-builder", status_code=303)


@router.get("/menu-builder", include_in_schema=False)
async def menu_builder_page(
    request: Request,
    restaurant: Optional[str] = Query(None),
    q: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    session: Optional[SessionContext] = Depends(get_optional_session),
    repository: MenuRepository = Depends(get_repository),
    storage: BaseStorageService = Depends(get_storage),
    store: SessionStore = Depends(get_store),
):
    """Serve the menu builder; anonymous visitors go to the login page."""
    if session is None:
        return RedirectResponse("/login", status_code=303)

    builder = await get_menu_builder(session, repository, storage, store)
    await builder.fetch_restaurants()

    target = restaurant or (builder.restaurants[0].id if builder.restaurants else None)
    if target:
        await builder.ensure_selected(target, refresh=True)
    builder.set_search_term(q)
    builder.set_active_filter(category)

    return render(request, "menu_builder.html", {
        "session": session,
        "builder": builder,
        "public_base_url": settings.app_base_url.rstrip("/"),
    })


# =============================================================================
# RESTAURANTS
# =============================================================================

@router.get("/api/restaurants")
async def list_restaurants(builder: MenuBuilder = Depends(get_menu_builder)) -> JSONResponse:
    result = await builder.fetch_restaurants()
    return action_response(result, failure_status=500)


@router.get("/api/restaurants/{restaurant_id}/menu", response_model=MenuSnapshot)
async def menu_snapshot(
    restaurant_id: str,
    q: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    refresh: bool = Query(False),
    builder: MenuBuilder = Depends(get_menu_builder),
) -> MenuSnapshot:
    """Current categories and items, with search and filter applied."""
    await open_restaurant(builder, restaurant_id, refresh=refresh)
    if q is not None:
        builder.set_search_term(q)
    if category is not None:
        builder.set_active_filter(category)
    return snapshot(builder)


@router.post("/api/restaurants/{restaurant_id}/settings")
async def save_settings(
    restaurant_id: str,
    appearance: str = Form("minimal"),
    background_color: str = Form("#ffffff"),
    accent_color: str = Form("#6366f1"),
    card_bg_color: str = Form("#ffffff"),
    text_color: str = Form("#000000"),
    muted_text_color: str = Form("#6b7280"),
    est_year: Optional[str] = Form(None),
    subtitle: Optional[str] = Form(None),
    slogan: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    background: Optional[UploadFile] = File(None),
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    try:
        branding = RestaurantSettingsUpdate(
            appearance=appearance,
            background_color=background_color,
            accent_color=accent_color,
            card_bg_color=card_bg_color,
            text_color=text_color,
            muted_text_color=muted_text_color,
            est_year=est_year or None,
            subtitle=subtitle or None,
            slogan=slogan or None,
            description=description or None,
        )
    except PydanticValidationError as e:
        raise ValidationError("Invalid settings") from e
    result = await builder.save_settings(
        branding,
        logo=await read_upload(logo),
        background=await read_upload(background),
    )
    return action_response(result)


@router.post("/api/restaurants/{restaurant_id}/qr-code")
async def generate_qr_code(
    restaurant_id: str,
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    return action_response(await builder.generate_qr_code(), failure_status=500)


# =============================================================================
# CATEGORIES
# =============================================================================

@router.post("/api/restaurants/{restaurant_id}/categories")
async def create_category(
    restaurant_id: str,
    payload: CategoryUpdate,
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    result = await builder.create_category(payload.name)
    response = action_response(result)
    if result.success:
        response.status_code = 201
    return response


@router.patch("/api/restaurants/{restaurant_id}/categories/{category_id}")
async def update_category(
    restaurant_id: str,
    category_id: str,
    payload: CategoryUpdate,
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    _require_category(builder, category_id)
    return action_response(await builder.update_category(category_id, payload.name))


@router.delete("/api/restaurants/{restaurant_id}/categories/{category_id}")
async def delete_category(
    restaurant_id: str,
    category_id: str,
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    _require_category(builder, category_id)
    return action_response(await builder.delete_category_action(category_id))


@router.post("/api/restaurants/{restaurant_id}/categories/move")
async def move_category(
    restaurant_id: str,
    payload: MoveRequest,
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    result = await builder.move_category(payload.index, payload.direction.value)
    return action_response(result)


@router.post("/api/restaurants/{restaurant_id}/categories/reorder")
async def reorder_categories(
    restaurant_id: str,
    payload: ReorderRequest,
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    result = await builder.reorder_categories(payload.from_index, payload.to_index)
    return action_response(result)


# =============================================================================
# ITEMS
# =============================================================================

@router.post("/api/restaurants/{restaurant_id}/items")
async def create_item(
    restaurant_id: str,
    payload: ItemCreate,
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    if not payload.category_id:
        raise ValidationError("category_id is required")
    _require_category(builder, payload.category_id)
    result = await builder.create_item(
        category_id=payload.category_id,
        name=payload.name,
        price=payload.price,
        description=payload.description,
        image_url=payload.image_url,
        is_available=payload.is_available,
    )
    response = action_response(result)
    if result.success:
        response.status_code = 201
    return response


def _require_item(builder: MenuBuilder, item_id: str) -> None:
    if not any(i.id == item_id for i in builder.items):
        raise NotFoundError("Item not found")


@router.patch("/api/restaurants/{restaurant_id}/items/{item_id}")
async def update_item(
    restaurant_id: str,
    item_id: str,
    payload: ItemUpdate,
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    _require_item(builder, item_id)
    changes: dict[str, Any] = payload.model_dump(exclude_unset=True)
    if changes.get("category_id"):
        _require_category(builder, changes["category_id"])
    return action_response(await builder.update_item(item_id, changes))


@router.delete("/api/restaurants/{restaurant_id}/items/{item_id}")
async def delete_item(
    restaurant_id: str,
    item_id: str,
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    _require_item(builder, item_id)
    return action_response(await builder.delete_item_action(item_id))


@router.post("/api/restaurants/{restaurant_id}/items/move")
async def move_item(
    restaurant_id: str,
    payload: MoveRequest,
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    result = await builder.move_item(payload.index, payload.direction.value)
    return action_response(result)


@router.post("/api/restaurants/{restaurant_id}/items/{item_id}/image")
async def upload_item_image(
    restaurant_id: str,
    item_id: str,
    image: UploadFile = File(...),
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    _require_item(builder, item_id)
    upload = await read_upload(image)
    if upload is None:
        raise ValidationError("No file uploaded")
    return action_response(await builder.upload_item_image(item_id, upload))


@router.post("/api/restaurants/{restaurant_id}/order/save")
async def save_order(
    restaurant_id: str,
    builder: MenuBuilder = Depends(get_menu_builder),
) -> JSONResponse:
    await open_restaurant(builder, restaurant_id)
    return action_response(await builder.save_order(), failure_status=500)


# =============================================================================
# SESSION
# =============================================================================

@router.post("/api/logout")
async def logout(builder: MenuBuilder = Depends(get_menu_builder)) -> JSONResponse:
    result = await builder.logout()
    response = action_response(result)
    response.delete_cookie(settings.session_cookie_name)
    return response

