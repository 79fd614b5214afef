"""
Restaurant JSON API

Endpoints:
    - GET  /api/restaurants/{slug}
    - POST /api/restaurants
    - GET  /api/restaurants/{slug}/categories
    - POST /api/restaurants/{slug}/categories
    - GET  /api/restaurants/{slug}/categories/{category_slug}/items
    - POST /api/restaurants/{slug}/categories/{category_slug}/items

Reads are public. Writes need a session (401) and ownership of the
restaurant or the admin role (403). Unknown slugs give 404.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from menucup.dependencies import ensure_can_manage, get_repository, require_session
from menucup.repository import MenuRepository
from menucup.schemas import (
    CategoryCreate,
    CategoryResponse,
    ErrorResponse,
    ItemCreate,
    ItemResponse,
    RestaurantCreate,
    RestaurantResponse,
)
from menucup.session import SessionContext
from menucup.slugs import validate_slug

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/restaurants", tags=["Restaurants"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


# =============================================================================
# RESTAURANTS
# =============================================================================

@router.post(
    "",
    response_model=RestaurantResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Create Restaurant",
)
async def create_restaurant(
    payload: RestaurantCreate,
    session: SessionContext = Depends(require_session),
    repository: MenuRepository = Depends(get_repository),
):
    """Create a restaurant owned by the signed-in user."""
    slug = validate_slug(payload.slug or payload.name, restaurant=True)
    restaurant = await repository.create_restaurant(
        name=payload.name,
        slug=slug,
        owner_id=session.user_id,
    )
    return restaurant


@router.get(
    "/{slug}",
    response_model=RestaurantResponse,
    responses=ERROR_RESPONSES,
)
async def get_restaurant(
    slug: str,
    repository: MenuRepository = Depends(get_repository),
):
    return await repository.require_restaurant_by_slug(slug)


# =============================================================================
# CATEGORIES
# =============================================================================

@router.get(
    "/{slug}/categories",
    response_model=List[CategoryResponse],
    responses=ERROR_RESPONSES,
)
async def list_categories(
    slug: str,
    repository: MenuRepository = Depends(get_repository),
):
    """Categories of a restaurant, in display order."""
    restaurant = await repository.require_restaurant_by_slug(slug)
    return await repository.list_categories(restaurant.id)


@router.post(
    "/{slug}/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_category(
    slug: str,
    payload: CategoryCreate,
    session: SessionContext = Depends(require_session),
    repository: MenuRepository = Depends(get_repository),
):
    restaurant = await repository.require_restaurant_by_slug(slug)
    await ensure_can_manage(session, repository, restaurant)

    category_slug = validate_slug(payload.slug or payload.name)
    order = payload.order
    if order is None:
        order = len(await repository.list_categories(restaurant.id)) + 1

    category = await repository.create_category(
        restaurant_id=restaurant.id,
        name=payload.name,
        slug=category_slug,
        order=order,
    )
    logger.info(f"Category {category_slug} created in {slug}")
    return category


# =============================================================================
# ITEMS
# =============================================================================

@router.get(
    "/{slug}/categories/{category_slug}/items",
    response_model=List[ItemResponse],
    responses=ERROR_RESPONSES,
)
async def list_items(
    slug: str,
    category_slug: str,
    repository: MenuRepository = Depends(get_repository),
):
    """Items of one category, in display order."""
    restaurant = await repository.require_restaurant_by_slug(slug)
    category = await repository.require_category_by_slug(restaurant.id, category_slug)
    return await repository.list_items(restaurant.id, category_id=category.id)


@router.post(
    "/{slug}/categories/{category_slug}/items",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_item(
    slug: str,
    category_slug: str,
    payload: ItemCreate,
    session: SessionContext = Depends(require_session),
    repository: MenuRepository = Depends(get_repository),
):
    restaurant = await repository.require_restaurant_by_slug(slug)
    await ensure_can_manage(session, repository, restaurant)
    category = await repository.require_category_by_slug(restaurant.id, category_slug)

    item = await repository.create_item(
        restaurant_id=restaurant.id,
        category_id=category.id,
        name=payload.name,
        price=payload.price,
        description=payload.description,
        image_url=payload.image_url,
        is_available=payload.is_available,
        order=payload.order,
    )
    logger.info(f"Item '{item.name}' created in {slug}/{category_slug}")
    return item
