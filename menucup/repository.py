"""
Menu Repository

All SQL for restaurants, categories, items and profiles lives here.
Callers get ORM rows back; database failures surface as BackendError,
unique-slug collisions as ConflictError.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from typing import Any, Iterable, Optional

from sqlalchemy import select, delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from menucup.errors import BackendError, ConflictError, NotFoundError, ValidationError
from menucup.models import (
    DEFAULT_BRANDING,
    MenuCategory,
    MenuItem,
    Profile,
    ProfileRole,
    Restaurant,
)

logger = logging.getLogger(__name__)

RESTAURANT_SETTINGS_FIELDS = frozenset({
    "est_year",
    "subtitle",
    "slogan",
    "description",
    "logo_url",
    "appearance",
    "background_color",
    "accent_color",
    "card_bg_color",
    "text_color",
    "muted_text_color",
    "background_image_url",
    "qr_code_url",
})

ITEM_UPDATE_FIELDS = frozenset({
    "name",
    "description",
    "price",
    "image_url",
    "is_available",
    "category_id",
    "order",
})


class MenuRepository:
    """
    Data access for one database session.

    Writes commit immediately; a failed write is rolled back before
    the error is raised.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    async def _scalars(self, query) -> list[Any]:
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Query failed: {e}")
            raise BackendError("Database query failed") from e
        return list(result.scalars().all())

    async def _scalar(self, query) -> Any:
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Query failed: {e}")
            raise BackendError("Database query failed") from e
        return result.scalar_one_or_none()

    async def _commit(self, conflict_message: str = "Already exists") -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Integrity violation: {e.orig}")
            raise ConflictError(conflict_message) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Commit failed: {e}")
            raise BackendError("Database write failed") from e

    # =========================================================================
    # PROFILES
    # =========================================================================

    async def get_role(self, user_id: str) -> ProfileRole:
        """Role for a user; a missing profile means owner."""
        profile = await self._scalar(select(Profile).where(Profile.id == user_id))
        if profile is None:
            return ProfileRole.OWNER
        return profile.role

    async def set_role(self, user_id: str, role: ProfileRole) -> Profile:
        profile = await self._scalar(select(Profile).where(Profile.id == user_id))
        if profile is None:
            profile = Profile(id=user_id, role=role)
            self.db.add(profile)
        else:
            profile.role = role
        await self._commit()
        return profile

    # =========================================================================
    # RESTAURANTS
    # =========================================================================

    async def list_restaurants(self, owner_id: Optional[str] = None) -> list[Restaurant]:
        """Newest first; all restaurants when owner_id is None."""
        query = select(Restaurant).order_by(Restaurant.created_at.desc())
        if owner_id is not None:
            query = query.where(Restaurant.owner_id == owner_id)
        return await self._scalars(query)

    async def get_restaurant(self, restaurant_id: str) -> Optional[Restaurant]:
        return await self._scalar(select(Restaurant).where(Restaurant.id == restaurant_id))

    async def get_restaurant_by_slug(self, slug: str) -> Optional[Restaurant]:
        return await self._scalar(select(Restaurant).where(Restaurant.slug == slug))

    async def require_restaurant_by_slug(self, slug: str) -> Restaurant:
        restaurant = await self.get_restaurant_by_slug(slug)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    async def create_restaurant(self, name: str, slug: str, owner_id: str) -> Restaurant:
        restaurant = Restaurant(name=name, slug=slug, owner_id=owner_id, **DEFAULT_BRANDING)
        self.db.add(restaurant)
        await self._commit(f"Restaurant slug '{slug}' is already taken")
        await self.db.refresh(restaurant)
        logger.info(f"Restaurant created: {slug} (owner {owner_id})")
        return restaurant

    async def update_restaurant(self, restaurant_id: str, changes: dict[str, Any]) -> Restaurant:
        """Write settings/branding columns; unknown keys are rejected."""
        unknown = set(changes) - RESTAURANT_SETTINGS_FIELDS
        if unknown:
            raise ValidationError(f"Unknown restaurant fields: {sorted(unknown)}")

        restaurant = await self.get_restaurant(restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        for key, value in changes.items():
            setattr(restaurant, key, value)
        await self._commit()
        await self.db.refresh(restaurant)
        return restaurant

    async def delete_restaurant(self, restaurant_id: str) -> None:
        try:
            await self.db.execute(delete(Restaurant).where(Restaurant.id == restaurant_id))
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise BackendError("Database delete failed") from e
        await self._commit()

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    async def list_categories(self, restaurant_id: str) -> list[MenuCategory]:
        return await self._scalars(
            select(MenuCategory)
            .where(MenuCategory.restaurant_id == restaurant_id)
            .order_by(MenuCategory.order.asc(), MenuCategory.created_at.asc())
        )

    async def get_category(self, category_id: str) -> Optional[MenuCategory]:
        return await self._scalar(select(MenuCategory).where(MenuCategory.id == category_id))

    async def get_category_by_slug(self, restaurant_id: str, slug: str) -> Optional[MenuCategory]:
        return await self._scalar(
            select(MenuCategory).where(
                MenuCategory.restaurant_id == restaurant_id,
                MenuCategory.slug == slug,
            )
        )

    async def require_category_by_slug(self, restaurant_id: str, slug: str) -> MenuCategory:
        category = await self.get_category_by_slug(restaurant_id, slug)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def create_category(
        self,
        restaurant_id: str,
        name: str,
        slug: str,
        order: int = 0,
    ) -> MenuCategory:
        category = MenuCategory(restaurant_id=restaurant_id, name=name, slug=slug, order=order)
        self.db.add(category)
        await self._commit(f"Category slug '{slug}' already exists")
        await self.db.refresh(category)
        return category

    async def update_category(self, category_id: str, changes: dict[str, Any]) -> MenuCategory:
        category = await self.get_category(category_id)
        if category is None:
            raise NotFoundError("Category not found")
        for key, value in changes.items():
            if key not in ("name", "slug", "order"):
                raise ValidationError(f"Unknown category field: {key}")
            setattr(category, key, value)
        await self._commit("Category slug already exists")
        await self.db.refresh(category)
        return category

    async def delete_category(self, category_id: str) -> None:
        """Items of the category go with it (ON DELETE CASCADE)."""
        try:
            result = await self.db.execute(delete(MenuCategory).where(MenuCategory.id == category_id))
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise BackendError("Database delete failed") from e
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError("Category not found")
        await self._commit()

    # =========================================================================
    # ITEMS
    # =========================================================================

    async def list_items(
        self,
        restaurant_id: str,
        category_id: Optional[str] = None,
        available_only: bool = False,
    ) -> list[MenuItem]:
        query = select(MenuItem).where(MenuItem.restaurant_id == restaurant_id)
        if category_id is not None:
            query = query.where(MenuItem.category_id == category_id)
        if available_only:
            query = query.where(MenuItem.is_available.is_(True))
        query = query.order_by(MenuItem.order.asc(), MenuItem.created_at.asc())
        return await self._scalars(query)

    async def get_item(self, item_id: str) -> Optional[MenuItem]:
        return await self._scalar(select(MenuItem).where(MenuItem.id == item_id))

    async def _check_category_scope(self, restaurant_id: str, category_id: str) -> None:
        category = await self.get_category(category_id)
        if category is None or category.restaurant_id != restaurant_id:
            raise ValidationError("Category does not belong to this restaurant")

    async def create_item(
        self,
        restaurant_id: str,
        category_id: str,
        name: str,
        price: float,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        is_available: bool = True,
        order: int = 0,
    ) -> MenuItem:
        await self._check_category_scope(restaurant_id, category_id)
        item = MenuItem(
            restaurant_id=restaurant_id,
            category_id=category_id,
            name=name,
            description=description,
            price=price,
            image_url=image_url,
            is_available=is_available,
            order=order,
        )
        self.db.add(item)
        await self._commit()
        await self.db.refresh(item)
        return item

    async def update_item(self, item_id: str, changes: dict[str, Any]) -> MenuItem:
        unknown = set(changes) - ITEM_UPDATE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown item fields: {sorted(unknown)}")

        item = await self.get_item(item_id)
        if item is None:
            raise NotFoundError("Item not found")
        if changes.get("category_id") and changes["category_id"] != item.category_id:
            await self._check_category_scope(item.restaurant_id, changes["category_id"])
        for key, value in changes.items():
            setattr(item, key, value)
        await self._commit()
        await self.db.refresh(item)
        return item

    async def delete_item(self, item_id: str) -> None:
        try:
            result = await self.db.execute(delete(MenuItem).where(MenuItem.id == item_id))
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise BackendError("Database delete failed") from e
        if result.rowcount == 0:
            await self.db.rollback()
            raise NotFoundError("Item not found")
        await self._commit()

    # =========================================================================
    # ORDERING
    # =========================================================================

    async def update_orders(self, model: type, orders: Iterable[tuple[str, int]]) -> None:
        """
        Write new order values in a single transaction.

        Args:
            model: MenuCategory or MenuItem
            orders: (row id, order) pairs
        """
        if model not in (MenuCategory, MenuItem):
            raise ValidationError("Only categories and items can be reordered")
        try:
            for row_id, order in orders:
                await self.db.execute(
                    update(model).where(model.id == row_id).values(order=order)
                )
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Reorder failed: {e}")
            raise BackendError("Failed to save order") from e
        await self._commit()
