"""
Menu Builder State Module

Holds the dashboard's working state for one signed-in user:
restaurants visible to them, the selected restaurant, its categories
and items, and the search/filter applied to the item list.

Every mutating action returns an ActionResult. Remote calls (database,
object storage) happen first; local state only changes after they
succeed, or is put back to its snapshot when they fail.

Reorder persistence follows REORDER_PERSIST_MODE:
    - immediate: changed order values are written on every move
    - on_save: moves only mark the lists dirty until save_order()

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from menucup.core.config import ReorderPersistMode, Settings, get_settings
from menucup.errors import MenuCupError
from menucup.models import Appearance, MenuCategory, MenuItem
from menucup.repository import MenuRepository
from menucup.schemas import (
    CategoryResponse,
    ItemResponse,
    RestaurantResponse,
    RestaurantSettingsUpdate,
)
from menucup.services.qr import qr_service
from menucup.services.storage import BaseStorageService, Upload
from menucup.session import SessionContext, SessionStore
from menucup.slugs import generate_slug

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"

ITEM_IMAGE_TYPES = ("image/png", "image/jpeg", "image/webp", "image/gif")


class ActionStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class ActionResult:
    """
    Outcome of one menu-builder action.

    Attributes:
        status: pending while the remote call runs, then success or failure
        success: True only when status is success
        error: Message shown to the user on failure
        data: Action payload (created row, new list, etc.)
    """
    status: ActionStatus = ActionStatus.PENDING
    success: bool = False
    error: Optional[str] = None
    data: Any = None

    def succeed(self, data: Any = None) -> "ActionResult":
        self.status = ActionStatus.SUCCESS
        self.success = True
        self.error = None
        self.data = data
        return self

    def fail(self, error: str) -> "ActionResult":
        self.status = ActionStatus.FAILURE
        self.success = False
        self.error = error
        return self

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        data = self.data
        if hasattr(data, "model_dump"):
            data = data.model_dump(mode="json")
        elif isinstance(data, list):
            data = [d.model_dump(mode="json") if hasattr(d, "model_dump") else d for d in data]
        return {
            "status": self.status.value,
            "success": self.success,
            "error": self.error,
            "data": data,
        }


Direction = Union[str, int]


def _step(direction: Direction) -> int:
    """Map 'up'/'down' (or -1/+1) to a list offset."""
    if direction in ("up", -1):
        return -1
    if direction in ("down", 1):
        return 1
    raise ValueError(f"Invalid direction: {direction!r}")


class MenuBuilder:
    """Working state of the menu builder for one session."""

    def __init__(
        self,
        repository: MenuRepository,
        storage: BaseStorageService,
        session: Optional[SessionContext] = None,
        session_store: Optional[SessionStore] = None,
        settings: Optional[Settings] = None,
    ):
        self.repository = repository
        self.storage = storage
        self.session = session
        self.session_store = session_store
        self.settings = settings or get_settings()
        self.reorder_mode = self.settings.reorder_persist_mode

        self.restaurants: list[RestaurantResponse] = []
        self.selected_restaurant: Optional[RestaurantResponse] = None
        self.categories: list[CategoryResponse] = []
        self.items: list[ItemResponse] = []
        self.search_term: str = ""
        self.active_filter: str = ALL_CATEGORIES

        # Pending order writes for on_save mode: row id -> order
        self._pending_orders: dict[type, dict[str, int]] = {MenuCategory: {}, MenuItem: {}}
        self.last_actions: dict[str, ActionResult] = {}

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _begin(self, action: str) -> ActionResult:
        result = ActionResult()
        self.last_actions[action] = result
        return result

    def _fail(self, result: ActionResult, action: str, error: Union[str, MenuCupError]) -> ActionResult:
        message = error.message if isinstance(error, MenuCupError) else error
        logger.warning(f"{action} failed: {message}")
        return result.fail(message)

    def _require_restaurant(self) -> RestaurantResponse:
        if self.selected_restaurant is None:
            raise MenuCupError("No restaurant selected")
        return self.selected_restaurant

    def _sort_items(self) -> None:
        self.items.sort(key=lambda item: item.order)

    def _sort_categories(self) -> None:
        self.categories.sort(key=lambda category: category.order)

    # =========================================================================
    # RESTAURANTS
    # =========================================================================

    async def fetch_restaurants(self) -> ActionResult:
        """
        Load restaurants visible to the session, newest first.

        Admins see every restaurant; everyone else sees their own.
        """
        result = self._begin("fetch_restaurants")
        if self.session is None:
            self.restaurants = []
            return result.succeed([])

        try:
            await self.session.resolve_role(self.repository)
            rows = await self.repository.list_restaurants(
                owner_id=None if self.session.is_admin else self.session.user_id
            )
        except MenuCupError as e:
            return self._fail(result, "fetch_restaurants", e)

        self.restaurants = [RestaurantResponse.model_validate(row) for row in rows]
        if self.selected_restaurant is not None:
            self.selected_restaurant = next(
                (r for r in self.restaurants if r.id == self.selected_restaurant.id),
                None,
            )
        return result.succeed(self.restaurants)

    async def select_restaurant(self, restaurant: RestaurantResponse) -> ActionResult:
        """Select a restaurant and load its categories and items in order."""
        result = self._begin("select_restaurant")
        self.search_term = ""
        self.active_filter = ALL_CATEGORIES

        try:
            categories = await self.repository.list_categories(restaurant.id)
            items = await self.repository.list_items(restaurant.id)
        except MenuCupError as e:
            return self._fail(result, "select_restaurant", e)

        self.selected_restaurant = restaurant
        self.categories = [CategoryResponse.model_validate(row) for row in categories]
        self.items = [ItemResponse.model_validate(row) for row in items]
        self._pending_orders = {MenuCategory: {}, MenuItem: {}}
        return result.succeed(restaurant)

    async def open_restaurant(self, restaurant_id: str) -> ActionResult:
        """Fetch the visible restaurants and select one of them by id."""
        fetched = await self.fetch_restaurants()
        if not fetched.success:
            return fetched
        restaurant = next((r for r in self.restaurants if r.id == restaurant_id), None)
        if restaurant is None:
            result = self._begin("select_restaurant")
            return self._fail(result, "select_restaurant", "Restaurant not found")
        return await self.select_restaurant(restaurant)

    async def ensure_selected(self, restaurant_id: str, refresh: bool = False) -> ActionResult:
        """Keep the current state when the restaurant is already selected."""
        if (
            not refresh
            and self.selected_restaurant is not None
            and self.selected_restaurant.id == restaurant_id
        ):
            return self._begin("select_restaurant").succeed(self.selected_restaurant)
        return await self.open_restaurant(restaurant_id)

    def bind(self, repository: MenuRepository, storage: BaseStorageService) -> None:
        """Attach the current request's repository and storage."""
        self.repository = repository
        self.storage = storage

    # =========================================================================
    # SEARCH / FILTER
    # =========================================================================

    def set_search_term(self, term: Optional[str]) -> None:
        self.search_term = term or ""

    def set_active_filter(self, category_id: Optional[str]) -> None:
        self.active_filter = category_id or ALL_CATEGORIES

    @property
    def filtered_items(self) -> list[ItemResponse]:
        """Items matching the search term and the active category filter."""
        term = self.search_term.lower()
        return [
            item for item in self.items
            if term in item.name.lower()
            and (self.active_filter == ALL_CATEGORIES or item.category_id == self.active_filter)
        ]

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    async def create_category(self, name: str) -> ActionResult:
        result = self._begin("create_category")
        name = (name or "").strip()
        if not name:
            return self._fail(result, "create_category", "Category name cannot be empty")
        slug = generate_slug(name)
        if not slug:
            return self._fail(result, "create_category", "Category name must contain letters or numbers")

        try:
            restaurant = self._require_restaurant()
            row = await self.repository.create_category(
                restaurant_id=restaurant.id,
                name=name,
                slug=slug,
                order=len(self.categories) + 1,
            )
        except MenuCupError as e:
            return self._fail(result, "create_category", e)

        category = CategoryResponse.model_validate(row)
        self.categories.append(category)
        self._sort_categories()
        return result.succeed(category)

    async def update_category(self, category_id: str, name: str) -> ActionResult:
        result = self._begin("update_category")
        name = (name or "").strip()
        if not name:
            return self._fail(result, "update_category", "Category name cannot be empty")

        try:
            row = await self.repository.update_category(category_id, {"name": name})
        except MenuCupError as e:
            return self._fail(result, "update_category", e)

        category = CategoryResponse.model_validate(row)
        self.categories = [category if c.id == category_id else c for c in self.categories]
        return result.succeed(category)

    async def delete_category_action(self, category_id: str) -> ActionResult:
        """
        Delete a category remotely, then drop it and its items locally.

        Deleting the category used as the active filter resets the
        filter to "all".
        """
        result = self._begin("delete_category")
        try:
            await self.repository.delete_category(category_id)
        except MenuCupError as e:
            return self._fail(result, "delete_category", e)

        self.categories = [c for c in self.categories if c.id != category_id]
        self.items = [i for i in self.items if i.category_id != category_id]
        self._pending_orders[MenuCategory].pop(category_id, None)
        if self.active_filter == category_id:
            self.active_filter = ALL_CATEGORIES
        return result.succeed({"id": category_id})

    # =========================================================================
    # ITEMS
    # =========================================================================

    async def create_item(
        self,
        category_id: str,
        name: str,
        price: float,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        is_available: bool = True,
    ) -> ActionResult:
        result = self._begin("create_item")
        name = (name or "").strip()
        if not name:
            return self._fail(result, "create_item", "Item name cannot be empty")
        if price is None or price < 0:
            return self._fail(result, "create_item", "Price must be zero or more")

        try:
            restaurant = self._require_restaurant()
            row = await self.repository.create_item(
                restaurant_id=restaurant.id,
                category_id=category_id,
                name=name,
                price=price,
                description=description,
                image_url=image_url,
                is_available=is_available,
                order=max((i.order for i in self.items), default=0) + 1,
            )
        except MenuCupError as e:
            return self._fail(result, "create_item", e)

        item = ItemResponse.model_validate(row)
        self.items.append(item)
        self._sort_items()
        return result.succeed(item)

    async def update_item(self, item_id: str, changes: dict[str, Any]) -> ActionResult:
        result = self._begin("update_item")
        if "name" in changes:
            changes = {**changes, "name": (changes["name"] or "").strip()}
            if not changes["name"]:
                return self._fail(result, "update_item", "Item name cannot be empty")

        try:
            row = await self.repository.update_item(item_id, changes)
        except MenuCupError as e:
            return self._fail(result, "update_item", e)

        item = ItemResponse.model_validate(row)
        self.items = [item if i.id == item_id else i for i in self.items]
        return result.succeed(item)

    async def delete_item_action(self, item_id: str) -> ActionResult:
        """Delete an item remotely; local list changes only on success."""
        result = self._begin("delete_item")
        try:
            await self.repository.delete_item(item_id)
        except MenuCupError as e:
            return self._fail(result, "delete_item", e)

        self.items = [i for i in self.items if i.id != item_id]
        self._pending_orders[MenuItem].pop(item_id, None)
        return result.succeed({"id": item_id})

    # =========================================================================
    # ORDERING
    # =========================================================================

    @property
    def order_dirty(self) -> bool:
        return any(self._pending_orders.values())

    async def _reorder(
        self,
        action: str,
        model: type,
        rows: list,
        from_index: int,
        to_index: int,
    ) -> ActionResult:
        result = self._begin(action)
        if (
            not 0 <= from_index < len(rows)
            or not 0 <= to_index < len(rows)
            or from_index == to_index
        ):
            return result.succeed({"moved": False})

        snapshot = [(row, row.order) for row in rows]
        row = rows.pop(from_index)
        rows.insert(to_index, row)

        changed: list[tuple[str, int]] = []
        for position, entry in enumerate(rows, start=1):
            if entry.order != position:
                entry.order = position
                changed.append((entry.id, position))

        if self.reorder_mode == ReorderPersistMode.ON_SAVE:
            self._pending_orders[model].update(dict(changed))
            return result.succeed({"moved": True, "pending": True})

        try:
            await self.repository.update_orders(model, changed)
        except MenuCupError as e:
            rows[:] = [entry for entry, _ in snapshot]
            for entry, order in snapshot:
                entry.order = order
            return self._fail(result, action, e)

        return result.succeed({"moved": True, "pending": False})

    async def move_item(self, index: int, direction: Direction) -> ActionResult:
        """Swap an item with its neighbour; moves past either end do nothing."""
        return await self._reorder("move_item", MenuItem, self.items, index, index + _step(direction))

    async def move_category(self, index: int, direction: Direction) -> ActionResult:
        return await self._reorder(
            "move_category", MenuCategory, self.categories, index, index + _step(direction)
        )

    async def reorder_categories(self, from_index: int, to_index: int) -> ActionResult:
        """Drag-and-drop: move one category to a new position."""
        return await self._reorder("reorder_categories", MenuCategory, self.categories, from_index, to_index)

    async def save_order(self) -> ActionResult:
        """Persist every order change made since the last save."""
        result = self._begin("save_order")
        try:
            for model, orders in self._pending_orders.items():
                if orders:
                    await self.repository.update_orders(model, orders.items())
                    orders.clear()
        except MenuCupError as e:
            return self._fail(result, "save_order", e)
        return result.succeed({"saved": True})

    # =========================================================================
    # UPLOADS & SETTINGS
    # =========================================================================

    def _check_upload(self, upload: Upload) -> Optional[str]:
        if not upload.content:
            return "Uploaded file is empty"
        if len(upload.content) > self.settings.max_upload_bytes:
            return "Uploaded file is too large"
        if upload.content_type not in ITEM_IMAGE_TYPES:
            return "Only PNG, JPEG, WebP or GIF images are accepted"
        return None

    async def _store(self, bucket: str, object_name: str, upload: Upload) -> str:
        stored = await self.storage.upload(
            bucket=bucket,
            object_name=object_name,
            content=upload.content,
            content_type=upload.content_type,
        )
        if not stored.success or not stored.public_url:
            raise MenuCupError(stored.error_message or "Upload failed")
        return stored.public_url

    async def upload_item_image(self, item_id: str, upload: Upload) -> ActionResult:
        """Upload a photo to the menu-items bucket and point the item at it."""
        result = self._begin("upload_item_image")
        problem = self._check_upload(upload)
        if problem:
            return self._fail(result, "upload_item_image", problem)

        try:
            restaurant = self._require_restaurant()
            object_name = f"{restaurant.id}/{item_id}-{uuid.uuid4().hex[:8]}.{upload.extension}"
            public_url = await self._store(self.settings.menu_items_bucket, object_name, upload)
            row = await self.repository.update_item(item_id, {"image_url": public_url})
        except MenuCupError as e:
            return self._fail(result, "upload_item_image", e)

        item = ItemResponse.model_validate(row)
        self.items = [item if i.id == item_id else i for i in self.items]
        return result.succeed(item)

    async def save_settings(
        self,
        settings: Union[RestaurantSettingsUpdate, dict],
        logo: Optional[Upload] = None,
        background: Optional[Upload] = None,
    ) -> ActionResult:
        """
        Save branding for the selected restaurant.

        Logo and background go to object storage first; the public URLs
        are then written with the other fields. The restaurant list is
        re-fetched afterwards.
        """
        result = self._begin("save_settings")
        if isinstance(settings, dict):
            settings = RestaurantSettingsUpdate(**settings)

        for upload in (logo, background):
            problem = self._check_upload(upload) if upload else None
            if problem:
                return self._fail(result, "save_settings", problem)

        changes = settings.model_dump()
        changes["appearance"] = Appearance(settings.appearance.value)
        try:
            restaurant = self._require_restaurant()
            stamp = int(time.time() * 1000)
            bucket = self.settings.restaurant_assets_bucket
            if logo:
                changes["logo_url"] = await self._store(
                    bucket, f"{restaurant.id}/logo-{stamp}.{logo.extension}", logo
                )
            if background:
                changes["background_image_url"] = await self._store(
                    bucket, f"{restaurant.id}/bg-{stamp}.{background.extension}", background
                )
            row = await self.repository.update_restaurant(restaurant.id, changes)
        except MenuCupError as e:
            return self._fail(result, "save_settings", e)

        self.selected_restaurant = RestaurantResponse.model_validate(row)
        await self.fetch_restaurants()
        return result.succeed(self.selected_restaurant)

    async def generate_qr_code(self) -> ActionResult:
        """Render the public menu URL as a QR code and store it."""
        result = self._begin("generate_qr_code")
        try:
            restaurant = self._require_restaurant()
            menu_url = f"{self.settings.app_base_url.rstrip('/')}/{restaurant.slug}"
            png = qr_service.generate_qr(menu_url)
            stored = await self.storage.upload(
                bucket=self.settings.restaurant_assets_bucket,
                object_name=f"{restaurant.slug}/qr-code.png",
                content=png,
                content_type="image/png",
                upsert=True,
            )
            if not stored.success:
                raise MenuCupError(stored.error_message or "QR code upload failed")
            row = await self.repository.update_restaurant(
                restaurant.id, {"qr_code_url": stored.public_url}
            )
        except MenuCupError as e:
            return self._fail(result, "generate_qr_code", e)

        self.selected_restaurant = RestaurantResponse.model_validate(row)
        self.restaurants = [
            self.selected_restaurant if r.id == row.id else r for r in self.restaurants
        ]
        return result.succeed({"qr_code_url": stored.public_url, "menu_url": menu_url})

    # =========================================================================
    # SESSION
    # =========================================================================

    async def logout(self) -> ActionResult:
        """Close the session and clear all working state."""
        result = self._begin("logout")
        if self.session is None:
            return result.succeed()
        if self.session_store is not None:
            await self.session_store.close(self.session.access_token)
        self.session = None
        self.restaurants = []
        self.selected_restaurant = None
        self.categories = []
        self.items = []
        self.search_term = ""
        self.active_filter = ALL_CATEGORIES
        return result.succeed()
