"""
Public menu view models.

Resolves a restaurant (and optionally one category) by slug and groups
its items into what the public templates render.
"""

import logging
from dataclasses import dataclass, field
from itertools import groupby
from typing import Optional

from menucup.errors import NotFoundError
from menucup.models import Appearance, DEFAULT_BRANDING, MenuCategory, MenuItem, Restaurant
from menucup.repository import MenuRepository

logger = logging.getLogger(__name__)


def format_price(price: Optional[float]) -> str:
    """Render a price as ``$X.XX``."""
    return f"${(price or 0):.2f}"


@dataclass
class Theme:
    """Colors and imagery for a public page."""
    appearance: str
    background_color: str
    accent_color: str
    card_bg_color: str
    text_color: str
    muted_text_color: str
    background_image_url: Optional[str] = None
    logo_url: Optional[str] = None

    @classmethod
    def from_restaurant(cls, restaurant: Restaurant) -> "Theme":
        appearance = getattr(restaurant.appearance, "value", restaurant.appearance) or Appearance.MINIMAL.value
        use_image = appearance == Appearance.VISUAL.value and bool(restaurant.background_image_url)
        return cls(
            appearance=appearance,
            background_color=restaurant.background_color or DEFAULT_BRANDING["background_color"],
            accent_color=restaurant.accent_color or DEFAULT_BRANDING["accent_color"],
            card_bg_color=restaurant.card_bg_color or DEFAULT_BRANDING["card_bg_color"],
            text_color=restaurant.text_color or DEFAULT_BRANDING["text_color"],
            muted_text_color=restaurant.muted_text_color or DEFAULT_BRANDING["muted_text_color"],
            background_image_url=restaurant.background_image_url if use_image else None,
            logo_url=restaurant.logo_url,
        )

    @property
    def background_style(self) -> str:
        # Image only for the visual appearance, solid color otherwise
        if self.background_image_url:
            return (
                f"background-color: {self.background_color}; "
                f"background-image: url('{self.background_image_url}'); "
                "background-size: cover; background-position: center;"
            )
        return f"background-color: {self.background_color};"


@dataclass
class ItemView:
    id: str
    name: str
    description: Optional[str]
    price: str
    image_url: Optional[str]
    is_available: bool

    @property
    def coming_soon(self) -> bool:
        return not self.is_available

    @classmethod
    def from_item(cls, item: MenuItem) -> "ItemView":
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            price=format_price(item.price),
            image_url=item.image_url,
            is_available=bool(item.is_available),
        )


@dataclass
class CategoryView:
    id: str
    name: str
    slug: str
    items: list[ItemView] = field(default_factory=list)

    @property
    def runs(self) -> list[tuple[bool, list[ItemView]]]:
        """Consecutive items split by whether they carry a photo, in menu order."""
        return [
            (has_image, list(group))
            for has_image, group in groupby(self.items, key=lambda item: bool(item.image_url))
        ]


@dataclass
class PublicMenu:
    restaurant: Restaurant
    theme: Theme
    categories: list[CategoryView]

    @property
    def item_count(self) -> int:
        return sum(len(c.items) for c in self.categories)


def group_items(categories: list[MenuCategory], items: list[MenuItem]) -> list[CategoryView]:
    """Attach items to their categories, keeping both orderings."""
    views = {c.id: CategoryView(id=c.id, name=c.name, slug=c.slug) for c in categories}
    for item in items:
        view = views.get(item.category_id)
        if view is not None:
            view.items.append(ItemView.from_item(item))
    return [views[c.id] for c in categories]


async def build_restaurant_menu(
    repository: MenuRepository,
    slug: str,
    show_unavailable: bool = True,
) -> PublicMenu:
    """
    Full menu for ``/{restaurant}``.

    Unavailable items are included (and marked) unless
    show_unavailable is False.

    Raises:
        NotFoundError: unknown restaurant slug
    """
    restaurant = await repository.require_restaurant_by_slug(slug)
    categories = await repository.list_categories(restaurant.id)
    items = await repository.list_items(restaurant.id, available_only=not show_unavailable)
    return PublicMenu(
        restaurant=restaurant,
        theme=Theme.from_restaurant(restaurant),
        categories=group_items(categories, items),
    )


async def build_category_page(
    repository: MenuRepository,
    slug: str,
    category_slug: str,
) -> PublicMenu:
    """
    Single-category page for ``/{restaurant}/{category}``.

    Only available items are listed.

    Raises:
        NotFoundError: unknown restaurant or category slug
    """
    restaurant = await repository.require_restaurant_by_slug(slug)
    category = await repository.get_category_by_slug(restaurant.id, category_slug)
    if category is None:
        raise NotFoundError("Category not found")
    items = await repository.list_items(restaurant.id, category_id=category.id, available_only=True)
    return PublicMenu(
        restaurant=restaurant,
        theme=Theme.from_restaurant(restaurant),
        categories=group_items([category], items),
    )
