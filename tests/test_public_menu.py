"""
Public themed menu pages.

Covers:
  Theme:
  - background image used only for the visual appearance
  - missing colors fall back to the default branding
  - prices render as $X.XX

  View Models:
  - items grouped under their categories in order
  - photo and text items split into runs without reordering
  - unavailable items included and marked unless hidden
  - category page lists available items only
  - unknown restaurant or category raises NotFoundError

  Pages:
  - /{restaurant} shows every category with prices
  - photo cards and text lines render in menu order
  - unavailable items carry the "Coming soon" marker
  - /{restaurant}/{category} hides unavailable items and links back
  - unknown slugs render the 404 page
  - visual appearance paints the background image
"""

import pytest

from menucup.errors import NotFoundError
from menucup.models import Appearance, Restaurant
from menucup.public_menu import (
    Theme,
    build_category_page,
    build_restaurant_menu,
    format_price,
)
from menucup.routers import public


def make_restaurant(**fields) -> Restaurant:
    defaults = {"name": "Joe's Bar", "slug": "joes-bar", "owner_id": "owner"}
    return Restaurant(**{**defaults, **fields})


class TestTheme:
    def test_minimal_ignores_background_image(self):
        theme = Theme.from_restaurant(make_restaurant(
            appearance=Appearance.MINIMAL,
            background_color="#111111",
            background_image_url="http://img/bg.jpg",
        ))
        assert theme.background_image_url is None
        assert theme.background_style == "background-color: #111111;"

    def test_visual_uses_background_image(self):
        theme = Theme.from_restaurant(make_restaurant(
            appearance=Appearance.VISUAL,
            background_image_url="http://img/bg.jpg",
        ))
        assert "url('http://img/bg.jpg')" in theme.background_style

    def test_visual_without_image_is_solid(self):
        theme = Theme.from_restaurant(make_restaurant(appearance=Appearance.VISUAL))
        assert theme.background_style == "background-color: #ffffff;"

    def test_default_colors(self):
        theme = Theme.from_restaurant(make_restaurant())
        assert theme.appearance == "minimal"
        assert theme.accent_color == "#6366f1"
        assert theme.text_color == "#000000"
        assert theme.muted_text_color == "#6b7280"

    @pytest.mark.parametrize("price,expected", [(9.5, "$9.50"), (0, "$0.00"), (12, "$12.00"), (None, "$0.00")])
    def test_format_price(self, price, expected):
        assert format_price(price) == expected


class TestViewModels:
    async def test_grouped_in_order(self, repo, joes_bar):
        menu = await build_restaurant_menu(repo, "joes-bar")
        assert [c.name for c in menu.categories] == ["Cocktails", "Beers"]
        cocktails = menu.categories[0]
        assert [i.name for i in cocktails.items] == ["Mojito", "Old Fashioned"]
        assert cocktails.items[0].price == "$9.50"
        assert cocktails.items[1].coming_soon
        assert menu.item_count == 3

    async def test_photo_runs_keep_order(self, repo, joes_bar):
        await repo.update_item(joes_bar.old_fashioned.id, {"image_url": "http://testserver/storage/of.jpg"})
        menu = await build_restaurant_menu(repo, "joes-bar")
        runs = [(has_image, [i.name for i in run]) for has_image, run in menu.categories[0].runs]
        assert runs == [(False, ["Mojito"]), (True, ["Old Fashioned"])]

    async def test_hide_unavailable(self, repo, joes_bar):
        menu = await build_restaurant_menu(repo, "joes-bar", show_unavailable=False)
        assert [i.name for i in menu.categories[0].items] == ["Mojito"]

    async def test_category_page_available_only(self, repo, joes_bar):
        menu = await build_category_page(repo, "joes-bar", "cocktails")
        assert len(menu.categories) == 1
        assert [i.name for i in menu.categories[0].items] == ["Mojito"]

    async def test_unknown_restaurant(self, repo):
        with pytest.raises(NotFoundError):
            await build_restaurant_menu(repo, "nowhere")

    async def test_unknown_category(self, repo, joes_bar):
        with pytest.raises(NotFoundError) as exc:
            await build_category_page(repo, "joes-bar", "wines")
        assert exc.value.message == "Category not found"


class TestPages:
    async def test_full_menu(self, client, joes_bar):
        response = await client.get("/joes-bar")
        assert response.status_code == 200
        html = response.text
        assert "Mojito" in html
        assert "$9.50" in html
        assert "Lager" in html
        assert "$5.00" in html
        assert 'href="/joes-bar/cocktails"' in html

    async def test_mixed_photo_and_text_items_in_order(self, client, repo, joes_bar):
        await repo.update_item(joes_bar.old_fashioned.id, {"image_url": "http://testserver/storage/of.jpg"})
        html = (await client.get("/joes-bar")).text
        assert "http://testserver/storage/of.jpg" in html
        assert html.index("Mojito") < html.index("Old Fashioned") < html.index("Lager")

    async def test_unavailable_marked(self, client, joes_bar):
        html = (await client.get("/joes-bar")).text
        assert "Old Fashioned" in html
        assert "Coming soon" in html

    async def test_unavailable_hidden_when_configured(self, client, joes_bar, monkeypatch):
        monkeypatch.setattr(public.settings, "public_menu_show_unavailable", False)
        html = (await client.get("/joes-bar")).text
        assert "Old Fashioned" not in html
        assert "Coming soon" not in html

    async def test_category_page(self, client, joes_bar):
        response = await client.get("/joes-bar/cocktails")
        assert response.status_code == 200
        html = response.text
        assert "Mojito" in html
        assert "$9.50" in html
        assert "Old Fashioned" not in html
        assert 'href="/joes-bar"' in html

    async def test_unknown_restaurant_page(self, client):
        response = await client.get("/nowhere")
        assert response.status_code == 404
        assert "Menu not found" in response.text
        assert "Restaurant not found" in response.text

    async def test_unknown_category_page(self, client, joes_bar):
        response = await client.get("/joes-bar/wines")
        assert response.status_code == 404
        assert "Category not found" in response.text

    async def test_visual_background(self, client, repo, joes_bar):
        await repo.update_restaurant(joes_bar.restaurant.id, {
            "appearance": Appearance.VISUAL,
            "background_image_url": "http://testserver/storage/restaurant-assets/bg.jpg",
        })
        html = (await client.get("/joes-bar")).text
        assert "background-image: url(" in html
        assert "http://testserver/storage/restaurant-assets/bg.jpg" in html
