"""
MenuBuilder working state.

Covers:
  Restaurant Scope:
  - no session sees nothing
  - owners see only their restaurants, admins see all
  - opening a restaurant outside the scope fails
  - selecting loads categories and items in order and resets search

  Search / Filter:
  - case-insensitive name search
  - category filter and "all"
  - search and filter combined

  Categories:
  - name trimmed, slug derived, appended at the end
  - blank name rejected without touching state
  - duplicate slug surfaces the conflict message
  - rename trims, blank rename rejected
  - delete drops the category's items and resets a matching filter
  - failed delete leaves categories, items and filter untouched

  Items:
  - new item placed after the last one
  - failed delete leaves the list untouched
  - update replaces the local copy

  Ordering:
  - move swaps neighbours and persists positions
  - moves past either end are no-ops
  - failed persist restores the previous order
  - on_save mode defers writes until save_order
  - drag-and-drop category reorder

  Uploads / Settings / QR:
  - item photo stored under the restaurant prefix
  - empty, oversized and non-image uploads rejected
  - settings save uploads the background and writes branding
  - QR code stored for the public menu URL, regenerating overwrites

  Session:
  - logout closes the session and clears state
"""

import pytest

from menucup.core.config import ReorderPersistMode, get_settings
from menucup.errors import BackendError
from menucup.menu_builder import ALL_CATEGORIES, ActionStatus, MenuBuilder
from menucup.services.storage import Upload

from conftest import OWNER_ID


@pytest.fixture
def make_builder(repo, storage, store, sign_in):
    async def _make(email: str = "owner@menucup.test", mode=ReorderPersistMode.IMMEDIATE):
        session = await sign_in(email)
        builder = MenuBuilder(repo, storage, session=session, session_store=store)
        builder.reorder_mode = mode
        return builder
    return _make


@pytest.fixture
async def builder(make_builder, joes_bar):
    builder = await make_builder()
    result = await builder.open_restaurant(joes_bar.restaurant.id)
    assert result.success
    return builder


def names(rows):
    return [row.name for row in rows]


class TestRestaurantScope:
    async def test_no_session(self, repo, storage, joes_bar):
        builder = MenuBuilder(repo, storage)
        result = await builder.fetch_restaurants()
        assert result.success
        assert builder.restaurants == []

    async def test_owner_sees_own(self, repo, make_builder, joes_bar):
        await repo.create_restaurant("Not Mine", "not-mine", "someone-else")
        builder = await make_builder()
        await builder.fetch_restaurants()
        assert [r.slug for r in builder.restaurants] == ["joes-bar"]

    async def test_other_owner_sees_nothing(self, make_builder, joes_bar):
        builder = await make_builder("other@menucup.test")
        await builder.fetch_restaurants()
        assert builder.restaurants == []

    async def test_admin_sees_all(self, repo, make_builder, joes_bar, admin_profile):
        await repo.create_restaurant("Not Mine", "not-mine", "someone-else")
        builder = await make_builder("admin@menucup.test")
        await builder.fetch_restaurants()
        assert {r.slug for r in builder.restaurants} == {"joes-bar", "not-mine"}

    async def test_open_outside_scope(self, make_builder, joes_bar):
        builder = await make_builder("other@menucup.test")
        result = await builder.open_restaurant(joes_bar.restaurant.id)
        assert result.status == ActionStatus.FAILURE
        assert result.error == "Restaurant not found"
        assert builder.selected_restaurant is None

    async def test_select_loads_in_order(self, builder):
        assert builder.selected_restaurant.slug == "joes-bar"
        assert names(builder.categories) == ["Cocktails", "Beers"]
        assert names(builder.items) == ["Mojito", "Old Fashioned", "Lager"]

    async def test_select_resets_search(self, builder):
        builder.set_search_term("moj")
        builder.set_active_filter(builder.categories[0].id)
        await builder.select_restaurant(builder.selected_restaurant)
        assert builder.search_term == ""
        assert builder.active_filter == ALL_CATEGORIES


class TestSearchFilter:
    async def test_search_case_insensitive(self, builder):
        builder.set_search_term("MOJ")
        assert names(builder.filtered_items) == ["Mojito"]

    async def test_category_filter(self, builder, joes_bar):
        builder.set_active_filter(joes_bar.beers.id)
        assert names(builder.filtered_items) == ["Lager"]

        builder.set_active_filter(None)
        assert builder.active_filter == ALL_CATEGORIES
        assert len(builder.filtered_items) == 3

    async def test_search_and_filter(self, builder, joes_bar):
        builder.set_active_filter(joes_bar.cocktails.id)
        builder.set_search_term("lager")
        assert builder.filtered_items == []


class TestCategories:
    async def test_create_trims_and_appends(self, builder):
        result = await builder.create_category("  Desserts  ")
        assert result.success
        assert result.data.name == "Desserts"
        assert result.data.slug == "desserts"
        assert result.data.order == 3
        assert names(builder.categories) == ["Cocktails", "Beers", "Desserts"]

    async def test_blank_name_rejected(self, builder):
        result = await builder.create_category("   ")
        assert not result.success
        assert result.error == "Category name cannot be empty"
        assert len(builder.categories) == 2

    async def test_duplicate_slug(self, builder):
        result = await builder.create_category("cocktails")
        assert not result.success
        assert "already exists" in result.error
        assert len(builder.categories) == 2

    async def test_rename_trims(self, builder, joes_bar):
        result = await builder.update_category(joes_bar.beers.id, "  Craft Beers ")
        assert result.success
        assert names(builder.categories) == ["Cocktails", "Craft Beers"]

    async def test_blank_rename_rejected(self, builder, joes_bar):
        result = await builder.update_category(joes_bar.beers.id, "  ")
        assert not result.success
        assert names(builder.categories) == ["Cocktails", "Beers"]

    async def test_delete_drops_items_and_filter(self, builder, joes_bar, repo):
        builder.set_active_filter(joes_bar.cocktails.id)
        result = await builder.delete_category_action(joes_bar.cocktails.id)

        assert result.success
        assert names(builder.categories) == ["Beers"]
        assert names(builder.items) == ["Lager"]
        assert builder.active_filter == ALL_CATEGORIES
        assert names(await repo.list_items(joes_bar.restaurant.id)) == ["Lager"]

    async def test_failed_delete_keeps_category(self, builder, joes_bar, repo, monkeypatch):
        async def broken_delete(category_id):
            raise BackendError("Database delete failed")

        builder.set_active_filter(joes_bar.cocktails.id)
        monkeypatch.setattr(repo, "delete_category", broken_delete)
        result = await builder.delete_category_action(joes_bar.cocktails.id)

        assert result.success is False
        assert result.error == "Database delete failed"
        assert names(builder.categories) == ["Cocktails", "Beers"]
        assert names(builder.items) == ["Mojito", "Old Fashioned", "Lager"]
        assert builder.active_filter == joes_bar.cocktails.id


class TestItems:
    async def test_create_after_last(self, builder, joes_bar):
        result = await builder.create_item(joes_bar.beers.id, " Stout ", 6.5)
        assert result.success
        assert result.data.name == "Stout"
        assert result.data.order == 4
        assert names(builder.items)[-1] == "Stout"

    async def test_create_rejects_negative_price(self, builder, joes_bar):
        result = await builder.create_item(joes_bar.beers.id, "Stout", -1)
        assert not result.success
        assert len(builder.items) == 3

    async def test_failed_delete_keeps_list(self, builder, joes_bar, repo, monkeypatch):
        async def broken_delete(item_id):
            raise BackendError("Database delete failed")

        monkeypatch.setattr(repo, "delete_item", broken_delete)
        result = await builder.delete_item_action(joes_bar.mojito.id)

        assert result.status == ActionStatus.FAILURE
        assert result.error == "Database delete failed"
        assert names(builder.items) == ["Mojito", "Old Fashioned", "Lager"]

    async def test_delete(self, builder, joes_bar):
        result = await builder.delete_item_action(joes_bar.mojito.id)
        assert result.success
        assert names(builder.items) == ["Old Fashioned", "Lager"]

    async def test_update_replaces_local_copy(self, builder, joes_bar):
        result = await builder.update_item(joes_bar.old_fashioned.id, {"is_available": True, "price": 13})
        assert result.success
        updated = next(i for i in builder.items if i.id == joes_bar.old_fashioned.id)
        assert updated.is_available is True
        assert updated.price == 13


class TestOrdering:
    async def test_move_down_swaps_and_persists(self, builder, joes_bar, repo):
        result = await builder.move_item(0, "down")

        assert result.success
        assert result.data == {"moved": True, "pending": False}
        assert names(builder.items) == ["Old Fashioned", "Mojito", "Lager"]
        assert [i.order for i in builder.items] == [1, 2, 3]

        stored = await repo.list_items(joes_bar.restaurant.id)
        assert names(stored) == ["Old Fashioned", "Mojito", "Lager"]

    @pytest.mark.parametrize("index,direction", [(0, "up"), (2, "down"), (7, "up")])
    async def test_out_of_range_is_noop(self, builder, index, direction):
        result = await builder.move_item(index, direction)
        assert result.success
        assert result.data == {"moved": False}
        assert names(builder.items) == ["Mojito", "Old Fashioned", "Lager"]

    async def test_failed_persist_reverts(self, builder, repo, monkeypatch):
        async def broken_update(model, orders):
            raise BackendError("Failed to save order")

        monkeypatch.setattr(repo, "update_orders", broken_update)
        result = await builder.move_category(0, "down")

        assert not result.success
        assert result.error == "Failed to save order"
        assert names(builder.categories) == ["Cocktails", "Beers"]
        assert [c.order for c in builder.categories] == [1, 2]

    async def test_on_save_defers_writes(self, make_builder, joes_bar, repo):
        builder = await make_builder(mode=ReorderPersistMode.ON_SAVE)
        await builder.open_restaurant(joes_bar.restaurant.id)

        result = await builder.move_category(1, "up")
        assert result.data == {"moved": True, "pending": True}
        assert builder.order_dirty
        assert names(await repo.list_categories(joes_bar.restaurant.id)) == ["Cocktails", "Beers"]

        saved = await builder.save_order()
        assert saved.success
        assert not builder.order_dirty
        assert names(await repo.list_categories(joes_bar.restaurant.id)) == ["Beers", "Cocktails"]

    async def test_reorder_categories(self, builder, joes_bar, repo):
        await builder.create_category("Desserts")
        result = await builder.reorder_categories(2, 0)

        assert result.success
        assert names(builder.categories) == ["Desserts", "Cocktails", "Beers"]
        assert names(await repo.list_categories(joes_bar.restaurant.id)) == [
            "Desserts", "Cocktails", "Beers",
        ]

    async def test_invalid_direction(self, builder):
        with pytest.raises(ValueError):
            await builder.move_item(0, "sideways")


class TestUploadsSettingsQR:
    async def test_item_photo(self, builder, joes_bar, storage):
        upload = Upload(filename="mojito.PNG", content=b"\x89PNG fake", content_type="image/png")
        result = await builder.upload_item_image(joes_bar.mojito.id, upload)

        assert result.success
        bucket = get_settings().menu_items_bucket
        prefix = f"http://testserver/storage/{bucket}/{joes_bar.restaurant.id}/{joes_bar.mojito.id}-"
        assert result.data.image_url.startswith(prefix)
        assert result.data.image_url.endswith(".png")
        assert len(storage.objects) == 1

    @pytest.mark.parametrize("upload,error", [
        (Upload("empty.png", b"", "image/png"), "Uploaded file is empty"),
        (Upload("notes.txt", b"hello", "text/plain"), "Only PNG, JPEG, WebP or GIF images are accepted"),
    ])
    async def test_rejected_uploads(self, builder, joes_bar, storage, upload, error):
        result = await builder.upload_item_image(joes_bar.mojito.id, upload)
        assert result.error == error
        assert storage.objects == {}

    async def test_oversized_upload(self, builder, joes_bar, monkeypatch):
        monkeypatch.setattr(builder.settings, "max_upload_bytes", 4)
        result = await builder.upload_item_image(
            joes_bar.mojito.id, Upload("big.png", b"12345", "image/png")
        )
        assert result.error == "Uploaded file is too large"

    async def test_save_settings_with_background(self, builder, storage):
        background = Upload("bg.jpg", b"jpeg-bytes", "image/jpeg")
        result = await builder.save_settings(
            {"appearance": "visual", "accent_color": "#ff0000", "slogan": "Cheers"},
            background=background,
        )

        assert result.success
        restaurant = builder.selected_restaurant
        assert restaurant.appearance == "visual"
        assert restaurant.accent_color == "#ff0000"
        assert restaurant.slogan == "Cheers"
        assert "/bg-" in restaurant.background_image_url
        assert restaurant.background_image_url.endswith(".jpg")
        assert builder.restaurants[0].accent_color == "#ff0000"

    async def test_qr_code(self, builder, storage):
        result = await builder.generate_qr_code()

        assert result.success
        assert result.data["menu_url"] == "http://testserver/joes-bar"
        bucket = get_settings().restaurant_assets_bucket
        content, content_type = storage.get_object(bucket, "joes-bar/qr-code.png")
        assert content.startswith(b"\x89PNG")
        assert content_type == "image/png"
        assert builder.selected_restaurant.qr_code_url == result.data["qr_code_url"]

        again = await builder.generate_qr_code()
        assert again.success

    async def test_actions_without_selection(self, make_builder):
        builder = await make_builder()
        result = await builder.create_category("Desserts")
        assert result.error == "No restaurant selected"


class TestLogout:
    async def test_logout_clears_state(self, builder, store):
        assert len(store) == 1
        result = await builder.logout()

        assert result.success
        assert len(store) == 0
        assert builder.session is None
        assert builder.selected_restaurant is None
        assert builder.items == []
