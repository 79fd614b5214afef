"""
Demo Data Seeder

Creates the "Joe's Bar" demo restaurant with a few categories and
items, and gives the first mock user the admin role.
Run from project root: python scripts/seed_demo.py

Author: Khalil Bannouri
Version: 1.0.0
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from menucup.core.config import get_settings, setup_logging
from menucup.database import async_session_maker, engine, init_db
from menucup.models import ProfileRole
from menucup.repository import MenuRepository

DEMO_SLUG = "joes-bar"

DEMO_MENU = [
    ("Cocktails", [
        {"name": "Mojito", "price": 9.5, "description": "Rum, lime, mint, soda"},
        {"name": "Old Fashioned", "price": 12.0, "description": "Bourbon, bitters, orange", "is_available": False},
        {"name": "Negroni", "price": 11.0, "description": "Gin, Campari, vermouth"},
    ]),
    ("Beers", [
        {"name": "Lager", "price": 5.0},
        {"name": "IPA", "price": 6.5, "description": "Citrus and pine"},
    ]),
    ("Snacks", [
        {"name": "Fries", "price": 4.0},
        {"name": "Olives", "price": 3.5},
    ]),
]


async def seed(owner_id: str, admin_id: str, reset: bool) -> None:
    await init_db()

    async with async_session_maker() as db:
        repo = MenuRepository(db)

        existing = await repo.get_restaurant_by_slug(DEMO_SLUG)
        if existing is not None:
            if not reset:
                print(f"⚠️ '{DEMO_SLUG}' already exists. Use --reset to recreate it.")
                return
            await repo.delete_restaurant(existing.id)
            print(f"🗑️ Removed existing '{DEMO_SLUG}'")

        await repo.set_role(admin_id, ProfileRole.ADMIN)
        print(f"👤 Admin role granted to {admin_id}")

        restaurant = await repo.create_restaurant("Joe's Bar", DEMO_SLUG, owner_id)
        await repo.update_restaurant(restaurant.id, {
            "subtitle": "Cocktails & craft beer",
            "slogan": "Cheers to that",
            "est_year": "1999",
        })
        print(f"🍸 Restaurant created: {restaurant.name} (/{restaurant.slug})")

        order = 0
        for position, (category_name, items) in enumerate(DEMO_MENU, start=1):
            category = await repo.create_category(
                restaurant.id, category_name, category_name.lower(), order=position
            )
            for item in items:
                order += 1
                await repo.create_item(restaurant.id, category.id, order=order, **item)
            print(f"   📂 {category_name}: {len(items)} items")

    await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    users = get_settings().mock_auth_users_list

    parser = argparse.ArgumentParser(description="Seed the demo restaurant")
    parser.add_argument(
        "--owner-id",
        default=users[1][2] if len(users) > 1 else None,
        help="Owner user id (defaults to the second mock user)",
    )
    parser.add_argument(
        "--admin-id",
        default=users[0][2] if users else None,
        help="User id to promote to admin (defaults to the first mock user)",
    )
    parser.add_argument("--reset", action="store_true", help="Recreate the demo restaurant")
    args = parser.parse_args()

    if not args.owner_id or not args.admin_id:
        print("❌ No owner/admin id given and MOCK_AUTH_USERS is empty.")
        sys.exit(1)

    print("=" * 60)
    print("🌱 SEEDING DEMO DATA")
    print("=" * 60)
    asyncio.run(seed(args.owner_id, args.admin_id, args.reset))
    print("=" * 60)
    print(f"✅ Done. Open {get_settings().app_base_url.rstrip('/')}/{DEMO_SLUG}")
    print("=" * 60)
