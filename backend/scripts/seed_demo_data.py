import argparse
import asyncio
import sys
from pathlib import Path
from decimal import Decimal

"""
Seed a demo organization (admin user, locations, ingredients, menu items, recipes).

Re-running is safe: rows are looked up by name inside the demo organization and
recipes are replaced rather than duplicated.

This script can be run from either:
- backend/: `python scripts/seed_demo_data.py`
- repo root: `python backend/scripts/seed_demo_data.py`
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import func, select, delete  # noqa: E402

from core.auth import hash_password  # noqa: E402
from db.database import (  # noqa: E402
    async_session_maker,
    create_db_and_tables,
    Ingredient,
    Location,
    MenuItem,
    MixMapping,
    Organization,
    Role,
    User,
)


async def get_or_create_admin(session, email: str, password: str, organization_name: str) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user:
        return user

    organization = Organization(name=organization_name)
    session.add(organization)
    await session.flush()

    user = User(
        email=email,
        hashed_password=hash_password(password),
        name="Demo Admin",
        organization_id=organization.id,
        role=Role.ADMIN,
        is_active=True,
    )
    session.add(user)
    await session.flush()
    return user


async def get_or_create_location(session, organization_id, name: str) -> Location:
    result = await session.execute(
        select(Location).where(
            Location.organization_id == organization_id,
            func.lower(Location.name) == name.strip().lower(),
        )
    )
    location = result.scalar_one_or_none()
    if location:
        return location

    location = Location(name=name.strip(), organization_id=organization_id)
    session.add(location)
    await session.flush()
    return location


async def get_or_create_ingredient(session, organization_id, name: str, price: Decimal, unit: str) -> Ingredient:
    result = await session.execute(
        select(Ingredient).where(
            Ingredient.organization_id == organization_id,
            func.lower(Ingredient.name) == name.strip().lower(),
        )
    )
    ingredient = result.scalar_one_or_none()
    if ingredient:
        # Keep price up-to-date if you re-run seed with new values
        ingredient.price = price
        ingredient.unit = unit
        await session.flush()
        return ingredient

    ingredient = Ingredient(name=name.strip(), price=price, unit=unit, organization_id=organization_id)
    session.add(ingredient)
    await session.flush()
    return ingredient


async def get_or_create_menu_item(session, organization_id, name: str, description: str | None) -> MenuItem:
    result = await session.execute(
        select(MenuItem).where(
            MenuItem.organization_id == organization_id,
            func.lower(MenuItem.name) == name.strip().lower(),
        )
    )
    menu_item = result.scalar_one_or_none()
    if menu_item:
        menu_item.description = description
        await session.flush()
        return menu_item

    menu_item = MenuItem(name=name.strip(), description=description, organization_id=organization_id)
    session.add(menu_item)
    await session.flush()
    return menu_item


async def upsert_recipe(session, menu_item: MenuItem, location: Location, lines: list[tuple[Ingredient, Decimal]]):
    # Replace recipe lines
    await session.execute(
        delete(MixMapping).where(
            MixMapping.menu_item_id == menu_item.id,
            MixMapping.location_id == location.id,
        )
    )
    for ingredient, quantity in lines:
        session.add(
            MixMapping(
                menu_item_id=menu_item.id,
                location_id=location.id,
                ingredient_id=ingredient.id,
                quantity=quantity,
            )
        )
    await session.flush()


async def seed(email: str, password: str, organization_name: str):
    await create_db_and_tables()

    async with async_session_maker() as session:
        async with session.begin():
            admin = await get_or_create_admin(session, email, password, organization_name)
            org_id = admin.organization_id

            downtown = await get_or_create_location(session, org_id, "Downtown")
            harbor = await get_or_create_location(session, org_id, "Harbor")

            # Ingredients (prices are example values per unit)
            bun = await get_or_create_ingredient(session, org_id, "brioche bun", Decimal("0.45"), "each")
            beef = await get_or_create_ingredient(session, org_id, "ground beef", Decimal("9.80"), "kg")
            cheddar = await get_or_create_ingredient(session, org_id, "cheddar", Decimal("12.50"), "kg")
            romaine = await get_or_create_ingredient(session, org_id, "romaine", Decimal("3.20"), "kg")
            parmesan = await get_or_create_ingredient(session, org_id, "parmesan", Decimal("21.00"), "kg")
            dough = await get_or_create_ingredient(session, org_id, "pizza dough", Decimal("0.60"), "each")
            tomato = await get_or_create_ingredient(session, org_id, "tomato sauce", Decimal("2.50"), "l")
            mozzarella = await get_or_create_ingredient(session, org_id, "mozzarella", Decimal("11.00"), "kg")

            burger = await get_or_create_menu_item(session, org_id, "Cheeseburger", "Beef patty, cheddar, brioche.")
            salad = await get_or_create_menu_item(session, org_id, "Caesar Salad", "Romaine and parmesan.")
            pizza = await get_or_create_menu_item(session, org_id, "Margherita", "Tomato and mozzarella.")

            recipes = {
                burger: [(bun, Decimal("1")), (beef, Decimal("0.180")), (cheddar, Decimal("0.030"))],
                salad: [(romaine, Decimal("0.150")), (parmesan, Decimal("0.020"))],
                pizza: [(dough, Decimal("1")), (tomato, Decimal("0.080")), (mozzarella, Decimal("0.125"))],
            }
            for location in (downtown, harbor):
                for menu_item, lines in recipes.items():
                    await upsert_recipe(session, menu_item, location, lines)

    print(f"Seeded demo organization {organization_name!r}; log in as {email}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo restaurant data")
    parser.add_argument("--email", default="admin@demo.com")
    parser.add_argument("--password", default="admin")
    parser.add_argument("--organization", default="Demo Bistro")
    args = parser.parse_args()
    asyncio.run(seed(args.email, args.password, args.organization))
