"""
Seed script for the Tablebook development database.

Creates a staff login, the floor layout, the menu and the default booking
settings. Safe to run more than once: existing rows are left alone.

Usage:
    alembic upgrade head
    python scripts/seed.py
"""
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sqlalchemy import select

from tablebook.core.security import hash_password
from tablebook.db.session import SessionLocal
from tablebook.models.menu import MenuItem
from tablebook.models.settings import RestaurantSetting
from tablebook.models.table import DiningTable
from tablebook.models.user import User
from tablebook.services.booking_settings import BookingSettings, DayHours, WEEKDAYS, save_booking_settings

STAFF_EMAIL = "staff@tablebook-demo.com"
STAFF_PASSWORD = "password123"

# name, seats, x, y
TABLES = [
    ("Table 1", 2, 100, 100),
    ("Table 2", 4, 200, 100),
    ("Table 3", 2, 300, 100),
    ("Table 4", 6, 100, 200),
    ("Table 5", 4, 200, 200),
    ("Table 6", 2, 300, 200),
    ("Table 7", 8, 100, 300),
    ("Table 8", 4, 200, 300),
    ("Table 9", 2, 300, 300),
]

# name, description, price, category, vegetarian, spicy, prep minutes, allergens
MENU = [
    ("Hummus met Pita", "Cremige hummus met verse pita brood en olijfolie", "8.50", "Voorgerechten", True, False, 10, ["gluten", "sesam"]),
    ("Falafel Mix", "Krokante falafel balletjes met tahini saus", "9.50", "Voorgerechten", True, False, 15, ["gluten", "sesam"]),
    ("Baba Ganoush", "Geroosterde aubergine dip met kruiden", "7.50", "Voorgerechten", True, False, 12, ["sesam"]),
    ("Lams Kebab", "Malse lamsreepjes met rijst en groenten", "18.50", "Hoofdgerechten", False, False, 25, []),
    ("Kip Shawarma", "Gekruide kip met hummus en verse groenten", "16.50", "Hoofdgerechten", False, False, 20, ["gluten", "sesam"]),
    ("Vegetarische Moussaka", "Lagen van aubergine, courgette en kaas", "15.50", "Hoofdgerechten", True, False, 30, ["melk", "eieren"]),
    ("Lentil Curry", "Pittige linzen curry met basmati rijst", "14.50", "Hoofdgerechten", True, True, 18, []),
    ("Baklava", "Zoete noten pastei met honing", "6.50", "Desserts", True, False, 5, ["gluten", "noten"]),
    ("Tiramisu", "Klassieke Italiaanse dessert", "7.50", "Desserts", True, False, 8, ["melk", "eieren", "gluten"]),
    ("Verse Muntthee", "Warme muntthee met honing", "3.50", "Dranken", True, False, 3, []),
    ("Turkse Koffie", "Traditionele Turkse koffie", "4.50", "Dranken", True, False, 5, []),
]


def seed_database():
    """Seed the database with demo data."""
    session = SessionLocal()

    try:
        print("Seeding database...")

        if session.execute(select(User).where(User.email == STAFF_EMAIL)).scalar_one_or_none() is None:
            session.add(User(email=STAFF_EMAIL, hashed_password=hash_password(STAFF_PASSWORD), full_name="Demo Staff"))
            print(f"Created staff user: {STAFF_EMAIL}")

        if not session.execute(select(DiningTable)).first():
            session.add_all([
                DiningTable(name=name, seats=seats, position_x=x, position_y=y)
                for name, seats, x, y in TABLES
            ])
            print(f"Created {len(TABLES)} tables")

        if not session.execute(select(MenuItem)).first():
            for sort_order, (name, description, price, category, vegetarian, spicy, prep, allergens) in enumerate(MENU):
                session.add(MenuItem(
                    name=name,
                    description=description,
                    price=Decimal(price),
                    category=category,
                    is_vegetarian=vegetarian,
                    is_spicy=spicy,
                    prep_time_minutes=prep,
                    allergens=allergens,
                    sort_order=sort_order,
                ))
            print(f"Created {len(MENU)} menu items")

        session.commit()

        if not session.execute(select(RestaurantSetting)).first():
            save_booking_settings(session, BookingSettings(
                opening_hours={day: DayHours(closed=(day == "sunday")) for day in WEEKDAYS},
            ))
            print("Created default booking settings")

        print("\n✅ Database seeded successfully!")
        print("\nStaff credentials:")
        print(f"  Email: {STAFF_EMAIL} | Password: {STAFF_PASSWORD}")

    except Exception as e:
        session.rollback()
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    seed_database()
