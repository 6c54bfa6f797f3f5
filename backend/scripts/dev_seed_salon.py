"""Seed a development salon with an admin login, kennels and a few services."""

from __future__ import annotations

import asyncio
from decimal import Decimal

from sqlalchemy import select

from groomflow.core.config import get_settings
from groomflow.core.security import get_password_hash
from groomflow.db.session import get_sessionmaker
from groomflow.models import Kennel, Salon, Service, SizeClass, User, UserRole, UserStatus

EMAIL = "admin@groomflow.example.com"
PASSWORD = "admin1234"

KENNELS = [
    ("K1", SizeClass.SMALL),
    ("K2", SizeClass.SMALL),
    ("K3", SizeClass.MEDIUM),
    ("K4", SizeClass.MEDIUM),
    ("K5", SizeClass.LARGE),
    ("K6", SizeClass.EXTRA_LARGE),
]

SERVICES = [
    ("Bath & Brush", Decimal("45.00"), 60),
    ("Full Groom", Decimal("75.00"), 120),
    ("Nail Trim", Decimal("15.00"), 15),
]


async def main() -> None:
    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        existing = await session.execute(select(User.id).where(User.email == EMAIL))
        if existing.first():
            print(f"User {EMAIL} already exists")
            return

        salon = Salon(name="Dev Salon", slug="dev-salon", phone="555-0100")
        session.add(salon)
        await session.flush()

        session.add(
            User(
                salon_id=salon.id,
                email=EMAIL,
                hashed_password=get_password_hash(PASSWORD),
                first_name="Dev",
                last_name="Admin",
                role=UserRole.ADMIN,
                status=UserStatus.ACTIVE,
            )
        )
        for number, size in KENNELS:
            session.add(Kennel(salon_id=salon.id, kennel_number=number, size_class=size))
        for name, price, minutes in SERVICES:
            session.add(
                Service(
                    salon_id=salon.id,
                    name=name,
                    price=price,
                    duration_minutes=minutes,
                )
            )

        await session.commit()
        print(f"Created salon dev-salon and admin {EMAIL} / {PASSWORD}")


if __name__ == "__main__":
    asyncio.run(main())
