"""Client, pet, service catalog and staff API tests."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest
from httpx import AsyncClient

from groomflow.db.session import get_sessionmaker

pytestmark = pytest.mark.asyncio


async def test_client_and_pet_records(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    headers = app_context["groomer_headers"]

    created = await client.post(
        "/api/v1/clients",
        json={"name": "Morgan Reed", "email": "morgan@example.com", "phone": "555-0111"},
        headers=headers,
    )
    assert created.status_code == 201, created.text
    client_id = created.json()["id"]

    search = await client.get("/api/v1/clients", params={"search": "morgan"}, headers=headers)
    assert [item["id"] for item in search.json()] == [client_id]

    pet = await client.post(
        "/api/v1/pets",
        json={"client_id": client_id, "name": "Noodle", "pet_type": "dog", "size": "small"},
        headers=headers,
    )
    assert pet.status_code == 201, pet.text
    pet_id = pet.json()["id"]

    updated = await client.patch(
        f"/api/v1/pets/{pet_id}",
        json={"grooming_notes": "Short summer cut"},
        headers=headers,
    )
    assert updated.status_code == 200
    assert updated.json()["grooming_notes"] == "Short summer cut"
    assert updated.json()["size"] == "small"

    by_client = await client.get("/api/v1/pets", params={"client_id": client_id}, headers=headers)
    assert [item["name"] for item in by_client.json()] == ["Noodle"]

    orphan = await client.post(
        "/api/v1/pets",
        json={"client_id": "00000000-0000-0000-0000-000000000000", "name": "Ghost"},
        headers=headers,
    )
    assert orphan.status_code == 404

    renamed = await client.patch(
        f"/api/v1/clients/{client_id}", json={"phone": "555-0199"}, headers=headers
    )
    assert renamed.json()["phone"] == "555-0199"

    removed = await client.delete(
        f"/api/v1/clients/{client_id}", headers=app_context["manager_headers"]
    )
    assert removed.status_code == 204
    missing = await client.get(f"/api/v1/clients/{client_id}", headers=headers)
    assert missing.status_code == 404


async def test_service_catalog(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    manager = app_context["manager_headers"]

    created = await client.post(
        "/api/v1/services",
        json={"name": "De-shedding", "price": "30.00", "duration_minutes": 45},
        headers=manager,
    )
    assert created.status_code == 201, created.text
    service_id = created.json()["id"]

    retired = await client.patch(
        f"/api/v1/services/{service_id}", json={"is_active": False}, headers=manager
    )
    assert retired.status_code == 200

    active = await client.get("/api/v1/services", headers=manager)
    assert "De-shedding" not in [item["name"] for item in active.json()]
    everything = await client.get(
        "/api/v1/services", params={"include_inactive": True}, headers=manager
    )
    names = [item["name"] for item in everything.json()]
    assert "De-shedding" in names

    booking = await client.post(
        "/api/v1/appointments",
        json={
            "client_id": str(app_context["client_id"]),
            "pet_id": str(app_context["pet_ids"]["small"]),
            "scheduled_at": "2026-10-20T10:00:00Z",
            "service_ids": [service_id],
        },
        headers=manager,
    )
    assert booking.status_code == 404

    groomer = await client.post(
        "/api/v1/services",
        json={"name": "Spa", "price": "10", "duration_minutes": 10},
        headers=app_context["groomer_headers"],
    )
    assert groomer.status_code == 403

    price = Decimal(created.json()["price"])
    assert price == Decimal("30.00")


async def test_staff_management(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    manager = app_context["manager_headers"]

    me = await client.get("/api/v1/users/me", headers=app_context["groomer_headers"])
    assert me.json()["full_name"] == "Jamie Trim"

    forbidden = await client.get("/api/v1/users", headers=app_context["groomer_headers"])
    assert forbidden.status_code == 403

    created = await client.post(
        "/api/v1/users",
        json={
            "email": "riley@example.com",
            "first_name": "Riley",
            "last_name": "Desk",
            "role": "receptionist",
            "password": "Welcome123",
        },
        headers=manager,
    )
    assert created.status_code == 201, created.text

    duplicate = await client.post(
        "/api/v1/users",
        json={
            "email": "riley@example.com",
            "first_name": "Riley",
            "last_name": "Again",
            "password": "Welcome123",
        },
        headers=manager,
    )
    assert duplicate.status_code == 400

    escalate = await client.post(
        "/api/v1/users",
        json={
            "email": "boss@example.com",
            "first_name": "Big",
            "last_name": "Boss",
            "role": "admin",
            "password": "Welcome123",
        },
        headers=manager,
    )
    assert escalate.status_code == 403

    staff = await client.get("/api/v1/users", headers=manager)
    assert "riley@example.com" in [item["email"] for item in staff.json()]

    token = await client.post(
        "/api/v1/auth/token",
        data={"username": "riley@example.com", "password": "Welcome123"},
    )
    assert token.status_code == 200


async def test_login_with_wrong_password(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": str(app_context["manager_email"]), "password": "nope"},
    )
    assert response.status_code == 401


async def test_deleting_booked_service_keeps_appointment_readable(
    app_context: dict[str, Any],
) -> None:
    client: AsyncClient = app_context["client"]
    manager = app_context["manager_headers"]
    bath_id = str(app_context["service_ids"]["bath"])

    booking = await client.post(
        "/api/v1/appointments",
        json={
            "client_id": str(app_context["client_id"]),
            "pet_id": str(app_context["pet_ids"]["medium"]),
            "scheduled_at": "2026-10-21T09:00:00Z",
            "service_ids": [bath_id, str(app_context["service_ids"]["nails"])],
        },
        headers=manager,
    )
    assert booking.status_code == 201, booking.text
    appointment_id = booking.json()["id"]

    removed = await client.delete(f"/api/v1/services/{bath_id}", headers=manager)
    assert removed.status_code == 204

    appointment = await client.get(
        f"/api/v1/appointments/{appointment_id}", headers=manager
    )
    assert appointment.status_code == 200, appointment.text
    body = appointment.json()
    assert sorted(item["service_name"] for item in body["services"]) == [
        "Bath & Brush",
        "Nail Trim",
    ]
    assert Decimal(body["total_price"]) == Decimal("60.00")

    active = await client.get("/api/v1/services", headers=manager)
    assert bath_id not in [item["id"] for item in active.json()]
    everything = await client.get(
        "/api/v1/services", params={"include_inactive": True}, headers=manager
    )
    assert bath_id in [item["id"] for item in everything.json()]


async def test_salon_settings(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    manager = app_context["manager_headers"]

    current = await client.get(
        "/api/v1/salon/settings", headers=app_context["groomer_headers"]
    )
    assert current.status_code == 200
    assert current.json()["name"] == "Suds & Snips"
    assert current.json()["phone"] is None

    settings = {
        "name": "Suds & Snips Downtown",
        "phone": "555-0142",
        "email": "hello@sudsandsnips.example.com",
        "address": "12 Main St",
        "website": "https://sudsandsnips.example.com",
    }
    updated = await client.put("/api/v1/salon/settings", json=settings, headers=manager)
    assert updated.status_code == 200, updated.text
    body = updated.json()
    assert {key: body[key] for key in settings} == settings
    assert body["slug"] == current.json()["slug"]

    cleared = await client.put(
        "/api/v1/salon/settings", json={"name": "Suds & Snips"}, headers=manager
    )
    assert cleared.json()["website"] is None

    groomer = await client.put(
        "/api/v1/salon/settings", json=settings, headers=app_context["groomer_headers"]
    )
    assert groomer.status_code == 403

    blank = await client.put(
        "/api/v1/salon/settings", json={"name": "   "}, headers=manager
    )
    assert blank.status_code == 400

    bad_email = await client.put(
        "/api/v1/salon/settings",
        json={"name": "Suds", "email": "not-an-email"},
        headers=manager,
    )
    assert bad_email.status_code == 422


async def test_manager_edits_and_suspends_staff(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]
    manager = app_context["manager_headers"]
    groomer_id = str(app_context["groomer_id"])

    updated = await client.patch(
        f"/api/v1/users/{groomer_id}",
        json={"last_name": "Clipper", "phone_number": "555-0177", "role": "receptionist"},
        headers=manager,
    )
    assert updated.status_code == 200, updated.text
    body = updated.json()
    assert body["full_name"] == "Jamie Clipper"
    assert body["phone_number"] == "555-0177"
    assert body["role"] == "receptionist"

    escalate = await client.patch(
        f"/api/v1/users/{groomer_id}", json={"role": "admin"}, headers=manager
    )
    assert escalate.status_code == 403

    taken = await client.patch(
        f"/api/v1/users/{groomer_id}",
        json={"email": str(app_context["manager_email"])},
        headers=manager,
    )
    assert taken.status_code == 400

    missing = await client.patch(
        "/api/v1/users/00000000-0000-0000-0000-000000000000",
        json={"first_name": "Nobody"},
        headers=manager,
    )
    assert missing.status_code == 404

    self_edit = await client.patch(
        f"/api/v1/users/{groomer_id}",
        json={"first_name": "Jay"},
        headers=app_context["groomer_headers"],
    )
    assert self_edit.status_code == 403

    suspended = await client.patch(
        f"/api/v1/users/{groomer_id}", json={"status": "suspended"}, headers=manager
    )
    assert suspended.json()["status"] == "suspended"
    locked_out = await client.get(
        "/api/v1/users/me", headers=app_context["groomer_headers"]
    )
    assert locked_out.status_code == 401


async def test_staff_password_reset_and_other_salon(
    app_context: dict[str, Any], salon_factory
) -> None:
    client: AsyncClient = app_context["client"]
    manager = app_context["manager_headers"]

    reset = await client.patch(
        f"/api/v1/users/{app_context['groomer_id']}",
        json={"password": "Fresh-Start9"},
        headers=manager,
    )
    assert reset.status_code == 200
    token = await client.post(
        "/api/v1/auth/token",
        data={"username": str(app_context["groomer_email"]), "password": "Fresh-Start9"},
    )
    assert token.status_code == 200

    sessionmaker = get_sessionmaker()
    async with sessionmaker() as db_session:
        other = await salon_factory(db_session)
    foreign = await client.patch(
        f"/api/v1/users/{other['groomer_id']}",
        json={"first_name": "Poached"},
        headers=manager,
    )
    assert foreign.status_code == 404
