"""Guest apartment booking API integration tests."""

from __future__ import annotations

import uuid
from typing import Any

import pytest
from httpx import AsyncClient

from intranet.db.session import get_sessionmaker
from intranet.models.audit_event import AuditEventType
from intranet.services import audit_service

pytestmark = pytest.mark.asyncio


async def _authenticate(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _booking(apartment_id: Any, start: str, end: str, **extra: Any) -> dict[str, Any]:
    return {
        "apartment_id": str(apartment_id),
        "start_date": start,
        "end_date": end,
        "guest_name": "Mormor Greta",
        "phone_number": "070-123 45 67",
        **extra,
    }


async def test_booking_lifecycle(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    apartment_id = app_context["apartment_id"]
    member = await _authenticate(
        client, app_context["member_email"], app_context["member_password"]
    )

    created = await client.post(
        "/api/v1/bookings",
        json=_booking(apartment_id, "2025-06-10", "2025-06-12"),
        headers=member,
    )
    assert created.status_code == 201, created.text
    booking = created.json()
    assert booking["status"] == "confirmed"
    assert booking["user_email"] == app_context["member_email"]
    assert booking["apartment_name"] == "Gästlägenheten"
    # Two nights at the apartment's base price; no season table exists.
    assert booking["total_price"] == 800

    conflict = await client.post(
        "/api/v1/bookings",
        json=_booking(apartment_id, "2025-06-11", "2025-06-14"),
        headers=member,
    )
    assert conflict.status_code == 409

    turnover = await client.post(
        "/api/v1/bookings",
        json=_booking(apartment_id, "2025-06-12", "2025-06-14"),
        headers=member,
    )
    assert turnover.status_code == 201

    listing = await client.get(
        "/api/v1/bookings", params={"apartment_id": str(apartment_id)}, headers=member
    )
    assert [item["start_date"] for item in listing.json()] == ["2025-06-10", "2025-06-12"]

    fetched = await client.get(f"/api/v1/bookings/{booking['id']}", headers=member)
    assert fetched.status_code == 200
    assert fetched.json()["guest_name"] == "Mormor Greta"

    for _ in range(2):
        cancelled = await client.delete(f"/api/v1/bookings/{booking['id']}", headers=member)
        assert cancelled.status_code == 204
    assert (await client.get(f"/api/v1/bookings/{booking['id']}", headers=member)).status_code == 404

    sessionmaker = get_sessionmaker()
    async with sessionmaker() as session:
        trail = await audit_service.list_events(session, booking_id=uuid.UUID(booking["id"]))
    assert sorted(event.event_type.value for event in trail) == [
        AuditEventType.BOOKING_CANCELLED.value,
        AuditEventType.BOOKING_CREATED.value,
    ]


async def test_booking_validation_errors(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    member = await _authenticate(
        client, app_context["member_email"], app_context["member_password"]
    )

    inverted = await client.post(
        "/api/v1/bookings",
        json=_booking(app_context["apartment_id"], "2025-06-12", "2025-06-10"),
        headers=member,
    )
    assert inverted.status_code == 400

    blank_guest = await client.post(
        "/api/v1/bookings",
        json=_booking(app_context["apartment_id"], "2025-06-10", "2025-06-12", guest_name=""),
        headers=member,
    )
    assert blank_guest.status_code == 422

    unknown = await client.post(
        "/api/v1/bookings",
        json=_booking(uuid.uuid4(), "2025-06-10", "2025-06-12"),
        headers=member,
    )
    assert unknown.status_code == 404


async def test_only_owner_or_admin_can_cancel(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    member = await _authenticate(
        client, app_context["member_email"], app_context["member_password"]
    )
    neighbour = await _authenticate(
        client, app_context["neighbour_email"], app_context["member_password"]
    )
    admin = await _authenticate(
        client, app_context["admin_email"], app_context["admin_password"]
    )
    created = await client.post(
        "/api/v1/bookings",
        json=_booking(app_context["apartment_id"], "2025-07-01", "2025-07-03"),
        headers=member,
    )
    booking_id = created.json()["id"]

    denied = await client.delete(f"/api/v1/bookings/{booking_id}", headers=neighbour)
    assert denied.status_code == 403
    allowed = await client.delete(f"/api/v1/bookings/{booking_id}", headers=admin)
    assert allowed.status_code == 204


async def test_admin_rejects_booking_and_frees_dates(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    member = await _authenticate(
        client, app_context["member_email"], app_context["member_password"]
    )
    admin = await _authenticate(
        client, app_context["admin_email"], app_context["admin_password"]
    )
    apartment_id = app_context["apartment_id"]
    created = await client.post(
        "/api/v1/bookings", json=_booking(apartment_id, "2025-08-01", "2025-08-04"), headers=member
    )
    booking_id = created.json()["id"]

    forbidden = await client.patch(
        f"/api/v1/bookings/{booking_id}/status", json={"status": "rejected"}, headers=member
    )
    assert forbidden.status_code == 403

    rejected = await client.patch(
        f"/api/v1/bookings/{booking_id}/status", json={"status": "rejected"}, headers=admin
    )
    assert rejected.status_code == 200
    assert rejected.json()["status"] == "rejected"

    reopened = await client.patch(
        f"/api/v1/bookings/{booking_id}/status", json={"status": "confirmed"}, headers=admin
    )
    assert reopened.status_code == 400

    rebooked = await client.post(
        "/api/v1/bookings", json=_booking(apartment_id, "2025-08-02", "2025-08-03"), headers=member
    )
    assert rebooked.status_code == 201

    missing = await client.patch(
        f"/api/v1/bookings/{uuid.uuid4()}/status", json={"status": "rejected"}, headers=admin
    )
    assert missing.status_code == 404
    assert "not found" in missing.json()["detail"]


async def test_availability_and_calendar(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    member = await _authenticate(
        client, app_context["member_email"], app_context["member_password"]
    )
    apartment_id = str(app_context["apartment_id"])
    for start, end in (("2025-06-10", "2025-06-12"), ("2025-06-12", "2025-06-13")):
        response = await client.post(
            "/api/v1/bookings", json=_booking(apartment_id, start, end), headers=member
        )
        assert response.status_code == 201

    availability = await client.get(
        "/api/v1/bookings/availability",
        params={
            "apartment_id": apartment_id,
            "start_date": "2025-06-09",
            "end_date": "2025-06-14",
        },
        headers=member,
    )
    assert availability.status_code == 200
    assert [day["booked"] for day in availability.json()["days"]] == [
        False,
        True,
        True,
        False,
        True,
        False,
    ]

    inverted = await client.get(
        "/api/v1/bookings/availability",
        params={
            "apartment_id": apartment_id,
            "start_date": "2025-06-14",
            "end_date": "2025-06-09",
        },
        headers=member,
    )
    assert inverted.status_code == 400

    calendar = await client.get(
        "/api/v1/bookings/calendar",
        params={
            "apartment_id": apartment_id,
            "year": 2025,
            "month": 6,
            "start": "2025-06-16",
            "end": "2025-06-18",
        },
        headers=member,
    )
    assert calendar.status_code == 200
    body = calendar.json()
    assert body["previous"] == {"year": 2025, "month": 5}
    assert body["next"] == {"year": 2025, "month": 7}
    first_row = body["weeks"][0]
    assert first_row[:6] == [None] * 6
    assert first_row[6]["date"] == "2025-06-01"
    cells = {cell["date"]: cell for row in body["weeks"] for cell in row if cell}
    assert cells["2025-06-11"]["is_booked"]
    assert not cells["2025-06-12"]["is_booked"]
    assert cells["2025-06-17"]["is_selected"]
    assert body["selection"]["state"] == "complete"
    assert body["quote"]["night_count"] == 2
    assert body["quote"]["total"] == 800


async def test_quote_uses_season_prices(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    admin = await _authenticate(
        client, app_context["admin_email"], app_context["admin_password"]
    )
    await client.post(
        "/api/v1/seasons",
        json={
            "year": 2025,
            "low_season_price": 300,
            "high_season_price": 600,
            "tennis_season_price": 900,
        },
        headers=admin,
    )
    await client.put(
        "/api/v1/seasons/2025/weeks",
        json={"weeks": [{"week_number": 24, "season_type": "high"}]},
        headers=admin,
    )

    quote = await client.get(
        "/api/v1/bookings/quote",
        params={
            "apartment_id": str(app_context["apartment_id"]),
            "start_date": "2025-06-08",
            "end_date": "2025-06-11",
        },
        headers=admin,
    )
    assert quote.status_code == 200
    body = quote.json()
    assert [night["season"] for night in body["nights"]] == ["low", "high", "high"]
    assert body["total"] == 300 + 600 + 600
