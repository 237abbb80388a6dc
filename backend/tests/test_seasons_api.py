"""Season administration API tests."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _authenticate(client: AsyncClient, email: str, password: str) -> dict[str, str]:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


_PRICES = {"low_season_price": 300, "high_season_price": 600, "tennis_season_price": 900}


async def test_season_year_crud(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    admin = await _authenticate(
        client, app_context["admin_email"], app_context["admin_password"]
    )
    member = await _authenticate(
        client, app_context["member_email"], app_context["member_password"]
    )

    for year in (2025, 2026):
        created = await client.post(
            "/api/v1/seasons", json={"year": year, **_PRICES}, headers=admin
        )
        assert created.status_code == 201

    duplicate = await client.post(
        "/api/v1/seasons", json={"year": 2025, **_PRICES}, headers=admin
    )
    assert duplicate.status_code == 400
    assert "2025" in duplicate.json()["detail"]

    denied = await client.post(
        "/api/v1/seasons", json={"year": 2027, **_PRICES}, headers=member
    )
    assert denied.status_code == 403

    listing = await client.get("/api/v1/seasons", headers=member)
    assert [item["year"] for item in listing.json()] == [2026, 2025]

    updated = await client.patch(
        "/api/v1/seasons/2025", json={"high_season_price": 650}, headers=admin
    )
    assert updated.status_code == 200
    assert updated.json()["high_season_price"] == 650
    assert updated.json()["low_season_price"] == 300

    missing = await client.patch(
        "/api/v1/seasons/2030", json={"high_season_price": 1}, headers=admin
    )
    assert missing.status_code == 404


async def test_week_assignments(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    admin = await _authenticate(
        client, app_context["admin_email"], app_context["admin_password"]
    )
    await client.post("/api/v1/seasons", json={"year": 2026, **_PRICES}, headers=admin)

    assigned = await client.put(
        "/api/v1/seasons/2026/weeks",
        json={
            "weeks": [
                {"week_number": 27, "season_type": "high"},
                {"week_number": 28, "season_type": "tennis"},
                {"week_number": 53, "season_type": "high"},
            ]
        },
        headers=admin,
    )
    assert assigned.status_code == 200
    weeks = {item["week_number"]: item["season_type"] for item in assigned.json()["weeks"]}
    assert len(weeks) == 53
    assert weeks[27] == "high"
    assert weeks[28] == "tennis"
    assert weeks[1] == "low"

    replaced = await client.put(
        "/api/v1/seasons/2026/weeks",
        json={"weeks": [{"week_number": 30, "season_type": "high"}]},
        headers=admin,
    )
    weeks = {item["week_number"]: item["season_type"] for item in replaced.json()["weeks"]}
    assert weeks[27] == "low"
    assert weeks[30] == "high"

    out_of_range = await client.put(
        "/api/v1/seasons/2025/weeks",
        json={"weeks": [{"week_number": 53, "season_type": "high"}]},
        headers=admin,
    )
    assert out_of_range.status_code == 404

    await client.post("/api/v1/seasons", json={"year": 2025, **_PRICES}, headers=admin)
    out_of_range = await client.put(
        "/api/v1/seasons/2025/weeks",
        json={"weeks": [{"week_number": 53, "season_type": "high"}]},
        headers=admin,
    )
    assert out_of_range.status_code == 400

    read_back = await client.get("/api/v1/seasons/2026/weeks", headers=admin)
    assert read_back.status_code == 200
    assert read_back.json()["year"] == 2026
