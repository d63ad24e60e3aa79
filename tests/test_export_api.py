"""Billing export endpoint tests"""

from datetime import date, datetime

from app.engine.types import BookingStatus, MealPeriod


async def test_export_groups_confirmed_bookings_by_unit(admin_client, add_booking):
    # In season, short notice: flat amount
    await add_booking(
        12, date(2025, 2, 1), [1], status=BookingStatus.CONFIRMED,
        attendees_final=10, created_at=datetime(2025, 1, 29, 10, 0),
    )
    # In season, booked well ahead: per person with a minimum
    await add_booking(
        12, date(2025, 2, 8), [1, 2], status=BookingStatus.CONFIRMED,
        attendees_final=10, created_at=datetime(2025, 1, 19), fire_preparation_requested=True,
    )
    # Off season
    await add_booking(
        12, date(2025, 7, 15), [3], meal_period=MealPeriod.EVENING,
        status=BookingStatus.CONFIRMED, attendees_final=20, oven_requested=True,
    )
    await add_booking(
        3, date(2025, 3, 1), [4], status=BookingStatus.CONFIRMED,
        attendees_final=3, created_at=datetime(2025, 2, 9),
    )
    # Not billed
    await add_booking(5, date(2025, 3, 1), [5], status=BookingStatus.PENDING)
    await add_booking(3, date(2024, 12, 20), [1], status=BookingStatus.CONFIRMED, attendees_final=8)

    response = await admin_client.get("/export/billing", params={"year": 2025})

    assert response.status_code == 200
    data = response.json()
    assert [unit["unit_number"] for unit in data] == [3, 12]

    unit3, unit12 = data
    assert unit3["total_bookings"] == 1
    assert unit3["total_amount"] == 30

    assert unit12["total_bookings"] == 3
    assert unit12["total_attendees"] == 40
    assert unit12["total_amount"] == 30 + 70 + 0
    assert [line["amount"] for line in unit12["bookings"]] == [30, 70, 0]
    assert unit12["bookings"][1]["services"] == ["fire"]
    assert unit12["bookings"][1]["tables"] == [1, 2]
    assert unit12["bookings"][2]["meal_period"] == "evening"
    assert unit12["bookings"][2]["services"] == ["oven"]


async def test_export_empty_year(manager_client):
    response = await manager_client.get("/export/billing", params={"year": 2031})

    assert response.status_code == 200
    assert response.json() == []


async def test_residents_cannot_export(resident_client):
    response = await resident_client.get("/export/billing", params={"year": 2025})
    assert response.status_code == 403


async def test_export_requires_year(admin_client):
    response = await admin_client.get("/export/billing")
    assert response.status_code == 422


async def test_export_rejects_invalid_year(admin_client):
    response = await admin_client.get("/export/billing", params={"year": 0})

    assert response.status_code == 400
    assert response.json()["field"] == "year"


async def test_export_counts_notice_from_the_local_creation_day(admin_client, add_booking):
    # 23:30 UTC on the 27th is already the 28th in Madrid: four days ahead
    await add_booking(
        12, date(2025, 2, 1), [1], status=BookingStatus.CONFIRMED,
        attendees_final=10, created_at=datetime(2025, 1, 27, 23, 30),
    )
    # 22:30 UTC on the 26th is still the 26th in Madrid: seven days ahead
    await add_booking(
        12, date(2025, 2, 2), [1], status=BookingStatus.CONFIRMED,
        attendees_final=10, created_at=datetime(2025, 1, 26, 22, 30),
    )

    response = await admin_client.get("/export/billing", params={"year": 2025})

    assert response.status_code == 200
    (unit12,) = response.json()
    assert [line["amount"] for line in unit12["bookings"]] == [30, 70]
