from datetime import datetime, timedelta, timezone

import pytest

from factories import (
    auth_header,
    create_class,
    create_club,
    create_location,
    create_member,
    create_plan,
    create_staff,
)


@pytest.fixture()
def club_data(api_client):
    client, SessionLocal = api_client
    db = SessionLocal()
    club = create_club(db, name="Harbour Fitness")
    location = create_location(db, club, name="Studio A")
    plan = create_plan(db, club, name="Monthly")
    staff = create_staff(db, club, name="Sam Coach")
    member = create_member(
        db, club, plan, name="Mia Member", cents_owed=500, next_billing_date=datetime(2030, 2, 1).date()
    )
    other_member = create_member(db, club, None, email="zed@example.com", name="Zed Walk-in")
    start = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(days=1)
    gym_class = create_class(db, staff, location, start_time=start, name="Pilates")
    db.close()
    return client, SessionLocal, {
        "club": club,
        "location": location,
        "staff": staff,
        "member": member,
        "other_member": other_member,
        "class": gym_class,
    }


def test_member_dashboard(club_data):
    client, _, data = club_data
    headers = auth_header(data["member"])
    assert client.post(f"/api/classes/{data['class'].id}/book", headers=headers).status_code == 201
    assert client.post("/api/member/visits", headers=headers).status_code == 201

    response = client.get("/api/member/dashboard", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["dashboardTitle"] == "Mia Member's Dashboard"
    assert body["totalBookings"] == 1
    assert body["totalVisits"] == 1
    assert body["amountOwed"] == "$5.00"
    assert body["upcomingBookings"][0]["className"] == "Pilates"
    assert body["upcomingBookings"][0]["locationName"] == "Studio A"


def test_membership_details(club_data):
    client, _, data = club_data

    response = client.get("/api/member/membership", headers=auth_header(data["member"]))

    assert response.status_code == 200
    body = response.json()
    assert body["clubName"] == "Harbour Fitness"
    assert body["membershipPlanName"] == "Monthly"
    assert body["nextBillingDate"] == "2030-02-01"
    assert body["amountDue"] == "$5.00"
    assert body["totalVisits"] == 0


def test_record_visit(club_data):
    client, _, data = club_data

    response = client.post("/api/member/visits", headers=auth_header(data["member"]))

    assert response.status_code == 201
    assert response.json() == {"message": "Visit recorded"}


def test_member_endpoints_reject_staff(club_data):
    client, _, data = club_data

    response = client.get("/api/member/dashboard", headers=auth_header(data["staff"]))

    assert response.status_code == 403
    assert response.json() == {"error": "Forbidden"}


def test_staff_members_overview(club_data):
    client, _, data = club_data

    response = client.get("/api/staff/members", headers=auth_header(data["staff"]))

    assert response.status_code == 200
    assert response.json() == {
        "members": [
            {"id": data["member"].id, "name": "Mia Member", "membershipPlanName": "Monthly", "owesUs": "$5.00"},
            {"id": data["other_member"].id, "name": "Zed Walk-in", "membershipPlanName": None, "owesUs": "$0.00"},
        ]
    }


def test_staff_endpoints_reject_members(club_data):
    client, _, data = club_data

    response = client.get("/api/staff/members", headers=auth_header(data["member"]))

    assert response.status_code == 403


def test_staff_schedule(club_data):
    client, _, data = club_data
    gym_class = data["class"]
    client.post(f"/api/classes/{gym_class.id}/book", headers=auth_header(data["member"]))

    response = client.get(
        "/api/staff/schedule",
        params={"date": gym_class.start_time.date().isoformat()},
        headers=auth_header(data["staff"]),
    )

    assert response.status_code == 200
    entries = response.json()
    assert len(entries) == 1
    assert entries[0]["className"] == "Pilates"
    assert entries[0]["currentBookings"] == 1

    upcoming = client.get("/api/staff/schedule", headers=auth_header(data["staff"])).json()
    assert [entry["classId"] for entry in upcoming] == [gym_class.id]


def _class_payload(location_id, start, **overrides):
    payload = {
        "locationId": location_id,
        "name": "HIIT",
        "description": "Intervals",
        "startTime": start.isoformat(),
        "endTime": (start + timedelta(minutes=30)).isoformat(),
        "maxCapacity": 12,
    }
    payload.update(overrides)
    return payload


def test_staff_creates_class(club_data):
    client, _, data = club_data
    start = datetime(2031, 5, 5, 18, 0, tzinfo=timezone.utc)

    response = client.post(
        "/api/staff/classes",
        json=_class_payload(data["location"].id, start),
        headers=auth_header(data["staff"]),
    )

    assert response.status_code == 201
    body = response.json()
    assert response.headers["location"] == f"/api/classes/{body['id']}"
    assert body["name"] == "HIIT"
    assert body["instructorName"] == "Sam Coach"
    assert body["locationName"] == "Studio A"

    details = client.get(response.headers["location"], headers=auth_header(data["member"]))
    assert details.status_code == 200
    assert details.json()["bookingStatus"] == "CAN_BOOK"


def test_create_class_rejects_end_before_start(club_data):
    client, _, data = club_data
    start = datetime(2031, 5, 5, 18, 0, tzinfo=timezone.utc)

    response = client.post(
        "/api/staff/classes",
        json=_class_payload(data["location"].id, start, endTime=start.isoformat()),
        headers=auth_header(data["staff"]),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "End time must be after start time"}


def test_create_class_rejects_foreign_location(club_data):
    client, SessionLocal, data = club_data
    db = SessionLocal()
    other_club = create_club(db, code="OTHER", name="Other Gym")
    foreign_location = create_location(db, other_club)
    db.close()

    response = client.post(
        "/api/staff/classes",
        json=_class_payload(foreign_location.id, datetime(2031, 5, 5, 18, 0, tzinfo=timezone.utc)),
        headers=auth_header(data["staff"]),
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Location does not belong to staff's club"}


def test_create_class_rejects_zero_capacity(club_data):
    client, _, data = club_data

    response = client.post(
        "/api/staff/classes",
        json=_class_payload(data["location"].id, datetime(2031, 5, 5, 18, 0, tzinfo=timezone.utc), maxCapacity=0),
        headers=auth_header(data["staff"]),
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("maxCapacity")


def test_health(api_client):
    client, _ = api_client

    assert client.get("/api/health").json() == {"status": "ok"}
