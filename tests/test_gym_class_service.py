from datetime import date, datetime, timedelta, timezone

import pytest

from factories import create_class, create_club, create_location, create_member, create_plan, create_staff
from gymmonitor.config import get_settings
from gymmonitor.db import schemas
from gymmonitor.services import booking_service, gym_class_service


def test_get_classes_for_date_filters_by_club_and_day(db_session):
    club = create_club(db_session)
    other_club = create_club(db_session, code="OTHER")
    location = create_location(db_session, club)
    other_location = create_location(db_session, other_club)
    staff = create_staff(db_session, club)
    other_staff = create_staff(db_session, other_club, email="other-coach@example.com")
    day = date(2030, 4, 10)
    morning = create_class(db_session, staff, location, start_time=datetime(2030, 4, 10, 7, tzinfo=timezone.utc))
    evening = create_class(db_session, staff, location, start_time=datetime(2030, 4, 10, 19, tzinfo=timezone.utc))
    create_class(db_session, staff, location, start_time=datetime(2030, 4, 11, 7, tzinfo=timezone.utc))
    create_class(db_session, other_staff, other_location, start_time=datetime(2030, 4, 10, 8, tzinfo=timezone.utc))

    classes = gym_class_service.get_classes_for_date(db_session, club.id, day)

    assert [gym_class.id for gym_class in classes] == [morning.id, evening.id]


def test_day_bounds_follow_club_timezone(db_session, monkeypatch):
    monkeypatch.setattr(get_settings(), "timezone", "Australia/Sydney")
    club = create_club(db_session)
    location = create_location(db_session, club)
    staff = create_staff(db_session, club)
    # 23:00 UTC on the 9th is already the morning of the 10th in Sydney
    early = create_class(db_session, staff, location, start_time=datetime(2030, 4, 9, 23, tzinfo=timezone.utc))

    assert [c.id for c in gym_class_service.get_classes_for_date(db_session, club.id, date(2030, 4, 10))] == [early.id]
    assert gym_class_service.get_classes_for_date(db_session, club.id, date(2030, 4, 9)) == []


def test_staff_schedule_queries(db_session):
    club = create_club(db_session)
    location = create_location(db_session, club)
    coach = create_staff(db_session, club)
    other_coach = create_staff(db_session, club, email="second@example.com")
    now = datetime.now(timezone.utc)
    upcoming = create_class(db_session, coach, location, start_time=now + timedelta(days=2))
    create_class(db_session, coach, location, start_time=now - timedelta(days=2))
    create_class(db_session, other_coach, location, start_time=now + timedelta(days=2))

    assert [c.id for c in gym_class_service.get_upcoming_classes_staff_teaches(db_session, coach.id)] == [upcoming.id]
    on_day = gym_class_service.get_classes_staff_teaches_on_date(
        db_session, coach.id, upcoming.start_time.date()
    )
    assert [c.id for c in on_day] == [upcoming.id]


def test_get_booking_counts(db_session):
    club = create_club(db_session)
    location = create_location(db_session, club)
    plan = create_plan(db_session, club)
    staff = create_staff(db_session, club)
    busy = create_class(db_session, staff, location)
    quiet = create_class(db_session, staff, location)
    for index in range(3):
        member = create_member(db_session, club, plan, email=f"m{index}@example.com")
        booking_service.book_class(db_session, busy.id, member)

    assert gym_class_service.get_booking_counts(db_session, [busy.id, quiet.id]) == {busy.id: 3}
    assert gym_class_service.get_booking_counts(db_session, []) == {}


def test_create_class_validation(db_session):
    club = create_club(db_session)
    location = create_location(db_session, club)
    staff = create_staff(db_session, club)
    start = datetime(2031, 1, 1, 10, tzinfo=timezone.utc)

    with pytest.raises(gym_class_service.ClassCreationError, match="Location not found"):
        gym_class_service.create_class(
            db_session,
            staff,
            schemas.GymClassCreate(
                location_id=999, name="Row", start_time=start, end_time=start + timedelta(hours=1), max_capacity=5
            ),
        )

    gym_class = gym_class_service.create_class(
        db_session,
        staff,
        schemas.GymClassCreate(
            location_id=location.id, name="Row", start_time=start, end_time=start + timedelta(hours=1), max_capacity=5
        ),
    )
    assert gym_class.staff_id == staff.id
    assert gym_class.duration_minutes == 60
    assert gym_class.location.club.id == club.id
