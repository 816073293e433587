from datetime import date, datetime, time, timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..core.clock import as_utc, club_timezone, utc_now
from ..db import models, schemas
from ..db.models.booking import BookingStatus


class ClassCreationError(ValueError):
    pass


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    tz = club_timezone()
    start = datetime.combine(day, time.min, tzinfo=tz)
    return as_utc(start), as_utc(start + timedelta(days=1))


def _class_query():
    return select(models.GymClass).options(
        selectinload(models.GymClass.staff),
        selectinload(models.GymClass.location).selectinload(models.Location.club),
    )


def get_class_by_id(db: Session, class_id: int) -> models.GymClass | None:
    return db.execute(
        _class_query().where(models.GymClass.id == class_id)
    ).scalar_one_or_none()


def get_classes_for_date(db: Session, club_id: int, day: date) -> list[models.GymClass]:
    start, end = _day_bounds(day)
    stmt = (
        _class_query()
        .join(models.Location)
        .where(
            models.Location.club_id == club_id,
            models.GymClass.start_time >= start,
            models.GymClass.start_time < end,
        )
        .order_by(models.GymClass.start_time)
    )
    return list(db.execute(stmt).scalars().all())


def get_upcoming_classes_for_club(db: Session, club_id: int) -> list[models.GymClass]:
    stmt = (
        _class_query()
        .join(models.Location)
        .where(
            models.Location.club_id == club_id,
            models.GymClass.start_time >= utc_now(),
        )
        .order_by(models.GymClass.start_time)
    )
    return list(db.execute(stmt).scalars().all())


def get_classes_staff_teaches_on_date(db: Session, staff_id: int, day: date) -> list[models.GymClass]:
    start, end = _day_bounds(day)
    stmt = (
        _class_query()
        .where(
            models.GymClass.staff_id == staff_id,
            models.GymClass.start_time >= start,
            models.GymClass.start_time < end,
        )
        .order_by(models.GymClass.start_time)
    )
    return list(db.execute(stmt).scalars().all())


def get_upcoming_classes_staff_teaches(db: Session, staff_id: int) -> list[models.GymClass]:
    stmt = (
        _class_query()
        .where(
            models.GymClass.staff_id == staff_id,
            models.GymClass.start_time >= utc_now(),
        )
        .order_by(models.GymClass.start_time)
    )
    return list(db.execute(stmt).scalars().all())


def get_booking_counts(db: Session, class_ids: list[int]) -> dict[int, int]:
    if not class_ids:
        return {}
    rows = db.execute(
        select(models.Booking.gym_class_id, func.count(models.Booking.id))
        .where(models.Booking.gym_class_id.in_(class_ids))
        .where(models.Booking.status == BookingStatus.booked)
        .group_by(models.Booking.gym_class_id)
    ).all()
    return {class_id: int(count) for class_id, count in rows}


def create_class(
    db: Session,
    staff: models.User,
    payload: schemas.GymClassCreate,
) -> models.GymClass:
    """Create a class taught by ``staff`` at one of their club's locations.

    Raises:
        ClassCreationError: if the location is unknown, belongs to another
            club, or the class does not end after it starts.
    """

    location = db.get(models.Location, payload.location_id)
    if location is None:
        raise ClassCreationError("Location not found")
    if location.club_id != staff.club_id:
        raise ClassCreationError("Location does not belong to staff's club")
    start_time = as_utc(payload.start_time)
    end_time = as_utc(payload.end_time)
    if end_time <= start_time:
        raise ClassCreationError("End time must be after start time")

    gym_class = models.GymClass(
        staff_id=staff.id,
        location_id=location.id,
        name=payload.name,
        description=payload.description,
        start_time=start_time,
        end_time=end_time,
        max_capacity=payload.max_capacity,
    )
    db.add(gym_class)
    db.commit()
    return get_class_by_id(db, gym_class.id)


__all__ = [
    "ClassCreationError",
    "create_class",
    "get_booking_counts",
    "get_class_by_id",
    "get_classes_for_date",
    "get_classes_staff_teaches_on_date",
    "get_upcoming_classes_for_club",
    "get_upcoming_classes_staff_teaches",
]
