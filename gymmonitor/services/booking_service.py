import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterator

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..core.clock import as_utc, club_timezone, utc_now
from ..core.constants import BOOKING_WINDOW_CLASS_WEEK, WEEKLY_BOOKING_WINDOW
from ..db import models
from ..db.models.booking import BookingStatus

logger = logging.getLogger(__name__)


class BookingResult(str, Enum):
    """Every outcome a booking attempt can have."""

    SUCCESS = "Success"
    CLASS_IN_PAST = "ClassInPast"
    ALREADY_BOOKED = "AlreadyBooked"
    FULL = "Full"
    NOT_FOUND = "NotFound"
    WEEKLY_BOOKING_LIMIT_REACHED = "WeeklyBookingLimitReached"


class BookingStatusForMember(str, Enum):
    CAN_BOOK = "CAN_BOOK"
    CANNOT_BOOK = "CANNOT_BOOK"


class BookingUnavailableError(Exception):
    """The booking store failed; the attempt may be retried."""


# Classes sharing a stripe are serialized together
CLASS_LOCK_STRIPES = 64
_class_locks: tuple[threading.Lock, ...] = tuple(threading.Lock() for _ in range(CLASS_LOCK_STRIPES))


@contextmanager
def _class_lock(class_id: int) -> Iterator[None]:
    with _class_locks[class_id % len(_class_locks)]:
        yield


def _effective_weekly_limit(plan: models.MembershipPlan | None) -> int:
    if plan is not None and plan.classes_per_week is not None:
        return plan.classes_per_week
    return get_settings().weekly_booking_limit


def _class_week_bounds(gym_class: models.GymClass) -> tuple[datetime, datetime]:
    tz = club_timezone()
    local_start = as_utc(gym_class.start_time).astimezone(tz)
    monday = local_start.date() - timedelta(days=local_start.weekday())
    week_start = datetime.combine(monday, datetime.min.time(), tzinfo=tz)
    return as_utc(week_start), as_utc(week_start + timedelta(days=7))


def count_member_bookings_in_window(
    db: Session,
    member_id: int,
    gym_class: models.GymClass,
    now: datetime,
) -> int:
    stmt = select(func.count(models.Booking.id)).where(
        models.Booking.member_id == member_id,
        models.Booking.status == BookingStatus.booked,
    )
    if get_settings().booking_window_policy == BOOKING_WINDOW_CLASS_WEEK:
        week_start, week_end = _class_week_bounds(gym_class)
        stmt = stmt.join(models.GymClass).where(
            models.GymClass.start_time >= week_start,
            models.GymClass.start_time < week_end,
        )
    else:
        stmt = stmt.where(
            models.Booking.created_at > now - WEEKLY_BOOKING_WINDOW,
            models.Booking.created_at <= now,
        )
    return db.scalar(stmt) or 0


def count_active_bookings(db: Session, gym_class_id: int) -> int:
    return (
        db.scalar(
            select(func.count(models.Booking.id)).where(
                models.Booking.gym_class_id == gym_class_id,
                models.Booking.status == BookingStatus.booked,
            )
        )
        or 0
    )


def _check_eligibility(
    db: Session,
    member_id: int,
    plan: models.MembershipPlan | None,
    gym_class: models.GymClass,
    now: datetime,
) -> BookingResult | None:
    """Return the first rule the booking would break, or ``None`` if it is allowed."""

    if as_utc(gym_class.start_time) <= now:
        return BookingResult.CLASS_IN_PAST
    existing = db.scalar(
        select(models.Booking.id).where(
            models.Booking.member_id == member_id,
            models.Booking.gym_class_id == gym_class.id,
            models.Booking.status == BookingStatus.booked,
        )
    )
    if existing is not None:
        return BookingResult.ALREADY_BOOKED
    if count_member_bookings_in_window(db, member_id, gym_class, now) >= _effective_weekly_limit(plan):
        return BookingResult.WEEKLY_BOOKING_LIMIT_REACHED
    if count_active_bookings(db, gym_class.id) >= gym_class.max_capacity:
        return BookingResult.FULL
    return None


DUPLICATE_BOOKING_CONSTRAINT = "uq_booking_member_class"
SQLITE_DUPLICATE_BOOKING = "UNIQUE constraint failed: bookings.member_id, bookings.gym_class_id"


def is_duplicate_booking(exc: IntegrityError) -> bool:
    """True if ``exc`` is a violation of the one-booking-per-member-per-class constraint."""

    constraint = getattr(getattr(exc.orig, "diag", None), "constraint_name", None)
    if constraint is not None:
        return constraint == DUPLICATE_BOOKING_CONSTRAINT
    return SQLITE_DUPLICATE_BOOKING in str(exc.orig)


def _member_plan(db: Session, member: models.User) -> models.MembershipPlan | None:
    if member.membership_plan_id is None:
        return None
    return db.get(models.MembershipPlan, member.membership_plan_id)


def book_class(
    db: Session,
    class_id: int,
    member: models.User,
    *,
    now: datetime | None = None,
) -> BookingResult:
    """Reserve a seat in ``class_id`` for ``member``.

    The whole check-then-insert sequence runs under a per-class lock and a row
    lock on the class, so concurrent attempts against the same class are
    serialized and capacity can never be exceeded.

    Raises:
        BookingUnavailableError: if the database fails while booking.
    """

    now = as_utc(now) if now else utc_now()
    member_id = member.id
    with _class_lock(class_id):
        try:
            gym_class = db.execute(
                select(models.GymClass)
                .where(models.GymClass.id == class_id)
                .with_for_update()
            ).scalar_one_or_none()
            if gym_class is None:
                db.rollback()
                return BookingResult.NOT_FOUND
            outcome = _check_eligibility(db, member_id, _member_plan(db, member), gym_class, now)
            if outcome is not None:
                db.rollback()
                logger.info(
                    "Booking rejected",
                    extra={"class_id": class_id, "user_id": member_id, "result": outcome.value},
                )
                return outcome
            db.add(
                models.Booking(
                    member_id=member_id,
                    gym_class_id=gym_class.id,
                    status=BookingStatus.booked,
                    created_at=now,
                )
            )
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            if is_duplicate_booking(exc):
                return BookingResult.ALREADY_BOOKED
            logger.exception("Booking insert failed", extra={"class_id": class_id, "user_id": member_id})
            raise BookingUnavailableError("Booking could not be saved") from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Booking store unavailable", extra={"class_id": class_id, "user_id": member_id})
            raise BookingUnavailableError("Booking could not be saved") from exc
    logger.info("Class booked", extra={"class_id": class_id, "user_id": member_id})
    return BookingResult.SUCCESS


def get_booking_status_for_member(
    db: Session,
    member: models.User | None,
    gym_class: models.GymClass,
    *,
    now: datetime | None = None,
) -> BookingStatusForMember:
    if member is None or not member.is_member:
        return BookingStatusForMember.CANNOT_BOOK
    now = as_utc(now) if now else utc_now()
    outcome = _check_eligibility(db, member.id, _member_plan(db, member), gym_class, now)
    if outcome is None:
        return BookingStatusForMember.CAN_BOOK
    return BookingStatusForMember.CANNOT_BOOK


__all__ = [
    "BookingResult",
    "BookingStatusForMember",
    "BookingUnavailableError",
    "book_class",
    "count_active_bookings",
    "count_member_bookings_in_window",
    "get_booking_status_for_member",
    "is_duplicate_booking",
]
