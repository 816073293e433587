from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..core import security
from ..core.clock import local_today, utc_now
from ..core.constants import format_cents
from ..db import models, schemas
from ..db.models.booking import BookingStatus

logger = logging.getLogger(__name__)


class SignupError(Exception):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def find_by_email(db: Session, email: str) -> models.User | None:
    return db.execute(
        select(models.User).where(func.lower(models.User.email) == email.strip().lower())
    ).scalar_one_or_none()


def authenticate(db: Session, email: str, password: str) -> models.User | None:
    user = find_by_email(db, email)
    if not user:
        return None
    if not security.password_matches(password, user.password_hash):
        return None
    return user


def signup_member(db: Session, payload: schemas.SignUpRequest) -> models.User:
    """Register a member account on the club identified by ``club_code``.

    The first billing date is one billing period after today.
    """

    if find_by_email(db, payload.email) is not None:
        raise SignupError("Email is already in use", status_code=409)
    club = db.execute(
        select(models.Club).where(models.Club.code == payload.club_code)
    ).scalar_one_or_none()
    if club is None:
        raise SignupError("Invalid club code")
    plan = db.get(models.MembershipPlan, payload.membership_plan_id)
    if plan is None:
        raise SignupError("Membership plan not found")
    if plan.club_id != club.id:
        raise SignupError("Membership plan does not belong to club")

    user = models.User(
        club_id=club.id,
        membership_plan_id=plan.id,
        name=payload.name,
        email=payload.email.strip().lower(),
        password_hash=security.hash_password(payload.password),
        role=models.UserRole.member,
        cents_owed=0,
        next_billing_date=local_today() + timedelta(days=plan.billing_period_days),
        date_joined=utc_now(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered member", extra={"user_id": user.id, "club_id": club.id})
    return user


def get_upcoming_bookings(db: Session, user: models.User) -> list[models.Booking]:
    stmt = (
        select(models.Booking)
        .join(models.GymClass)
        .options(
            selectinload(models.Booking.gym_class).selectinload(models.GymClass.location)
        )
        .where(
            models.Booking.member_id == user.id,
            models.Booking.status == BookingStatus.booked,
            models.GymClass.start_time > utc_now(),
        )
        .order_by(models.GymClass.start_time)
    )
    return list(db.execute(stmt).scalars().all())


def get_total_visits(db: Session, user: models.User) -> int:
    return db.scalar(
        select(func.count(models.Visit.id)).where(models.Visit.member_id == user.id)
    ) or 0


def record_visit(db: Session, member: models.User) -> models.Visit:
    visit = models.Visit(member_id=member.id, club_id=member.club_id, scanned_at=utc_now())
    db.add(visit)
    db.commit()
    db.refresh(visit)
    return visit


def get_members_by_club(db: Session, club_id: int) -> list[models.User]:
    stmt = (
        select(models.User)
        .options(selectinload(models.User.membership_plan))
        .where(models.User.club_id == club_id, models.User.role == models.UserRole.member)
        .order_by(models.User.name)
    )
    return list(db.execute(stmt).scalars().all())


def build_dashboard(db: Session, user: models.User) -> schemas.Dashboard:
    upcoming = [
        schemas.BookingSummary(
            class_name=booking.gym_class.name,
            location_name=booking.gym_class.location.name,
            start_time=booking.gym_class.start_time,
            duration_minutes=booking.gym_class.duration_minutes,
        )
        for booking in get_upcoming_bookings(db, user)
    ]
    return schemas.Dashboard(
        dashboard_title=f"{user.name}'s Dashboard",
        total_bookings=len(upcoming),
        upcoming_bookings=upcoming,
        total_visits=get_total_visits(db, user),
        amount_owed=format_cents(user.cents_owed),
    )


def build_membership_details(db: Session, user: models.User) -> schemas.MembershipDetails:
    # Read the ledger fields in one statement so a concurrent billing update is
    # seen either entirely or not at all
    row = db.execute(
        select(
            models.User.cents_owed,
            models.User.next_billing_date,
            models.User.date_joined,
            models.Club.name,
            models.MembershipPlan.name,
        )
        .join(models.Club, models.User.club_id == models.Club.id)
        .outerjoin(models.MembershipPlan, models.User.membership_plan_id == models.MembershipPlan.id)
        .where(models.User.id == user.id)
    ).one()
    cents_owed, next_billing_date, date_joined, club_name, plan_name = row
    return schemas.MembershipDetails(
        club_name=club_name,
        date_joined=date_joined,
        total_visits=get_total_visits(db, user),
        membership_plan_name=plan_name,
        next_billing_date=next_billing_date,
        amount_due=format_cents(cents_owed),
    )


def build_members_overview(db: Session, club_id: int) -> schemas.ClubMembersOverview:
    return schemas.ClubMembersOverview(
        members=[
            schemas.MemberOverview(
                id=member.id,
                name=member.name,
                membership_plan_name=member.membership_plan.name if member.membership_plan else None,
                owes_us=format_cents(member.cents_owed),
            )
            for member in get_members_by_club(db, club_id)
        ]
    )


__all__ = [
    "SignupError",
    "authenticate",
    "build_dashboard",
    "build_members_overview",
    "build_membership_details",
    "find_by_email",
    "get_members_by_club",
    "get_total_visits",
    "get_upcoming_bookings",
    "record_visit",
    "signup_member",
]
