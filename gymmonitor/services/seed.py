import logging
from datetime import timedelta
from sqlalchemy.orm import Session
from ..db.session import SessionLocal
from ..db import models
from ..core import security
from ..core.clock import local_today, utc_now

logger = logging.getLogger(__name__)

DEMO_CLUB_CODE = "DEMO"


def seed(session: Session) -> None:
    if session.query(models.Club).filter_by(code=DEMO_CLUB_CODE).first():
        logger.info("Demo club already exists")
        return
    club = models.Club(name="GymMonitor Demo Club", code=DEMO_CLUB_CODE)
    session.add(club)
    session.flush()
    studio = models.Location(club_id=club.id, name="Studio 1")
    plan = models.MembershipPlan(
        club_id=club.id,
        name="Standard Monthly",
        price_cents=4999,
        billing_period_days=30,
        classes_per_week=3,
    )
    session.add_all([studio, plan])
    session.flush()
    staff = models.User(
        club_id=club.id,
        name="Demo Instructor",
        email="staff@demo.gym",
        password_hash=security.hash_password("staffpass123"),
        role=models.UserRole.staff,
    )
    member = models.User(
        club_id=club.id,
        membership_plan_id=plan.id,
        name="Demo Member",
        email="member@demo.gym",
        password_hash=security.hash_password("memberpass123"),
        role=models.UserRole.member,
        next_billing_date=local_today() + timedelta(days=plan.billing_period_days),
    )
    session.add_all([staff, member])
    session.flush()
    start = utc_now().replace(minute=0, second=0, microsecond=0) + timedelta(days=1)
    session.add(
        models.GymClass(
            staff_id=staff.id,
            location_id=studio.id,
            name="Morning Yoga",
            description="Gentle flow to start the day",
            start_time=start,
            end_time=start + timedelta(hours=1),
            max_capacity=12,
        )
    )
    session.commit()
    logger.info("Created demo club '%s'", DEMO_CLUB_CODE)


if __name__ == "__main__":
    with SessionLocal() as session:
        seed(session)
        print("Seed data created")
