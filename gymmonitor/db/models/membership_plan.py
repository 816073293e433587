from sqlalchemy import CheckConstraint, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..session import Base


class MembershipPlan(Base):
    __tablename__ = "membership_plans"
    __table_args__ = (
        CheckConstraint("billing_period_days > 0", name="ck_membership_plan_period_positive"),
        CheckConstraint("price_cents >= 0", name="ck_membership_plan_price_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    club_id: Mapped[int] = mapped_column(ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    billing_period_days: Mapped[int] = mapped_column(Integer, nullable=False)
    # Per-plan weekly booking cap; falls back to WEEKLY_BOOKING_LIMIT when unset
    classes_per_week: Mapped[int | None] = mapped_column(Integer)

    club = relationship("Club", back_populates="membership_plans")
