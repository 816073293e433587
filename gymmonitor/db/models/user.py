from datetime import date, datetime
from enum import Enum as PyEnum
from sqlalchemy import Date, DateTime, Enum, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..session import Base


class UserRole(str, PyEnum):
    member = "MEMBER"
    staff = "STAFF"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    club_id: Mapped[int] = mapped_column(ForeignKey("clubs.id"), nullable=False, index=True)
    membership_plan_id: Mapped[int | None] = mapped_column(ForeignKey("membership_plans.id"))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, values_callable=lambda roles: [role.value for role in roles]),
        default=UserRole.member,
        nullable=False,
    )
    cents_owed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    next_billing_date: Mapped[date | None] = mapped_column(Date, index=True)
    date_joined: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    club = relationship("Club")
    membership_plan = relationship("MembershipPlan")

    @property
    def is_member(self) -> bool:
        return self.role == UserRole.member
