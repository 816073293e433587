from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import DateTime, Enum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..session import Base


class BookingStatus(str, PyEnum):
    booked = "BOOKED"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("member_id", "gym_class_id", name="uq_booking_member_class"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    member_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    gym_class_id: Mapped[int] = mapped_column(ForeignKey("gym_classes.id", ondelete="CASCADE"), index=True)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus, values_callable=lambda statuses: [status.value for status in statuses]),
        default=BookingStatus.booked,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    member = relationship("User")
    gym_class = relationship("GymClass", back_populates="bookings")
