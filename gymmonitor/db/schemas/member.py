from datetime import date, datetime

from .base import CamelModel


class BookingSummary(CamelModel):
    class_name: str
    location_name: str
    start_time: datetime
    duration_minutes: int


class Dashboard(CamelModel):
    dashboard_title: str
    total_bookings: int
    upcoming_bookings: list[BookingSummary]
    total_visits: int
    amount_owed: str


class MembershipDetails(CamelModel):
    club_name: str
    date_joined: datetime
    total_visits: int
    membership_plan_name: str | None = None
    next_billing_date: date | None = None
    amount_due: str
