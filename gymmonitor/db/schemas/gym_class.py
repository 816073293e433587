from datetime import datetime

from pydantic import Field

from .base import CamelModel


class GymClassCreate(CamelModel):
    location_id: int
    name: str = Field(min_length=1, max_length=128)
    description: str = ""
    start_time: datetime
    end_time: datetime
    max_capacity: int = Field(gt=0)


class GymClassDetails(CamelModel):
    id: int
    name: str
    instructor_name: str
    start_time: datetime
    end_time: datetime
    club_name: str
    location_name: str
    description: str
    booking_status: str | None = None


class TimetableEntry(CamelModel):
    class_id: int
    class_name: str
    instructor_name: str
    location_name: str
    start_time: datetime
    duration_minutes: int
    current_bookings: int
    max_capacity: int


class StaffScheduleEntry(CamelModel):
    class_id: int
    class_name: str
    location_name: str
    start_time: datetime
    duration_minutes: int
    current_bookings: int
    max_capacity: int
