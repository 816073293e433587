from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from ...api import deps
from ...db.session import get_db
from ...db import models, schemas
from ...services import booking_service, gym_class_service
from ...services.booking_service import BookingResult

router = APIRouter(prefix="/classes", tags=["classes"])

BOOKING_RESPONSES: dict[BookingResult, tuple[int, str]] = {
    BookingResult.SUCCESS: (status.HTTP_201_CREATED, "Successfully booked class"),
    BookingResult.CLASS_IN_PAST: (status.HTTP_400_BAD_REQUEST, "Cannot book a class in the past"),
    BookingResult.ALREADY_BOOKED: (status.HTTP_400_BAD_REQUEST, "You have already booked this class"),
    BookingResult.FULL: (status.HTTP_400_BAD_REQUEST, "This class is full"),
    BookingResult.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Class not found"),
    BookingResult.WEEKLY_BOOKING_LIMIT_REACHED: (
        status.HTTP_400_BAD_REQUEST,
        "Weekly booking limit has already been reached",
    ),
}


def class_details(gym_class: models.GymClass, booking_status: str | None = None) -> schemas.GymClassDetails:
    return schemas.GymClassDetails(
        id=gym_class.id,
        name=gym_class.name,
        instructor_name=gym_class.staff.name,
        start_time=gym_class.start_time,
        end_time=gym_class.end_time,
        club_name=gym_class.location.club.name,
        location_name=gym_class.location.name,
        description=gym_class.description or "",
        booking_status=booking_status,
    )


@router.get("/timetable", response_model=list[schemas.TimetableEntry])
def timetable(
    day: date | None = Query(default=None, alias="date", description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
    user: models.User = Depends(deps.get_current_user),
):
    if day is not None:
        gym_classes = gym_class_service.get_classes_for_date(db, user.club_id, day)
    else:
        gym_classes = gym_class_service.get_upcoming_classes_for_club(db, user.club_id)
    counts = gym_class_service.get_booking_counts(db, [gym_class.id for gym_class in gym_classes])
    return [
        schemas.TimetableEntry(
            class_id=gym_class.id,
            class_name=gym_class.name,
            instructor_name=gym_class.staff.name,
            location_name=gym_class.location.name,
            start_time=gym_class.start_time,
            duration_minutes=gym_class.duration_minutes,
            current_bookings=counts.get(gym_class.id, 0),
            max_capacity=gym_class.max_capacity,
        )
        for gym_class in gym_classes
    ]


@router.get("/{class_id}", response_model=schemas.GymClassDetails)
def get_class_details(
    class_id: int,
    db: Session = Depends(get_db),
    user: models.User = Depends(deps.get_current_user),
):
    gym_class = gym_class_service.get_class_by_id(db, class_id)
    if not gym_class:
        raise HTTPException(status_code=404, detail="Class not found")
    booking_status = booking_service.get_booking_status_for_member(db, user, gym_class)
    return class_details(gym_class, booking_status.value)


@router.post("/{class_id}/book", status_code=status.HTTP_201_CREATED, response_model=schemas.MessageResponse)
def book_class(
    class_id: int,
    db: Session = Depends(get_db),
    user: models.User = Depends(deps.get_current_user),
):
    if not user.is_member:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only members can book classes")
    try:
        result = booking_service.book_class(db, class_id, user)
    except booking_service.BookingUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Booking is temporarily unavailable, please try again",
        ) from exc
    status_code, message = BOOKING_RESPONSES[result]
    if result is BookingResult.SUCCESS:
        return schemas.MessageResponse(message=message)
    return JSONResponse(status_code=status_code, content={"error": message})
