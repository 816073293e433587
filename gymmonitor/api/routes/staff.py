from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session
from ...api import deps
from ...db.session import get_db
from ...db import models, schemas
from ...services import gym_class_service, user_service
from .classes import class_details

router = APIRouter(prefix="/staff", tags=["staff"])

require_staff = deps.require_roles(models.UserRole.staff)


@router.get("/members", response_model=schemas.ClubMembersOverview)
def view_club_members(
    db: Session = Depends(get_db),
    staff: models.User = Depends(require_staff),
):
    return user_service.build_members_overview(db, staff.club_id)


@router.get("/schedule", response_model=list[schemas.StaffScheduleEntry])
def view_schedule(
    day: date | None = Query(default=None, alias="date", description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
    staff: models.User = Depends(require_staff),
):
    if day is not None:
        gym_classes = gym_class_service.get_classes_staff_teaches_on_date(db, staff.id, day)
    else:
        gym_classes = gym_class_service.get_upcoming_classes_staff_teaches(db, staff.id)
    counts = gym_class_service.get_booking_counts(db, [gym_class.id for gym_class in gym_classes])
    return [
        schemas.StaffScheduleEntry(
            class_id=gym_class.id,
            class_name=gym_class.name,
            location_name=gym_class.location.name,
            start_time=gym_class.start_time,
            duration_minutes=gym_class.duration_minutes,
            current_bookings=counts.get(gym_class.id, 0),
            max_capacity=gym_class.max_capacity,
        )
        for gym_class in gym_classes
    ]


@router.post("/classes", status_code=status.HTTP_201_CREATED, response_model=schemas.GymClassDetails)
def create_class(
    payload: schemas.GymClassCreate,
    response: Response,
    db: Session = Depends(get_db),
    staff: models.User = Depends(require_staff),
):
    try:
        gym_class = gym_class_service.create_class(db, staff, payload)
    except gym_class_service.ClassCreationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    response.headers["Location"] = f"/api/classes/{gym_class.id}"
    return class_details(gym_class)
