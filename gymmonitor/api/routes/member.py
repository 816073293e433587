from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from ...api import deps
from ...db.session import get_db
from ...db import models, schemas
from ...services import user_service

router = APIRouter(prefix="/member", tags=["member"])

require_member = deps.require_roles(models.UserRole.member)


@router.get("/dashboard", response_model=schemas.Dashboard)
def view_dashboard(
    db: Session = Depends(get_db),
    user: models.User = Depends(require_member),
):
    return user_service.build_dashboard(db, user)


@router.get("/membership", response_model=schemas.MembershipDetails)
def view_membership(
    db: Session = Depends(get_db),
    user: models.User = Depends(require_member),
):
    return user_service.build_membership_details(db, user)


@router.post("/visits", status_code=status.HTTP_201_CREATED, response_model=schemas.MessageResponse)
def check_in(
    db: Session = Depends(get_db),
    user: models.User = Depends(require_member),
):
    user_service.record_visit(db, user)
    return schemas.MessageResponse(message="Visit recorded")
