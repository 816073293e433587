from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from ...core import security
from ...db.session import get_db
from ...db import models, schemas
from ...services import user_service
from .. import deps


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=schemas.MessageResponse)
def signup(payload: schemas.SignUpRequest, db: Session = Depends(get_db)):
    try:
        user_service.signup_member(db, payload)
    except user_service.SignupError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return schemas.MessageResponse(message="User registered successfully")


@router.post("/login", response_model=schemas.TokenResponse)
def login(payload: schemas.LoginRequest, db: Session = Depends(get_db)):
    user = user_service.authenticate(db, payload.email, payload.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password"
        )
    token = security.issue_token(user.id, user.role.value)
    return schemas.TokenResponse(token=token)


@router.get("/check", response_model=schemas.AuthCheck)
def check(current: models.User = Depends(deps.get_current_user)):
    return schemas.AuthCheck(id=current.id, name=current.name, role=current.role.value)
