from pydantic import BaseModel, Field

from .base import CamelModel


class SignUpRequest(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8, max_length=128)
    club_code: str = Field(min_length=1, max_length=32)
    membership_plan_id: int


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str


class AuthCheck(BaseModel):
    id: int
    name: str
    role: str
