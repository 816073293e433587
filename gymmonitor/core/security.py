"""Password hashing and bearer tokens for members and staff."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from ..config import get_settings

password_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
TOKEN_ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    pass


def hash_password(password: str) -> str:
    return password_context.hash(password)


def password_matches(password: str, password_hash: str) -> bool:
    return password_context.verify(password, password_hash)


def issue_token(user_id: int, role: str, lifetime: timedelta | None = None) -> str:
    """Sign a token naming the user and their role.

    ``lifetime`` defaults to ``JWT_EXPIRE_MIN`` minutes.
    """

    settings = get_settings()
    issued_at = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "role": role,
        "iat": issued_at,
        "exp": issued_at + (lifetime or timedelta(minutes=settings.jwt_expire_min)),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=TOKEN_ALGORITHM)


def read_token(token: str) -> int:
    """Return the user id a valid token was issued for.

    Raises:
        InvalidTokenError: if the token is malformed, expired, signed with
            another secret, or carries no numeric subject.
    """

    try:
        claims = jwt.decode(token, get_settings().jwt_secret, algorithms=[TOKEN_ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
    subject = str(claims.get("sub", ""))
    if not subject.isdigit():
        raise InvalidTokenError("Token does not name a user")
    return int(subject)
