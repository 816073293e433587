from . import (
    auth,
    classes,
    member,
    staff,
    misc,
)

__all__ = [
    "auth",
    "classes",
    "member",
    "staff",
    "misc",
]
