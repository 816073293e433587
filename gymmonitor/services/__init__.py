from . import (
    billing_service,
    booking_service,
    gym_class_service,
    user_service,
)
__all__ = [
    "billing_service",
    "booking_service",
    "gym_class_service",
    "user_service",
]
