"""Common application-wide constants."""

from datetime import timedelta

# Length of the trailing window used by the ``rolling`` weekly booking policy
WEEKLY_BOOKING_WINDOW = timedelta(days=7)

BOOKING_WINDOW_ROLLING = "rolling"
BOOKING_WINDOW_CLASS_WEEK = "class_week"

BILLING_JOB_ID = "daily_billing"


def format_cents(cents: int) -> str:
    """Render an integer amount of cents as dollars, e.g. ``1234`` -> ``$12.34``."""

    return "$%.2f" % (cents / 100)


__all__ = [
    "WEEKLY_BOOKING_WINDOW",
    "BOOKING_WINDOW_ROLLING",
    "BOOKING_WINDOW_CLASS_WEEK",
    "BILLING_JOB_ID",
    "format_cents",
]
