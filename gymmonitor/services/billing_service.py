from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.clock import local_today
from ..db import models

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BillingUpdate:
    cents_owed: int
    next_billing_date: date | None


@dataclass(slots=True)
class BillingRunSummary:
    today: date
    billed: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)


def apply_billing(
    cents_owed: int,
    next_billing_date: date | None,
    plan: models.MembershipPlan | None,
    today: date,
) -> BillingUpdate:
    """Compute an account's balance and due date after one billing cycle.

    An account with no plan, no due date, or a due date after ``today`` is
    returned unchanged. Otherwise exactly one period is charged, even if the
    account is several periods behind; later runs pick up the remainder.
    """

    if plan is None or next_billing_date is None or next_billing_date > today:
        return BillingUpdate(cents_owed, next_billing_date)
    if plan.billing_period_days <= 0:
        raise ValueError(f"Membership plan {plan.id} has a non-positive billing period")
    return BillingUpdate(
        cents_owed=cents_owed + plan.price_cents,
        next_billing_date=next_billing_date + timedelta(days=plan.billing_period_days),
    )


def find_due_account_ids(db: Session, today: date) -> list[int]:
    stmt = (
        select(models.User.id)
        .where(
            models.User.next_billing_date.is_not(None),
            models.User.membership_plan_id.is_not(None),
            models.User.next_billing_date <= today,
        )
        .order_by(models.User.id)
    )
    return list(db.execute(stmt).scalars().all())


def bill_account(db: Session, user_id: int, today: date) -> bool:
    """Bill a single account inside its own transaction.

    Returns ``True`` if a charge was applied, ``False`` if the account was no
    longer due by the time its row was locked.
    """

    user = db.execute(
        select(models.User).where(models.User.id == user_id).with_for_update()
    ).scalar_one_or_none()
    if user is None:
        db.rollback()
        return False
    plan = db.get(models.MembershipPlan, user.membership_plan_id) if user.membership_plan_id else None
    update = apply_billing(user.cents_owed, user.next_billing_date, plan, today)
    if update.next_billing_date == user.next_billing_date:
        db.rollback()
        return False
    user.cents_owed = update.cents_owed
    user.next_billing_date = update.next_billing_date
    db.commit()
    return True


def charge_due_members(db: Session, today: date | None = None) -> BillingRunSummary:
    """Charge every member whose billing date is today or earlier.

    Each account is billed independently; a failure on one account is logged
    and does not stop the rest of the run.
    """

    today = today or local_today()
    summary = BillingRunSummary(today=today)
    due_ids = find_due_account_ids(db, today)
    db.rollback()
    for user_id in due_ids:
        try:
            charged = bill_account(db, user_id, today)
        except Exception:
            db.rollback()
            summary.failed.append(user_id)
            logger.exception("Failed to bill account", extra={"user_id": user_id})
            continue
        if charged:
            summary.billed.append(user_id)
    return summary


__all__ = [
    "BillingRunSummary",
    "BillingUpdate",
    "apply_billing",
    "bill_account",
    "charge_due_members",
    "find_due_account_ids",
]
