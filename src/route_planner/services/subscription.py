"""Time-limited subscription bookkeeping backed by the Supabase ``users`` table."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from ..db.supabase import SupabaseNotConfiguredError, get_supabase_client, users_table
from ..models.domain import SubscriptionPlan, SubscriptionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlanDefinition:
    plan: SubscriptionPlan
    name: str
    price: float
    duration_days: int


PLANS: dict[str, PlanDefinition] = {
    "monthly": PlanDefinition(plan="monthly", name="Monthly", price=9.90, duration_days=30),
    "semester": PlanDefinition(plan="semester", name="Semester", price=53.40, duration_days=180),
    "annual": PlanDefinition(plan="annual", name="Annual", price=82.80, duration_days=365),
}

SubscriptionStoreNotConfigured = SupabaseNotConfiguredError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def expiration_for(plan: str, now: datetime | None = None) -> datetime:
    definition = PLANS.get(plan)
    if definition is None:
        raise ValueError(f"Unknown subscription plan '{plan}'. Expected one of: {', '.join(PLANS)}")
    return (now or _utcnow()) + timedelta(days=definition.duration_days)


def is_expired(record: SubscriptionRecord, now: datetime | None = None) -> bool:
    """An active subscription whose expiry date has passed."""
    if record.status != "active" or record.expires_at is None:
        return False
    return record.expires_at < (now or _utcnow())


def subscription_status(record: SubscriptionRecord, now: datetime | None = None) -> dict:
    now = now or _utcnow()
    expired = record.status == "expired" or is_expired(record, now)
    days_remaining = 0
    if not expired and record.expires_at is not None:
        days_remaining = max((record.expires_at - now).days, 0)
    return {
        "user_id": record.user_id,
        "plan": record.plan,
        "status": "expired" if expired else "active",
        "expires_at": record.expires_at,
        "days_remaining": days_remaining,
    }


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _record_from_row(user_id: str, row: dict) -> SubscriptionRecord:
    return SubscriptionRecord(
        user_id=user_id,
        plan=row.get("subscription_plan"),
        status=row.get("subscription_status") or "expired",
        expires_at=_parse_timestamp(row.get("subscription_expires_at")),
    )


def get_subscription(user_id: str) -> SubscriptionRecord | None:
    response = (
        users_table(get_supabase_client())
        .select("subscription_plan, subscription_status, subscription_expires_at")
        .eq("id", user_id)
        .limit(1)
        .execute()
    )
    rows = response.data or []
    if not rows:
        return None
    return _record_from_row(user_id, rows[0])


def renew_subscription(user_id: str, plan: str, now: datetime | None = None) -> SubscriptionRecord:
    """Start a new subscription period from ``now`` for the chosen plan."""
    expires_at = expiration_for(plan, now)
    table = users_table(get_supabase_client())
    update = {
        "subscription_plan": plan,
        "subscription_status": "active",
        "subscription_expires_at": expires_at.isoformat(),
    }
    response = table.update(update).eq("id", user_id).execute()
    if not response.data:
        raise ValueError(f"User '{user_id}' not found.")
    logger.info(f"Renewed subscription for user {user_id}: plan={plan}, expires_at={expires_at.isoformat()}")
    return _record_from_row(user_id, response.data[0])
