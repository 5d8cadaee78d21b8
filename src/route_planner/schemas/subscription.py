"""Subscription schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class SubscriptionPlanModel(BaseModel):
    plan: Literal["monthly", "semester", "annual"]
    name: str
    price: float
    duration_days: int


class SubscriptionStatusResponse(BaseModel):
    user_id: str
    plan: Optional[str] = None
    status: Literal["active", "expired"]
    expires_at: Optional[datetime] = None
    days_remaining: int


class RenewSubscriptionRequest(BaseModel):
    plan: Literal["monthly", "semester", "annual"]
