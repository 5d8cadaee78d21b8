"""Subscription endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from ...schemas.subscription import (
    RenewSubscriptionRequest,
    SubscriptionPlanModel,
    SubscriptionStatusResponse,
)
from ...services import subscription as subscription_service
from ...services.subscription import PLANS, SubscriptionStoreNotConfigured

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscription", tags=["subscription"])


@router.get("/plans", response_model=List[SubscriptionPlanModel], status_code=status.HTTP_200_OK)
def list_plans() -> List[SubscriptionPlanModel]:
    return [
        SubscriptionPlanModel(
            plan=plan.plan,
            name=plan.name,
            price=plan.price,
            duration_days=plan.duration_days,
        )
        for plan in PLANS.values()
    ]


@router.get("/{user_id}", response_model=SubscriptionStatusResponse, status_code=status.HTTP_200_OK)
def get_status(user_id: str) -> SubscriptionStatusResponse:
    try:
        record = subscription_service.get_subscription(user_id)
    except SubscriptionStoreNotConfigured as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error loading subscription for {user_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to load subscription: {str(exc)}",
        ) from exc

    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User '{user_id}' not found.")
    return SubscriptionStatusResponse(**subscription_service.subscription_status(record))


@router.post("/{user_id}/renew", response_model=SubscriptionStatusResponse, status_code=status.HTTP_200_OK)
def renew(user_id: str, payload: RenewSubscriptionRequest) -> SubscriptionStatusResponse:
    try:
        record = subscription_service.renew_subscription(user_id, payload.plan)
    except SubscriptionStoreNotConfigured as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error renewing subscription for {user_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to renew subscription: {str(exc)}",
        ) from exc
    return SubscriptionStatusResponse(**subscription_service.subscription_status(record))
