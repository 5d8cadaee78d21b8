"""Domain models for stops, routes and subscriptions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Literal, Optional

AddressRole = Literal["start", "delivery", "pickup"]
SubscriptionPlan = Literal["monthly", "semester", "annual"]


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class Address:
    """A stop entered by the user, geocoded or not yet."""

    id: str
    address: str
    type: AddressRole
    coordinates: Optional[Coordinates] = None


@dataclass(slots=True)
class RouteStop:
    """An address placed in the visiting order of a computed route."""

    id: str
    address: str
    type: AddressRole
    coordinates: Optional[Coordinates]
    order: int
    completed: bool = False

    @classmethod
    def from_address(cls, address: Address, order: int) -> "RouteStop":
        return cls(
            id=address.id,
            address=address.address,
            type=address.type,
            coordinates=address.coordinates,
            order=order,
        )


@dataclass(slots=True)
class OptimizedRoute:
    stops: List[RouteStop]
    total_distance: float
    created_at: datetime


@dataclass(slots=True)
class GeocodingResult:
    address: str
    coordinates: Coordinates
    formatted_address: str


@dataclass(slots=True)
class SubscriptionRecord:
    """Subscription columns of a user row."""

    user_id: str
    plan: Optional[SubscriptionPlan]
    status: Literal["active", "expired"]
    expires_at: Optional[datetime]
