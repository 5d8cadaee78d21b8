"""Routing request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import Address, Coordinates, OptimizedRoute, RouteStop


class CoordinatesModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class AddressModel(BaseModel):
    id: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    coordinates: Optional[CoordinatesModel] = None

    def to_domain(self, role: Literal["start", "delivery", "pickup"]) -> Address:
        return Address(
            id=self.id,
            address=self.address,
            type=role,
            coordinates=Coordinates(lat=self.coordinates.lat, lng=self.coordinates.lng)
            if self.coordinates
            else None,
        )


class RouteRequest(BaseModel):
    start: AddressModel
    deliveries: List[AddressModel] = Field(default_factory=list)
    pickups: List[AddressModel] = Field(default_factory=list)
    persist: bool = Field(default=True, description="Replace the stored route snapshot with the result.")


class RouteStopModel(BaseModel):
    id: str
    address: str
    coordinates: Optional[CoordinatesModel] = None
    type: Literal["start", "delivery", "pickup"]
    order: int
    completed: bool = False

    @classmethod
    def from_domain(cls, stop: RouteStop) -> "RouteStopModel":
        return cls(
            id=stop.id,
            address=stop.address,
            coordinates=CoordinatesModel(lat=stop.coordinates.lat, lng=stop.coordinates.lng)
            if stop.coordinates
            else None,
            type=stop.type,
            order=stop.order,
            completed=stop.completed,
        )


class OptimizedRouteModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    stops: List[RouteStopModel]
    total_distance: float = Field(..., alias="totalDistance", description="Kilometers, two decimals.")
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_domain(cls, route: OptimizedRoute) -> "OptimizedRouteModel":
        return cls(
            stops=[RouteStopModel.from_domain(stop) for stop in route.stops],
            total_distance=route.total_distance,
            created_at=route.created_at,
        )


class RouteProgressModel(BaseModel):
    completed: int
    total: int
    percent: float
    all_completed: bool


class DirectionsResponse(BaseModel):
    origin: str
    destination: str
    google_maps_url: str
    navigation_url: str
    duration: Optional[float] = None
    distance: Optional[float] = None
    encoded_path: Optional[str] = None
    path: List[CoordinatesModel] = Field(default_factory=list)


class GeocodeResponse(BaseModel):
    address: str
    formatted_address: str
    coordinates: CoordinatesModel
