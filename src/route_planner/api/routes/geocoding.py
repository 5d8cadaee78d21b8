"""Geocoding endpoint used by the stop entry form."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from ...schemas.routing import CoordinatesModel, GeocodeResponse
from ...services.geocoding import GoogleGeocodingClient
from ...services.routing.models import ProviderUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["geocoding"])


@router.get("/geocode", response_model=GeocodeResponse, status_code=status.HTTP_200_OK)
def geocode(address: str = Query(..., min_length=1, description="Free-text address")) -> GeocodeResponse:
    try:
        result = GoogleGeocodingClient().geocode(address)
    except ProviderUnavailableError as exc:
        logger.warning(f"Geocoding unavailable: {exc}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Could not geocode address '{address}'.",
        )
    return GeocodeResponse(
        address=result.address,
        formatted_address=result.formatted_address,
        coordinates=CoordinatesModel(lat=result.coordinates.lat, lng=result.coordinates.lng),
    )
