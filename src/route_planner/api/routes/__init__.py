"""Route group exports."""

from . import geocoding, health, routes, subscription

__all__ = ["routes", "health", "geocoding", "subscription"]
