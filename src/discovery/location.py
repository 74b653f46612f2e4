"""Saved user location: cookie encoding and search-location resolution."""

import base64
import binascii
import json
import logging
from typing import Annotated, Literal
from urllib.parse import unquote

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from src.core.schemas import DEFAULT_RADIUS_KM

logger = logging.getLogger(__name__)


class LocationGeo(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["geo"] = "geo"
    lat: float
    lng: float
    label: str = ""


class LocationCity(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["city"] = "city"
    city: str


LocationData = LocationGeo | LocationCity

# The "type" tag must be present in decoded cookies.
_TaggedLocation = Annotated[LocationData, Field(discriminator="type")]

_location_adapter: TypeAdapter[LocationData] = TypeAdapter(_TaggedLocation)


class SearchLocation(BaseModel):
    """Location filters to pass on to the discovery query."""

    latitude: float | None = None
    longitude: float | None = None
    radius_km: float | None = None
    city: str | None = None

    @property
    def is_filtered(self) -> bool:
        return (self.latitude is not None and self.longitude is not None) or bool(self.city)


def serialize_location_cookie(data: LocationData) -> str:
    """Encode a location as base64 JSON (safe for non-ASCII city names)."""
    raw = json.dumps(data.model_dump(), ensure_ascii=False).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def parse_location_cookie(value: str | None) -> LocationData | None:
    """Decode a cookie value; falls back to the legacy URL-encoded JSON format.

    Returns None for anything that does not decode to a valid location.
    """
    if not value:
        return None

    try:
        decoded = base64.b64decode(value, validate=True).decode("utf-8")
        return _validate(json.loads(decoded))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, ValidationError):
        logger.debug("Location cookie is not base64 JSON, trying legacy format")

    try:
        return _validate(json.loads(unquote(value)))
    except (json.JSONDecodeError, ValidationError):
        logger.debug("Discarding unreadable location cookie")
        return None


def resolve_location(
    *,
    latitude: float | None = None,
    longitude: float | None = None,
    radius_km: float | None = None,
    city: str | None = None,
    saved: LocationData | None = None,
    default_radius_km: float = DEFAULT_RADIUS_KM,
) -> SearchLocation:
    """Combine explicit location parameters with the saved location.

    Explicit coordinates or city win. Otherwise a saved geo location searches
    within default_radius_km and a saved city sets the city filter.
    """
    explicit = (latitude is not None and longitude is not None) or bool(city)
    if explicit or saved is None:
        return SearchLocation(latitude=latitude, longitude=longitude, radius_km=radius_km, city=city)
    if isinstance(saved, LocationGeo):
        return SearchLocation(latitude=saved.lat, longitude=saved.lng, radius_km=default_radius_km)
    return SearchLocation(city=saved.city, radius_km=radius_km)


def _validate(parsed: object) -> LocationData:
    return _location_adapter.validate_python(parsed)
