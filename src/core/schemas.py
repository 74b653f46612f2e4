"""Core data models for provider discovery."""

import math
from datetime import datetime, time, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

OrderBy = Literal["recent", "rating", "distance"]

DEFAULT_RADIUS_KM = 50.0


def as_utc(value: datetime) -> datetime:
    """Return an aware datetime. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Category(BaseModel):
    """A leaf service category (e.g. 'eletricista')."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    slug: str


class BusinessHoursEntry(BaseModel):
    """Opening hours for one day of the week (0 = Sunday)."""

    model_config = ConfigDict(frozen=True)

    day_of_week: int = Field(ge=0, le=6)
    open_time: time | None = None
    close_time: time | None = None
    is_closed: bool = False


class Provider(BaseModel):
    """Flat read model of a provider, as assembled by the data layer.

    Frozen: distance is query-scoped and lives on RankedProvider, never here.
    A naive created_at is taken as UTC so every record orders by instant.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    city: str = ""
    neighborhood: str = ""
    state: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    whatsapp: str = ""
    categories: list[Category] = Field(default_factory=list)
    is_active: bool = True
    is_verified: bool = False
    average_rating: float | None = None
    review_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
    business_hours: list[BusinessHoursEntry] = Field(default_factory=list)

    @field_validator("created_at")
    @classmethod
    def created_at_aware(cls, v: datetime) -> datetime:
        return as_utc(v)

    @field_validator("business_hours")
    @classmethod
    def one_entry_per_day(cls, v: list[BusinessHoursEntry]) -> list[BusinessHoursEntry]:
        days = [h.day_of_week for h in v]
        if len(days) != len(set(days)):
            msg = "business_hours must have at most one entry per day"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def rating_matches_review_count(self) -> "Provider":
        if (self.average_rating is None) != (self.review_count == 0):
            msg = "average_rating must be null if and only if review_count is 0"
            raise ValueError(msg)
        return self


class DistanceHit(BaseModel):
    """One row returned by the distance collaborator."""

    model_config = ConfigDict(frozen=True)

    provider_id: str
    distance_km: float = Field(ge=0.0)


class RankedProvider(BaseModel):
    """Wrapper pairing a frozen Provider with its query-scoped distance."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    distance_km: float | None = None


class DiscoveryFilters(BaseModel):
    """Filter, sort and pagination options for a discovery query.

    All fields are optional. Callers validate raw user input before building
    this model; out-of-range values raise ValidationError here.
    """

    search: str | None = None
    category_slug: str | None = None
    city: str | None = None
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    radius_km: float = Field(default=DEFAULT_RADIUS_KM, gt=0.0)
    order_by: OrderBy = "recent"
    page: int | None = Field(default=None, ge=1)
    page_size: int | None = Field(default=None, ge=1)

    @property
    def geo_active(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class DiscoveryResult(BaseModel):
    """A page of discovery results plus the filtered-but-unsliced count."""

    results: list[RankedProvider] = Field(default_factory=list)
    total: int = 0

    def total_pages(self, page_size: int) -> int:
        return math.ceil(self.total / page_size) if page_size > 0 else 0


class OpenStatus(BaseModel):
    """Open-now flag and the label shown next to a provider."""

    model_config = ConfigDict(frozen=True)

    is_open: bool
    label: str
