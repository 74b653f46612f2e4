"""Load providers, categories, hours and reviews from a YAML seed file.

Seed format::

    categories:          # optional, defaults to the leaf taxonomy
      - {id: eletricista, name: Eletricista, slug: eletricista}
    providers:
      - id: p1
        name: João Silva
        city: São Paulo
        categories: [eletricista]      # slugs
        business_hours:
          - {day_of_week: 1, open_time: "08:00", close_time: "18:00"}
        reviews:
          - {client_id: c1, rating: 5, comment: Great}
"""

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from src.core.db import add_review, upsert_category, upsert_provider
from src.core.schemas import BusinessHoursEntry, Category, Provider, as_utc
from src.core.taxonomy import SERVICE_CATEGORIES

logger = logging.getLogger(__name__)


class SeedReview(BaseModel):
    client_id: str
    rating: int = Field(ge=1, le=5)
    comment: str | None = None


class SeedProvider(BaseModel):
    """A provider entry as written in the seed file."""

    id: str
    name: str
    description: str = ""
    city: str = ""
    neighborhood: str = ""
    state: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    whatsapp: str = ""
    is_active: bool = True
    is_verified: bool = False
    created_at: datetime | None = None
    categories: list[str] = Field(default_factory=list)
    business_hours: list[BusinessHoursEntry] = Field(default_factory=list)
    reviews: list[SeedReview] = Field(default_factory=list)

    @field_validator("created_at")
    @classmethod
    def created_at_aware(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None


class SeedFile(BaseModel):
    categories: list[Category] = Field(
        default_factory=lambda: [Category(id=slug, name=name, slug=slug) for name, slug in SERVICE_CATEGORIES]
    )
    providers: list[SeedProvider] = Field(default_factory=list)


def load_seed_file(path: str | Path) -> SeedFile:
    """Parse and validate a seed YAML file."""
    path = Path(path)
    if not path.exists():
        msg = f"Seed file not found: {path}"
        raise FileNotFoundError(msg)
    raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
    try:
        return SeedFile.model_validate(raw)
    except ValidationError as e:
        msg = f"Invalid seed file {path}: {e}"
        raise ValueError(msg) from e


def apply_seed(conn: sqlite3.Connection, seed: SeedFile) -> int:
    """Write a seed into the store. Returns the number of providers written.

    Raises:
        ValueError: If a provider references an unknown category slug.
    """
    by_slug = {c.slug: c for c in seed.categories}
    for entry in seed.providers:
        unknown = [s for s in entry.categories if s not in by_slug]
        if unknown:
            msg = f"Provider '{entry.id}' references unknown categories: {unknown}"
            raise ValueError(msg)

    for category in seed.categories:
        upsert_category(conn, category)

    for entry in seed.providers:
        data = entry.model_dump(exclude={"categories", "business_hours", "reviews", "created_at"})
        if entry.created_at:
            data["created_at"] = entry.created_at
        provider = Provider(
            **data,
            categories=[by_slug[s] for s in entry.categories],
            business_hours=entry.business_hours,
        )
        upsert_provider(conn, provider)
        for review in entry.reviews:
            add_review(conn, entry.id, review.client_id, review.rating, review.comment)

    logger.info("Seeded %d categories, %d providers", len(seed.categories), len(seed.providers))
    return len(seed.providers)
