"""Configuration models and YAML loader for provider discovery."""

from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from src.core.schemas import DEFAULT_RADIUS_KM

REFERENCE_TIMEZONE = "America/Sao_Paulo"


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/providers.db"


class DiscoveryConfig(BaseModel):
    """Search page defaults."""

    page_size: int = Field(default=12, ge=1, le=100)
    default_radius_km: float = Field(default=DEFAULT_RADIUS_KM, gt=0.0)
    max_radius_km: float = Field(default=200.0, gt=0.0)

    @model_validator(mode="after")
    def default_within_max(self) -> "DiscoveryConfig":
        if self.default_radius_km > self.max_radius_km:
            msg = "default_radius_km must not exceed max_radius_km"
            raise ValueError(msg)
        return self


class BusinessHoursConfig(BaseModel):
    """Reference timezone for every provider's business hours."""

    timezone: str = REFERENCE_TIMEZONE

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            msg = f"unknown timezone: '{v}'"
            raise ValueError(msg) from None
        return v


class ContactConfig(BaseModel):
    """WhatsApp contact link settings."""

    country_code: str = Field(default="55", pattern=r"^\d{1,3}$")


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    business_hours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)
    contact: ContactConfig = Field(default_factory=ContactConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
