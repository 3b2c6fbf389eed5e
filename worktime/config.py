# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application settings."""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration, read from WORKTIME_* environment variables."""

    app_name: str = "WorkTime"
    database_url: str = Field(
        default="sqlite:///./worktime.db",
        description="SQLAlchemy database URL",
    )
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Grace period for retroactive entries, in working days
    grace_working_days: int = Field(default=2, ge=0)

    # MM-DD dates on which the weekday target is halved (Christmas/New Year's Eve)
    half_day_dates: list[str] = ["12-24", "12-31"]
    grant_half_day_leave: bool = True

    vacation_working_days_per_year: int = Field(default=260, gt=0)

    holiday_country: str = "DE"
    holiday_subdivision: str | None = "BY"

    model_config = SettingsConfigDict(
        env_prefix="WORKTIME_", env_file=".env", extra="ignore"
    )

    @field_validator("half_day_dates")
    @classmethod
    def validate_half_day_dates(cls, value: list[str]) -> list[str]:
        """Ensure half-day dates are MM-DD strings."""
        for item in value:
            month, _, day = item.partition("-")
            if not (month.isdigit() and day.isdigit()):
                raise ValueError(f"Invalid half-day date {item!r}, expected MM-DD")
            if not (1 <= int(month) <= 12 and 1 <= int(day) <= 31):
                raise ValueError(f"Invalid half-day date {item!r}")
        return value

    @property
    def half_days(self) -> frozenset[tuple[int, int]]:
        """Half-day dates as (month, day) tuples."""
        return frozenset(
            (int(item.split("-")[0]), int(item.split("-")[1]))
            for item in self.half_day_dates
        )


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


settings = get_settings()
