"""Season pricing schemas."""
from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field

from intranet.models.season import SeasonType


class SeasonWeekRead(BaseModel):
    week_number: int
    season_type: SeasonType

    model_config = ConfigDict(from_attributes=True)


class SeasonSettingBase(BaseModel):
    low_season_price: int = Field(ge=0)
    high_season_price: int = Field(ge=0)
    tennis_season_price: int = Field(ge=0)


class SeasonSettingCreate(SeasonSettingBase):
    """Prices for a new season year."""

    year: int = Field(ge=1970, le=9999)


class SeasonSettingUpdate(BaseModel):
    low_season_price: int | None = Field(default=None, ge=0)
    high_season_price: int | None = Field(default=None, ge=0)
    tennis_season_price: int | None = Field(default=None, ge=0)


class SeasonSettingRead(SeasonSettingBase):
    id: uuid.UUID
    year: int
    weeks: list[SeasonWeekRead] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class SeasonWeeksUpdate(BaseModel):
    """Full set of week assignments for a year; omitted weeks become low season."""

    weeks: list[SeasonWeekRead] = Field(default_factory=list)

    def as_mapping(self) -> dict[int, SeasonType]:
        return {week.week_number: week.season_type for week in self.weeks}


class SeasonWeeksRead(BaseModel):
    """Every week of a year with its effective season."""

    year: int
    weeks: list[SeasonWeekRead]
