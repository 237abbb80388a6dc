"""Seasonal pricing models."""
from __future__ import annotations

import enum
import uuid

from sqlalchemy import Enum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from intranet.db.base import Base
from intranet.models.mixins import TimestampMixin


class SeasonType(str, enum.Enum):
    """Price bands a calendar week can belong to."""

    LOW = "low"
    HIGH = "high"
    TENNIS = "tennis"


class SeasonSetting(TimestampMixin, Base):
    """Nightly prices for each season band of one calendar year."""

    __tablename__ = "season_settings"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    year: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    low_season_price: Mapped[int] = mapped_column(Integer, nullable=False)
    high_season_price: Mapped[int] = mapped_column(Integer, nullable=False)
    tennis_season_price: Mapped[int] = mapped_column(Integer, nullable=False)

    weeks: Mapped[list["SeasonWeek"]] = relationship(
        "SeasonWeek",
        back_populates="season_setting",
        cascade="all, delete-orphan",
        order_by="SeasonWeek.week_number",
    )

    def price_for(self, season: SeasonType) -> int:
        if season == SeasonType.HIGH:
            return self.high_season_price
        if season == SeasonType.TENNIS:
            return self.tennis_season_price
        return self.low_season_price


class SeasonWeek(Base):
    """Assignment of one ISO week of a season year to a season band."""

    __tablename__ = "season_weeks"
    __table_args__ = (
        UniqueConstraint(
            "season_setting_id", "week_number", name="uq_season_weeks_setting_week"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    season_setting_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("season_settings.id", ondelete="CASCADE"), nullable=False
    )
    week_number: Mapped[int] = mapped_column(Integer, nullable=False)
    season_type: Mapped[SeasonType] = mapped_column(
        Enum(SeasonType), default=SeasonType.LOW, nullable=False
    )

    season_setting: Mapped["SeasonSetting"] = relationship(
        "SeasonSetting", back_populates="weeks"
    )
