"""Season tables, week assignments and nightly price resolution."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from intranet.core.dates import iso_week, iter_nights, normalize_day, weeks_in_year
from intranet.models.season import SeasonSetting, SeasonType, SeasonWeek
from intranet.services.errors import DuplicateSeasonYearError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SeasonWeekAssignment:
    """Flattened ``(year, week) -> season`` row."""

    year: int
    week_number: int
    season_type: SeasonType


@dataclass(slots=True)
class NightPrice:
    """Price charged for a single night."""

    date: date
    week_number: int
    season: SeasonType | None
    price: int


@dataclass(slots=True)
class StayQuote:
    """Per-night breakdown and total for a stay."""

    start_date: date
    end_date: date
    nights: list[NightPrice] = field(default_factory=list)

    @property
    def night_count(self) -> int:
        return len(self.nights)

    @property
    def total(self) -> int:
        return sum(night.price for night in self.nights)


class SeasonPriceResolver:
    """Maps nights to prices using season tables and week assignments.

    Weeks without an explicit assignment are low season. Years without a
    season table fall back to the apartment's base nightly price.
    """

    def __init__(
        self,
        season_tables: Iterable[SeasonSetting],
        assignments: Iterable[SeasonWeekAssignment],
        *,
        base_price: int,
    ) -> None:
        self._tables = {table.year: table for table in season_tables}
        self._assignments = {
            (assignment.year, assignment.week_number): assignment.season_type
            for assignment in assignments
        }
        self.base_price = base_price

    def season_for_week(self, year: int, week_number: int) -> SeasonType:
        return self._assignments.get((year, week_number), SeasonType.LOW)

    def price_for_night(self, day: date | str) -> int:
        return self._night(normalize_day(day)).price

    def total_price(self, start: date | str, end: date | str) -> int:
        """Sum of nightly prices for ``[start, end)``; checkout is not charged."""
        return self.quote(start, end).total

    def quote(self, start: date | str, end: date | str) -> StayQuote:
        start_day = normalize_day(start)
        end_day = normalize_day(end)
        return StayQuote(
            start_date=start_day,
            end_date=end_day,
            nights=[self._night(day) for day in iter_nights(start_day, end_day)],
        )

    def _night(self, day: date) -> NightPrice:
        week = iso_week(day)
        table = self._tables.get(day.year)
        if table is None:
            return NightPrice(date=day, week_number=week, season=None, price=self.base_price)
        season = self.season_for_week(day.year, week)
        return NightPrice(
            date=day, week_number=week, season=season, price=table.price_for(season)
        )


def flatten_assignments(
    season_tables: Iterable[SeasonSetting],
) -> list[SeasonWeekAssignment]:
    """Turn loaded season tables (with weeks) into flat assignments."""
    return [
        SeasonWeekAssignment(
            year=table.year, week_number=week.week_number, season_type=week.season_type
        )
        for table in season_tables
        for week in table.weeks
    ]


async def list_season_settings(session: AsyncSession) -> Sequence[SeasonSetting]:
    """Return all season tables, newest year first, with their weeks loaded."""
    result = await session.execute(
        select(SeasonSetting)
        .options(selectinload(SeasonSetting.weeks))
        .execution_options(populate_existing=True)
        .order_by(SeasonSetting.year.desc())
    )
    return result.scalars().unique().all()


async def get_season_setting(
    session: AsyncSession, *, year: int
) -> SeasonSetting | None:
    result = await session.execute(
        select(SeasonSetting)
        .options(selectinload(SeasonSetting.weeks))
        .execution_options(populate_existing=True)
        .where(SeasonSetting.year == year)
    )
    return result.scalars().unique().one_or_none()


async def create_season_setting(
    session: AsyncSession,
    *,
    year: int,
    low_season_price: int,
    high_season_price: int,
    tennis_season_price: int,
) -> SeasonSetting:
    """Create the season table for ``year``; only one may exist per year."""
    if await get_season_setting(session, year=year) is not None:
        raise DuplicateSeasonYearError(year)

    setting = SeasonSetting(
        year=year,
        low_season_price=low_season_price,
        high_season_price=high_season_price,
        tennis_season_price=tennis_season_price,
    )
    session.add(setting)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateSeasonYearError(year) from exc
    logger.info("Created season settings for %s", year)
    return await get_season_setting(session, year=year)  # type: ignore[return-value]


async def update_season_setting(
    session: AsyncSession,
    *,
    setting: SeasonSetting,
    low_season_price: int | None = None,
    high_season_price: int | None = None,
    tennis_season_price: int | None = None,
) -> SeasonSetting:
    if low_season_price is not None:
        setting.low_season_price = low_season_price
    if high_season_price is not None:
        setting.high_season_price = high_season_price
    if tennis_season_price is not None:
        setting.tennis_season_price = tennis_season_price
    await session.commit()
    return await get_season_setting(session, year=setting.year)  # type: ignore[return-value]


async def upsert_season_setting(
    session: AsyncSession,
    *,
    year: int,
    low_season_price: int,
    high_season_price: int,
    tennis_season_price: int,
) -> SeasonSetting:
    """Update the prices for ``year`` or create its season table."""
    existing = await get_season_setting(session, year=year)
    if existing is None:
        return await create_season_setting(
            session,
            year=year,
            low_season_price=low_season_price,
            high_season_price=high_season_price,
            tennis_season_price=tennis_season_price,
        )
    return await update_season_setting(
        session,
        setting=existing,
        low_season_price=low_season_price,
        high_season_price=high_season_price,
        tennis_season_price=tennis_season_price,
    )


def _validate_weeks(year: int, weeks: dict[int, SeasonType]) -> None:
    max_week = weeks_in_year(year)
    invalid = sorted(week for week in weeks if week < 1 or week > max_week)
    if invalid:
        raise ValueError(
            f"Week numbers out of range for {year} (1-{max_week}): "
            + ", ".join(str(week) for week in invalid)
        )


async def set_season_weeks(
    session: AsyncSession,
    *,
    setting: SeasonSetting,
    weeks: dict[int, SeasonType],
) -> SeasonSetting:
    """Replace the week assignments of a season year.

    Low-season weeks are not stored since unassigned weeks default to low.
    """
    _validate_weeks(setting.year, weeks)
    setting_id: uuid.UUID = setting.id
    year = setting.year
    await session.execute(
        delete(SeasonWeek).where(SeasonWeek.season_setting_id == setting_id)
    )
    session.add_all(
        SeasonWeek(season_setting_id=setting_id, week_number=week, season_type=season)
        for week, season in sorted(weeks.items())
        if season != SeasonType.LOW
    )
    await session.commit()
    return await get_season_setting(session, year=year)  # type: ignore[return-value]


async def list_week_assignments(session: AsyncSession) -> list[SeasonWeekAssignment]:
    result = await session.execute(
        select(SeasonSetting.year, SeasonWeek.week_number, SeasonWeek.season_type)
        .select_from(SeasonWeek)
        .join(SeasonSetting, SeasonWeek.season_setting_id == SeasonSetting.id)
        .order_by(SeasonSetting.year, SeasonWeek.week_number)
    )
    return [
        SeasonWeekAssignment(year=year, week_number=week, season_type=season)
        for year, week, season in result.all()
    ]


async def build_resolver(session: AsyncSession, *, base_price: int) -> SeasonPriceResolver:
    """Load season data and return a resolver for an apartment's base price."""
    tables = await list_season_settings(session)
    return SeasonPriceResolver(
        tables, flatten_assignments(tables), base_price=base_price
    )
