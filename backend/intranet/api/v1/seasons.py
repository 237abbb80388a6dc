"""Season pricing administration endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from intranet.api import deps
from intranet.core.dates import all_weeks_for_year
from intranet.models.season import SeasonSetting, SeasonType
from intranet.models.user import User
from intranet.schemas.season import (
    SeasonSettingCreate,
    SeasonSettingRead,
    SeasonSettingUpdate,
    SeasonWeekRead,
    SeasonWeeksRead,
    SeasonWeeksUpdate,
)
from intranet.services import season_service
from intranet.services.errors import DuplicateSeasonYearError

router = APIRouter()

YearPath = Annotated[int, Path(ge=1970, le=9999)]


async def _get_setting_or_404(session: AsyncSession, year: int) -> SeasonSetting:
    setting = await season_service.get_season_setting(session, year=year)
    if setting is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No season settings for {year}",
        )
    return setting


def _weeks_response(setting: SeasonSetting) -> SeasonWeeksRead:
    assigned = {week.week_number: week.season_type for week in setting.weeks}
    return SeasonWeeksRead(
        year=setting.year,
        weeks=[
            SeasonWeekRead(week_number=week, season_type=assigned.get(week, SeasonType.LOW))
            for week in all_weeks_for_year(setting.year)
        ],
    )


@router.get("", response_model=list[SeasonSettingRead], summary="List season years")
async def list_seasons(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_active_user)],
) -> list[SeasonSettingRead]:
    settings = await season_service.list_season_settings(session)
    return [SeasonSettingRead.model_validate(obj) for obj in settings]


@router.post(
    "",
    response_model=SeasonSettingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create season year",
)
async def create_season(
    payload: SeasonSettingCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> SeasonSettingRead:
    try:
        setting = await season_service.create_season_setting(
            session, **payload.model_dump()
        )
    except DuplicateSeasonYearError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return SeasonSettingRead.model_validate(setting)


@router.patch("/{year}", response_model=SeasonSettingRead, summary="Update prices")
async def update_season(
    year: YearPath,
    payload: SeasonSettingUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> SeasonSettingRead:
    setting = await _get_setting_or_404(session, year)
    updated = await season_service.update_season_setting(
        session, setting=setting, **payload.model_dump(exclude_unset=True)
    )
    return SeasonSettingRead.model_validate(updated)


@router.get("/{year}/weeks", response_model=SeasonWeeksRead, summary="Week seasons")
async def read_season_weeks(
    year: YearPath,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.get_current_active_user)],
) -> SeasonWeeksRead:
    """Every ISO week of the year with its effective season."""
    setting = await _get_setting_or_404(session, year)
    return _weeks_response(setting)


@router.put("/{year}/weeks", response_model=SeasonWeeksRead, summary="Assign weeks")
async def replace_season_weeks(
    year: YearPath,
    payload: SeasonWeeksUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _: Annotated[User, Depends(deps.require_admin)],
) -> SeasonWeeksRead:
    setting = await _get_setting_or_404(session, year)
    try:
        updated = await season_service.set_season_weeks(
            session, setting=setting, weeks=payload.as_mapping()
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return _weeks_response(updated)
