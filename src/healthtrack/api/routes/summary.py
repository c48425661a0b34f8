"""Derived metrics (dashboard summary) and trend chart routes."""
from datetime import date
from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlmodel import Session

from healthtrack.analysis.summary import DailySummary, build_daily_summary
from healthtrack.analysis.units import InvalidMeasurementError
from healthtrack.db.crud import get_user_settings, list_for_user
from healthtrack.db.engine import get_session
from healthtrack.models.entries import SleepEntry, WaterEntry, WeightEntry
from healthtrack.models.settings import UserSettingsRead
from healthtrack.reports.charts import make_sleep_chart, make_water_chart, make_weight_chart

router = APIRouter()


class ChartKind(str, Enum):
    WEIGHT = "weight"
    WATER = "water"
    SLEEP = "sleep"


def _settings_or_defaults(session: Session, user_id: int):
    # Users who never saved settings see the defaults, as on first launch
    return get_user_settings(session, user_id) or UserSettingsRead(user_id=user_id)


@router.get("/users/{user_id}/summary", response_model=DailySummary)
def daily_summary(
    user_id: int,
    on: Optional[date] = None,
    session: Session = Depends(get_session),
):
    """BMI, water goal progress and last night's sleep for one day (default today)."""
    settings = _settings_or_defaults(session, user_id)
    try:
        return build_daily_summary(
            weights=list_for_user(session, WeightEntry, user_id),
            water=list_for_user(session, WaterEntry, user_id),
            sleep=list_for_user(session, SleepEntry, user_id),
            settings=settings,
            on_date=on or date.today(),
        )
    except InvalidMeasurementError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.get("/users/{user_id}/charts/{kind}.png")
def trend_chart(
    user_id: int,
    kind: ChartKind,
    days: int = Query(default=7, ge=2, le=90),
    end: Optional[date] = None,
    session: Session = Depends(get_session),
):
    """Render a trend chart as PNG."""
    settings = _settings_or_defaults(session, user_id)
    today = end or date.today()
    if kind is ChartKind.WEIGHT:
        png, caption = make_weight_chart(
            list_for_user(session, WeightEntry, user_id),
            unit=settings.weight_unit, days=days, today=today,
        )
    elif kind is ChartKind.WATER:
        png, caption = make_water_chart(
            list_for_user(session, WaterEntry, user_id),
            goal_liters=settings.water_goal, days=days, today=today,
        )
    else:
        png, caption = make_sleep_chart(
            list_for_user(session, SleepEntry, user_id),
            goal_hours=settings.sleep_goal, days=days, today=today,
        )
    return Response(content=png, media_type="image/png", headers={"X-Chart-Caption": caption})
