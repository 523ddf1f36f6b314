from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shiftboard.api.deps import get_catalog, get_db, require_elevated
from shiftboard.core.config import settings
from shiftboard.db.models.profiles import Profiles
from shiftboard.schemas.selections import CategoryCountsSchema
from shiftboard.schemas.stats import StatsResponse, UserStatsResponse
from shiftboard.services.rules.catalog import ShiftCatalog
from shiftboard.services.stats import collect_stats

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("", response_model=StatsResponse)
def get_stats(
    months: Optional[int] = Query(None, ge=1, le=24),
    today: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: Profiles = Depends(require_elevated),
    catalog: ShiftCatalog = Depends(get_catalog),
):
    """Approved shift counts per user, busiest first"""
    since, stats = collect_stats(
        db,
        current_user,
        catalog,
        today=today,
        months=months or settings.STATS_WINDOW_MONTHS,
    )
    return StatsResponse(
        since=since,
        users=[
            UserStatsResponse(
                user_id=s.user_id,
                user_name=s.user_name,
                counts=CategoryCountsSchema.from_counts(s.counts),
                total=s.total,
            )
            for s in stats
        ],
    )
