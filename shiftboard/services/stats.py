import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from shiftboard.db.models.profiles import Profiles
from shiftboard.db.models.week_requests import WeekRequests
from shiftboard.services.rules.catalog import ShiftCatalog
from shiftboard.services.rules.lifecycle import require_elevated
from shiftboard.services.rules.stats import aggregate_stats, window_start
from shiftboard.services.rules.types import RequestStatus, UserStats, WeekRequestRecord
from shiftboard.services.selections import selections_from_json

logger = logging.getLogger(__name__)


def collect_stats(
    db: Session,
    actor: Profiles,
    catalog: ShiftCatalog,
    today: Optional[date] = None,
    months: int = 1,
) -> tuple[date, list[UserStats]]:
    """Per-user category totals over approved requests in the last `months` months."""
    require_elevated(actor.role)
    since = window_start(today or date.today(), months)

    rows = db.query(WeekRequests, Profiles.name).join(
        Profiles, Profiles.id == WeekRequests.user_id
    ).filter(
        WeekRequests.status == RequestStatus.APPROVED,
        WeekRequests.week_start >= since,
    ).all()

    records = [
        WeekRequestRecord(
            user_id=req.user_id,
            week_start=req.week_start,
            status=req.status,
            selections=selections_from_json(req.selections),
            user_name=name,
        )
        for req, name in rows
    ]
    stats = aggregate_stats(records, since, catalog)
    logger.debug(f"Stats since {since}: {len(records)} requests, {len(stats)} users")
    return since, stats
