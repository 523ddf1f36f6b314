import logging
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftboard.core.config import Settings
from shiftboard.db.database import commit_or_raise
from shiftboard.db.models.profiles import Profiles
from shiftboard.db.models.week_deadlines import WeekDeadlines
from shiftboard.services.rules.deadlines import AutoDeadline, ExplicitDeadline, SubmissionWindow, as_aware
from shiftboard.services.rules.lifecycle import require_manager
from shiftboard.services.rules.weeks import ensure_week_start

logger = logging.getLogger(__name__)


def local_timezone(settings: Settings) -> tzinfo:
    return timezone(timedelta(hours=settings.TIMEZONE_OFFSET_HOURS))


def get_deadline(db: Session, week_start: date) -> Optional[datetime]:
    row = db.query(WeekDeadlines).filter(WeekDeadlines.week_start == week_start).first()
    return row.deadline if row else None


def build_submission_window(db: Session, settings: Settings) -> SubmissionWindow:
    tz = local_timezone(settings)
    if settings.DEADLINE_MODE == "auto":
        return AutoDeadline(settings.DEADLINE_OFFSET_DAYS, settings.DEADLINE_HOUR, tz)
    if settings.DEADLINE_MODE == "explicit":
        return ExplicitDeadline(lambda week_start: get_deadline(db, week_start), tz)
    raise ValueError(f"Unknown deadline mode: {settings.DEADLINE_MODE}")


def set_deadline(db: Session, actor: Profiles, week_start: date, deadline: datetime, tz: tzinfo = timezone.utc) -> WeekDeadlines:
    """
    Create or move the week's deadline. Naive datetimes are read in `tz`.
    The value is stored as `tz` wall time, since SQLite drops the offset and
    reads it back naive.
    """
    require_manager(actor.role)
    ensure_week_start(week_start)
    deadline = as_aware(deadline, tz).astimezone(tz)

    for attempt in range(2):
        row = db.query(WeekDeadlines).filter(WeekDeadlines.week_start == week_start).first()
        if row is None:
            row = WeekDeadlines(week_start=week_start)
            db.add(row)
        row.deadline = deadline
        row.created_by = actor.id
        try:
            commit_or_raise(db)
            break
        except IntegrityError:
            db.rollback()
            if attempt:
                raise

    db.refresh(row)
    logger.info(f"Deadline for week {week_start} set to {deadline.isoformat()} by user {actor.id}")
    return row


def submission_status(window: SubmissionWindow, week_start: date, now: Optional[datetime] = None) -> tuple[Optional[datetime], bool]:
    ensure_week_start(week_start)
    now = now or datetime.now(timezone.utc)
    return window.deadline_for(week_start), window.is_submission_open(week_start, now)
