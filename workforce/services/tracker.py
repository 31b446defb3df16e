# workforce/services/tracker.py
"""
Attendance and work-session operations for a single verified user.

Every operation runs as one transaction. The (user, date) unique constraint and
the one-open-session-per-user partial index back up the read-then-write checks,
so a racing duplicate is reported as the same conflict instead of a crash.
"""
import logging
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Type

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from workforce.core.exceptions import (
    AlreadyCheckedIn, AlreadyCheckedOut, NoActiveSession, NotCheckedIn, SessionAlreadyActive,
    SessionNotFound, StorageFailure, TrackerError,
)
from workforce.db import models
from workforce.schemas.admin import PolicySettings
from workforce.schemas.attendance import EmployeeStatus, WorkSession
from workforce.schemas.work import WorkUploadCreate

logger = logging.getLogger(__name__)

STATUS_PRESENT = "Present"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes (as SQLite returns them) are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def session_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, rounded down."""
    return (as_utc(end) - as_utc(start)) // timedelta(minutes=1)


def day_bounds(day: date):
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


@contextmanager
def transaction(db: Session, conflict: Optional[Type[TrackerError]] = None):
    """Commit on success, roll back on any failure.

    An IntegrityError is reported as ``conflict`` when given; every other
    storage error becomes StorageFailure.
    """
    try:
        yield
        db.commit()
    except TrackerError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        if conflict is not None:
            logger.info("Store rejected a duplicate write: %s", conflict.code)
            raise conflict() from exc
        logger.exception("Integrity error")
        raise StorageFailure() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Storage error")
        raise StorageFailure() from exc


def _today_record(db: Session, user_id: int, today: date) -> Optional[models.AttendanceRecord]:
    return db.query(models.AttendanceRecord).filter(
        models.AttendanceRecord.user_id == user_id,
        models.AttendanceRecord.date == today,
    ).first()


def _active_session(db: Session, user_id: int) -> Optional[models.WorkSession]:
    return db.query(models.WorkSession).filter(
        models.WorkSession.user_id == user_id,
        models.WorkSession.end_time.is_(None),
    ).first()


# --- Attendance ---

def check_in(db: Session, user: models.User, now: Optional[datetime] = None) -> models.AttendanceRecord:
    now = as_utc(now or utcnow())
    with transaction(db, conflict=AlreadyCheckedIn):
        if _today_record(db, user.id, now.date()) is not None:
            raise AlreadyCheckedIn()
        record = models.AttendanceRecord(user_id=user.id, date=now.date(), check_in=now, status=STATUS_PRESENT)
        db.add(record)
    logger.info("User %s checked in at %s", user.id, now.isoformat())
    return record


def check_out(db: Session, user: models.User, now: Optional[datetime] = None) -> models.AttendanceRecord:
    now = as_utc(now or utcnow())
    with transaction(db):
        record = _today_record(db, user.id, now.date())
        if record is None:
            raise NotCheckedIn()
        if record.check_out is not None:
            raise AlreadyCheckedOut()
        updated = db.query(models.AttendanceRecord).filter(
            models.AttendanceRecord.id == record.id,
            models.AttendanceRecord.check_out.is_(None),
        ).update({models.AttendanceRecord.check_out: now}, synchronize_session="fetch")
        if not updated:
            raise AlreadyCheckedOut()
    logger.info("User %s checked out at %s", user.id, now.isoformat())
    return record


# --- Work sessions ---

def start_session(db: Session, user: models.User, now: Optional[datetime] = None) -> models.WorkSession:
    now = as_utc(now or utcnow())
    with transaction(db, conflict=SessionAlreadyActive):
        if _active_session(db, user.id) is not None:
            raise SessionAlreadyActive()
        work_session = models.WorkSession(user_id=user.id, start_time=now, work_uploaded=False)
        db.add(work_session)
    logger.info("User %s started a session", user.id)
    return work_session


def end_session(db: Session, user: models.User, now: Optional[datetime] = None) -> int:
    """Close the user's open session and return its id."""
    now = as_utc(now or utcnow())
    with transaction(db):
        active = _active_session(db, user.id)
        if active is None:
            raise NoActiveSession()
        session_id = active.id
        duration = session_minutes(active.start_time, now)
        updated = db.query(models.WorkSession).filter(
            models.WorkSession.id == session_id,
            models.WorkSession.end_time.is_(None),
        ).update(
            {models.WorkSession.end_time: now, models.WorkSession.duration: duration},
            synchronize_session="fetch",
        )
        if not updated:
            raise NoActiveSession()
    logger.info("User %s ended session %s after %d minutes", user.id, session_id, duration)
    return session_id


def submit_work(
    db: Session, user: models.User, payload: WorkUploadCreate, now: Optional[datetime] = None,
) -> models.WorkUpload:
    """Attach a progress note to one of the user's sessions and flag the session.

    The session may be open or already closed, but it must belong to the user.
    """
    now = as_utc(now or utcnow())
    with transaction(db):
        work_session = db.query(models.WorkSession).filter(
            models.WorkSession.id == payload.session_id,
            models.WorkSession.user_id == user.id,
        ).first()
        if work_session is None:
            logger.warning("User %s submitted work for unknown session %s", user.id, payload.session_id)
            raise SessionNotFound()
        upload = models.WorkUpload(
            session_id=work_session.id,
            user_id=user.id,
            project_name=payload.project_name,
            task_id=payload.task_id,
            description=payload.description,
            repo_link=payload.repo_link,
            file_url=payload.file_url,
            created_at=now,
        )
        db.add(upload)
        work_session.work_uploaded = True
    logger.info("User %s uploaded work for session %s", user.id, payload.session_id)
    return upload


# --- Reads ---

def worked_minutes(db: Session, day: date, user_id: Optional[int] = None) -> int:
    """Sum of closed session durations started on ``day``."""
    start, end = day_bounds(day)
    query = db.query(func.coalesce(func.sum(models.WorkSession.duration), 0)).filter(
        models.WorkSession.start_time >= start,
        models.WorkSession.start_time < end,
        models.WorkSession.end_time.isnot(None),
    )
    if user_id is not None:
        query = query.filter(models.WorkSession.user_id == user_id)
    return int(query.scalar())


def get_status(
    db: Session, user: models.User, policy: PolicySettings, now: Optional[datetime] = None,
) -> EmployeeStatus:
    today = as_utc(now or utcnow()).date()
    record = _today_record(db, user.id, today)
    active = _active_session(db, user.id)
    return EmployeeStatus(
        checked_in=record is not None,
        check_in_time=record.check_in if record else None,
        check_out_time=record.check_out if record else None,
        active_session=WorkSession.model_validate(active) if active else None,
        worked_minutes_today=worked_minutes(db, today, user.id),
        min_daily_hours=policy.min_daily_hours,
    )


def attendance_history(db: Session, user_id: int) -> List[models.AttendanceRecord]:
    return db.query(models.AttendanceRecord).filter(
        models.AttendanceRecord.user_id == user_id
    ).order_by(models.AttendanceRecord.date.desc()).all()


def session_history(db: Session, user_id: int) -> List[models.WorkSession]:
    return db.query(models.WorkSession).filter(
        models.WorkSession.user_id == user_id
    ).order_by(models.WorkSession.start_time.desc()).all()


def work_history(db: Session, user_id: int, limit: Optional[int] = 5) -> List[models.WorkUpload]:
    query = db.query(models.WorkUpload).filter(
        models.WorkUpload.user_id == user_id
    ).order_by(models.WorkUpload.created_at.desc(), models.WorkUpload.id.desc())
    if limit is not None:
        query = query.limit(limit)
    return query.all()
