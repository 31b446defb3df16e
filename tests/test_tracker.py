from datetime import timedelta
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from conftest import DAY_START
from workforce.core.exceptions import (
    AlreadyCheckedIn, AlreadyCheckedOut, NoActiveSession, NotCheckedIn, SessionAlreadyActive, SessionNotFound,
    StorageFailure,
)
from workforce.db import models
from workforce.schemas.admin import PolicySettings
from workforce.schemas.work import WorkUploadCreate
from workforce.services import tracker


def upload_for(session_id: int) -> WorkUploadCreate:
    return WorkUploadCreate(
        session_id=session_id,
        project_name="Payroll",
        task_id="PAY-12",
        description="Wired the export button",
        repo_link="https://git.example.com/payroll",
    )


# --- Attendance ---

def test_check_in_creates_present_record(db, employee):
    record = tracker.check_in(db, employee, now=DAY_START)

    assert record.date == DAY_START.date()
    assert record.status == "Present"
    assert tracker.as_utc(record.check_in) == DAY_START
    assert record.check_out is None


def test_second_check_in_same_day_is_declined(db, employee):
    tracker.check_in(db, employee, now=DAY_START)

    with pytest.raises(AlreadyCheckedIn):
        tracker.check_in(db, employee, now=DAY_START + timedelta(hours=2))

    assert db.query(models.AttendanceRecord).count() == 1


def test_check_in_next_day_is_allowed(db, employee):
    tracker.check_in(db, employee, now=DAY_START)
    tracker.check_in(db, employee, now=DAY_START + timedelta(days=1))

    assert db.query(models.AttendanceRecord).count() == 2


def test_racing_check_in_is_rejected_by_the_store(db, employee, monkeypatch):
    tracker.check_in(db, employee, now=DAY_START)
    # pretend the read happened before the other request committed
    monkeypatch.setattr(tracker, "_today_record", lambda *args: None)

    with pytest.raises(AlreadyCheckedIn):
        tracker.check_in(db, employee, now=DAY_START + timedelta(minutes=1))

    assert db.query(models.AttendanceRecord).count() == 1


def test_attendance_unique_constraint(db, employee):
    db.add(models.AttendanceRecord(user_id=employee.id, date=DAY_START.date(), check_in=DAY_START, status="Present"))
    db.commit()
    db.add(models.AttendanceRecord(user_id=employee.id, date=DAY_START.date(), check_in=DAY_START, status="Present"))

    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_check_out_before_check_in_is_declined(db, employee):
    with pytest.raises(NotCheckedIn):
        tracker.check_out(db, employee, now=DAY_START)


def test_check_out_twice_is_declined(db, employee):
    tracker.check_in(db, employee, now=DAY_START)
    tracker.check_out(db, employee, now=DAY_START + timedelta(hours=9))

    with pytest.raises(AlreadyCheckedOut):
        tracker.check_out(db, employee, now=DAY_START + timedelta(hours=10))

    record = db.query(models.AttendanceRecord).one()
    assert tracker.as_utc(record.check_out) == DAY_START + timedelta(hours=9)


def test_check_out_of_a_stale_record_is_declined(db, employee, monkeypatch):
    record = tracker.check_in(db, employee, now=DAY_START)
    tracker.check_out(db, employee, now=DAY_START + timedelta(hours=8))
    # a read taken before the other request checked out
    stale = SimpleNamespace(id=record.id, check_out=None)
    monkeypatch.setattr(tracker, "_today_record", lambda *args: stale)

    with pytest.raises(AlreadyCheckedOut):
        tracker.check_out(db, employee, now=DAY_START + timedelta(hours=9))

    assert tracker.as_utc(db.query(models.AttendanceRecord).one().check_out) == DAY_START + timedelta(hours=8)


def test_check_out_only_looks_at_today(db, employee):
    tracker.check_in(db, employee, now=DAY_START - timedelta(days=1))

    with pytest.raises(NotCheckedIn):
        tracker.check_out(db, employee, now=DAY_START)


# --- Sessions ---

def test_start_session_opens_a_session(db, employee):
    work_session = tracker.start_session(db, employee, now=DAY_START)

    assert work_session.end_time is None
    assert work_session.duration is None
    assert work_session.work_uploaded is False


def test_second_active_session_is_declined(db, employee):
    tracker.start_session(db, employee, now=DAY_START)

    with pytest.raises(SessionAlreadyActive):
        tracker.start_session(db, employee, now=DAY_START + timedelta(minutes=5))

    assert db.query(models.WorkSession).count() == 1


def test_racing_session_start_is_rejected_by_the_store(db, employee, monkeypatch):
    tracker.start_session(db, employee, now=DAY_START)
    monkeypatch.setattr(tracker, "_active_session", lambda *args: None)

    with pytest.raises(SessionAlreadyActive):
        tracker.start_session(db, employee, now=DAY_START + timedelta(minutes=1))


def test_active_sessions_are_per_user(db, employee, other_employee):
    tracker.start_session(db, employee, now=DAY_START)
    tracker.start_session(db, other_employee, now=DAY_START)

    assert db.query(models.WorkSession).filter(models.WorkSession.end_time.is_(None)).count() == 2


def test_end_session_without_active_session_is_declined(db, employee):
    with pytest.raises(NoActiveSession):
        tracker.end_session(db, employee, now=DAY_START)


def test_end_session_rounds_duration_down_to_minutes(db, employee):
    tracker.start_session(db, employee, now=DAY_START)

    session_id = tracker.end_session(db, employee, now=DAY_START + timedelta(seconds=125))

    work_session = db.get(models.WorkSession, session_id)
    assert work_session.duration == 2
    assert tracker.as_utc(work_session.end_time) == DAY_START + timedelta(seconds=125)


def test_closed_session_cannot_be_ended_again(db, employee):
    tracker.start_session(db, employee, now=DAY_START)
    tracker.end_session(db, employee, now=DAY_START + timedelta(minutes=30))

    with pytest.raises(NoActiveSession):
        tracker.end_session(db, employee, now=DAY_START + timedelta(minutes=40))


def test_ending_a_session_closed_meanwhile_is_declined(db, employee, monkeypatch):
    tracker.start_session(db, employee, now=DAY_START)
    session_id = tracker.end_session(db, employee, now=DAY_START + timedelta(minutes=30))
    stale = SimpleNamespace(id=session_id, start_time=DAY_START)
    monkeypatch.setattr(tracker, "_active_session", lambda *args: stale)

    with pytest.raises(NoActiveSession):
        tracker.end_session(db, employee, now=DAY_START + timedelta(minutes=50))

    assert db.get(models.WorkSession, session_id).duration == 30


def test_new_session_allowed_after_closing(db, employee):
    tracker.start_session(db, employee, now=DAY_START)
    tracker.end_session(db, employee, now=DAY_START + timedelta(minutes=30))
    tracker.start_session(db, employee, now=DAY_START + timedelta(minutes=45))

    assert db.query(models.WorkSession).count() == 2


# --- Work uploads ---

def test_submit_work_flags_the_session(db, employee):
    work_session = tracker.start_session(db, employee, now=DAY_START)
    session_id = tracker.end_session(db, employee, now=DAY_START + timedelta(hours=1))

    upload = tracker.submit_work(db, employee, upload_for(session_id), now=DAY_START + timedelta(hours=1))

    assert upload.session_id == work_session.id
    assert upload.user_id == employee.id
    assert db.get(models.WorkSession, session_id).work_uploaded is True


def test_submit_work_for_open_session(db, employee):
    work_session = tracker.start_session(db, employee, now=DAY_START)

    tracker.submit_work(db, employee, upload_for(work_session.id), now=DAY_START + timedelta(minutes=10))

    status = tracker.get_status(db, employee, PolicySettings(), now=DAY_START + timedelta(minutes=11))
    assert status.active_session.work_uploaded is True


def test_submit_work_for_someone_elses_session_is_declined(db, employee, other_employee):
    foreign = tracker.start_session(db, other_employee, now=DAY_START)

    with pytest.raises(SessionNotFound):
        tracker.submit_work(db, employee, upload_for(foreign.id), now=DAY_START)

    assert db.query(models.WorkUpload).count() == 0
    assert db.get(models.WorkSession, foreign.id).work_uploaded is False


def test_submit_work_storage_error_rolls_back_both_writes(db, employee, monkeypatch):
    work_session = tracker.start_session(db, employee, now=DAY_START)
    session_id = work_session.id

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)

    with pytest.raises(StorageFailure):
        tracker.submit_work(db, employee, upload_for(session_id), now=DAY_START)

    assert db.query(models.WorkUpload).count() == 0
    assert db.get(models.WorkSession, session_id).work_uploaded is False


def test_submit_work_for_unknown_session_is_declined(db, employee):
    with pytest.raises(SessionNotFound):
        tracker.submit_work(db, employee, upload_for(999), now=DAY_START)


# --- Status and history ---

def test_status_before_anything(db, employee):
    status = tracker.get_status(db, employee, PolicySettings(min_daily_hours="8"), now=DAY_START)

    assert status.checked_in is False
    assert status.check_in_time is None
    assert status.active_session is None
    assert status.worked_minutes_today == 0
    assert status.min_daily_hours == "8"


def test_status_counts_closed_sessions_started_today(db, employee):
    tracker.start_session(db, employee, now=DAY_START - timedelta(days=1))
    tracker.end_session(db, employee, now=DAY_START - timedelta(days=1, minutes=-50))
    tracker.start_session(db, employee, now=DAY_START)
    tracker.end_session(db, employee, now=DAY_START + timedelta(minutes=90))
    tracker.start_session(db, employee, now=DAY_START + timedelta(hours=2))

    status = tracker.get_status(db, employee, PolicySettings(), now=DAY_START + timedelta(hours=3))

    assert status.worked_minutes_today == 90
    assert status.active_session is not None


def test_histories_are_newest_first(db, employee):
    tracker.check_in(db, employee, now=DAY_START - timedelta(days=1))
    tracker.check_in(db, employee, now=DAY_START)
    first = tracker.start_session(db, employee, now=DAY_START)
    tracker.end_session(db, employee, now=DAY_START + timedelta(minutes=10))
    second = tracker.start_session(db, employee, now=DAY_START + timedelta(minutes=20))

    attendance = tracker.attendance_history(db, employee.id)
    sessions = tracker.session_history(db, employee.id)

    assert [r.date for r in attendance] == [DAY_START.date(), (DAY_START - timedelta(days=1)).date()]
    assert [s.id for s in sessions] == [second.id, first.id]


def test_work_history_is_limited(db, employee):
    work_session = tracker.start_session(db, employee, now=DAY_START)
    for minute in range(7):
        tracker.submit_work(db, employee, upload_for(work_session.id), now=DAY_START + timedelta(minutes=minute))

    assert len(tracker.work_history(db, employee.id)) == 5
    assert len(tracker.work_history(db, employee.id, limit=None)) == 7


def test_full_working_day(db, employee):
    tracker.check_in(db, employee, now=DAY_START)
    tracker.start_session(db, employee, now=DAY_START + timedelta(minutes=5))
    session_id = tracker.end_session(db, employee, now=DAY_START + timedelta(hours=4, minutes=5))
    tracker.submit_work(db, employee, upload_for(session_id), now=DAY_START + timedelta(hours=4, minutes=6))
    tracker.check_out(db, employee, now=DAY_START + timedelta(hours=9))

    work_session = db.get(models.WorkSession, session_id)
    assert work_session.duration == 240
    assert work_session.work_uploaded is True

    status = tracker.get_status(db, employee, PolicySettings(), now=DAY_START + timedelta(hours=9))
    assert status.checked_in is True
    assert tracker.as_utc(status.check_in_time) == DAY_START
    assert tracker.as_utc(status.check_out_time) == DAY_START + timedelta(hours=9)
    assert status.worked_minutes_today == 240
