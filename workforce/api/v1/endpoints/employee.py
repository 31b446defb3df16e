# workforce/api/v1/endpoints/employee.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from workforce.core import security
from workforce.db import models, session
from workforce.schemas import attendance as attendance_schema
from workforce.schemas import work as work_schema
from workforce.services import policy, tracker

router = APIRouter()

@router.get("/status", response_model=attendance_schema.EmployeeStatus)
def read_status(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Today's attendance, the open session if any, and minutes worked today. """
    return tracker.get_status(db, current_user, policy.load_policy(db))

@router.post("/check-in", response_model=attendance_schema.ActionResult)
def check_in(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    tracker.check_in(db, current_user)
    return {"success": True}

@router.post("/check-out", response_model=attendance_schema.ActionResult)
def check_out(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    tracker.check_out(db, current_user)
    return {"success": True}

@router.post("/session/start", response_model=attendance_schema.ActionResult)
def start_session(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    tracker.start_session(db, current_user)
    return {"success": True}

@router.post("/session/end", response_model=attendance_schema.SessionClosed)
def end_session(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    session_id = tracker.end_session(db, current_user)
    return {"success": True, "session_id": session_id}

@router.post("/work-upload", response_model=attendance_schema.ActionResult)
def upload_work(
    payload: work_schema.WorkUploadCreate,
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ Attaches a progress note to one of the caller's sessions. """
    tracker.submit_work(db, current_user, payload)
    return {"success": True}

@router.get("/attendance", response_model=List[attendance_schema.AttendanceRecord])
def read_attendance_history(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    return tracker.attendance_history(db, current_user.id)

@router.get("/sessions", response_model=List[attendance_schema.WorkSession])
def read_session_history(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    return tracker.session_history(db, current_user.id)

@router.get("/work-history", response_model=List[work_schema.WorkUpload])
def read_work_history(
    db: Session = Depends(session.get_db),
    current_user: models.User = Depends(security.get_current_user)
):
    """ The caller's five most recent uploads. """
    return tracker.work_history(db, current_user.id)
