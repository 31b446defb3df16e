# workforce/schemas/attendance.py
from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime

class AttendanceRecord(BaseModel):
    id: int
    user_id: int
    date: date
    check_in: datetime
    check_out: Optional[datetime] = None
    status: str

    class Config:
        from_attributes = True

class WorkSession(BaseModel):
    id: int
    user_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = None
    work_uploaded: bool

    class Config:
        from_attributes = True

class EmployeeStatus(BaseModel):
    checked_in: bool
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    active_session: Optional[WorkSession] = None
    worked_minutes_today: int = 0
    min_daily_hours: Optional[str] = None

class ActionResult(BaseModel):
    success: bool = True

class SessionClosed(ActionResult):
    session_id: int
