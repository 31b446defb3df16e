# workforce/schemas/admin.py
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from workforce.schemas.attendance import AttendanceRecord, WorkSession
from workforce.schemas.user import User
from workforce.schemas.work import WorkUpload

class Stats(BaseModel):
    total_employees: int
    present_today: int
    absent_today: int
    total_minutes_today: int

class EmployeeSummary(BaseModel):
    id: int
    name: Optional[str]
    email: str
    today_status: Optional[str] = None
    check_in_time: Optional[datetime] = None

class EmployeeDetail(BaseModel):
    employee: User
    attendance: List[AttendanceRecord]
    sessions: List[WorkSession]
    work: List[WorkUpload]

class PolicySettings(BaseModel):
    """Admin-configurable thresholds. Stored and reported; nothing enforces them."""
    min_daily_hours: Optional[str] = None
    max_session_duration: Optional[str] = None
    late_threshold: Optional[str] = None
    auto_checkout: Optional[str] = None

    class Config:
        extra = "forbid"
        coerce_numbers_to_str = True
