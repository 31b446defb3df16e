# workforce/services/admin.py
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from workforce.core.exceptions import EmployeeNotFound
from workforce.core.security import require_admin
from workforce.db import models
from workforce.schemas import admin as admin_schema
from workforce.schemas import attendance as attendance_schema
from workforce.schemas import user as user_schema
from workforce.schemas import work as work_schema
from workforce.schemas.admin import PolicySettings
from workforce.services import policy, tracker

logger = logging.getLogger(__name__)

def stats(db: Session, actor: models.User, today: Optional[date] = None) -> admin_schema.Stats:
    """Headcount for ``today``: employees, how many have an attendance record, and the rest."""
    require_admin(actor)
    today = today or tracker.utcnow().date()
    total = db.query(models.User).filter(models.User.role == models.ROLE_EMPLOYEE).count()
    present = db.query(models.AttendanceRecord).join(models.User).filter(
        models.AttendanceRecord.date == today,
        models.User.role == models.ROLE_EMPLOYEE,
    ).count()
    return admin_schema.Stats(
        total_employees=total,
        present_today=present,
        absent_today=total - present,
        total_minutes_today=tracker.worked_minutes(db, today),
    )

def list_employees(db: Session, actor: models.User, today: Optional[date] = None) -> List[admin_schema.EmployeeSummary]:
    require_admin(actor)
    today = today or tracker.utcnow().date()
    rows = db.query(models.User, models.AttendanceRecord).outerjoin(
        models.AttendanceRecord,
        (models.AttendanceRecord.user_id == models.User.id) & (models.AttendanceRecord.date == today),
    ).filter(models.User.role == models.ROLE_EMPLOYEE).order_by(models.User.id).all()

    return [
        admin_schema.EmployeeSummary(
            id=user.id, name=user.name, email=user.email,
            today_status=record.status if record else None,
            check_in_time=record.check_in if record else None,
        )
        for user, record in rows
    ]

def employee_detail(db: Session, actor: models.User, employee_id: int) -> admin_schema.EmployeeDetail:
    require_admin(actor)
    employee = db.query(models.User).filter(models.User.id == employee_id).first()
    if employee is None:
        raise EmployeeNotFound()
    return admin_schema.EmployeeDetail(
        employee=user_schema.User.model_validate(employee),
        attendance=[attendance_schema.AttendanceRecord.model_validate(r) for r in tracker.attendance_history(db, employee.id)],
        sessions=[attendance_schema.WorkSession.model_validate(s) for s in tracker.session_history(db, employee.id)],
        work=[work_schema.WorkUpload.model_validate(w) for w in tracker.work_history(db, employee.id, limit=None)],
    )

def get_settings(db: Session, actor: models.User) -> PolicySettings:
    require_admin(actor)
    return policy.load_policy(db)

def update_settings(db: Session, actor: models.User, updates: PolicySettings) -> PolicySettings:
    require_admin(actor)
    logger.info("Admin %s is updating policy settings", actor.id)
    return policy.save_policy(db, updates)
