# workforce/api/v1/endpoints/admin.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from workforce.core import security
from workforce.db import models, session
from workforce.schemas import admin as admin_schema
from workforce.services import admin as admin_service

router = APIRouter()

@router.get("/stats", response_model=admin_schema.Stats)
def read_stats(
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """ Today's headcount: employees, present, absent, and minutes worked. """
    return admin_service.stats(db, admin)

@router.get("/employees", response_model=List[admin_schema.EmployeeSummary])
def read_employees(
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """ Every employee with today's attendance status and check-in time. """
    return admin_service.list_employees(db, admin)

@router.get("/employees/{employee_id}", response_model=admin_schema.EmployeeDetail)
def read_employee(
    employee_id: int,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    return admin_service.employee_detail(db, admin, employee_id)

@router.get("/settings", response_model=admin_schema.PolicySettings)
def read_settings(
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    return admin_service.get_settings(db, admin)

@router.post("/settings", response_model=admin_schema.PolicySettings)
def update_settings(
    updates: admin_schema.PolicySettings,
    db: Session = Depends(session.get_db),
    admin: models.User = Depends(security.get_current_admin_user)
):
    """ Upserts the provided policy keys and returns the full map. """
    return admin_service.update_settings(db, admin, updates)
