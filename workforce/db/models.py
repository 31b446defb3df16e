# workforce/db/models.py
from sqlalchemy import (
    Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, String, Text,
    UniqueConstraint, text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

ROLE_ADMIN = "Admin"
ROLE_EMPLOYEE = "Employee"

class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(100))
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    __table_args__ = ( CheckConstraint("role IN ('Admin', 'Employee')"), )
    attendance = relationship("AttendanceRecord", back_populates="owner")
    sessions = relationship("WorkSession", back_populates="owner")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

class AttendanceRecord(Base):
    __tablename__ = "attendance"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    date = Column(Date, nullable=False, index=True)
    check_in = Column(DateTime(timezone=True), nullable=False)
    check_out = Column(DateTime(timezone=True), nullable=True)
    status = Column(String(20), nullable=False)
    # one record per user per calendar day
    __table_args__ = ( UniqueConstraint("user_id", "date", name="uq_attendance_user_date"), )
    owner = relationship("User", back_populates="attendance")

class WorkSession(Base):
    __tablename__ = "sessions"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=True)
    duration = Column(Integer, nullable=True)  # minutes
    work_uploaded = Column(Boolean, nullable=False, default=False)
    # at most one open session per user
    __table_args__ = (
        Index(
            "uq_sessions_one_active", "user_id", unique=True,
            sqlite_where=text("end_time IS NULL"), postgresql_where=text("end_time IS NULL"),
        ),
    )
    owner = relationship("User", back_populates="sessions")
    uploads = relationship("WorkUpload", back_populates="session")

class WorkUpload(Base):
    __tablename__ = "work_uploads"
    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("sessions.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    project_name = Column(String(200), nullable=False)
    task_id = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    file_url = Column(String(500), nullable=True)
    repo_link = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    session = relationship("WorkSession", back_populates="uploads")

class PolicySetting(Base):
    __tablename__ = "settings"
    key = Column(String(50), primary_key=True)
    value = Column(String(100), nullable=False)
