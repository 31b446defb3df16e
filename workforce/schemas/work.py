# workforce/schemas/work.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class WorkUploadCreate(BaseModel):
    session_id: int
    project_name: str = Field(min_length=1, max_length=200)
    task_id: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    repo_link: Optional[str] = None
    file_url: Optional[str] = None

class WorkUpload(BaseModel):
    id: int
    session_id: int
    user_id: int
    project_name: str
    task_id: str
    description: str
    file_url: Optional[str] = None
    repo_link: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
