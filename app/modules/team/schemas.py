from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class TeamMemberCreate(BaseModel):
    name: str
    role: str
    work_detail: str


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    work_detail: Optional[str] = None


class TeamMemberResponse(BaseModel):
    id: str
    name: str
    role: str
    work_detail: str
    image_path: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TeamMemberSummary(BaseModel):
    """Populated form used inside themes"""
    id: str
    name: str
    role: str
    work_detail: str
    image_path: Optional[str] = None

    class Config:
        from_attributes = True
