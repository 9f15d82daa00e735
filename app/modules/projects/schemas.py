from enum import Enum
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from app.modules.themes.schemas import ThemeResponse


class ProjectStatus(str, Enum):
    ONGOING = "ongoing"
    COMPLETED = "completed"


class ProjectCreate(BaseModel):
    name: str
    description: str
    status: ProjectStatus = ProjectStatus.ONGOING


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None


class ProjectResponse(BaseModel):
    id: str
    name: str
    description: str
    status: ProjectStatus
    image_path: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProjectWithThemesResponse(BaseModel):
    project: ProjectResponse
    themes: List[ThemeResponse]
