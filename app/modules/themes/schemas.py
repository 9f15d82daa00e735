from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from app.modules.team.schemas import TeamMemberSummary


class ThemeCreate(BaseModel):
    name: str
    description: str
    project_id: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None


class ThemeUpdate(BaseModel):
    """Generic update; membership, head and project have dedicated operations"""
    name: Optional[str] = None
    description: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None


class ThemeMembersAdd(BaseModel):
    member_ids: List[str]


class ThemeHeadAssign(BaseModel):
    member_id: Optional[str] = None  # null clears the head


class ProjectSummary(BaseModel):
    id: str
    name: str


class ThemeResponse(BaseModel):
    id: str
    name: str
    description: str
    project_id: Optional[str] = None
    project: Optional[ProjectSummary] = None
    members: List[TeamMemberSummary] = []
    theme_head_id: Optional[str] = None
    theme_head: Optional[TeamMemberSummary] = None
    created_by: Optional[str] = None
    image_path: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ThemeTeamResponse(BaseModel):
    theme_id: str
    theme_name: str
    theme_head: Optional[TeamMemberSummary] = None
    members: List[TeamMemberSummary]
