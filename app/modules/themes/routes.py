from fastapi import APIRouter, Depends, File, Form, UploadFile
from app.core.dependencies import require_admin
from app.core.responses import ApiResponse, ApiListResponse, ok, ok_list
from app.database.supabase_client import get_supabase
from app.modules.notifications.service import Notifier, get_notifier
from app.modules.themes.schemas import (
    ThemeCreate, ThemeUpdate, ThemeResponse, ThemeTeamResponse,
    ThemeMembersAdd, ThemeHeadAssign
)
from app.modules.themes.service import ThemeService
from app.modules.uploads.storage import get_image_storage, stored_image
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/themes", tags=["themes"])


def get_theme_service(
    supabase: Client = Depends(get_supabase),
    notifier: Notifier = Depends(get_notifier)
) -> ThemeService:
    return ThemeService(supabase, notifier)


@router.get("", response_model=ApiListResponse[ThemeResponse])
async def list_themes(
    project_id: Optional[str] = None,
    service: ThemeService = Depends(get_theme_service)
):
    """List themes with members, head and project populated"""
    return ok_list(service.list_themes(project_id=project_id))


@router.get("/{theme_id}", response_model=ApiResponse[ThemeResponse])
async def get_theme(
    theme_id: str,
    service: ThemeService = Depends(get_theme_service)
):
    """Get theme by ID"""
    return ok(service.get_theme(theme_id))


@router.get("/{theme_id}/team", response_model=ApiResponse[ThemeTeamResponse])
async def get_theme_team(
    theme_id: str,
    service: ThemeService = Depends(get_theme_service)
):
    """Get the members and head of a theme"""
    return ok(service.get_theme_team(theme_id))


@router.post("", response_model=ApiResponse[ThemeResponse], status_code=201)
async def create_theme(
    name: str = Form(...),
    description: str = Form(...),
    project_id: Optional[str] = Form(None),
    primary_color: Optional[str] = Form(None),
    secondary_color: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    principal: Dict = Depends(require_admin("themes:create")),
    service: ThemeService = Depends(get_theme_service),
    storage=Depends(get_image_storage)
):
    """Create a theme, optionally under a project (multipart, optional image)"""
    async with stored_image(storage, image, "theme") as image_path:
        theme = service.create_theme(
            ThemeCreate(
                name=name,
                description=description,
                project_id=project_id or None,
                primary_color=primary_color,
                secondary_color=secondary_color
            ),
            principal["id"],
            image_path
        )
    return ok(theme, "Theme created successfully")


@router.put("/{theme_id}", response_model=ApiResponse[ThemeResponse])
async def update_theme(
    theme_id: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    primary_color: Optional[str] = Form(None),
    secondary_color: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    principal: Dict = Depends(require_admin("themes:update")),
    service: ThemeService = Depends(get_theme_service),
    storage=Depends(get_image_storage)
):
    """Update theme fields; members, head and project use their own endpoints"""
    async with stored_image(storage, image, "theme") as image_path:
        theme = service.update_theme(
            theme_id,
            ThemeUpdate(
                name=name,
                description=description,
                primary_color=primary_color,
                secondary_color=secondary_color
            ),
            image_path
        )
    return ok(theme, "Theme updated successfully")


@router.put("/{theme_id}/members", response_model=ApiResponse[ThemeResponse])
async def add_members(
    theme_id: str,
    members: ThemeMembersAdd,
    principal: Dict = Depends(require_admin("themes:add_members")),
    service: ThemeService = Depends(get_theme_service)
):
    """Add team members to a theme (existing members are left as they are)"""
    return ok(service.add_members(theme_id, members.member_ids), "Members added to theme successfully")


@router.delete("/{theme_id}/members/{member_id}", response_model=ApiResponse[ThemeResponse])
async def remove_member(
    theme_id: str,
    member_id: str,
    principal: Dict = Depends(require_admin("themes:remove_member")),
    service: ThemeService = Depends(get_theme_service)
):
    """Remove a team member from a theme; clears the head if it was that member"""
    return ok(service.remove_member(theme_id, member_id), "Member removed from theme successfully")


@router.put("/{theme_id}/theme-head", response_model=ApiResponse[ThemeResponse])
async def assign_theme_head(
    theme_id: str,
    head: ThemeHeadAssign,
    principal: Dict = Depends(require_admin("themes:assign_head")),
    service: ThemeService = Depends(get_theme_service)
):
    """Assign the theme head (must be a member), or clear it with member_id=null"""
    return ok(service.assign_theme_head(theme_id, head.member_id), "Theme head updated successfully")


@router.delete("/{theme_id}", response_model=ApiResponse[None])
async def delete_theme(
    theme_id: str,
    principal: Dict = Depends(require_admin("themes:delete")),
    service: ThemeService = Depends(get_theme_service)
):
    """Delete a theme and its memberships"""
    service.delete_theme(theme_id)
    return ok(message="Theme deleted successfully")
