from fastapi import APIRouter, Depends, File, Form, UploadFile
from app.core.dependencies import require_admin
from app.core.responses import ApiResponse, ApiListResponse, ok, ok_list
from app.database.supabase_client import get_supabase
from app.modules.team.schemas import TeamMemberCreate, TeamMemberUpdate, TeamMemberResponse
from app.modules.team.service import TeamMemberService
from app.modules.uploads.storage import get_image_storage, stored_image
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/team", tags=["team"])


def get_team_service(supabase: Client = Depends(get_supabase)) -> TeamMemberService:
    return TeamMemberService(supabase)


@router.get("", response_model=ApiListResponse[TeamMemberResponse])
async def list_team_members(
    service: TeamMemberService = Depends(get_team_service)
):
    """List all team members"""
    return ok_list(service.list_team_members())


@router.get("/{member_id}", response_model=ApiResponse[TeamMemberResponse])
async def get_team_member(
    member_id: str,
    service: TeamMemberService = Depends(get_team_service)
):
    """Get team member by ID"""
    return ok(service.get_team_member(member_id))


@router.post("", response_model=ApiResponse[TeamMemberResponse], status_code=201)
async def create_team_member(
    name: str = Form(...),
    role: str = Form(...),
    work_detail: str = Form(...),
    image: Optional[UploadFile] = File(None),
    principal: Dict = Depends(require_admin("team:create")),
    service: TeamMemberService = Depends(get_team_service),
    storage=Depends(get_image_storage)
):
    """Create a team member (multipart, optional image)"""
    async with stored_image(storage, image, "team") as image_path:
        member = service.create_team_member(
            TeamMemberCreate(name=name, role=role, work_detail=work_detail),
            image_path
        )
    return ok(member, "Team member created successfully")


@router.put("/{member_id}", response_model=ApiResponse[TeamMemberResponse])
async def update_team_member(
    member_id: str,
    name: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    work_detail: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    principal: Dict = Depends(require_admin("team:update")),
    service: TeamMemberService = Depends(get_team_service),
    storage=Depends(get_image_storage)
):
    """Update a team member; the current image is kept when none is uploaded"""
    async with stored_image(storage, image, "team") as image_path:
        member = service.update_team_member(
            member_id,
            TeamMemberUpdate(name=name, role=role, work_detail=work_detail),
            image_path
        )
    return ok(member, "Team member updated successfully")


@router.delete("/{member_id}", response_model=ApiResponse[None])
async def delete_team_member(
    member_id: str,
    principal: Dict = Depends(require_admin("team:delete")),
    service: TeamMemberService = Depends(get_team_service)
):
    """Delete a team member and detach it from every theme"""
    service.delete_team_member(member_id)
    return ok(message="Team member deleted successfully")
