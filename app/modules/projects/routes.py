from fastapi import APIRouter, Depends, File, Form, UploadFile
from app.core.dependencies import require_admin
from app.core.responses import ApiResponse, ApiListResponse, ok, ok_list
from app.database.supabase_client import get_supabase
from app.modules.notifications.service import Notifier, get_notifier
from app.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectStatus, ProjectWithThemesResponse
)
from app.modules.projects.service import ProjectService
from app.modules.uploads.storage import get_image_storage, stored_image
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(
    supabase: Client = Depends(get_supabase),
    notifier: Notifier = Depends(get_notifier)
) -> ProjectService:
    return ProjectService(supabase, notifier)


@router.get("", response_model=ApiListResponse[ProjectResponse])
async def list_projects(
    status: Optional[str] = None,
    service: ProjectService = Depends(get_project_service)
):
    """List all projects, optionally filtered by status (ongoing | completed)"""
    return ok_list(service.list_projects(status=status))


@router.get("/{project_id}", response_model=ApiResponse[ProjectResponse])
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service)
):
    """Get project by ID"""
    return ok(service.get_project(project_id))


@router.get("/{project_id}/themes", response_model=ApiResponse[ProjectWithThemesResponse])
async def get_project_with_themes(
    project_id: str,
    service: ProjectService = Depends(get_project_service)
):
    """Get project with its themes"""
    return ok(service.get_project_with_themes(project_id))


@router.post("", response_model=ApiResponse[ProjectResponse], status_code=201)
async def create_project(
    name: str = Form(...),
    description: str = Form(...),
    status: ProjectStatus = Form(ProjectStatus.ONGOING),
    image: Optional[UploadFile] = File(None),
    principal: Dict = Depends(require_admin("projects:create")),
    service: ProjectService = Depends(get_project_service),
    storage=Depends(get_image_storage)
):
    """Create a project (multipart, optional image)"""
    async with stored_image(storage, image, "project") as image_path:
        project = service.create_project(
            ProjectCreate(name=name, description=description, status=status),
            image_path
        )
    return ok(project, "Project created successfully")


@router.put("/{project_id}", response_model=ApiResponse[ProjectResponse])
async def update_project(
    project_id: str,
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    status: Optional[ProjectStatus] = Form(None),
    image: Optional[UploadFile] = File(None),
    principal: Dict = Depends(require_admin("projects:update")),
    service: ProjectService = Depends(get_project_service),
    storage=Depends(get_image_storage)
):
    """Update a project; the current image is kept when none is uploaded"""
    async with stored_image(storage, image, "project") as image_path:
        project = service.update_project(
            project_id,
            ProjectUpdate(name=name, description=description, status=status),
            image_path
        )
    return ok(project, "Project updated successfully")


@router.delete("/{project_id}", response_model=ApiResponse[None])
async def delete_project(
    project_id: str,
    principal: Dict = Depends(require_admin("projects:delete")),
    service: ProjectService = Depends(get_project_service)
):
    """Delete a project and all of its themes"""
    service.delete_project(project_id)
    return ok(message="Project deleted successfully")
