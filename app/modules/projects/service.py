from datetime import datetime, timezone
from supabase import Client
from app.core.errors import NotFoundError, StorageError
from app.core.validation import require_text, optional_text, is_uuid
from app.modules.notifications.service import ChangeEvent, Notifier, notify_safely
from app.modules.projects.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectStatus, ProjectWithThemesResponse
)
from app.modules.themes.service import ThemeService
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 200
STATUS_VALUES = {status.value for status in ProjectStatus}


class ProjectService:
    def __init__(self, supabase: Client, notifier: Optional[Notifier] = None):
        self.supabase = supabase
        self.notifier = notifier or Notifier()
        self.themes = ThemeService(supabase)

    def create_project(self, project_data: ProjectCreate, image_path: Optional[str] = None) -> ProjectResponse:
        """Create a new project"""
        row = {
            "name": require_text(project_data.name, "name", NAME_MAX_LENGTH),
            "description": require_text(project_data.description, "description"),
            "status": (project_data.status or ProjectStatus.ONGOING).value,
            "image_path": image_path
        }
        try:
            result = self.supabase.table("projects").insert(row).execute()
        except Exception as e:
            logger.error(f"Error creating project: {e}")
            raise StorageError("Failed to create project")

        if not result.data:
            raise StorageError("Failed to create project")

        project = ProjectResponse(**result.data[0])
        logger.info("Project created: %s", project.id)
        notify_safely(self.notifier, ChangeEvent("project", project.name, "Added"))
        return project

    def get_project(self, project_id: str) -> ProjectResponse:
        """Get project by ID"""
        if not is_uuid(project_id):
            raise NotFoundError("Project", project_id)
        try:
            result = self.supabase.table("projects")\
                .select("*")\
                .eq("id", project_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error getting project {project_id}: {e}")
            raise StorageError("Failed to load project")

        if not result.data:
            raise NotFoundError("Project", project_id)

        return ProjectResponse(**result.data[0])

    def list_projects(self, status: Optional[str] = None) -> List[ProjectResponse]:
        """List projects, newest first. An unrecognized status filter is ignored."""
        try:
            query = self.supabase.table("projects").select("*")
            if status in STATUS_VALUES:
                query = query.eq("status", status)
            result = query.order("created_at", desc=True).execute()
        except Exception as e:
            logger.error(f"Error listing projects: {e}")
            raise StorageError("Failed to list projects")

        return [ProjectResponse(**project) for project in result.data]

    def get_project_with_themes(self, project_id: str) -> ProjectWithThemesResponse:
        """Get a project together with its populated themes"""
        project = self.get_project(project_id)
        return ProjectWithThemesResponse(
            project=project,
            themes=self.themes.list_themes(project_id=project_id)
        )

    def update_project(
        self,
        project_id: str,
        project_data: ProjectUpdate,
        image_path: Optional[str] = None
    ) -> ProjectResponse:
        """Update project; the existing image is kept unless a new one is supplied"""
        self.get_project(project_id)

        update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
        name = optional_text(project_data.name, "name", NAME_MAX_LENGTH)
        if name is not None:
            update_data["name"] = name
        description = optional_text(project_data.description, "description")
        if description is not None:
            update_data["description"] = description
        if project_data.status is not None:
            update_data["status"] = project_data.status.value
        if image_path:
            update_data["image_path"] = image_path

        try:
            result = self.supabase.table("projects")\
                .update(update_data)\
                .eq("id", project_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating project {project_id}: {e}")
            raise StorageError("Failed to update project")

        if not result.data:
            raise NotFoundError("Project", project_id)

        project = ProjectResponse(**result.data[0])
        notify_safely(self.notifier, ChangeEvent("project", project.name, "Updated"))
        return project

    def delete_project(self, project_id: str) -> bool:
        """Delete a project after its themes; a failed cascade leaves the project in place"""
        self.get_project(project_id)

        removed = self.themes.delete_themes_for_project(project_id)

        try:
            result = self.supabase.table("projects")\
                .delete()\
                .eq("id", project_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting project {project_id}: {e}")
            raise StorageError("Failed to delete project")

        logger.info("Project deleted: %s (%d theme(s) removed)", project_id, removed)
        return len(result.data) > 0
