from datetime import datetime, timezone
from supabase import Client
from app.core.errors import NotFoundError, StorageError, ValidationError
from app.core.validation import require_text, optional_text, optional_color, is_uuid
from app.modules.notifications.service import ChangeEvent, Notifier, notify_safely
from app.modules.team.schemas import TeamMemberSummary
from app.modules.themes.schemas import (
    ThemeCreate, ThemeUpdate, ThemeResponse, ThemeTeamResponse, ProjectSummary
)
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 200
MEMBER_SUMMARY_FIELDS = "id, name, role, work_detail, image_path"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ThemeService:
    def __init__(self, supabase: Client, notifier: Optional[Notifier] = None):
        self.supabase = supabase
        self.notifier = notifier or Notifier()

    # ---- lookups ----

    def _get_theme_row(self, theme_id: str) -> dict:
        if not is_uuid(theme_id):
            raise NotFoundError("Theme", theme_id)
        try:
            result = self.supabase.table("themes")\
                .select("*")\
                .eq("id", theme_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error getting theme {theme_id}: {e}")
            raise StorageError("Failed to load theme")

        if not result.data:
            raise NotFoundError("Theme", theme_id)
        return result.data[0]

    def _get_project_row(self, project_id: str) -> dict:
        if not is_uuid(project_id):
            raise NotFoundError("Project", project_id)
        try:
            result = self.supabase.table("projects")\
                .select("id, name")\
                .eq("id", project_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error getting project {project_id}: {e}")
            raise StorageError("Failed to load project")

        if not result.data:
            raise NotFoundError("Project", project_id)
        return result.data[0]

    def _is_member(self, theme_id: str, member_id: str) -> bool:
        result = self.supabase.table("theme_members")\
            .select("id")\
            .eq("theme_id", theme_id)\
            .eq("team_member_id", member_id)\
            .execute()
        return bool(result.data)

    def _populate(self, rows: List[dict]) -> List[ThemeResponse]:
        """Expand members, head and project for a batch of theme rows (read-side join)"""
        if not rows:
            return []
        theme_ids = [row["id"] for row in rows]
        try:
            links = self.supabase.table("theme_members")\
                .select("theme_id, team_member_id")\
                .in_("theme_id", theme_ids)\
                .order("created_at")\
                .execute().data

            member_ids = {link["team_member_id"] for link in links}
            member_ids.update(row["theme_head_id"] for row in rows if row.get("theme_head_id"))
            members: Dict[str, TeamMemberSummary] = {}
            if member_ids:
                member_rows = self.supabase.table("team_members")\
                    .select(MEMBER_SUMMARY_FIELDS)\
                    .in_("id", list(member_ids))\
                    .execute().data
                members = {m["id"]: TeamMemberSummary(**m) for m in member_rows}

            project_ids = {row["project_id"] for row in rows if row.get("project_id")}
            projects: Dict[str, ProjectSummary] = {}
            if project_ids:
                project_rows = self.supabase.table("projects")\
                    .select("id, name")\
                    .in_("id", list(project_ids))\
                    .execute().data
                projects = {p["id"]: ProjectSummary(**p) for p in project_rows}
        except Exception as e:
            logger.error(f"Error populating themes: {e}")
            raise StorageError("Failed to load theme relationships")

        by_theme: Dict[str, List[TeamMemberSummary]] = {theme_id: [] for theme_id in theme_ids}
        for link in links:
            member = members.get(link["team_member_id"])
            if member is not None:
                by_theme[link["theme_id"]].append(member)

        themes = []
        for row in rows:
            theme = ThemeResponse(**row)
            theme.members = by_theme[row["id"]]
            theme.theme_head = members.get(row.get("theme_head_id")) if row.get("theme_head_id") else None
            theme.project = projects.get(row.get("project_id")) if row.get("project_id") else None
            themes.append(theme)
        return themes

    # ---- reads ----

    def get_theme(self, theme_id: str) -> ThemeResponse:
        """Get theme by ID with members, head and project populated"""
        return self._populate([self._get_theme_row(theme_id)])[0]

    def list_themes(self, project_id: Optional[str] = None) -> List[ThemeResponse]:
        """List themes, newest first, optionally only those of one project"""
        if project_id and not is_uuid(project_id):
            return []
        try:
            query = self.supabase.table("themes").select("*")
            if project_id:
                query = query.eq("project_id", project_id)
            result = query.order("created_at", desc=True).execute()
        except Exception as e:
            logger.error(f"Error listing themes: {e}")
            raise StorageError("Failed to list themes")

        return self._populate(result.data)

    def get_theme_team(self, theme_id: str) -> ThemeTeamResponse:
        """Members and head of a theme"""
        theme = self.get_theme(theme_id)
        return ThemeTeamResponse(
            theme_id=theme.id,
            theme_name=theme.name,
            theme_head=theme.theme_head,
            members=theme.members
        )

    # ---- writes ----

    def create_theme(self, theme_data: ThemeCreate, created_by: str, image_path: Optional[str] = None) -> ThemeResponse:
        """Create a theme with no members and no head, optionally under a project"""
        row = {
            "name": require_text(theme_data.name, "name", NAME_MAX_LENGTH),
            "description": require_text(theme_data.description, "description"),
            "project_id": None,
            "theme_head_id": None,
            "created_by": created_by,
            "image_path": image_path,
            "primary_color": optional_color(theme_data.primary_color, "primary_color"),
            "secondary_color": optional_color(theme_data.secondary_color, "secondary_color")
        }
        project_name = None
        if theme_data.project_id:
            project = self._get_project_row(theme_data.project_id)
            row["project_id"] = project["id"]
            project_name = project["name"]

        try:
            result = self.supabase.table("themes").insert(row).execute()
        except Exception as e:
            logger.error(f"Error creating theme: {e}")
            raise StorageError("Failed to create theme")

        if not result.data:
            raise StorageError("Failed to create theme")

        theme = self._populate([result.data[0]])[0]
        logger.info("Theme created: %s (project=%s)", theme.id, theme.project_id)
        notify_safely(self.notifier, ChangeEvent("theme", theme.name, "Added", project_name))
        return theme

    def update_theme(self, theme_id: str, theme_data: ThemeUpdate, image_path: Optional[str] = None) -> ThemeResponse:
        """Update name/description/colors/image only"""
        self._get_theme_row(theme_id)

        update_data = {"updated_at": _now()}
        name = optional_text(theme_data.name, "name", NAME_MAX_LENGTH)
        if name is not None:
            update_data["name"] = name
        description = optional_text(theme_data.description, "description")
        if description is not None:
            update_data["description"] = description
        if theme_data.primary_color is not None:
            update_data["primary_color"] = optional_color(theme_data.primary_color, "primary_color")
        if theme_data.secondary_color is not None:
            update_data["secondary_color"] = optional_color(theme_data.secondary_color, "secondary_color")
        if image_path:
            update_data["image_path"] = image_path

        try:
            result = self.supabase.table("themes")\
                .update(update_data)\
                .eq("id", theme_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating theme {theme_id}: {e}")
            raise StorageError("Failed to update theme")

        if not result.data:
            raise NotFoundError("Theme", theme_id)

        theme = self._populate([result.data[0]])[0]
        project_name = theme.project.name if theme.project else None
        notify_safely(self.notifier, ChangeEvent("theme", theme.name, "Updated", project_name))
        return theme

    def add_members(self, theme_id: str, member_ids: List[str]) -> ThemeResponse:
        """Merge team members into the theme (set union; re-adding is a no-op)"""
        wanted = list(dict.fromkeys(m for m in member_ids if m))
        if not wanted:
            raise ValidationError("Please provide member_ids")

        self._get_theme_row(theme_id)

        candidates = [m for m in wanted if is_uuid(m)]
        found = []
        try:
            if candidates:
                found = self.supabase.table("team_members")\
                    .select("id")\
                    .in_("id", candidates)\
                    .execute().data
        except Exception as e:
            logger.error(f"Error resolving members for theme {theme_id}: {e}")
            raise StorageError("Failed to load team members")

        missing = set(wanted) - {m["id"] for m in found}
        if missing:
            raise NotFoundError("Team member", ", ".join(sorted(missing)))

        try:
            # Atomic add-if-absent on the (theme_id, team_member_id) unique key
            self.supabase.table("theme_members")\
                .upsert(
                    [{"theme_id": theme_id, "team_member_id": member_id} for member_id in wanted],
                    on_conflict="theme_id,team_member_id",
                    ignore_duplicates=True
                )\
                .execute()
            self.supabase.table("themes")\
                .update({"updated_at": _now()})\
                .eq("id", theme_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error adding members to theme {theme_id}: {e}")
            raise StorageError("Failed to add members to theme")

        return self.get_theme(theme_id)

    def remove_member(self, theme_id: str, member_id: str) -> ThemeResponse:
        """Remove one member; clears the head if it was that member"""
        self._get_theme_row(theme_id)
        if not is_uuid(member_id):
            raise NotFoundError("Theme member", member_id)

        try:
            # Head first, so the head is always a member
            self.supabase.table("themes")\
                .update({"theme_head_id": None, "updated_at": _now()})\
                .eq("id", theme_id)\
                .eq("theme_head_id", member_id)\
                .execute()

            result = self.supabase.table("theme_members")\
                .delete()\
                .eq("theme_id", theme_id)\
                .eq("team_member_id", member_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error removing member {member_id} from theme {theme_id}: {e}")
            raise StorageError("Failed to remove member from theme")

        if not result.data:
            raise NotFoundError("Theme member", member_id)

        return self.get_theme(theme_id)

    def assign_theme_head(self, theme_id: str, member_id: Optional[str]) -> ThemeResponse:
        """Set the head to one of the theme's members, or clear it with None"""
        self._get_theme_row(theme_id)

        if member_id:
            if not is_uuid(member_id):
                raise NotFoundError("Member", member_id)
            try:
                member = self.supabase.table("team_members")\
                    .select("id")\
                    .eq("id", member_id)\
                    .execute().data
                is_member = self._is_member(theme_id, member_id)
            except Exception as e:
                logger.error(f"Error checking theme head candidate {member_id}: {e}")
                raise StorageError("Failed to load team member")

            if not member:
                raise NotFoundError("Member", member_id)
            if not is_member:
                raise ValidationError("Theme head must be one of the theme members")

        try:
            self.supabase.table("themes")\
                .update({"theme_head_id": member_id or None, "updated_at": _now()})\
                .eq("id", theme_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error assigning head of theme {theme_id}: {e}")
            raise StorageError("Failed to update theme head")

        if member_id:
            self._undo_head_if_removed(theme_id, member_id)

        return self.get_theme(theme_id)

    def _undo_head_if_removed(self, theme_id: str, member_id: str) -> None:
        """A removal may have landed between the membership check and the head update"""
        try:
            if self._is_member(theme_id, member_id):
                return
            self.supabase.table("themes")\
                .update({"theme_head_id": None, "updated_at": _now()})\
                .eq("id", theme_id)\
                .eq("theme_head_id", member_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error re-checking head of theme {theme_id}: {e}")
            raise StorageError("Failed to update theme head")

        logger.warning("Member %s left theme %s while being made head; head cleared", member_id, theme_id)
        raise ValidationError("Theme head must be one of the theme members")

    def delete_theme(self, theme_id: str) -> bool:
        """Delete a theme and its membership rows (team members themselves survive)"""
        self._get_theme_row(theme_id)

        try:
            self.supabase.table("theme_members")\
                .delete()\
                .eq("theme_id", theme_id)\
                .execute()

            result = self.supabase.table("themes")\
                .delete()\
                .eq("id", theme_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting theme {theme_id}: {e}")
            raise StorageError("Failed to delete theme")

        logger.info("Theme deleted: %s", theme_id)
        return len(result.data) > 0

    def delete_themes_for_project(self, project_id: str) -> int:
        """Cascade step for project deletion: memberships, then themes. Raises on any failure."""
        try:
            rows = self.supabase.table("themes")\
                .select("id")\
                .eq("project_id", project_id)\
                .execute().data
            theme_ids = [row["id"] for row in rows]
            if not theme_ids:
                return 0

            self.supabase.table("theme_members")\
                .delete()\
                .in_("theme_id", theme_ids)\
                .execute()

            self.supabase.table("themes")\
                .delete()\
                .in_("id", theme_ids)\
                .execute()
        except Exception as e:
            logger.error(f"Cascade delete of themes for project {project_id} failed: {e}")
            raise StorageError("Failed to delete project themes; project was not deleted")

        logger.info("Deleted %d theme(s) of project %s", len(theme_ids), project_id)
        return len(theme_ids)
