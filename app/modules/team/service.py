from datetime import datetime, timezone
from supabase import Client
from app.core.errors import NotFoundError, StorageError
from app.core.validation import require_text, optional_text, is_uuid
from app.modules.team.schemas import TeamMemberCreate, TeamMemberUpdate, TeamMemberResponse
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100
ROLE_MAX_LENGTH = 100


class TeamMemberService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_team_member(self, member_data: TeamMemberCreate, image_path: Optional[str] = None) -> TeamMemberResponse:
        """Create a new team member"""
        row = {
            "name": require_text(member_data.name, "name", NAME_MAX_LENGTH),
            "role": require_text(member_data.role, "role", ROLE_MAX_LENGTH),
            "work_detail": require_text(member_data.work_detail, "work detail"),
            "image_path": image_path
        }
        try:
            result = self.supabase.table("team_members").insert(row).execute()
        except Exception as e:
            logger.error(f"Error creating team member: {e}")
            raise StorageError("Failed to create team member")

        if not result.data:
            raise StorageError("Failed to create team member")

        logger.info("Team member created: %s", result.data[0]["id"])
        return TeamMemberResponse(**result.data[0])

    def get_team_member(self, member_id: str) -> TeamMemberResponse:
        """Get team member by ID"""
        if not is_uuid(member_id):
            raise NotFoundError("Team member", member_id)
        try:
            result = self.supabase.table("team_members")\
                .select("*")\
                .eq("id", member_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error getting team member {member_id}: {e}")
            raise StorageError("Failed to load team member")

        if not result.data:
            raise NotFoundError("Team member", member_id)

        return TeamMemberResponse(**result.data[0])

    def list_team_members(self) -> List[TeamMemberResponse]:
        """List all team members, newest first"""
        try:
            result = self.supabase.table("team_members")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error listing team members: {e}")
            raise StorageError("Failed to list team members")

        return [TeamMemberResponse(**member) for member in result.data]

    def update_team_member(
        self,
        member_id: str,
        member_data: TeamMemberUpdate,
        image_path: Optional[str] = None
    ) -> TeamMemberResponse:
        """Update team member; the existing image is kept unless a new one is supplied"""
        self.get_team_member(member_id)

        update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
        name = optional_text(member_data.name, "name", NAME_MAX_LENGTH)
        if name is not None:
            update_data["name"] = name
        role = optional_text(member_data.role, "role", ROLE_MAX_LENGTH)
        if role is not None:
            update_data["role"] = role
        work_detail = optional_text(member_data.work_detail, "work detail")
        if work_detail is not None:
            update_data["work_detail"] = work_detail
        if image_path:
            update_data["image_path"] = image_path

        try:
            result = self.supabase.table("team_members")\
                .update(update_data)\
                .eq("id", member_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating team member {member_id}: {e}")
            raise StorageError("Failed to update team member")

        if not result.data:
            raise NotFoundError("Team member", member_id)

        return TeamMemberResponse(**result.data[0])

    def delete_team_member(self, member_id: str) -> bool:
        """Delete team member, detaching it from every theme first"""
        self.get_team_member(member_id)

        try:
            # Clear head pointers before memberships so no theme is left headed by a non-member
            self.supabase.table("themes")\
                .update({"theme_head_id": None})\
                .eq("theme_head_id", member_id)\
                .execute()

            self.supabase.table("theme_members")\
                .delete()\
                .eq("team_member_id", member_id)\
                .execute()

            result = self.supabase.table("team_members")\
                .delete()\
                .eq("id", member_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting team member {member_id}: {e}")
            raise StorageError("Failed to delete team member")

        logger.info("Team member deleted: %s", member_id)
        return len(result.data) > 0
