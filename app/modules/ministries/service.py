from supabase import Client
from app.modules.ministries.schemas import (
    MinistryCreate, MinistryUpdate, MinistryResponse,
    VolunteerCreate, VolunteerUpdate, VolunteerResponse
)
from app.database.supabase_client import first_row
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class MinistryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_ministries(
        self,
        church_id: str,
        category: Optional[str] = None,
        is_active: Optional[bool] = None
    ) -> List[MinistryResponse]:
        try:
            query = self.supabase.table("ministries").select("*").eq("church_id", church_id)
            if category:
                query = query.eq("category", category)
            if is_active is not None:
                query = query.eq("is_active", is_active)
            result = query.order("name").execute()
            return [MinistryResponse(**m) for m in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_ministry(self, church_id: str, ministry_id: str) -> MinistryResponse:
        try:
            row = first_row(
                self.supabase.table("ministries")
                .select("*")
                .eq("id", ministry_id)
                .eq("church_id", church_id)
                .limit(1)
                .execute()
            )
            if row is None:
                raise HTTPException(status_code=404, detail="Ministry not found")
            return MinistryResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _ensure_unique_name(self, church_id: str, name: str, ministry_id: Optional[str] = None) -> None:
        query = self.supabase.table("ministries")\
            .select("id")\
            .eq("church_id", church_id)\
            .eq("name", name)
        if ministry_id:
            query = query.neq("id", ministry_id)
        if query.limit(1).execute().data:
            raise HTTPException(status_code=409, detail="A ministry with this name already exists")

    def create_ministry(self, church_id: str, ministry_data: MinistryCreate, user_id: str) -> MinistryResponse:
        try:
            self._ensure_unique_name(church_id, ministry_data.name)

            payload = ministry_data.model_dump()
            payload.update({"church_id": church_id, "is_active": True, "created_by": user_id})
            result = self.supabase.table("ministries").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create ministry")

            return MinistryResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating ministry: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_ministry(self, church_id: str, ministry_id: str, ministry_data: MinistryUpdate) -> MinistryResponse:
        try:
            update_data = ministry_data.model_dump(exclude_unset=True)
            if update_data.get("name"):
                self._ensure_unique_name(church_id, update_data["name"], ministry_id)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table("ministries")\
                .update(update_data)\
                .eq("id", ministry_id)\
                .eq("church_id", church_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Ministry not found")

            return MinistryResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_ministry(self, church_id: str, ministry_id: str) -> bool:
        """Delete a ministry; volunteers and schedules cascade in the database"""
        try:
            result = self.supabase.table("ministries")\
                .delete()\
                .eq("id", ministry_id)\
                .eq("church_id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Ministry not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))


class VolunteerService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_volunteers(self, ministry_id: str, is_active: Optional[bool] = None) -> List[VolunteerResponse]:
        try:
            query = self.supabase.table("ministry_volunteers").select("*").eq("ministry_id", ministry_id)
            if is_active is not None:
                query = query.eq("is_active", is_active)
            result = query.order("joined_at").execute()
            return [VolunteerResponse(**v) for v in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def add_volunteer(self, church_id: str, ministry_id: str, volunteer_data: VolunteerCreate) -> VolunteerResponse:
        """Add a church member to a ministry as an active volunteer"""
        try:
            member = first_row(
                self.supabase.table("church_members")
                .select("id")
                .eq("user_id", volunteer_data.user_id)
                .eq("church_id", church_id)
                .limit(1)
                .execute()
            )
            if member is None:
                raise HTTPException(status_code=400, detail="User must be a church member")

            existing = self.supabase.table("ministry_volunteers")\
                .select("id")\
                .eq("ministry_id", ministry_id)\
                .eq("user_id", volunteer_data.user_id)\
                .limit(1)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail="User is already a volunteer in this ministry")

            payload = volunteer_data.model_dump(mode="json")
            payload.update({"ministry_id": ministry_id, "is_active": True})
            result = self.supabase.table("ministry_volunteers").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add volunteer")

            return VolunteerResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error adding volunteer to ministry {ministry_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_volunteer(
        self,
        ministry_id: str,
        volunteer_id: str,
        volunteer_data: VolunteerUpdate
    ) -> VolunteerResponse:
        try:
            update_data = volunteer_data.model_dump(exclude_unset=True, mode="json")
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table("ministry_volunteers")\
                .update(update_data)\
                .eq("id", volunteer_id)\
                .eq("ministry_id", ministry_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Volunteer not found")

            return VolunteerResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_volunteer(self, ministry_id: str, volunteer_id: str) -> bool:
        try:
            result = self.supabase.table("ministry_volunteers")\
                .delete()\
                .eq("id", volunteer_id)\
                .eq("ministry_id", ministry_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Volunteer not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
