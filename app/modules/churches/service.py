from supabase import Client
from app.modules.churches.schemas import (
    ChurchCreate, ChurchUpdate, ChurchResponse,
    CampusCreate, CampusUpdate, CampusResponse, CampusOverseerResponse
)
from app.config.permissions_config import ChurchRole
from app.database.supabase_client import first_row
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class ChurchService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create_church(self, church_data: ChurchCreate, user_data: dict) -> ChurchResponse:
        """Create a church; the creator becomes its owner"""
        user_id = user_data["id"]
        try:
            existing = self.supabase.table("church_members")\
                .select("id")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=400, detail="You are already a member of a church")

            result = self.supabase.table("churches").insert({
                "name": church_data.name,
                "description": church_data.description,
                "location": church_data.location,
                "is_public": church_data.is_public,
                "owner_id": user_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create church")
            church = result.data[0]

            metadata = user_data.get("user_metadata") or {}
            self.supabase.table("church_members").insert({
                "church_id": church["id"],
                "campus_id": None,
                "user_id": user_id,
                "role": ChurchRole.OWNER.value,
                "user_name": metadata.get("full_name"),
                "user_email": user_data.get("email"),
            }).execute()

            logger.info(f"Church {church['id']} created by {user_id}")
            return ChurchResponse(**church)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating church: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_church_by_id(self, church_id: str) -> ChurchResponse:
        """Get church by ID"""
        try:
            row = first_row(
                self.supabase.table("churches").select("*").eq("id", church_id).limit(1).execute()
            )
            if row is None:
                raise HTTPException(status_code=404, detail="Church not found")
            return ChurchResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_church(self, church_id: str, church_data: ChurchUpdate) -> ChurchResponse:
        """Update church"""
        try:
            update_data = church_data.model_dump(exclude_unset=True)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table("churches")\
                .update(update_data)\
                .eq("id", church_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Church not found")

            return ChurchResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_church(self, church_id: str) -> bool:
        """Delete church; campuses, memberships and schedules cascade in the database"""
        try:
            result = self.supabase.table("churches")\
                .delete()\
                .eq("id", church_id)\
                .execute()
            logger.info(f"Church {church_id} deleted")
            return len(result.data) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))


class CampusService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_campuses(self, church_id: str, campus_ids: Optional[List[str]] = None) -> List[CampusResponse]:
        """List campuses of a church, optionally restricted to campus_ids"""
        try:
            if campus_ids is not None and len(campus_ids) == 0:
                return []
            query = self.supabase.table("campuses").select("*").eq("church_id", church_id)
            if campus_ids is not None:
                query = query.in_("id", campus_ids)
            result = query.order("name").execute()
            return [CampusResponse(**campus) for campus in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_campus(self, church_id: str, campus_id: str) -> CampusResponse:
        """Get campus, checking it belongs to the church"""
        try:
            row = first_row(
                self.supabase.table("campuses")
                .select("*")
                .eq("id", campus_id)
                .eq("church_id", church_id)
                .limit(1)
                .execute()
            )
            if row is None:
                raise HTTPException(status_code=404, detail="Campus not found")
            return CampusResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_campus(self, church_id: str, campus_data: CampusCreate) -> CampusResponse:
        """Create a new campus"""
        try:
            result = self.supabase.table("campuses").insert({
                "church_id": church_id,
                "name": campus_data.name,
                "location": campus_data.location,
                "address": campus_data.address,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create campus")

            return CampusResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_campus(self, church_id: str, campus_id: str, campus_data: CampusUpdate) -> CampusResponse:
        """Update campus"""
        try:
            update_data = campus_data.model_dump(exclude_unset=True)
            if not update_data:
                return self.get_campus(church_id, campus_id)

            result = self.supabase.table("campuses")\
                .update(update_data)\
                .eq("id", campus_id)\
                .eq("church_id", church_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Campus not found")

            return CampusResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_campus(self, church_id: str, campus_id: str) -> bool:
        """Delete campus; members assigned to it become unassigned"""
        try:
            self.supabase.table("church_members")\
                .update({"campus_id": None})\
                .eq("campus_id", campus_id)\
                .execute()

            result = self.supabase.table("campuses")\
                .delete()\
                .eq("id", campus_id)\
                .eq("church_id", church_id)\
                .execute()

            return len(result.data) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def assign_overseer(self, church_id: str, campus_id: str, member_id: str) -> CampusOverseerResponse:
        """Give an overseer responsibility for an additional campus"""
        try:
            self.get_campus(church_id, campus_id)
            member = first_row(
                self.supabase.table("church_members")
                .select("id, role")
                .eq("id", member_id)
                .eq("church_id", church_id)
                .limit(1)
                .execute()
            )
            if member is None:
                raise HTTPException(status_code=404, detail="Member not found")
            if member["role"] != ChurchRole.OVERSEER.value:
                raise HTTPException(status_code=400, detail="Only overseers can be assigned to oversee campuses")

            existing = self.supabase.table("campus_overseers")\
                .select("id")\
                .eq("church_member_id", member_id)\
                .eq("campus_id", campus_id)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=400, detail="Overseer already assigned to this campus")

            result = self.supabase.table("campus_overseers").insert({
                "church_member_id": member_id,
                "campus_id": campus_id,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to assign overseer")

            return CampusOverseerResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_overseer(self, campus_id: str, member_id: str) -> bool:
        try:
            result = self.supabase.table("campus_overseers")\
                .delete()\
                .eq("church_member_id", member_id)\
                .eq("campus_id", campus_id)\
                .execute()
            return len(result.data) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
