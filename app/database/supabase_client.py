from supabase import create_client, Client
from postgrest.exceptions import APIError
from app.config import settings
from typing import Any, Dict, Optional

# SQLSTATE raised by the schedule exclusion constraints
EXCLUSION_VIOLATION = "23P01"


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Authorization is enforced by the API layer."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_service_client()


def get_auth_client() -> Client:
    """Anon-key client for Supabase Auth calls (sign up, sign in, token lookup)."""
    return SupabaseClient.get_client()


def first_row(result) -> Optional[Dict[str, Any]]:
    """First row of a query result, or None. Used instead of .single() so a miss is not an error."""
    if result is None or not result.data:
        return None
    return result.data[0]


def is_exclusion_violation(exc: Exception) -> bool:
    return isinstance(exc, APIError) and getattr(exc, "code", None) == EXCLUSION_VIOLATION
