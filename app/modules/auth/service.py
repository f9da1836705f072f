import hashlib
import logging
import time
from supabase import Client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from fastapi import HTTPException
from typing import Dict, Any, Optional, Tuple

logger = logging.getLogger(__name__)


class TokenCache:
    """Short-lived map of token digest -> user dict.

    A page load fires several API calls with the same bearer token; caching the
    Supabase user lookup keeps that to one auth round trip per TTL window.
    """

    def __init__(self, ttl_sec: float = 60, max_size: int = 500):
        self.ttl_sec = ttl_sec
        self.max_size = max_size
        self._entries: Dict[str, Tuple[Dict[str, Any], float]] = {}

    @staticmethod
    def key(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()

    def get(self, token: str) -> Optional[Dict[str, Any]]:
        key = self.key(token)
        entry = self._entries.get(key)
        if entry is None:
            return None
        user_data, expiry = entry
        if time.monotonic() >= expiry:
            del self._entries[key]
            return None
        return user_data

    def put(self, token: str, user_data: Dict[str, Any]) -> None:
        now = time.monotonic()
        if len(self._entries) >= self.max_size:
            self._entries = {k: v for k, v in self._entries.items() if v[1] > now}
            if len(self._entries) >= self.max_size:
                return
        self._entries[self.key(token)] = (user_data, now + self.ttl_sec)

    def invalidate(self, token: str) -> None:
        self._entries.pop(self.key(token), None)

    def clear(self) -> None:
        self._entries.clear()


token_cache = TokenCache()


def _mentions(error: Exception, *phrases: str) -> bool:
    message = str(error).lower()
    return any(phrase in message for phrase in phrases)


class AuthService:
    def __init__(self, supabase: Client, cache: TokenCache = token_cache):
        self.supabase = supabase
        self.cache = cache

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Create a Supabase Auth account.

        The account has no church yet; the user joins one afterwards with an
        invite code or a join request, and full_name becomes their member name.
        """
        user_metadata = {}
        if register_data.full_name and register_data.full_name.strip():
            user_metadata["full_name"] = register_data.full_name.strip()
        try:
            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {"data": user_metadata},
            })
            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            logger.info(f"Registered user {auth_response.user.id}")
            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                message="Account created. Join a church with an invite code or send a join request."
            )
        except HTTPException:
            raise
        except Exception as e:
            if _mentions(e, "already registered", "already exists"):
                raise HTTPException(status_code=400, detail="User already exists")
            logger.error(f"Registration failed: {e}")
            raise HTTPException(status_code=500, detail="Registration failed")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Exchange email and password for a Supabase access token"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid email or password")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except HTTPException:
            raise
        except Exception as e:
            if _mentions(e, "invalid", "credentials"):
                raise HTTPException(status_code=401, detail="Invalid email or password")
            logger.error(f"Login failed: {e}")
            raise HTTPException(status_code=500, detail="Login failed")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve a bearer token to {id, email, user_metadata}"""
        cached = self.cache.get(token)
        if cached is not None:
            return cached
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            if not _mentions(e, "jwt", "expired", "invalid"):
                logger.warning(f"Token lookup failed: {e}")
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        user = user_response.user if user_response else None
        if not user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        user_data = {
            "id": user.id,
            "email": user.email,
            "user_metadata": user.user_metadata or {},
        }
        self.cache.put(token, user_data)
        return user_data

    def logout(self, token: str) -> bool:
        """Drop the cached identity for this token and end the Supabase session"""
        self.cache.invalidate(token)
        try:
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False
