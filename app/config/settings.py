from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Bypasses RLS; used for membership writes on join/approve

    # Invites and join requests
    app_url: str = "http://localhost:3000"  # Base URL for invite links
    invite_code_length: int = 8
    join_request_weekly_limit: int = 3
    join_request_denial_limit: int = 3
    join_request_denial_window_days: int = 90

    # App
    app_name: str = "flock-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def invite_url(self, code: str) -> str:
        return f"{self.app_url.rstrip('/')}/welcome/join-church?code={code}"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
