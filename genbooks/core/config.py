import os
from typing import List, Union, Optional
from pydantic import AnyHttpUrl, validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Settings(BaseSettings):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "GenBooks Store")
    VERSION: str = os.getenv("VERSION", "1.0.0")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    PORT: int = int(os.getenv("PORT", "3000"))

    # Storage: "file" keeps everything in DATA_FILE, "supabase" talks to the hosted database
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "file")
    DATA_FILE: str = os.getenv("DATA_FILE", "data.json")

    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

    # Sessions
    SESSION_SECRET: str = os.getenv("SESSION_SECRET", "fallback-secret-key-for-development")
    SESSION_MAX_AGE: int = int(os.getenv("SESSION_MAX_AGE", str(24 * 60 * 60)))

    # Admin
    ADMIN_USERNAME: Optional[str] = os.getenv("ADMIN_USERNAME")
    ADMIN_PASSWORD: Optional[str] = os.getenv("ADMIN_PASSWORD")
    ADMIN_PASSWORD_HASH: Optional[str] = os.getenv("ADMIN_PASSWORD_HASH")

    LOGIN_MAX_ATTEMPTS: int = int(os.getenv("LOGIN_MAX_ATTEMPTS", "5"))
    LOGIN_LOCKOUT_SECONDS: int = int(os.getenv("LOGIN_LOCKOUT_SECONDS", str(15 * 60)))
    LOGIN_TRACKER_CAPACITY: int = int(os.getenv("LOGIN_TRACKER_CAPACITY", "10000"))

    # Email
    EMAIL_HOST: str = os.getenv("EMAIL_HOST", "")
    EMAIL_PORT: int = int(os.getenv("EMAIL_PORT", "587"))
    EMAIL_SECURE: bool = _env_bool("EMAIL_SECURE")
    EMAIL_USER: str = os.getenv("EMAIL_USER", "")
    EMAIL_PASS: str = os.getenv("EMAIL_PASS", "")
    EMAIL_FROM: str = os.getenv("EMAIL_FROM", "")

    WEBSITE_URL: str = os.getenv("WEBSITE_URL", "http://localhost:3000")

    # CORS
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = []

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    @validator("STORAGE_BACKEND")
    def check_storage_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("file", "supabase"):
            raise ValueError(f"Unknown storage backend: {v!r} (expected 'file' or 'supabase')")
        return v

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def email_configured(self) -> bool:
        return bool(self.EMAIL_HOST and self.EMAIL_USER and self.EMAIL_PASS)

    class Config:
        case_sensitive = True
        env_file = ".env"
        extra = "ignore"

settings = Settings()
