"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_BACKEND_DIR = Path(__file__).resolve().parents[2]
_ENV_FILE = _BACKEND_DIR / ".env"

def _expand_origin(value: str) -> list[str]:
    origin = value.rstrip("/")
    if origin in {"http://localhost", "http://127.0.0.1"}:
        return [f"{origin}:3000", origin]
    return [origin]


class Settings(BaseSettings):
    APP_ENV: str = "dev"

    # ===== Evaluation =====
    # "reject": a label applied twice in one scope is a DuplicateLabelError
    # "first": allowed, hydration keeps the first body registered under it
    DUPLICATE_LABELS: Literal["reject", "first"] = "reject"

    # ===== Hydration =====
    BODY_DEFAULT_RESTITUTION: float = 0.9
    BODY_DEFAULT_FRICTION: float = 0.1
    STRICT_CONSTRAINTS: bool = False  # raise instead of skipping unresolved endpoints

    # ===== World =====
    WORLD_WIDTH: int = 800
    WORLD_HEIGHT: int = 450
    WORLD_GRAVITY_Y: float = 1.0
    WORLD_BOUNDARIES: bool = True

    # ===== Matter.js worker =====
    MATTER_WORKER_PATH: str | None = "backend/sim_worker/matter_worker.js"  # If None, defaults to backend/sim_worker/matter_worker.js
    MATTER_WORKER_TIMEOUT_S: float = 10.0
    SIM_DEFAULT_DURATION_S: float = 5.0
    SIM_FRAME_RATE: int = 60

    # ===== Frontend & CORS =====
    FRONTEND_ORIGIN: str | None = Field(
        default=None, validation_alias="FRONTEND_ORIGIN"
    )
    CORS_ALLOW_ORIGINS: list[str] = Field(default_factory=list)

    model_config = SettingsConfigDict(env_file=_ENV_FILE, extra="ignore")

    @field_validator("CORS_ALLOW_ORIGINS", mode="before")
    @classmethod
    def _populate_cors(cls, value: list[str] | None, info: ValidationInfo) -> list[str]:
        origins: list[str] = []

        if value:
            for origin in value:
                origins.extend(_expand_origin(origin))

        frontend_origin = info.data.get("FRONTEND_ORIGIN") if info.data else None
        if isinstance(frontend_origin, str) and frontend_origin.strip():
            origins.extend(_expand_origin(frontend_origin))

        return list(dict.fromkeys(origins)) or _expand_origin("http://localhost:9002")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()


settings = get_settings()
