"""Application configuration helpers."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path
import re
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .local_state import LocalStateStore

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_STATE_PATH = PROJECT_ROOT / "data" / "local_state.json"
REPO_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


class AppConfig(BaseModel):
    """Runtime configuration passed explicitly into the store client and services."""

    model_config = ConfigDict(frozen=True)

    github_token: Optional[str] = Field(
        default=None,
        description="Personal access token for the vault repository",
    )
    github_repo: Optional[str] = Field(
        default=None,
        description="Repository identifier in owner/name form",
    )
    github_branch: str = Field(default="main", description="Branch holding the vault")
    api_base: str = Field(
        default="https://api.github.com",
        description="Base URL of the repository content API",
    )
    gemini_api_key: Optional[str] = Field(None, description="Gemini API key (optional)")
    webhook_url: Optional[str] = Field(
        None, description="Outbound webhook for write notifications (optional)"
    )
    state_path: Path = Field(
        default=DEFAULT_STATE_PATH,
        description="JSON file standing in for browser local storage",
    )
    cache_ttl_seconds: float = Field(default=90.0, gt=0)
    request_timeout: float = Field(default=30.0, gt=0)
    actor: Optional[str] = Field(None, description="Display name attached to commits and notifications")

    @field_validator("github_repo", mode="before")
    @classmethod
    def _validate_repo(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip().strip("/")
        if not cleaned:
            return None
        if not REPO_PATTERN.match(cleaned):
            raise ValueError("GITHUB_REPO must look like 'owner/name'")
        return cleaned

    @field_validator("github_token", "gemini_api_key", "webhook_url", "actor", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("state_path", mode="before")
    @classmethod
    def _normalize_state_path(cls, value: str | Path | None) -> Path:
        if value is None or value == "":
            return DEFAULT_STATE_PATH
        path = value if isinstance(value, Path) else Path(value)
        return path.expanduser().resolve()

    @property
    def is_connected(self) -> bool:
        """True when both a credential and a repository are configured."""
        return bool(self.github_token and self.github_repo)

    @property
    def repo_api_url(self) -> str:
        if not self.github_repo:
            raise ValueError("GITHUB_REPO is not configured")
        return f"{self.api_base.rstrip('/')}/repos/{self.github_repo}"


def _read_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load and cache application configuration.

    Environment variables win; anything unset falls back to the values the UI
    saved into local state.
    """
    load_dotenv()
    state_path = _read_env("VAULT_STATE_PATH") or str(DEFAULT_STATE_PATH)
    saved = LocalStateStore(Path(state_path)).load_settings()

    ttl = _read_env("VAULT_CACHE_TTL")

    return AppConfig(
        github_token=_read_env("GITHUB_TOKEN") or saved.get("vault_token"),
        github_repo=_read_env("GITHUB_REPO") or saved.get("vault_repo"),
        github_branch=_read_env("GITHUB_BRANCH", "main"),
        api_base=_read_env("GITHUB_API_BASE", "https://api.github.com"),
        gemini_api_key=_read_env("GEMINI_API_KEY") or saved.get("vault_gemini"),
        webhook_url=_read_env("WEBHOOK_URL") or saved.get("vault_webhook"),
        state_path=state_path,
        cache_ttl_seconds=float(ttl) if ttl else 90.0,
        actor=_read_env("VAULT_ACTOR"),
    )


def reload_config() -> AppConfig:
    """Clear cached config (useful for tests) and reload."""
    get_config.cache_clear()
    return get_config()


__all__ = ["AppConfig", "get_config", "reload_config", "PROJECT_ROOT", "DEFAULT_STATE_PATH"]
