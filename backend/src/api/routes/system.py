"""System routes for cache control, sync, settings and logs."""

import logging
from collections import deque
from typing import List, Dict, Any, Optional
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator

from ...services.config import REPO_PATTERN, AppConfig, get_config, reload_config
from ...services.dependencies import get_local_state, get_notifier, get_store, reset_services
from ...services.github_store import RemoteFileStore
from ...services.notifier import NotificationService
from ...services.local_state import (
    GEMINI_KEY,
    REPO_KEY,
    TOKEN_KEY,
    WEBHOOK_KEY,
    LocalStateStore,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Global in-memory log buffer
LOG_BUFFER: deque = deque(maxlen=100)

class LogEntry(BaseModel):
    timestamp: str
    level: str
    message: str
    extra: Dict[str, Any]

class SettingsUpdate(BaseModel):
    github_token: Optional[str] = None
    github_repo: Optional[str] = None
    gemini_api_key: Optional[str] = None
    webhook_url: Optional[str] = None

    @field_validator("github_repo")
    @classmethod
    def _check_repo(cls, value: Optional[str]) -> Optional[str]:
        if value and not REPO_PATTERN.match(value.strip().strip("/")):
            raise ValueError("Repository must look like 'owner/name'")
        return value

class SettingsStatus(BaseModel):
    connected: bool
    github_repo: Optional[str] = None
    gemini_configured: bool
    webhook_configured: bool

class MemoryLogHandler(logging.Handler):
    """Custom handler to capture logs into memory."""
    def emit(self, record):
        try:
            msg = self.format(record)
            extra = {k: v for k, v in record.__dict__.items() 
                     if k not in {'args', 'asctime', 'created', 'exc_info', 'exc_text', 'filename', 
                                  'funcName', 'levelname', 'levelno', 'lineno', 'module', 
                                  'msecs', 'message', 'msg', 'name', 'pathname', 'process', 
                                  'processName', 'relativeCreated', 'stack_info', 'thread', 'threadName',
                                  'taskName'}}
            
            entry = {
                "timestamp": datetime.fromtimestamp(record.created).isoformat(),
                "level": record.levelname,
                "message": msg,
                "extra": extra
            }
            LOG_BUFFER.append(entry)
        except Exception:
            self.handleError(record)

# Attach handler to root logger or specific loggers
memory_handler = MemoryLogHandler()
formatter = logging.Formatter('%(name)s: %(message)s')
memory_handler.setFormatter(formatter)

# Attach to root logger to capture everything
logging.getLogger().addHandler(memory_handler)
# Ensure level allows INFO
logging.getLogger().setLevel(logging.INFO)

@router.get("/api/system/logs", response_model=List[LogEntry])
async def get_logs():
    """Retrieve recent system logs."""
    return list(LOG_BUFFER)

@router.post("/api/system/cache/clear")
async def clear_cache(store: RemoteFileStore = Depends(get_store)):
    """Drop every cached GitHub response."""
    store.clear_cache()
    return {"status": "cleared"}

@router.post("/api/system/sync", status_code=202)
async def sync_now(
    store: RemoteFileStore = Depends(get_store),
    notifier: NotificationService = Depends(get_notifier),
):
    """Trigger the vault-sync workflow in the repository."""
    await store.dispatch_event("vault-sync")
    await notifier.after_write("Sync now", "Manual sync triggered from the dashboard")
    return {"status": "dispatched"}

def _status(config: AppConfig) -> SettingsStatus:
    return SettingsStatus(
        connected=config.is_connected,
        github_repo=config.github_repo,
        gemini_configured=bool(config.gemini_api_key),
        webhook_configured=bool(config.webhook_url),
    )

@router.get("/api/system/settings", response_model=SettingsStatus)
async def get_settings():
    return _status(get_config())

@router.put("/api/system/settings", response_model=SettingsStatus)
async def update_settings(update: SettingsUpdate, state: LocalStateStore = Depends(get_local_state)):
    """Persist connection settings and rebuild services with them."""
    values = {
        TOKEN_KEY: update.github_token,
        REPO_KEY: update.github_repo,
        GEMINI_KEY: update.gemini_api_key,
        WEBHOOK_KEY: update.webhook_url,
    }
    state.save_settings(**{k: v for k, v in values.items() if v is not None})
    config = reload_config()
    reset_services()
    logger.info("Settings updated")
    return _status(config)
