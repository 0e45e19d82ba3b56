"""Service layer: remote store client, extractors, aggregate queries, notifications."""

from .assistant import GeminiClient, VaultAssistant
from .checklist import ChecklistDocument, MemoDocument, parse_todos
from .config import AppConfig, get_config, reload_config
from .errors import (
    ConflictError,
    DashboardError,
    ErrorKind,
    LineNotFoundError,
    NotFoundError,
    RateLimitedError,
    UnauthorizedError,
    UnknownStoreError,
    ValidationError,
)
from .github_store import RemoteFileStore
from .insights import InsightsService
from .local_state import LocalStateStore
from .memo_service import MemoService
from .notifier import NotificationService
from .response_cache import ResponseCache
from .todo_service import TodoService

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "RemoteFileStore",
    "ResponseCache",
    "ChecklistDocument",
    "MemoDocument",
    "parse_todos",
    "TodoService",
    "MemoService",
    "InsightsService",
    "NotificationService",
    "LocalStateStore",
    "GeminiClient",
    "VaultAssistant",
    "ErrorKind",
    "DashboardError",
    "NotFoundError",
    "LineNotFoundError",
    "ConflictError",
    "UnauthorizedError",
    "RateLimitedError",
    "ValidationError",
    "UnknownStoreError",
]
