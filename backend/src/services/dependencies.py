"""Service wiring for the API layer (overridden in tests)."""

from __future__ import annotations

from functools import lru_cache

from .assistant import GeminiClient, VaultAssistant
from .config import get_config
from .errors import UnauthorizedError
from .github_store import RemoteFileStore
from .insights import InsightsService
from .local_state import LocalStateStore
from .memo_service import MemoService
from .notifier import NotificationService
from .todo_service import TodoService


@lru_cache(maxsize=1)
def get_local_state() -> LocalStateStore:
    return LocalStateStore(get_config().state_path)


@lru_cache(maxsize=1)
def _store() -> RemoteFileStore:
    return RemoteFileStore(get_config())


def get_store() -> RemoteFileStore:
    """Shared store client; its cache lives for the process."""
    if not get_config().is_connected:
        raise UnauthorizedError("GitHub token and repository must be configured")
    return _store()


@lru_cache(maxsize=1)
def _notifier() -> NotificationService:
    config = get_config()
    return NotificationService(
        _store(), get_local_state(), webhook_url=config.webhook_url, actor=config.actor
    )


def get_notifier() -> NotificationService:
    get_store()
    return _notifier()


def get_todo_service() -> TodoService:
    return TodoService(get_store(), get_notifier())


def get_memo_service() -> MemoService:
    return MemoService(get_store(), get_notifier())


def get_insights_service() -> InsightsService:
    return InsightsService(get_store())


def get_assistant() -> VaultAssistant:
    store = get_store()
    return VaultAssistant(store, InsightsService(store), GeminiClient(get_config().gemini_api_key))


def reset_services() -> None:
    """Drop cached singletons (after settings change or between tests)."""
    _store.cache_clear()
    _notifier.cache_clear()
    get_local_state.cache_clear()


__all__ = [
    "get_local_state",
    "get_store",
    "get_notifier",
    "get_todo_service",
    "get_memo_service",
    "get_insights_service",
    "get_assistant",
    "reset_services",
]
