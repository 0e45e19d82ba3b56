"""HTTP API route handlers."""

from . import assistant, files, insights, memos, notifications, system, todos

__all__ = ["files", "todos", "memos", "insights", "notifications", "assistant", "system"]
