"""Adapters - I/O implementations of ports."""

from .api_store import ApiTaskStore, AuthenticationError
from .file_store import FileTaskStore

__all__ = [
    "ApiTaskStore",
    "AuthenticationError",
    "FileTaskStore",
]
