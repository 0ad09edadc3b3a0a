"""Expose constructed client wrappers."""

from .dynamodb import DynamoDBStore
from .gemini import GeminiClient
from .google_auth import GoogleOAuthClient
from .google_drive import GoogleDriveClient
from .memory_store import InMemoryStore
from .sqlite_store import SQLiteStore

__all__ = [
    "DynamoDBStore",
    "GeminiClient",
    "GoogleDriveClient",
    "GoogleOAuthClient",
    "InMemoryStore",
    "SQLiteStore",
]
