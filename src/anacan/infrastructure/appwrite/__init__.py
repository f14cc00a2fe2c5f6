"""Client for the hosted document database."""

from anacan.infrastructure.appwrite.client import AppwriteClient
from anacan.infrastructure.appwrite.errors import AppwriteError, AppwriteNetworkError
from anacan.infrastructure.appwrite.query import UNIQUE_ID, Query

__all__ = [
    "AppwriteClient",
    "AppwriteError",
    "AppwriteNetworkError",
    "Query",
    "UNIQUE_ID",
]
