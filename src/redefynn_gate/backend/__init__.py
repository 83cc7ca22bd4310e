"""Hosted backend collaborators."""

from .client import AuthClient, PersistenceClient
from .http_client import SupabaseAuthClient, SupabasePersistenceClient
from .memory import InMemoryAuthClient, InMemoryPersistenceClient

__all__ = [
    "AuthClient",
    "InMemoryAuthClient",
    "InMemoryPersistenceClient",
    "PersistenceClient",
    "SupabaseAuthClient",
    "SupabasePersistenceClient",
]
