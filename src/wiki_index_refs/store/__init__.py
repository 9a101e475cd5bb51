"""
Entity Store Package

Defines the collaborator contract the resolvers read wiki content through,
plus a dictionary-backed implementation.
"""

from .base import EntityStore, StoredAttachment, StoredDocument, StoredObject
from .memory import InMemoryEntityStore

__all__ = [
    "EntityStore",
    "StoredAttachment",
    "StoredDocument",
    "StoredObject",
    "InMemoryEntityStore",
]
