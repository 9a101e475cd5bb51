"""
Reference Resolvers Package

Per-kind resolvers turning wiki references into index identifiers, index
records and query fragments, and expanding them into the references to
index.
"""

from .base import AbstractReferenceResolver, ExpansionResult, SkippedReference
from .registry import ReferenceResolvers

__all__ = [
    "AbstractReferenceResolver",
    "ExpansionResult",
    "SkippedReference",
    "ReferenceResolvers",
]
