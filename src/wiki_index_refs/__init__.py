"""
wiki-index-refs

Maps hierarchical wiki entity references to their flat search index form
(identifiers, records, query fragments) and back.
"""

from .config import Settings, configure_logging, settings
from .core.errors import (
    ChildResolutionFailure,
    DecodeError,
    EntityNotFoundError,
    LookupFailure,
    MalformedRecordError,
    MalformedReferenceError,
    MissingKindError,
    UnsupportedKindError,
    WikiIndexError,
)
from .index.decoder import IndexReferenceDecoder
from .model.reference import ROOT_LOCALE, EntityReference, EntityType
from .resolvers import ExpansionResult, ReferenceResolvers, SkippedReference
from .store import InMemoryEntityStore

__all__ = [
    "Settings",
    "configure_logging",
    "settings",
    "ChildResolutionFailure",
    "DecodeError",
    "EntityNotFoundError",
    "LookupFailure",
    "MalformedRecordError",
    "MalformedReferenceError",
    "MissingKindError",
    "UnsupportedKindError",
    "WikiIndexError",
    "IndexReferenceDecoder",
    "ROOT_LOCALE",
    "EntityReference",
    "EntityType",
    "ExpansionResult",
    "ReferenceResolvers",
    "SkippedReference",
    "InMemoryEntityStore",
]
