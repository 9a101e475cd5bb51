"""
Resolver Registry

Maps every entity kind to its resolver. The mapping is checked to be
exhaustive at import time, so adding an `EntityType` without a resolver
fails immediately instead of at the first lookup.
"""

from __future__ import annotations

from typing import Dict, Optional, Type

from ..config import Settings
from ..core.errors import UnsupportedKindError
from ..index.fields import IndexRecord
from ..model.reference import EntityReference, EntityType
from ..store.base import EntityStore
from .attachment import AttachmentReferenceResolver
from .base import AbstractReferenceResolver, ExpansionResult
from .document import DocumentReferenceResolver
from .objects import ObjectPropertyReferenceResolver, ObjectReferenceResolver
from .space import SpaceReferenceResolver
from .wiki import WikiReferenceResolver


RESOLVER_CLASSES: Dict[EntityType, Type[AbstractReferenceResolver]] = {
    EntityType.WIKI: WikiReferenceResolver,
    EntityType.SPACE: SpaceReferenceResolver,
    EntityType.DOCUMENT: DocumentReferenceResolver,
    EntityType.ATTACHMENT: AttachmentReferenceResolver,
    EntityType.OBJECT: ObjectReferenceResolver,
    EntityType.OBJECT_PROPERTY: ObjectPropertyReferenceResolver,
}

_missing = set(EntityType) - set(RESOLVER_CLASSES)
if _missing:
    raise ImportError(f"No reference resolver for {sorted(t.value for t in _missing)}")


class ReferenceResolvers:
    """
    One resolver per entity kind, sharing a store and a configuration.

    The convenience methods dispatch on the reference's own type.
    """

    def __init__(self, store: EntityStore, config: Optional[Settings] = None) -> None:
        self._resolvers: Dict[EntityType, AbstractReferenceResolver] = {
            entity_type: resolver_class(store, self, config)
            for entity_type, resolver_class in RESOLVER_CLASSES.items()
        }

    def get(self, entity_type: EntityType) -> AbstractReferenceResolver:
        try:
            return self._resolvers[EntityType(entity_type)]
        except (KeyError, ValueError):
            raise UnsupportedKindError(f"No reference resolver for [{entity_type}]") from None

    def expand(self, reference: EntityReference) -> ExpansionResult:
        return self.get(reference.type).expand(reference)

    def get_identifier(self, reference: EntityReference) -> str:
        return self.get(reference.type).get_identifier(reference)

    def get_query(self, reference: EntityReference) -> str:
        return self.get(reference.type).get_query(reference)

    def get_fields(self, reference: EntityReference) -> IndexRecord:
        return self.get(reference.type).get_fields(reference)
