"""
Entity Store Contract

The resolvers never read wiki content themselves. Everything they need to
know about which entities exist comes through this contract, implemented by
the surrounding application (a database, a REST client, ...) or by
`InMemoryEntityStore` for tests and tooling.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from ..model.reference import EntityReference


# ---------------------------------------------------------------------
# Stored Entity Handles
# ---------------------------------------------------------------------

class StoredAttachment(BaseModel):
    reference: EntityReference

    model_config = ConfigDict(extra="forbid", frozen=True)


class StoredObject(BaseModel):
    reference: EntityReference

    properties: List[str] = Field(
        default_factory=list,
        description="Names of the object's properties.",
    )

    model_config = ConfigDict(extra="forbid", frozen=True)


class StoredDocument(BaseModel):
    """
    A loaded document, as returned by `EntityStore.get_document`.

    Only the root-locale document owns attachments and objects; translations
    are listed by locale.
    """

    reference: EntityReference

    translation_locales: List[str] = Field(default_factory=list)

    attachments: List[StoredAttachment] = Field(default_factory=list)

    # Objects grouped by the reference of the class document that defines them.
    # Deleted objects leave None holes so numbering stays stable.
    objects: Dict[EntityReference, List[Optional[StoredObject]]] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid", frozen=True)


# ---------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------

@runtime_checkable
class EntityStore(Protocol):
    def exists(self, reference: EntityReference) -> bool:
        ...

    def get_document(self, reference: EntityReference) -> StoredDocument:
        """Load a document; raises `EntityNotFoundError` if it does not exist."""
        ...

    def get_translation_locales(self, document: StoredDocument) -> List[str]:
        ...

    def get_attachments(self, document: StoredDocument) -> List[StoredAttachment]:
        ...

    def get_objects(
        self,
        document: StoredDocument,
    ) -> Dict[EntityReference, List[Optional[StoredObject]]]:
        ...

    def get_spaces(self, parent: EntityReference) -> List[EntityReference]:
        """List the spaces directly below a wiki or a space."""
        ...

    def get_documents(self, space: EntityReference) -> List[EntityReference]:
        """List the documents directly inside a space."""
        ...

    def get_object_properties(self, obj: EntityReference) -> List[EntityReference]:
        ...
