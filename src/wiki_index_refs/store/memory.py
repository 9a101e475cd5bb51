"""
In-Memory Entity Store

A thread-safe `EntityStore` backed by plain dictionaries. It is the store
used by the test-suite and is handy for tooling that indexes a wiki snapshot
without a database.
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..config import Settings, settings
from ..core.errors import EntityNotFoundError
from ..model.reference import (
    EntityReference,
    EntityType,
    attachment_reference,
    is_root_locale,
    object_property_reference,
    object_reference,
)
from ..model.serializer import resolve_string
from .base import StoredAttachment, StoredDocument, StoredObject

logger = logging.getLogger("refs.store")


class InMemoryEntityStore:
    """
    Dictionary-backed wiki content, keyed by root-locale document reference.

    `config` supplies the default names used to complete relative object
    class names.
    """

    def __init__(self, config: Optional[Settings] = None) -> None:
        self._config = config or settings
        self._documents: Dict[EntityReference, StoredDocument] = {}
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def add_document(
        self,
        reference: EntityReference,
        translation_locales: Iterable[str] = (),
        attachments: Iterable[str] = (),
        objects: Optional[Mapping[str, Sequence[Optional[Sequence[str]]]]] = None,
    ) -> StoredDocument:
        """
        Add (or replace) a document.

        Parameters
        ----------
        reference : EntityReference
            Document reference; any locale is ignored.

        translation_locales : Iterable[str]
            Locales the document is translated to.

        attachments : Iterable[str]
            Attachment file names.

        objects : Mapping[str, Sequence[Optional[Sequence[str]]]]
            Objects per class name (``"XWiki.TagClass"``). Each entry is the
            property name list of one object, numbered by position; None
            marks a deleted object.
        """
        reference = reference.with_locale(None)
        wiki = reference.extract_reference(EntityType.WIKI)

        stored_objects: Dict[EntityReference, List[Optional[StoredObject]]] = {}
        for class_name, entries in (objects or {}).items():
            class_reference = resolve_string(class_name, EntityType.DOCUMENT, wiki, self._config)
            stored_objects[class_reference] = [
                None if properties is None else StoredObject(
                    reference=object_reference(reference, class_name, number),
                    properties=list(properties),
                )
                for number, properties in enumerate(entries)
            ]

        document = StoredDocument(
            reference=reference,
            translation_locales=list(translation_locales),
            attachments=[
                StoredAttachment(reference=attachment_reference(reference, filename))
                for filename in attachments
            ],
            objects=stored_objects,
        )

        with self._lock:
            self._documents[reference] = document

        logger.debug("Stored document %s", reference)
        return document

    def remove_document(self, reference: EntityReference) -> bool:
        with self._lock:
            return self._documents.pop(reference.with_locale(None), None) is not None

    # ------------------------------------------------------------------
    # EntityStore
    # ------------------------------------------------------------------

    def exists(self, reference: EntityReference) -> bool:
        if reference.type is EntityType.WIKI:
            return any(ref.extract_reference(EntityType.WIKI) == reference for ref in self._snapshot())

        if reference.type is EntityType.SPACE:
            chain = reference.chain()
            return any(ref.chain()[:len(chain)] == chain for ref in self._snapshot())

        document = self._find(reference.extract_reference(EntityType.DOCUMENT))
        if document is None:
            return False

        if reference.type is EntityType.DOCUMENT:
            return is_root_locale(reference.locale) or reference.locale in document.translation_locales

        if reference.type is EntityType.ATTACHMENT:
            return any(a.reference == reference for a in document.attachments)

        obj = self._find_object(document, reference.extract_reference(EntityType.OBJECT))
        if obj is None:
            return False

        if reference.type is EntityType.OBJECT:
            return True

        return reference.name in obj.properties

    def get_document(self, reference: EntityReference) -> StoredDocument:
        document = self._find(reference)
        if document is None:
            raise EntityNotFoundError(f"Document [{reference}] does not exist")
        return document

    def get_translation_locales(self, document: StoredDocument) -> List[str]:
        return list(document.translation_locales)

    def get_attachments(self, document: StoredDocument) -> List[StoredAttachment]:
        return list(document.attachments)

    def get_objects(
        self,
        document: StoredDocument,
    ) -> Dict[EntityReference, List[Optional[StoredObject]]]:
        return {owner: list(objs) for owner, objs in document.objects.items()}

    def get_spaces(self, parent: EntityReference) -> List[EntityReference]:
        depth = len(parent.chain())
        spaces: List[EntityReference] = []
        for ref in self._snapshot():
            chain = ref.chain()
            if chain[:depth] != parent.chain():
                continue
            child = chain[depth]
            if child.type is EntityType.SPACE and child not in spaces:
                spaces.append(child)
        return spaces

    def get_documents(self, space: EntityReference) -> List[EntityReference]:
        return [ref for ref in self._snapshot() if ref.parent == space]

    def get_object_properties(self, obj: EntityReference) -> List[EntityReference]:
        document = self._find(obj.extract_reference(EntityType.DOCUMENT))
        found = self._find_object(document, obj) if document is not None else None
        if found is None:
            return []
        return [object_property_reference(obj, name) for name in found.properties]

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    def _snapshot(self) -> List[EntityReference]:
        with self._lock:
            return list(self._documents)

    def _find(self, reference: Optional[EntityReference]) -> Optional[StoredDocument]:
        if reference is None:
            return None
        with self._lock:
            return self._documents.get(reference.with_locale(None))

    @staticmethod
    def _find_object(
        document: StoredDocument,
        reference: Optional[EntityReference],
    ) -> Optional[StoredObject]:
        if reference is None:
            return None
        for objs in document.objects.values():
            for obj in objs:
                if obj is not None and obj.reference == reference:
                    return obj
        return None
