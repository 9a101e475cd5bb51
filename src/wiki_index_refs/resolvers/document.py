"""
Document Reference Resolver

Documents are the only translatable entities. The root-locale document owns
the attachments and objects; translations are indexed as separate records
that share everything but the locale.

Space home pages are stored flattened: a document named after the default
document convention (``A.B.WebHome``) is indexed under the name of its space
(``B``) with ``doc_final=false`` and the parent path ``A``. Any other
document (``A.B.Page``) keeps its own name with ``doc_final=true`` and the
parent path ``A.B``.
"""

from __future__ import annotations

from typing import Tuple

from ..core.errors import LookupFailure
from ..index.fields import USCORE, FieldNames, IndexRecord, and_query, clause
from ..model.reference import ROOT_LOCALE, EntityReference, EntityType, is_root_locale
from ..model.serializer import serialize_local
from ..store.base import StoredDocument
from .base import AbstractReferenceResolver, ExpansionResult


class DocumentReferenceResolver(AbstractReferenceResolver):
    entity_type = EntityType.DOCUMENT

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    def expand(self, reference: EntityReference) -> ExpansionResult:
        """
        Expand a document into itself, its translations, its attachments and
        its objects.

        Translations own neither attachments nor objects, so only the document
        itself is returned for a non-root locale. A failing attachment or
        object is recorded in `ExpansionResult.skipped`; failing to check, load
        or list the translations of the document itself raises `LookupFailure`.
        """
        document_reference = self._extract(reference)
        result = ExpansionResult()

        if not self._exists(document_reference):
            return result

        result.add(document_reference)

        if not is_root_locale(document_reference.locale):
            return result

        try:
            document = self._store.get_document(document_reference)
        except Exception as exc:
            raise LookupFailure(f"Failed to get document [{document_reference}]") from exc

        try:
            locales = self._store.get_translation_locales(document)
        except Exception as exc:
            raise LookupFailure(
                f"Failed to get document [{document_reference}] translations"
            ) from exc

        for locale in locales:
            result.add(document_reference.with_locale(locale))

        self._add_attachments(document, result)
        self._add_objects(document, result)

        return result

    def _add_attachments(self, document: StoredDocument, result: ExpansionResult) -> None:
        for attachment in self._store.get_attachments(document):
            self._expand_child(result, EntityType.ATTACHMENT, attachment.reference)

    def _add_objects(self, document: StoredDocument, result: ExpansionResult) -> None:
        for objects in self._store.get_objects(document).values():
            for obj in objects:
                if obj is not None:
                    self._expand_child(result, EntityType.OBJECT, obj.reference)

    # ------------------------------------------------------------------
    # Index Mapping
    # ------------------------------------------------------------------

    def get_identifier(self, reference: EntityReference) -> str:
        # Only documents are translated, so only their ids carry the locale.
        document = self._extract(reference)
        locale = document.locale or ROOT_LOCALE
        return super().get_identifier(document) + USCORE + locale

    def get_query(self, reference: EntityReference) -> str:
        document = self._extract(reference)
        name, _, doc_final = self.flatten(document)

        return and_query(
            self._resolvers.get(EntityType.SPACE).get_exact_query(document.parent),
            clause(FieldNames.DOCUMENT_NAME_EXACT, name),
            clause(FieldNames.DOCUMENT_FINAL, doc_final),
        )

    def get_fields(self, reference: EntityReference) -> IndexRecord:
        document = self._extract(reference)
        name, parent, doc_final = self.flatten(document)

        record = self._resolvers.get(EntityType.SPACE).get_fields(document.parent)
        record.pop(FieldNames.DOCUMENT_PARENT_PATH, None)
        record.update({
            FieldNames.DOCUMENT_NAME: name,
            FieldNames.DOCUMENT_NAME_EXACT: name,
            FieldNames.DOCUMENT_FINAL: doc_final,
            FieldNames.DOCUMENT_LOCALE: document.locale or ROOT_LOCALE,
        })
        if parent.type is EntityType.SPACE:
            record[FieldNames.DOCUMENT_PARENT_PATH] = serialize_local(parent)

        return self._with_identity(record, document)

    def flatten(self, document: EntityReference) -> Tuple[str, EntityReference, bool]:
        """
        Return the ``(name, parent, doc_final)`` triple a document is indexed
        under.

        A space home page is shifted one level up: it takes its space's name
        and the space's parent, with ``doc_final`` false.
        """
        space = self._extract(document, EntityType.SPACE)

        if document.name == self._config.default_name(EntityType.DOCUMENT):
            return space.name, space.parent, False

        return document.name, space, True
