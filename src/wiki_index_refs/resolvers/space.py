from __future__ import annotations

from ..index.fields import FieldNames, IndexRecord, and_query, clause
from ..model.reference import EntityReference, EntityType
from ..model.serializer import serialize_local
from .base import AbstractReferenceResolver, ExpansionResult


class SpaceReferenceResolver(AbstractReferenceResolver):
    """
    Resolves (possibly nested) space references.

    A space has no index record of its own when expanded; its documents and
    nested spaces do. `get_fields` still describes the space, flattened the
    same way as the space's home page.
    """

    entity_type = EntityType.SPACE

    def expand(self, reference: EntityReference) -> ExpansionResult:
        space = self._extract(reference)
        result = ExpansionResult()

        if self._exists(space):
            for document in self._store.get_documents(space):
                self._expand_child(result, EntityType.DOCUMENT, document)

            for child in self._store.get_spaces(space):
                self._expand_child(result, EntityType.SPACE, child)

        return result

    def get_query(self, reference: EntityReference) -> str:
        """
        Match everything below a space, nested spaces included.

        A reference without any space segment (e.g. the parent of a top-level
        space) only restricts the wiki.
        """
        wiki_query = self._resolvers.get(EntityType.WIKI).get_query(reference)

        space = reference.extract_reference(EntityType.SPACE)
        if space is None:
            return wiki_query

        return and_query(wiki_query, clause(FieldNames.SPACE_PREFIX, serialize_local(space)))

    def get_exact_query(self, reference: EntityReference) -> str:
        """Match the records located directly in a space, not in its children."""
        space = self._extract(reference)
        return and_query(
            self._resolvers.get(EntityType.WIKI).get_query(space),
            clause(FieldNames.SPACE_EXACT, serialize_local(space)),
        )

    def get_fields(self, reference: EntityReference) -> IndexRecord:
        space = self._extract(reference)

        record: IndexRecord = {
            FieldNames.WIKI: self._extract(space, EntityType.WIKI).name,
            FieldNames.SPACE_EXACT: serialize_local(space),
            FieldNames.SPACE_PREFIX: [serialize_local(s) for s in space.spaces()],
            FieldNames.DOCUMENT_NAME: space.name,
            FieldNames.DOCUMENT_NAME_EXACT: space.name,
            FieldNames.DOCUMENT_FINAL: False,
        }
        if space.parent is not None and space.parent.type is EntityType.SPACE:
            record[FieldNames.DOCUMENT_PARENT_PATH] = serialize_local(space.parent)

        return self._with_identity(record, space)
