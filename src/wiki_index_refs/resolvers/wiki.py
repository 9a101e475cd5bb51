from __future__ import annotations

from ..index.fields import FieldNames, IndexRecord, clause
from ..model.reference import EntityReference, EntityType
from .base import AbstractReferenceResolver, ExpansionResult


class WikiReferenceResolver(AbstractReferenceResolver):
    """Resolves wiki references by walking their top-level spaces."""

    entity_type = EntityType.WIKI

    def expand(self, reference: EntityReference) -> ExpansionResult:
        wiki = self._extract(reference)
        result = ExpansionResult()

        if self._exists(wiki):
            for space in self._store.get_spaces(wiki):
                self._expand_child(result, EntityType.SPACE, space)

        return result

    def get_query(self, reference: EntityReference) -> str:
        return clause(FieldNames.WIKI, self._extract(reference).name)

    def get_fields(self, reference: EntityReference) -> IndexRecord:
        wiki = self._extract(reference)
        return self._with_identity({FieldNames.WIKI: wiki.name}, wiki)
