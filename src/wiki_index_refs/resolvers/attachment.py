from __future__ import annotations

from ..index.fields import FieldNames, IndexRecord, and_query, clause
from ..model.reference import EntityReference, EntityType
from .base import AbstractReferenceResolver, ExpansionResult


class AttachmentReferenceResolver(AbstractReferenceResolver):
    entity_type = EntityType.ATTACHMENT

    def expand(self, reference: EntityReference) -> ExpansionResult:
        attachment = self._extract(reference)
        result = ExpansionResult()

        if self._exists(attachment):
            result.add(attachment)

        return result

    def get_query(self, reference: EntityReference) -> str:
        attachment = self._extract(reference)
        document = self._extract(attachment, EntityType.DOCUMENT)
        return and_query(
            self._resolvers.get(EntityType.DOCUMENT).get_query(document),
            clause(FieldNames.FILENAME, attachment.name),
        )

    def get_fields(self, reference: EntityReference) -> IndexRecord:
        attachment = self._extract(reference)
        record = self._resolvers.get(EntityType.DOCUMENT).get_fields(
            self._extract(attachment, EntityType.DOCUMENT)
        )
        record[FieldNames.FILENAME] = attachment.name
        return self._with_identity(record, attachment)
