"""
Object and Object Property Reference Resolvers

Objects are named ``<class reference>[<number>]`` inside their document and
are indexed with the class name and number as separate fields. Properties
are indexed with their object's fields plus the property name.
"""

from __future__ import annotations

from ..index.fields import FieldNames, IndexRecord, and_query, clause
from ..model.reference import EntityReference, EntityType, split_object_name
from .base import AbstractReferenceResolver, ExpansionResult


class ObjectReferenceResolver(AbstractReferenceResolver):
    entity_type = EntityType.OBJECT

    def expand(self, reference: EntityReference) -> ExpansionResult:
        obj = self._extract(reference)
        result = ExpansionResult()

        if self._exists(obj):
            result.add(obj)

            for prop in self._store.get_object_properties(obj):
                self._expand_child(result, EntityType.OBJECT_PROPERTY, prop)

        return result

    def get_query(self, reference: EntityReference) -> str:
        obj = self._extract(reference)
        class_name, number = split_object_name(obj.name)
        document = self._extract(obj, EntityType.DOCUMENT)
        return and_query(
            self._resolvers.get(EntityType.DOCUMENT).get_query(document),
            clause(FieldNames.CLASS, class_name),
            clause(FieldNames.NUMBER, number),
        )

    def get_fields(self, reference: EntityReference) -> IndexRecord:
        obj = self._extract(reference)
        class_name, number = split_object_name(obj.name)

        record = self._resolvers.get(EntityType.DOCUMENT).get_fields(
            self._extract(obj, EntityType.DOCUMENT)
        )
        record[FieldNames.CLASS] = class_name
        record[FieldNames.NUMBER] = number
        return self._with_identity(record, obj)


class ObjectPropertyReferenceResolver(AbstractReferenceResolver):
    entity_type = EntityType.OBJECT_PROPERTY

    def expand(self, reference: EntityReference) -> ExpansionResult:
        prop = self._extract(reference)
        result = ExpansionResult()

        if self._exists(prop):
            result.add(prop)

        return result

    def get_query(self, reference: EntityReference) -> str:
        prop = self._extract(reference)
        obj = self._extract(prop, EntityType.OBJECT)
        return and_query(
            self._resolvers.get(EntityType.OBJECT).get_query(obj),
            clause(FieldNames.PROPERTY_NAME, prop.name),
        )

    def get_fields(self, reference: EntityReference) -> IndexRecord:
        prop = self._extract(reference)
        record = self._resolvers.get(EntityType.OBJECT).get_fields(
            self._extract(prop, EntityType.OBJECT)
        )
        record[FieldNames.PROPERTY_NAME] = prop.name
        return self._with_identity(record, prop)
