"""
Index Reference Decoder

Turns a flat index record (as returned by a search) back into the
hierarchical reference it was built from.

Reconstruction Order
--------------------
1. kind marker (`type`)
2. wiki
3. space chain, rebuilt from `doc_parent_path` plus the last space `name`
4. document, undoing the space home flattening driven by `doc_final`
5. locale
6. attachment / object / object property below the document

Records missing a field their kind requires are rejected; the only defaults
applied are the root locale and the default document name.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Mapping, Optional

from ..config import Settings, settings
from ..core.errors import (
    MalformedRecordError,
    MalformedReferenceError,
    MissingKindError,
    UnsupportedKindError,
)
from ..model.explicit import ExplicitReferenceResolver
from ..model.reference import (
    EntityReference,
    EntityType,
    attachment_reference,
    object_property_reference,
    object_reference,
    parse_locale,
    wiki_reference,
)
from ..model.serializer import resolve_string
from .fields import FieldNames

logger = logging.getLogger("refs.decoder")

StringResolver = Callable[[str, EntityType, Optional[EntityReference]], EntityReference]


class IndexReferenceDecoder:
    """
    Decode index records into entity references.

    Parameters
    ----------
    config : Optional[Settings]
        Naming conventions; defaults to the module-level settings.

    string_resolver : Optional[StringResolver]
        Resolves the serialized parent space path. Defaults to
        `resolve_string` bound to `config`.

    normalizer : Optional[ExplicitReferenceResolver]
        Applied when `decode` is asked for a specific entity kind.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        string_resolver: Optional[StringResolver] = None,
        normalizer: Optional[ExplicitReferenceResolver] = None,
    ) -> None:
        self._config = config or settings
        self._resolve_string = string_resolver or partial(resolve_string, config=self._config)
        self._normalizer = normalizer or ExplicitReferenceResolver()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def decode(
        self,
        record: Mapping[str, Any],
        entity_type: Optional[EntityType] = None,
    ) -> EntityReference:
        """
        Rebuild the reference described by `record`.

        When `entity_type` is given, the decoded reference is re-resolved to
        that kind (e.g. the document owning a decoded attachment).

        Raises
        ------
        MissingKindError
            The record has no kind marker.
        UnsupportedKindError
            The kind marker is not a known entity type.
        MalformedRecordError
            A field required by the record's kind is missing or invalid.
        """
        kind = self._read_kind(record)

        try:
            reference = self._decode(record, kind)
        except MalformedReferenceError as exc:
            raise MalformedRecordError(
                f"Invalid {kind.value} index record [{record.get(FieldNames.ID)}]: {exc}"
            ) from exc

        if entity_type is not None:
            reference = self._normalizer.resolve(reference, entity_type)

        logger.debug("Decoded index record [%s] as %s", record.get(FieldNames.ID), reference)
        return reference

    # ------------------------------------------------------------------
    # Reconstruction
    # ------------------------------------------------------------------

    def _decode(self, record: Mapping[str, Any], kind: EntityType) -> EntityReference:
        wiki = wiki_reference(self._required(record, kind, FieldNames.WIKI))
        if kind is EntityType.WIKI:
            return wiki

        space = self._space(record, kind, wiki)
        if kind is EntityType.SPACE:
            return space

        document = self._document_with_locale(record, space)

        if kind is EntityType.ATTACHMENT:
            return attachment_reference(
                document,
                self._required(record, kind, FieldNames.FILENAME),
            )
        if kind is EntityType.OBJECT:
            return self._object(record, kind, document)
        if kind is EntityType.OBJECT_PROPERTY:
            return object_property_reference(
                self._object(record, kind, document),
                self._required(record, kind, FieldNames.PROPERTY_NAME),
            )
        return document

    def _space(
        self,
        record: Mapping[str, Any],
        kind: EntityType,
        wiki: EntityReference,
    ) -> EntityReference:
        parent = wiki
        parent_path = record.get(FieldNames.DOCUMENT_PARENT_PATH)
        if parent_path:
            parent = self._resolve_string(str(parent_path), EntityType.SPACE, wiki)

        name = self._required(record, kind, FieldNames.DOCUMENT_NAME)
        return EntityReference.create(name=name, type=EntityType.SPACE, parent=parent)

    def _document_with_locale(
        self,
        record: Mapping[str, Any],
        space: EntityReference,
    ) -> EntityReference:
        document = self._document(record, space)

        locale = record.get(FieldNames.DOCUMENT_LOCALE)
        if locale:
            document = document.with_locale(parse_locale(str(locale)))
        return document

    def _document(self, record: Mapping[str, Any], space: EntityReference) -> EntityReference:
        if self._read_flag(record.get(FieldNames.DOCUMENT_FINAL)):
            # An explicitly named document: the last "space" is its name.
            if space.parent is None or space.parent.type is not EntityType.SPACE:
                raise MalformedReferenceError(
                    f"Document [{space.name}] has no enclosing space"
                )
            return EntityReference.create(name=space.name, type=EntityType.DOCUMENT, parent=space.parent)

        return EntityReference.create(
            name=self._config.default_name(EntityType.DOCUMENT),
            type=EntityType.DOCUMENT,
            parent=space,
        )

    def _object(
        self,
        record: Mapping[str, Any],
        kind: EntityType,
        document: EntityReference,
    ) -> EntityReference:
        class_name = self._required(record, kind, FieldNames.CLASS)
        number = self._read_number(record, kind)
        return object_reference(document, class_name, number)

    # ------------------------------------------------------------------
    # Field Access
    # ------------------------------------------------------------------

    @staticmethod
    def _read_kind(record: Mapping[str, Any]) -> EntityType:
        raw = record.get(FieldNames.TYPE)
        if raw is None or raw == "":
            raise MissingKindError(f"Index record [{record.get(FieldNames.ID)}] has no kind marker")
        try:
            return EntityType(raw)
        except ValueError:
            raise UnsupportedKindError(f"Unknown entity kind [{raw}]") from None

    @staticmethod
    def _required(record: Mapping[str, Any], kind: EntityType, field: str) -> str:
        value = record.get(field)
        if value is None or value == "":
            raise MalformedRecordError(
                f"{kind.value} index record [{record.get(FieldNames.ID)}] is missing field [{field}]"
            )
        return str(value)

    @staticmethod
    def _read_number(record: Mapping[str, Any], kind: EntityType) -> int:
        value = record.get(FieldNames.NUMBER)
        invalid = MalformedRecordError(
            f"{kind.value} index record [{record.get(FieldNames.ID)}] has an invalid "
            f"[{FieldNames.NUMBER}] field: {value!r}"
        )

        # int() would accept booleans and truncate fractional floats.
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise invalid
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise invalid from None
        if number < 0:
            raise invalid
        return number

    @staticmethod
    def _read_flag(value: Any) -> bool:
        if isinstance(value, str):
            return value.lower() == "true"
        return bool(value)
