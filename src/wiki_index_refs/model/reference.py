"""
Entity Reference Model

This module defines the hierarchical references used to address wiki
entities:

    wiki -> space(s) -> document[+locale] -> {attachment | object[+property]}

A reference is an immutable chain of typed, named segments. Each segment only
accepts the parent kinds the wiki model allows (an attachment always hangs
off a document, a document off a space, ...). A reference without a parent
is relative and is completed by whoever resolves it.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..core.errors import MalformedReferenceError


# ---------------------------------------------------------------------
# Entity Kinds
# ---------------------------------------------------------------------

class EntityType(str, Enum):
    WIKI = "WIKI"
    SPACE = "SPACE"
    DOCUMENT = "DOCUMENT"
    ATTACHMENT = "ATTACHMENT"
    OBJECT = "OBJECT"
    OBJECT_PROPERTY = "OBJECT_PROPERTY"


LEGAL_PARENTS: Dict[EntityType, FrozenSet[EntityType]] = {
    EntityType.WIKI: frozenset(),
    EntityType.SPACE: frozenset({EntityType.WIKI, EntityType.SPACE}),
    EntityType.DOCUMENT: frozenset({EntityType.SPACE}),
    EntityType.ATTACHMENT: frozenset({EntityType.DOCUMENT}),
    EntityType.OBJECT: frozenset({EntityType.DOCUMENT}),
    EntityType.OBJECT_PROPERTY: frozenset({EntityType.OBJECT}),
}


# ---------------------------------------------------------------------
# Locales
# ---------------------------------------------------------------------

# The canonical, untranslated version of a document.
ROOT_LOCALE = ""

LOCALE_PATTERN = re.compile(r"^([a-zA-Z]{2,8})?(?:_([a-zA-Z]{2}|[0-9]{3})(?:_([a-zA-Z0-9]+))?)?$")


def parse_locale(text: str) -> str:
    """
    Parse a locale tag such as ``fr``, ``pt_BR`` or ``de_DE_POSIX``.

    Language is normalized to lower case and country to upper case. The empty
    string is the root locale.
    """
    text = text.strip()
    if text == ROOT_LOCALE:
        return ROOT_LOCALE

    match = LOCALE_PATTERN.match(text)
    if match is None or not (match.group(1) or match.group(2)):
        raise MalformedReferenceError(f"Invalid locale [{text}]")

    language, country, variant = match.groups()
    parts = [(language or "").lower()]
    if country:
        parts.append(country.upper())
    if variant:
        parts.append(variant)
    return "_".join(parts)


def is_root_locale(locale: Optional[str]) -> bool:
    return locale is None or locale == ROOT_LOCALE


# ---------------------------------------------------------------------
# Reference
# ---------------------------------------------------------------------

class EntityReference(BaseModel):
    """
    One addressable wiki entity and its ancestor chain.

    Instances are frozen and hashable; use `with_locale` or `replace_parent`
    to derive modified copies.
    """

    name: str = Field(
        ...,
        min_length=1,
        description="Segment name, unique among the parent's children of the same kind.",
    )

    type: EntityType = Field(
        ...,
        description="Kind of entity this segment addresses.",
    )

    parent: Optional[EntityReference] = Field(
        default=None,
        description="Enclosing entity, or None for a relative reference.",
    )

    locale: Optional[str] = Field(
        default=None,
        description="Document locale; None for the original document.",
    )

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    @field_validator("locale", mode="before")
    @classmethod
    def validate_locale(cls, v: Optional[str]) -> Optional[str]:
        # The root locale has a single representation: None.
        if v is None:
            return None
        locale = parse_locale(v)
        return locale or None

    @model_validator(mode="after")
    def validate_chain(self) -> EntityReference:
        if self.parent is not None and self.parent.type not in LEGAL_PARENTS[self.type]:
            raise MalformedReferenceError(
                f"A {self.type.value} reference cannot have a {self.parent.type.value} parent"
            )
        if self.locale is not None and self.type is not EntityType.DOCUMENT:
            raise MalformedReferenceError(
                f"Only DOCUMENT references carry a locale, not {self.type.value}"
            )
        return self

    @classmethod
    def create(
        cls,
        name: str,
        type: EntityType,
        parent: Optional[EntityReference] = None,
        locale: Optional[str] = None,
    ) -> EntityReference:
        """
        Build a reference, reporting any invalid name, chain or locale as
        `MalformedReferenceError`.
        """
        try:
            return cls(name=name, type=type, parent=parent, locale=locale)
        except ValidationError as exc:
            raise MalformedReferenceError(
                f"Invalid reference [{name}]: {exc}"
            ) from exc

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def extract_reference(self, entity_type: EntityType) -> Optional[EntityReference]:
        """Return the closest ancestor-or-self of the given type."""
        current: Optional[EntityReference] = self
        while current is not None and current.type is not entity_type:
            current = current.parent
        return current

    def chain(self) -> List[EntityReference]:
        """Return the ancestor chain, root first, ending with this reference."""
        segments: List[EntityReference] = []
        current: Optional[EntityReference] = self
        while current is not None:
            segments.append(current)
            current = current.parent
        segments.reverse()
        return segments

    def spaces(self) -> List[EntityReference]:
        """Return the space segments of the chain, outermost first."""
        return [segment for segment in self.chain() if segment.type is EntityType.SPACE]

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def with_locale(self, locale: Optional[str]) -> EntityReference:
        return EntityReference.create(name=self.name, type=self.type, parent=self.parent, locale=locale)

    def replace_parent(self, parent: Optional[EntityReference]) -> EntityReference:
        return EntityReference.create(name=self.name, type=self.type, parent=parent, locale=self.locale)

    def __str__(self) -> str:
        from .serializer import serialize_reference

        text = serialize_reference(self)
        if self.locale:
            text = f"{text}({self.locale})"
        return text


# ---------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------

def wiki_reference(wiki: str) -> EntityReference:
    return EntityReference.create(name=wiki, type=EntityType.WIKI)


def space_reference(wiki: str, spaces: Sequence[str]) -> EntityReference:
    """Build a (possibly nested) space reference from its space names."""
    if not spaces:
        raise MalformedReferenceError("A space reference needs at least one space name")

    parent = wiki_reference(wiki)
    for space in spaces:
        parent = EntityReference.create(name=space, type=EntityType.SPACE, parent=parent)
    return parent


def document_reference(
    wiki: str,
    spaces: Sequence[str],
    name: str,
    locale: Optional[str] = None,
) -> EntityReference:
    return EntityReference.create(
        name=name,
        type=EntityType.DOCUMENT,
        parent=space_reference(wiki, spaces),
        locale=locale,
    )


def attachment_reference(document: EntityReference, filename: str) -> EntityReference:
    return EntityReference.create(name=filename, type=EntityType.ATTACHMENT, parent=document)


def object_reference(document: EntityReference, class_name: str, number: int) -> EntityReference:
    return EntityReference.create(name=f"{class_name}[{number}]", type=EntityType.OBJECT, parent=document)


def object_property_reference(obj: EntityReference, property_name: str) -> EntityReference:
    return EntityReference.create(name=property_name, type=EntityType.OBJECT_PROPERTY, parent=obj)


OBJECT_NAME_PATTERN = re.compile(r"^(?P<class_name>.+)\[(?P<number>\d+)\]$")


def split_object_name(name: str) -> tuple[str, int]:
    """Split an object segment name ``Class.Name[3]`` into class name and number."""
    match = OBJECT_NAME_PATTERN.match(name)
    if match is None:
        raise MalformedReferenceError(f"Invalid object name [{name}]")
    return match.group("class_name"), int(match.group("number"))
