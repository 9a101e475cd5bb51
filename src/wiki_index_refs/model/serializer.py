"""
Reference String Codec

Serializes references to their textual form and resolves text back into
references:

    xwiki:Main.Sub.Page@photo.png
    xwiki:Main.Page^XWiki\\.TagClass[0].tags

Separators depend on the kind of the child segment (``:`` after the wiki,
``.`` between spaces and before a document or property, ``@`` before an
attachment, ``^`` before an object). A backslash escapes, inside a name, the
backslash itself and the separators that may still follow that segment:
spaces and documents escape all four, objects only ``.``, while attachment
and property names are last and keep their dots verbatim.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Optional, Tuple

from ..config import Settings, settings
from ..core.errors import MalformedReferenceError
from .reference import LEGAL_PARENTS, EntityReference, EntityType


# ---------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------

ESCAPE = "\\"

SEPARATORS: Dict[Tuple[EntityType, EntityType], str] = {
    (EntityType.WIKI, EntityType.SPACE): ":",
    (EntityType.SPACE, EntityType.SPACE): ".",
    (EntityType.SPACE, EntityType.DOCUMENT): ".",
    (EntityType.DOCUMENT, EntityType.ATTACHMENT): "@",
    (EntityType.DOCUMENT, EntityType.OBJECT): "^",
    (EntityType.OBJECT, EntityType.OBJECT_PROPERTY): ".",
}

# Separators the tokenizer looks for while reading a given part of the text
PATH_SEPARATORS: FrozenSet[str] = frozenset(":.@^")
OBJECT_SEPARATORS: FrozenSet[str] = frozenset(".")
NO_SEPARATORS: FrozenSet[str] = frozenset()

# Characters escaped inside a segment name of each kind
ESCAPED_CHARS: Dict[EntityType, FrozenSet[str]] = {
    EntityType.WIKI: PATH_SEPARATORS | {ESCAPE},
    EntityType.SPACE: PATH_SEPARATORS | {ESCAPE},
    EntityType.DOCUMENT: PATH_SEPARATORS | {ESCAPE},
    EntityType.ATTACHMENT: frozenset(ESCAPE),
    EntityType.OBJECT: OBJECT_SEPARATORS | {ESCAPE},
    EntityType.OBJECT_PROPERTY: frozenset(ESCAPE),
}

# Parent kind implied by a separator found left of a segment of a given kind
PARENT_BY_SEPARATOR: Dict[Tuple[EntityType, str], EntityType] = {
    (child, separator): parent for (parent, child), separator in SEPARATORS.items()
}

# Parent kind used when a relative reference has to be completed with defaults
DEFAULT_PARENT: Dict[EntityType, EntityType] = {
    EntityType.SPACE: EntityType.WIKI,
    EntityType.DOCUMENT: EntityType.SPACE,
    EntityType.ATTACHMENT: EntityType.DOCUMENT,
    EntityType.OBJECT: EntityType.DOCUMENT,
    EntityType.OBJECT_PROPERTY: EntityType.OBJECT,
}


# ---------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------

def escape_name(name: str, entity_type: EntityType = EntityType.SPACE) -> str:
    """Escape the characters a segment of `entity_type` cannot hold verbatim."""
    special = ESCAPED_CHARS[entity_type]
    return "".join(ESCAPE + c if c in special else c for c in name)


def _serialize_chain(segments: List[EntityReference]) -> str:
    parts: List[str] = []
    previous: Optional[EntityReference] = None
    for segment in segments:
        if previous is not None:
            parts.append(SEPARATORS[(previous.type, segment.type)])
        parts.append(escape_name(segment.name, segment.type))
        previous = segment
    return "".join(parts)


def serialize_reference(reference: EntityReference) -> str:
    """Serialize the full chain of `reference`, wiki included."""
    return _serialize_chain(reference.chain())


def serialize_local(reference: EntityReference) -> str:
    """Serialize `reference` without its wiki segment."""
    return _serialize_chain(
        [segment for segment in reference.chain() if segment.type is not EntityType.WIKI]
    )


# ---------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------

def _has_unescaped(text: str, char: str) -> bool:
    chars = iter(text)
    for c in chars:
        if c == ESCAPE:
            next(chars, None)
        elif c == char:
            return True
    return False


def _initial_separators(text: str, entity_type: EntityType) -> FrozenSet[str]:
    # Relative attachment, object and property strings start below the document.
    if entity_type is EntityType.ATTACHMENT and not _has_unescaped(text, "@"):
        return NO_SEPARATORS
    if entity_type is EntityType.OBJECT and not _has_unescaped(text, "^"):
        return NO_SEPARATORS
    if entity_type is EntityType.OBJECT_PROPERTY and not _has_unescaped(text, "^"):
        return OBJECT_SEPARATORS
    return PATH_SEPARATORS


def _separators_after(
    separator: str,
    active: FrozenSet[str],
    entity_type: EntityType,
) -> FrozenSet[str]:
    if separator == "@":
        return NO_SEPARATORS
    if separator == "^":
        if entity_type is EntityType.OBJECT_PROPERTY:
            return OBJECT_SEPARATORS
        return NO_SEPARATORS
    if active is OBJECT_SEPARATORS:
        return NO_SEPARATORS
    return active


def _tokenize(text: str, entity_type: EntityType) -> Tuple[List[str], List[str]]:
    names: List[str] = []
    separators: List[str] = []
    current: List[str] = []
    active = _initial_separators(text, entity_type)

    chars = iter(text)
    for c in chars:
        if c == ESCAPE:
            escaped = next(chars, None)
            if escaped is None:
                raise MalformedReferenceError(f"Dangling escape character in [{text}]")
            current.append(escaped)
        elif c in active:
            names.append("".join(current))
            separators.append(c)
            current = []
            active = _separators_after(c, active, entity_type)
        else:
            current.append(c)

    names.append("".join(current))
    return names, separators


def _default_chain(
    entity_type: EntityType,
    config: Settings,
    context: Optional[EntityReference] = None,
) -> Optional[EntityReference]:
    parent_type = DEFAULT_PARENT.get(entity_type)
    if parent_type is None:
        return None

    # Levels present in the context (typically its wiki) are kept.
    if context is not None:
        found = context.extract_reference(parent_type)
        if found is not None:
            return found

    return EntityReference.create(
        name=config.default_name(parent_type),
        type=parent_type,
        parent=_default_chain(parent_type, config, context),
    )


def _attach_point(
    entity_type: EntityType,
    parent: Optional[EntityReference],
    config: Settings,
) -> Optional[EntityReference]:
    legal = LEGAL_PARENTS[entity_type]
    if not legal:
        return None

    current = parent
    while current is not None and current.type not in legal:
        current = current.parent

    if current is None:
        return _default_chain(entity_type, config, parent)
    return current


def resolve_string(
    text: str,
    entity_type: EntityType,
    parent: Optional[EntityReference] = None,
    config: Optional[Settings] = None,
) -> EntityReference:
    """
    Resolve a serialized reference of kind `entity_type`.

    Segments missing on the left are taken from `parent` (the closest legal
    ancestor is used) or, failing that, from the default names of `config`
    (the module-level settings when omitted). An empty string resolves to the
    default name of `entity_type`.
    """
    config = config or settings

    if text == "":
        return EntityReference.create(
            name=config.default_name(entity_type),
            type=entity_type,
            parent=_attach_point(entity_type, parent, config),
        )

    names, separators = _tokenize(text, entity_type)

    types = [entity_type]
    for separator in reversed(separators):
        parent_type = PARENT_BY_SEPARATOR.get((types[-1], separator))
        if parent_type is None:
            raise MalformedReferenceError(
                f"Unexpected separator [{separator}] before a {types[-1].value} in [{text}]"
            )
        types.append(parent_type)
    types.reverse()

    if any(name == "" for name in names):
        raise MalformedReferenceError(f"Empty segment name in [{text}]")

    reference = _attach_point(types[0], parent, config)
    for name, segment_type in zip(names, types):
        reference = EntityReference.create(name=name, type=segment_type, parent=reference)
    return reference
