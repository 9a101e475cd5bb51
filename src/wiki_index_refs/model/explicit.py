from __future__ import annotations

from ..core.errors import MalformedReferenceError
from .reference import EntityReference, EntityType


class ExplicitReferenceResolver:
    """
    Re-resolve a complete reference to a requested entity kind.

    Unlike `resolve_string`, nothing is filled in from defaults: the
    reference must be anchored in a wiki and must contain a segment of the
    requested kind.
    """

    def resolve(self, reference: EntityReference, entity_type: EntityType) -> EntityReference:
        if reference.chain()[0].type is not EntityType.WIKI:
            raise MalformedReferenceError(f"Reference [{reference}] is not anchored in a wiki")

        resolved = reference.extract_reference(entity_type)
        if resolved is None:
            raise MalformedReferenceError(
                f"Reference [{reference}] has no {entity_type.value} segment"
            )
        return resolved
