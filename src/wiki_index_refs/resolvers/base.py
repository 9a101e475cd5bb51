"""
Reference Resolver Base

Every entity kind has one resolver implementing the same capability set:

- `expand`          the indexable references an entity implies
- `get_identifier`  the unique id of the entity's index record
- `get_query`       a query fragment matching the entity and its subtree
- `get_fields`      the flat index record describing the entity

Resolvers are immutable and hold nothing but collaborators, so a single
instance may be shared freely between threads.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import Settings, settings
from ..core.errors import ChildResolutionFailure, LookupFailure, MalformedReferenceError
from ..index.fields import FieldNames, IndexRecord
from ..model.reference import EntityReference, EntityType
from ..model.serializer import serialize_reference
from ..store.base import EntityStore

if TYPE_CHECKING:
    from .registry import ReferenceResolvers

logger = logging.getLogger("refs.expander")


# ---------------------------------------------------------------------
# Expansion Accumulator
# ---------------------------------------------------------------------

class SkippedReference(BaseModel):
    """A child entity left out of an expansion because resolving it failed."""

    reference: EntityReference
    reason: str = Field(..., description="Message of the failure.")
    error_type: str = Field(..., description="Class name of the failure.")

    model_config = ConfigDict(extra="forbid", frozen=True)


class ExpansionResult(BaseModel):
    """
    Ordered references produced by an expansion, plus the children skipped
    along the way.

    Iterating, indexing and `len` all address the references, so the result
    reads like the sequence it accumulates.
    """

    references: List[EntityReference] = Field(default_factory=list)
    skipped: List[SkippedReference] = Field(default_factory=list)

    def add(self, reference: EntityReference) -> None:
        self.references.append(reference)

    def extend(self, other: ExpansionResult) -> None:
        self.references.extend(other.references)
        self.skipped.extend(other.skipped)

    def skip(self, reference: EntityReference, exc: BaseException) -> None:
        self.skipped.append(
            SkippedReference(
                reference=reference,
                reason=str(exc),
                error_type=type(exc).__name__,
            )
        )

    def __len__(self) -> int:
        return len(self.references)

    def __iter__(self) -> Iterator[EntityReference]:  # type: ignore[override]
        return iter(self.references)

    def __getitem__(self, index: int) -> EntityReference:
        return self.references[index]

    def __contains__(self, reference: object) -> bool:
        return reference in self.references


# ---------------------------------------------------------------------
# Resolver Base
# ---------------------------------------------------------------------

class AbstractReferenceResolver(ABC):
    """Shared behavior of the per-kind resolvers."""

    entity_type: ClassVar[EntityType]

    def __init__(
        self,
        store: EntityStore,
        resolvers: ReferenceResolvers,
        config: Optional[Settings] = None,
    ) -> None:
        self._store = store
        self._resolvers = resolvers
        self._config = config or settings

    @abstractmethod
    def expand(self, reference: EntityReference) -> ExpansionResult:
        ...

    @abstractmethod
    def get_query(self, reference: EntityReference) -> str:
        ...

    @abstractmethod
    def get_fields(self, reference: EntityReference) -> IndexRecord:
        ...

    def get_identifier(self, reference: EntityReference) -> str:
        return serialize_reference(self._extract(reference))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _extract(self, reference: EntityReference, entity_type: Optional[EntityType] = None) -> EntityReference:
        """Return the segment of the requested kind (this resolver's by default)."""
        entity_type = entity_type or self.entity_type
        extracted = reference.extract_reference(entity_type)
        if extracted is None:
            raise MalformedReferenceError(
                f"Reference [{reference}] has no {entity_type.value} segment"
            )
        return extracted

    def _exists(self, reference: EntityReference) -> bool:
        try:
            return self._store.exists(reference)
        except Exception as exc:
            raise LookupFailure(f"Failed to check whether [{reference}] exists") from exc

    def _expand_child(
        self,
        result: ExpansionResult,
        entity_type: EntityType,
        reference: EntityReference,
    ) -> None:
        """Expand one child, recording it as skipped instead of failing."""
        try:
            result.extend(self._resolvers.get(entity_type).expand(reference))
        except Exception as exc:
            failure = ChildResolutionFailure(reference, exc)
            logger.error("%s", failure, exc_info=exc)
            result.skip(reference, exc)

    def _with_identity(self, record: IndexRecord, reference: EntityReference) -> IndexRecord:
        record[FieldNames.ID] = self.get_identifier(reference)
        record[FieldNames.TYPE] = self.entity_type.value
        return record
