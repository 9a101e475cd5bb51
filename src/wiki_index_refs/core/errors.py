"""
Error Taxonomy

This module defines every exception the reference resolvers and the index
decoder raise or record.

Policy
------
- Lookups for the entity being resolved propagate (`LookupFailure`)
- Failures of individual children are recorded, never raised
  (`ChildResolutionFailure`)
- Decoding never reconstructs partially (`DecodeError` and subclasses)
- Callers (typically an indexing pipeline) decide whether to skip the
  offending entity and continue
"""

from __future__ import annotations


# ---------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------

class WikiIndexError(RuntimeError):
    """Base error for reference resolution and index decoding."""


class MalformedReferenceError(WikiIndexError, ValueError):
    """Raised when a reference, reference string or locale is invalid."""


# ---------------------------------------------------------------------
# Expansion
# ---------------------------------------------------------------------

class LookupFailure(WikiIndexError):
    """Raised when a collaborator cannot return data required for an entity."""


class EntityNotFoundError(LookupFailure):
    """Raised by entity stores when a referenced entity does not exist."""


class ChildResolutionFailure(WikiIndexError):
    """
    Describes a child entity that could not be expanded.

    Instances are collected in `ExpansionResult.skipped` rather than raised,
    so one broken attachment or object never blocks its siblings.
    """

    def __init__(self, reference, cause: BaseException) -> None:
        super().__init__(f"Failed to resolve references for [{reference}]: {cause}")
        self.reference = reference
        self.cause = cause


# ---------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------

class DecodeError(WikiIndexError):
    """Base error for index records that cannot be turned into a reference."""


class MissingKindError(DecodeError):
    """Raised when an index record carries no kind marker."""


class UnsupportedKindError(DecodeError):
    """Raised when a kind marker matches no known entity type."""


class MalformedRecordError(DecodeError):
    """Raised when a field required by the record's kind is absent or invalid."""
