"""
Index Field Schema

Field names, separators and query escaping shared by the reference
resolvers (which produce records and queries) and the decoder (which reads
records back).
"""

from __future__ import annotations

from typing import Any, Dict

# A flat index record, keyed by the names below.
IndexRecord = Dict[str, Any]


class FieldNames:
    ID = "id"
    TYPE = "type"

    WIKI = "wiki"
    SPACE_EXACT = "space_exact"
    SPACE_PREFIX = "space_prefix"

    # Document name, or the last space name for space home pages
    DOCUMENT_NAME = "name"
    DOCUMENT_NAME_EXACT = "name_exact"
    DOCUMENT_PARENT_PATH = "doc_parent_path"
    DOCUMENT_FINAL = "doc_final"
    DOCUMENT_LOCALE = "locale"

    FILENAME = "filename"
    CLASS = "class"
    NUMBER = "number"
    PROPERTY_NAME = "propertyname"


QUERY_AND = " AND "

# Joins a document identifier and its locale
USCORE = "_"

# Characters with a meaning in the index engine's query syntax
QUERY_SPECIAL_CHARS = frozenset('\\+-!():^[]"{}~*?|&;/')


def escape_query_chars(text: str) -> str:
    """
    Escape `text` so it parses as a single term of a `field:value` clause.

    Every query operator character and every whitespace character is
    prefixed with a backslash.
    """
    return "".join(
        "\\" + c if c in QUERY_SPECIAL_CHARS or c.isspace() else c
        for c in text
    )


def clause(field: str, value: Any) -> str:
    """Build an exact-match clause, escaping string values."""
    if isinstance(value, bool):
        return f"{field}:{str(value).lower()}"
    if isinstance(value, int):
        return f"{field}:{value}"
    return f"{field}:{escape_query_chars(str(value))}"


def and_query(*clauses: str) -> str:
    return QUERY_AND.join(c for c in clauses if c)
