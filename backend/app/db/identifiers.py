"""
Store-generated identifiers.

Every record is keyed by a random UUID rendered as a string. Identifiers
arriving in URLs or request bodies are checked for syntax before any query
is built from them.
"""

import uuid


def new_id() -> str:
    """Generate a fresh record identifier."""
    return str(uuid.uuid4())


def is_valid_id(value) -> bool:
    """Return True if value is a record identifier in its stored, lower-case form."""
    if not isinstance(value, str):
        return False
    try:
        return str(uuid.UUID(value)) == value
    except ValueError:
        return False
