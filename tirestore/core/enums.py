"""Enums for rack and storage constants."""

from enum import Enum


class Row(str, Enum):
    """Rack row a tire can be stored in."""

    FRONT = "front"
    BACK = "back"

    @classmethod
    def from_string(cls, value: str | None) -> "Row | None":
        """Convert string to enum, returning None if invalid."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class StorageBackend(str, Enum):
    """Where racks and tires are persisted."""

    MEMORY = "memory"
    SUPABASE = "supabase"


# Placeholder model name when the product page has none
UNKNOWN_MODEL = "N/A"
