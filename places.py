"""Resolve spoken place names to street addresses."""

from typing import Mapping, Optional


def normalize_place(name: str) -> str:
    return " ".join(name.lower().split())


def resolve_address(name: Optional[str], table: Mapping[str, str], default: str) -> str:
    """Return the address for ``name`` or ``default`` when it is unknown.

    Matching is on the lower-cased name with runs of whitespace collapsed,
    so "Levis  Stadium" and "levis stadium" resolve the same way.
    """
    if not name:
        return default
    return table.get(normalize_place(name), default)
