"""
Name normalization for process and job identifiers.
"""
import re
from typing import Optional

_SEPARATORS = re.compile(r"[\s*,.\-]+")
_DASHES = re.compile(r"-+")


def normalize_name(value: Optional[str]) -> str:
    """
    Turn a raw name into a canonical slug.

    Examples:
        "Foo Bar" -> "foo-bar"
        "a--b***c" -> "a-b-c"
        "  Hello, World.  " -> "hello-world"

    Normalizing an already normalized name returns it unchanged.
    """
    if not value:
        return ""
    slug = value.strip().lower()
    slug = _SEPARATORS.sub("-", slug).strip().strip("-")
    return _DASHES.sub("-", slug).strip().strip("-")
