"""
Slug generation for restaurants and categories.
"""

import re
import unicodedata

from menucup.errors import ValidationError

# Top-level paths a restaurant slug may not take
RESERVED_SLUGS = frozenset({
    "api",
    "dashboard",
    "login",
    "logout",
    "health",
    "docs",
    "redoc",
    "openapi.json",
    "storage",
    "contact",
    "locale",
    "static",
})

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_slug(name: str) -> str:
    """
    Build a URL slug from a display name.

    >>> generate_slug("Joe's Bar & Grill")
    'joe-s-bar-grill'
    >>> generate_slug("  Café Olé ")
    'cafe-ole'
    """
    folded = unicodedata.normalize("NFKD", name or "")
    folded = folded.encode("ascii", "ignore").decode("ascii").lower()
    return _NON_ALNUM.sub("-", folded).strip("-")


def validate_slug(slug: str, *, restaurant: bool = False) -> str:
    """
    Normalize and check a user-supplied slug.

    Raises:
        ValidationError: if the slug is empty or reserved
    """
    normalized = generate_slug(slug)
    if not normalized:
        raise ValidationError("Slug cannot be empty")
    if restaurant and normalized in RESERVED_SLUGS:
        raise ValidationError(f"Slug '{normalized}' is reserved")
    return normalized
