"""
Slug service — URL-safe, collision-free identifiers derived from display names.

The collision check is supplied by the caller so the same algorithm serves any
table with a slug column.
"""
import re
import unicodedata
from typing import Awaitable, Callable, Optional

from domain.errors import ValidationError

CollisionCheck = Callable[[str, Optional[int]], Awaitable[bool]]

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """
    Normalize a display name: fold to ASCII, lowercase, collapse every run of
    non-alphanumerics into one hyphen, and trim hyphens at both ends.

    >>> slugify("  Ready to Dispatch! ")
    'ready-to-dispatch'
    """
    folded = unicodedata.normalize("NFKD", name or "").encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", folded.lower()).strip("-")


async def generate_unique_slug(
    name: str,
    exclude_id: Optional[int],
    collision_check: CollisionCheck,
) -> str:
    """
    Return slugify(name), suffixed -1, -2, ... until collision_check reports it free.

    Args:
        name: Display name to derive from
        exclude_id: Row id whose own slug should not count as a collision (updates)
        collision_check: async (slug, exclude_id) -> True if the slug is taken

    Raises:
        ValidationError: the name has no letters or digits to build a slug from
    """
    base = slugify(name)
    if not base:
        raise ValidationError("must contain at least one letter or digit", field="name")

    slug = base
    counter = 1
    while await collision_check(slug, exclude_id):
        slug = f"{base}-{counter}"
        counter += 1
    return slug
