"""Slug generation.

A slug is the lowercase ASCII form of a display name with every run of
other characters collapsed to a single hyphen. Uniqueness is resolved
against a caller-supplied existence check, so the same generator serves
categories and tags (each check is scoped to its own table).
"""

import re
import unicodedata
from collections.abc import Awaitable, Callable

from category_service.core.exceptions import InvalidInputError, SlugGenerationError
from category_service.infra.logging import get_logger

logger = get_logger(__name__)

SlugExistsCheck = Callable[[str], Awaitable[bool]]

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Letters NFKD leaves intact; encoding them straight to ASCII would drop them.
_TRANSLITERATIONS = str.maketrans(
    {
        "ß": "ss",
        "ẞ": "SS",
        "æ": "ae",
        "Æ": "AE",
        "ø": "o",
        "Ø": "O",
        "œ": "oe",
        "Œ": "OE",
        "ł": "l",
        "Ł": "L",
        "đ": "d",
        "Đ": "D",
        "þ": "th",
        "Þ": "TH",
    }
)


def slugify(display_name: str) -> str:
    """Normalize a display name into a base slug.

    Accented letters lose their marks ("Café" -> "cafe"), a few letters with
    no decomposition are spelled out ("Straße" -> "strasse") and any other
    non-ASCII character is dropped.

    Raises:
        InvalidInputError: If nothing URL-safe remains.
    """
    normalized = unicodedata.normalize("NFKD", display_name.translate(_TRANSLITERATIONS))
    normalized = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    normalized = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = _NON_ALNUM.sub("-", normalized).strip("-")
    if not slug:
        raise InvalidInputError(f"Name '{display_name}' does not produce a valid slug")
    return slug


async def generate_slug(
    display_name: str,
    exists: SlugExistsCheck,
    max_attempts: int | None = None,
) -> str:
    """Return the first free slug for ``display_name``.

    Tries the base slug, then ``base-1``, ``base-2``... until ``exists``
    reports a free candidate.

    Args:
        display_name: Name to derive the slug from
        exists: Async check for "slug already taken in this namespace"
        max_attempts: Optional bound on candidates tried (None = unbounded)

    Returns:
        Unused slug

    Raises:
        InvalidInputError: Name normalizes to an empty slug
        SlugGenerationError: The existence check failed, or max_attempts ran out
    """
    base = slugify(display_name)
    candidate = base
    counter = 0

    while True:
        try:
            taken = await exists(candidate)
        except Exception as e:
            logger.error("Slug existence check failed", slug=candidate, error=str(e))
            raise SlugGenerationError(f"Could not verify slug '{candidate}'") from e

        if not taken:
            if counter:
                logger.debug("Slug collision resolved", base=base, slug=candidate)
            return candidate

        counter += 1
        if max_attempts is not None and counter >= max_attempts:
            raise SlugGenerationError(
                f"No free slug for '{base}' after {max_attempts} attempts"
            )
        candidate = f"{base}-{counter}"
