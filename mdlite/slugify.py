"""Slug generation for heading anchors."""

from __future__ import annotations

import re
import string
import unicodedata


def generate_slug(title: str, preserve_unicode: bool = False) -> str:
    """Generate a URL-style slug from a heading title.

    Converts the title to lowercase ASCII (or Unicode when preserving),
    removes punctuation except hyphens and underscores, collapses whitespace to
    single hyphens, and returns ``"untitled"`` when no characters remain.

    Args:
        title: The heading text to convert into a slug.
        preserve_unicode: When True, retain Unicode characters instead of
            transliterating to ASCII.

    Returns:
        str: Hyphen-separated slug suitable for anchor links.

    Examples:
        generate_slug("Hello World")  # "hello-world"
        generate_slug("What's New?")  # "whats-new"
        generate_slug("Café", preserve_unicode=True)  # "café"
    """
    punctuation = string.punctuation.replace("-", "").replace("_", "")

    normalized = unicodedata.normalize("NFKC" if preserve_unicode else "NFKD", title)
    if preserve_unicode:
        slug = normalized
    else:
        slug = normalized.encode("ascii", "ignore").decode("utf-8", "ignore")

    slug = slug.casefold()
    slug = slug.translate(str.maketrans("", "", punctuation))

    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    slug = slug.strip("-")

    return slug if slug else "untitled"


def unique_slug(
    title: str,
    used_slugs: set[str],
    slug_counters: dict[str, int],
    preserve_unicode: bool = False,
) -> str:
    """Return a slug for `title` that is not yet in `used_slugs`.

    Duplicates get GitHub-style numeric suffixes, including cascading
    collisions (``"Header"``, ``"Header"``, ``"Header 1"`` yields ``header``,
    ``header-1``, ``header-1-1``). Both collections are updated in place.

    Args:
        title: Plain heading text.
        used_slugs: Slugs already handed out in this document.
        slug_counters: Next suffix to try for each base slug.
        preserve_unicode: Keep Unicode characters in the slug.

    Returns:
        str: The unique slug.
    """
    base_slug = generate_slug(title, preserve_unicode=preserve_unicode)

    # First occurrence gets no suffix, then -1, -2, etc.
    count = slug_counters.get(base_slug, 0)
    slug = base_slug if count == 0 else f"{base_slug}-{count}"

    # A numbered title can collide with an auto-numbered duplicate
    while slug in used_slugs:
        count += 1
        slug = f"{base_slug}-{count}"

    slug_counters[base_slug] = count + 1
    used_slugs.add(slug)
    return slug
