"""Text processing utilities."""

import html
import re
import unicodedata

from zatch.core.constants import MAX_SLUG_LENGTH


_TAG_RE = re.compile(r"<[^>]*>")


def strip_accents(value: str) -> str:
    """Remove diacritics, e.g. ``"Chácara"`` -> ``"Chacara"``."""
    normalized = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in normalized if unicodedata.category(ch) != "Mn")


def generate_slug(name: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """Generate a URL-safe slug from a name.

    Converts the input string to a URL-friendly slug by:
    - Stripping accents
    - Converting to lowercase
    - Removing special characters
    - Replacing spaces, underscores and hyphens with single hyphens
    - Truncating to max_length

    Args:
        name: The input string to slugify
        max_length: Maximum length of output slug (default 63)

    Returns:
        URL-safe lowercase slug

    Examples:
        >>> generate_slug("Casa na Praia")
        'casa-na-praia'
        >>> generate_slug("Apartamento São João!")
        'apartamento-sao-joao'
    """
    slug = strip_accents(name).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s_]+", "-", slug).strip("-")
    return slug[:max_length].rstrip("-")


def strip_html(value: str) -> str:
    """Drop markup tags and unescape entities."""
    return html.unescape(_TAG_RE.sub("", value)).strip()


def truncate(value: str, max_length: int) -> str:
    """Cut ``value`` to ``max_length`` characters."""
    return value if len(value) <= max_length else value[:max_length]
