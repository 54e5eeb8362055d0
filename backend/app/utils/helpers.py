"""Utility helper functions."""

import math
import re
import unicodedata


def total_pages(total_count: int, limit: int) -> int:
    """
    Number of pages needed to show ``total_count`` items ``limit`` at a time.

    An empty result still has one (empty) page.

    Args:
        total_count: Number of matching items, non-negative
        limit: Page size, positive

    Returns:
        max(1, ceil(total_count / limit))
    """
    if limit < 1:
        raise ValueError("limit must be positive")
    return max(1, math.ceil(max(0, total_count) / limit))


def slugify(value: str) -> str:
    """
    Lowercase, url-safe form of a name.

    Accents are stripped, ``&`` becomes ``and`` and every other run of
    non-alphanumeric characters collapses into a single hyphen.

    Args:
        value: Display name such as "Art & Image Generator"

    Returns:
        Slug such as "art-and-image-generator"
    """
    normalized = unicodedata.normalize("NFKD", value)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    ascii_text = ascii_text.replace("&", " and ").lower()
    return re.sub(r"[^a-z0-9]+", "-", ascii_text).strip("-")
