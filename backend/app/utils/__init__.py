"""Utils package."""

from .helpers import slugify, total_pages

__all__ = [
    "slugify",
    "total_pages",
]
