"""Chapter catalog module.

Provides chapter metadata lookup from the remote content service.
"""

from .client import CatalogError, CatalogRateLimitError, QuranCatalogClient
from .schemas import WHOLE_BOOK_PAGES, WHOLE_BOOK_TITLE, Chapter, chapter_title

__all__ = [
    "QuranCatalogClient",
    "CatalogError",
    "CatalogRateLimitError",
    "Chapter",
    "chapter_title",
    "WHOLE_BOOK_PAGES",
    "WHOLE_BOOK_TITLE",
]
