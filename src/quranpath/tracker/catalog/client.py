"""Chapter catalog client for the quran.com content API.

The catalog provides chapter metadata, including the inclusive page range
each chapter occupies in the mushaf. Single-chapter plans use it to resolve
their unit range. No API key required.
"""

import logging
import time
from typing import Optional

import requests

from .schemas import Chapter

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Base exception for catalog API errors."""

    pass


class CatalogRateLimitError(CatalogError):
    """Raised when rate limited by the catalog API."""

    pass


class QuranCatalogClient:
    """Client for chapter lookups with an in-process cache."""

    BASE_URL = "https://api.quran.com/api/v4"

    def __init__(
        self,
        base_url: Optional[str] = None,
        language: str = "en",
        timeout: int = 10,
        cache_ttl: int = 3600,
    ):
        """Initialize client.

        Args:
            base_url: API root, defaults to the public quran.com v4 API
            language: Language for translated chapter names
            timeout: Request timeout in seconds
            cache_ttl: Seconds a fetched chapter list stays valid
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.language = language
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": "quranpath/0.1"})
        self._cache: dict[str, tuple[float, list[Chapter]]] = {}

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        """Make GET request with error handling."""
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout:
            raise CatalogError("Request timed out")
        except requests.exceptions.HTTPError as e:
            if e.response.status_code == 429:
                raise CatalogRateLimitError("Rate limited by catalog API")
            raise CatalogError(f"HTTP error: {e.response.status_code}")
        except requests.exceptions.RequestException as e:
            raise CatalogError(f"Request failed: {e}")
        except ValueError as e:
            raise CatalogError(f"Invalid JSON response: {e}")

    def get_chapters(self, language: Optional[str] = None) -> list[Chapter]:
        """Get all chapters, served from cache while fresh.

        Args:
            language: Override the client language

        Returns:
            Chapters ordered by id
        """
        language = language or self.language
        cached = self._cache.get(language)
        if cached and time.monotonic() - cached[0] < self.cache_ttl:
            return cached[1]

        data = self._get("/chapters", {"language": language})
        chapters = []
        for raw in data.get("chapters", []):
            try:
                chapters.append(Chapter.model_validate(raw))
            except ValueError as e:
                logger.warning("Skipping malformed chapter %s: %s", raw.get("id"), e)

        chapters.sort(key=lambda c: c.id)
        self._cache[language] = (time.monotonic(), chapters)
        return chapters

    def get_chapter(self, chapter_id: int) -> Optional[Chapter]:
        """Look up a single chapter by id."""
        for chapter in self.get_chapters():
            if chapter.id == chapter_id:
                return chapter
        return None

    def search_chapters(self, text: str) -> list[Chapter]:
        """Filter chapters by name or id substring (case-insensitive)."""
        needle = text.strip().lower()
        if not needle:
            return self.get_chapters()
        return [
            c
            for c in self.get_chapters()
            if needle in c.name_simple.lower() or needle in str(c.id)
        ]

    def clear_cache(self) -> None:
        """Drop cached chapter lists."""
        self._cache.clear()
