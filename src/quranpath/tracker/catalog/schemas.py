"""Pydantic schemas for chapter catalog data."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Pages in the standard Madani mushaf
WHOLE_BOOK_PAGES = 604
WHOLE_BOOK_TITLE = "Khatmul Quran"


class TranslatedName(BaseModel):
    """Chapter name in a translation language."""

    language_name: str = ""
    name: str = ""


class Chapter(BaseModel):
    """A chapter (surah) descriptor from the catalog."""

    id: int = Field(..., ge=1)
    name_simple: str
    name_arabic: str = ""
    name_complex: str = ""
    revelation_place: str = ""
    revelation_order: Optional[int] = None
    verses_count: int = Field(0, ge=0)
    pages: tuple[int, int]
    translated_name: Optional[TranslatedName] = None

    @field_validator("pages")
    @classmethod
    def pages_in_order(cls, v):
        """Validate the page range is inclusive and ascending."""
        first, last = v
        if first < 1 or last < first:
            raise ValueError(f"invalid page range: {first}-{last}")
        return v

    @property
    def first_page(self) -> int:
        return self.pages[0]

    @property
    def last_page(self) -> int:
        return self.pages[1]

    @property
    def page_count(self) -> int:
        return self.last_page - self.first_page + 1

    @property
    def display_name(self) -> str:
        """Name used in plan titles and listings."""
        if self.translated_name and self.translated_name.name:
            return f"{self.name_simple} ({self.translated_name.name})"
        return self.name_simple


def chapter_title(chapter: Optional[Chapter]) -> str:
    """Build a plan title from an optional chapter."""
    if chapter is None:
        return WHOLE_BOOK_TITLE
    return f"Surat {chapter.name_simple}"
