"""quranpath - a devotional reading companion."""

__version__ = "0.1.0"
