"""
Locale fallback selection for multi-language catalog fields.
"""

from .selector import LocalizedItem, language_tag_of, select_all, select_one

__all__ = ["LocalizedItem", "language_tag_of", "select_all", "select_one"]
