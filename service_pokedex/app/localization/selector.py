"""
Locale fallback selection over language-tagged items.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple


@dataclass(frozen=True)
class LocalizedItem:
    """A payload tagged with the language it is written in."""
    language_tag: str
    payload: Any


def language_tag_of(item: Any) -> Optional[str]:
    """Read the tag from a ``LocalizedItem`` or an upstream ``{"language": {"name": ...}}`` entry."""
    tag = getattr(item, "language_tag", None)
    if tag is not None:
        return tag

    language = item.get("language") if isinstance(item, Mapping) else getattr(item, "language", None)
    if isinstance(language, Mapping):
        return language.get("name")
    return getattr(language, "name", None)


def select_all(
    items: Iterable[Any],
    preferred_locales: Sequence[str],
    tag_of: Callable[[Any], Optional[str]] = language_tag_of,
) -> Tuple[Any, ...]:
    """Items tagged with the first preferred locale that has any.

    Tags must match exactly. Locales missing from ``preferred_locales`` are
    never used; returns ``()`` when nothing matches.
    """
    snapshot = tuple(items)
    tags = [tag_of(item) for item in snapshot]

    for locale in preferred_locales:
        matches = tuple(item for item, tag in zip(snapshot, tags) if tag == locale)
        if matches:
            return matches
    return ()


def select_one(
    items: Iterable[Any],
    preferred_locales: Sequence[str],
    tag_of: Callable[[Any], Optional[str]] = language_tag_of,
) -> Optional[Any]:
    """First element of ``select_all``, or ``None``."""
    matches = select_all(items, preferred_locales, tag_of)
    return matches[0] if matches else None
