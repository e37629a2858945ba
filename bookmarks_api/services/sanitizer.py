"""
Bookmarks API — Output Sanitizer
=================================

What:  Turns a stored bookmark into a wire-safe representation.
How:   bleach, driven by a SanitizerPolicy:
       - strict fields (title): every tag is escaped and rendered as text
       - rich fields (description): an allow-list of benign inline tags and
         attributes survives, everything else is escaped
       - event-handler attributes (on*) are dropped on every tag
       id, url and rating pass through unchanged.
Who:   BookmarkService, on every response that carries a bookmark.

Example:
    title       'Naughty <script>alert("xss");</script>'
             →  'Naughty &lt;script&gt;alert("xss");&lt;/script&gt;'
    description '<img src="https://x/y.png" onerror="alert(1);"> <strong>ok</strong>'
             →  '<img src="https://x/y.png"> <strong>ok</strong>'

Serialization is deterministic and idempotent: existing entities are kept
as-is, so sanitizing sanitized output changes nothing.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Mapping, Tuple

from bleach.sanitizer import Cleaner

DEFAULT_RICH_TAGS = frozenset({
    "a",
    "abbr",
    "b",
    "br",
    "code",
    "em",
    "i",
    "img",
    "p",
    "small",
    "span",
    "strong",
    "sub",
    "sup",
    "u",
})

DEFAULT_RICH_ATTRIBUTES: Dict[str, Tuple[str, ...]] = {
    "a": ("href", "title"),
    "abbr": ("title",),
    "img": ("src", "alt", "title", "width", "height"),
}

DEFAULT_PROTOCOLS = frozenset({"http", "https", "mailto"})


@dataclass(frozen=True)
class SanitizerPolicy:
    """
    Which fields get which treatment.

    Fields named in neither tuple are passed through untouched.
    """

    strict_fields: Tuple[str, ...] = ("title",)
    rich_fields: Tuple[str, ...] = ("description",)
    rich_tags: FrozenSet[str] = DEFAULT_RICH_TAGS
    rich_attributes: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_RICH_ATTRIBUTES)
    )
    protocols: FrozenSet[str] = DEFAULT_PROTOCOLS


DEFAULT_POLICY = SanitizerPolicy()


def _attribute_filter(allowed: Mapping[str, Tuple[str, ...]]) -> Callable[[str, str, str], bool]:
    """bleach attribute callable: allow-listed names only, never on* handlers."""

    def allow(tag: str, name: str, value: str) -> bool:
        if name.lower().startswith("on"):
            return False
        return name in allowed.get(tag, ()) or name in allowed.get("*", ())

    return allow


class BookmarkSerializer:
    """Applies a SanitizerPolicy to bookmark records."""

    def __init__(self, policy: SanitizerPolicy = DEFAULT_POLICY):
        self.policy = policy
        self._strict = Cleaner(tags=frozenset(), attributes={}, strip=False)
        self._rich = Cleaner(
            tags=policy.rich_tags,
            attributes=_attribute_filter(policy.rich_attributes),
            protocols=policy.protocols,
            strip=False,
            strip_comments=True,
        )

    def sanitize_strict(self, text: str) -> str:
        return self._strict.clean(text)

    def sanitize_rich(self, text: str) -> str:
        return self._rich.clean(text)

    def serialize(self, bookmark: Any) -> Dict[str, Any]:
        """
        Sanitized copy of a bookmark.

        Accepts an ORM Bookmark (anything with to_dict()) or a plain mapping.
        The source object is never modified.
        """
        record = dict(bookmark.to_dict() if hasattr(bookmark, "to_dict") else bookmark)
        for name in self.policy.strict_fields:
            if isinstance(record.get(name), str):
                record[name] = self.sanitize_strict(record[name])
        for name in self.policy.rich_fields:
            if isinstance(record.get(name), str):
                record[name] = self.sanitize_rich(record[name])
        return record


# ── Singleton Instance ────────────────────────────────────────────────────
serializer = BookmarkSerializer()


def serialize_bookmark(bookmark: Any) -> Dict[str, Any]:
    """Serialize with the default policy."""
    return serializer.serialize(bookmark)
