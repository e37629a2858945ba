"""
Bookmarks API — Payload Validation
===================================

What:  Decides whether a create or update payload is acceptable before it
       reaches storage.
How:   Pure functions. Each rejects with a single ValidationError naming the
       failing field; the first failing check wins.
Who:   Called by BookmarkService before any store call.

Create check order (fixed):
    title present → url present → description present → rating present
    → rating is an integer in [0, 5] → url is a syntactically valid URI

Update:
    At least one of title/url/description/rating must carry a usable value.
    Each supplied field gets the same per-field rule as on create.
"""

import re
from typing import Any, Dict, Mapping, Optional

import pydantic
from pydantic import AnyUrl, TypeAdapter

from bookmarks_api.exceptions import ValidationError

BOOKMARK_FIELDS = ("title", "url", "description", "rating")

RATING_MIN = 0
RATING_MAX = 5

MISSING_FIELD_MESSAGE = "Missing '{field}' in request body."
RATING_MESSAGE = "Rating must be a number between 0 and 5."
URL_MESSAGE = "URL must be valid."
EMPTY_UPDATE_MESSAGE = (
    "Request body must contain either 'title', 'url', 'description', or 'rating'."
)

_URI_ADAPTER = TypeAdapter(AnyUrl)

# The URL parser percent-encodes these instead of rejecting them
_ILLEGAL_URI_CHARS = re.compile(r"[^a-z0-9:/?#\[\]@!$&'()*+,;=.\-_~%]", re.IGNORECASE)
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9a-f]{2})", re.IGNORECASE)
_INTEGER = re.compile(r"^\s*[+-]?\d+\s*$")


def is_present(value: Any) -> bool:
    """A value counts as supplied unless it is None or the empty string."""
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    return True


def is_uri(value: Any) -> bool:
    """
    Syntactic check for an absolute URI.

    Parsing (scheme, host, IP literals, port) is done by pydantic's AnyUrl.
    On top of that only RFC 3986 characters and complete percent escapes
    are allowed, since the parser would silently encode anything else.

        >>> is_uri("http://www.bookmark.com")
        True
        >>> is_uri("invalid-url")
        False
    """
    if not isinstance(value, str) or not value:
        return False
    if _ILLEGAL_URI_CHARS.search(value) or _BAD_PERCENT_ESCAPE.search(value):
        return False

    try:
        _URI_ADAPTER.validate_python(value)
    except pydantic.ValidationError:
        return False
    return True


def parse_rating(value: Any) -> Optional[int]:
    """
    Loose integer coercion for ratings.

    Accepts ints, integral floats and strings holding a base-10 integer.
    Returns None for anything else (booleans included) or when the result
    falls outside [0, 5].
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        rating = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        rating = int(value)
    elif isinstance(value, str) and _INTEGER.match(value):
        rating = int(value)
    else:
        return None

    if RATING_MIN <= rating <= RATING_MAX:
        return rating
    return None


def _checked_rating(value: Any) -> int:
    rating = parse_rating(value)
    if rating is None:
        raise ValidationError(RATING_MESSAGE, field="rating", context={"value": repr(value)})
    return rating


def _checked_url(value: Any) -> str:
    if not is_uri(value):
        raise ValidationError(URL_MESSAGE, field="url", context={"value": repr(value)})
    return value


def _checked_text(field: str, value: Any) -> str:
    # Non-string JSON values (numbers, lists) are not text
    if not isinstance(value, str):
        raise ValidationError(
            f"'{field}' must be a string.", field=field, context={"value": repr(value)}
        )
    return value


def validate_create(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate a POST payload and return the normalized field set.

    Raises:
        ValidationError: on the first failing check, with the client-facing
            message ("Missing 'url' in request body.", ...)
    """
    for field in BOOKMARK_FIELDS:
        if not is_present(payload.get(field)):
            raise ValidationError(MISSING_FIELD_MESSAGE.format(field=field), field=field)

    rating = _checked_rating(payload["rating"])
    url = _checked_url(payload["url"])

    return {
        "title": _checked_text("title", payload["title"]),
        "url": url,
        "description": _checked_text("description", payload["description"]),
        "rating": rating,
    }


def validate_update(payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Validate a PATCH payload and return only the supplied, recognized fields.

    Absent, null and empty-string fields are dropped (they leave the stored
    value untouched). Extraneous keys never make it into the result.

    Raises:
        ValidationError: nothing usable was supplied, or a supplied rating/url
            fails the create-time rule.
    """
    payload = payload or {}
    supplied = {
        field: payload.get(field)
        for field in BOOKMARK_FIELDS
        if is_present(payload.get(field))
    }
    if not supplied:
        raise ValidationError(EMPTY_UPDATE_MESSAGE)

    if "rating" in supplied:
        supplied["rating"] = _checked_rating(supplied["rating"])
    if "url" in supplied:
        supplied["url"] = _checked_url(supplied["url"])
    for field in ("title", "description"):
        if field in supplied:
            supplied[field] = _checked_text(field, supplied[field])
    return supplied
