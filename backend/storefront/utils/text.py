"""Text helpers for slugs, prices and previews."""

import re
import unicodedata
from decimal import ROUND_HALF_UP, Decimal

_NON_WORD = re.compile(r"[^\w\-]+")
_DASH_RUNS = re.compile(r"-{2,}")
_WHITESPACE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """Turn a display name into a URL slug: "Dome Cameras" -> "dome-cameras".

    Diacritics are stripped; letters of other scripts are kept as-is.
    """
    normalized = unicodedata.normalize("NFD", str(text))
    without_marks = "".join(ch for ch in normalized if not unicodedata.combining(ch))
    slug = _WHITESPACE.sub("-", without_marks.lower().strip())
    slug = _NON_WORD.sub("", slug)
    slug = _DASH_RUNS.sub("-", slug)
    return slug.strip("-")


def format_price(price: Decimal | float | int, currency: str = "₽") -> str:
    """Whole-unit price with thousands separated by spaces, e.g. "7 500 ₽"."""
    whole = int(Decimal(str(price)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return f"{whole:,}".replace(",", " ") + f" {currency}"


def truncate_text(text: str, max_length: int) -> str:
    if not text or len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def escape_like(s: str) -> str:
    """Escape SQL LIKE wildcards in user input."""
    return s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
