from __future__ import annotations

import re
import unicodedata

FALLBACK_SLUG = "n-a"

_NON_ALNUM_RE = re.compile(r"[\W_]+")
_NON_ASCII_RE = re.compile(r"[^a-zA-Z0-9-]+")
_DASHES_RE = re.compile(r"-+")


def _strip_accents(text: str) -> str:
    text = unicodedata.normalize("NFKD", text)
    return "".join([c for c in text if not unicodedata.combining(c)])


def slugify(text: str | None) -> str:
    """Turn arbitrary text into a lowercase ASCII slug.

    Never raises; anything that reduces to nothing (empty input, symbols only,
    scripts without an ASCII transliteration) becomes ``"n-a"``.
    """
    text = _NON_ALNUM_RE.sub("-", text or "")
    text = _strip_accents(text).replace("ß", "ss")
    text = _NON_ASCII_RE.sub("", text)
    text = _DASHES_RE.sub("-", text.strip("-"))
    # the accent pass can leave new edge hyphens, e.g. "-é" -> "-"
    text = text.strip("-").lower()
    return text or FALLBACK_SLUG
