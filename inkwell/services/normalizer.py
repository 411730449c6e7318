"""Slug generation for posts, pages, categories and tags."""

import re
import unicodedata

# Digraph transliterations; must run before the NFKD fold, which would
# otherwise reduce "ä" to a bare "a".
_DIGRAPHS = {
    "Ä": "ae",
    "ä": "ae",
    "Ö": "oe",
    "ö": "oe",
    "Ü": "ue",
    "ü": "ue",
    "ß": "ss",
}
_DIGRAPH_RE = re.compile("|".join(_DIGRAPHS))

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def generate_slug(text: str) -> str:
    """Generate a URL slug from a human-readable label.

    The slug is lowercased, ASCII-only, and uses single hyphens as separators.
    An input with no alphanumeric content yields an empty string; callers
    decide whether that is acceptable.
    """
    slug = unicodedata.normalize("NFC", text)
    slug = _DIGRAPH_RE.sub(lambda m: _DIGRAPHS[m.group(0)], slug)

    # Fold remaining accents (é -> e); other non-ASCII characters become
    # separators below rather than vanishing, so a dash between words still
    # splits them.
    slug = unicodedata.normalize("NFKD", slug)
    slug = "".join(ch for ch in slug if not unicodedata.combining(ch))

    slug = _NON_ALNUM_RE.sub("-", slug.lower().strip())
    return slug.strip("-")
