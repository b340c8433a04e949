"""URL slug generation for project pages."""

import re

_CYRILLIC = {
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "yo", "ж": "zh",
    "з": "z", "и": "i", "й": "j", "к": "k", "л": "l", "м": "m", "н": "n", "о": "o",
    "п": "p", "р": "r", "с": "s", "т": "t", "у": "u", "ф": "f", "х": "h", "ц": "ts",
    "ч": "ch", "ш": "sh", "щ": "sch", "ъ": "", "ы": "y", "ь": "", "э": "e", "ю": "yu",
    "я": "ya",
}

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")
_REPEATED_HYPHENS = re.compile(r"-{2,}")


def slugify(text: str) -> str:
    """Generate a URL-safe slug from text.

    Lowercases, transliterates basic Cyrillic, replaces every run of
    non-alphanumerics with a hyphen and trims hyphens from both ends.
    Returns "" when nothing usable is left.
    """
    lowered = "".join(_CYRILLIC.get(char, char) for char in text.lower())
    slug = _NON_ALNUM.sub("-", lowered)
    slug = _EDGE_HYPHENS.sub("", slug)
    return _REPEATED_HYPHENS.sub("-", slug)


def candidate_slugs(base: str):
    """Yield ``base``, ``base-1``, ``base-2``, ... forever."""
    yield base
    counter = 1
    while True:
        yield f"{base}-{counter}"
        counter += 1
