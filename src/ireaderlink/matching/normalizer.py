# ABOUTME: Title and author normalization for comparing Douban and iReader records.
# ABOUTME: Strips edition notes, subtitles, badges, and name separators before matching.

import re

# Parenthesized notes, half- or full-width and mixed: "(修订版)", "（全集）".
_PAREN_RE = re.compile(r"[（(].*?[）)]", re.DOTALL)

# Bracketed tags: "[精品]", "【完结】", and "〔美〕" style nationality markers.
_BRACKET_RE = re.compile(r"[\[【〔].*?[\]】〕]", re.DOTALL)

# Subtitle separator, ASCII or full-width colon.
_COLON_RE = re.compile(r"[：:]")

_WHITESPACE_RE = re.compile(r"\s+")

# Separator glyphs inside names: period, middle dot, bullet, katakana middle dot, hyphen.
_NAME_SEPARATOR_RE = re.compile(r"[.·•・\-]")


def strip_subtitle(text: str) -> str:
    """Text before the first ASCII or full-width colon, trimmed."""
    return _COLON_RE.split(text, maxsplit=1)[0].strip()


def normalize_title(raw: str) -> str:
    """Reduce a title to its main title for exact comparison.

    Removes every parenthesized segment, keeps only the text before the
    first colon, and trims whitespace. Idempotent.
    """
    return strip_subtitle(_PAREN_RE.sub("", raw))


def normalize_candidate_title(raw: str) -> str:
    """Normalize a storefront result name, dropping bracketed badges first."""
    return normalize_title(_BRACKET_RE.sub("", raw))


def normalize_author(raw: str) -> str:
    """Canonical comparison form of an author name. Never displayed."""
    name = _WHITESPACE_RE.sub("", raw)
    name = _PAREN_RE.sub("", name)
    name = _BRACKET_RE.sub("", name)
    name = _NAME_SEPARATOR_RE.sub("", name)
    return name.lower()


def authors_match(a: str | None, b: str | None) -> bool:
    """Loose author comparison: equal or one contained in the other.

    Fails closed: returns False when either side is missing or normalizes
    to an empty string. Symmetric in its arguments.
    """
    if not a or not b:
        return False

    norm_a = normalize_author(a)
    norm_b = normalize_author(b)
    if not norm_a or not norm_b:
        return False

    return norm_a == norm_b or norm_a in norm_b or norm_b in norm_a
