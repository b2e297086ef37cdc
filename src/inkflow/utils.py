"""Utility functions for the InkFlow data layer."""
import unicodedata

MAX_FILENAME_LENGTH = 100

_ALLOWED_PUNCTUATION = "-_"


def _is_word_char(c: str) -> bool:
    # Combining marks (Devanagari vowel signs, viramas, ...) belong to the
    # letter before them
    return c.isalnum() or unicodedata.category(c) in ("Mn", "Mc")


def sanitize_filename(title: str, max_length: int = MAX_FILENAME_LENGTH) -> str:
    """Map an arbitrary title to a safe filesystem path component.

    Alphanumeric characters (Unicode-aware, including combining marks),
    hyphens and underscores are kept; every other character becomes an
    underscore. The result is cut to ``max_length`` characters, counted as
    code points rather than bytes.

    Examples:
        "Hello World!" -> "Hello_World_"
        "q3-plan_v2" -> "q3-plan_v2"
        "a/b\\c" -> "a_b_c"

    No fallback is substituted for empty or symbol-only titles; callers
    decide how to name those (see ``has_meaningful_chars``).
    """
    sanitized = "".join(
        c if _is_word_char(c) or c in _ALLOWED_PUNCTUATION else "_" for c in title
    )
    return sanitized[:max_length]


def has_meaningful_chars(name: str) -> bool:
    """Return True if a sanitized name contains at least one alphanumeric."""
    return any(c.isalnum() for c in name)
