from __future__ import annotations

import math
import re
from typing import Any, Optional

from rapidfuzz.fuzz import ratio as fuzz_ratio
from unidecode import unidecode

from .exceptions import PARSE_ERRORS, DECODE_ERRORS


__all__ = [
    "to_text",
    "is_absent",
    "strip_accents",
    "normalize_affiliation",
    "affiliation_similarity",
    "latex_escape",
]

# characters with a special meaning in LaTeX that can be escaped with a backslash
_LATEX_ESCAPE_REGEX = re.compile(r'(?<!\\)([&%$#_{}])')

# characters that need a command rather than a backslash
_LATEX_SPECIAL_CHARS = {
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


def to_text(obj: Any) -> Optional[str]:
    """
    Convert a table cell into a stripped string, returning None for anything
    that counts as absent: None, NaN, pandas NA, or a blank string.
    """
    if is_absent(obj):
        return None
    s = str(obj).strip()
    return s or None


def is_absent(obj: Any) -> bool:
    """
    Decide whether a cell value carries no data.
    """
    if obj is None:
        return True
    if isinstance(obj, str):
        return not obj.strip()
    if isinstance(obj, float) and math.isnan(obj):
        return True
    # pandas.NA refuses to be used in a boolean context
    try:
        return bool(obj != obj)
    except PARSE_ERRORS:
        return True


def strip_accents(s: str) -> str:
    """
    Remove accents and diacritics from a string so visually similar text from
    different locales can be compared more reliably.

    Uses unidecode library for comprehensive Unicode to ASCII transliteration.
    """
    try:
        return unidecode(s)
    except PARSE_ERRORS + DECODE_ERRORS:
        return s


def normalize_affiliation(a: Optional[str]) -> str:
    """
    Normalize an affiliation for fuzzy comparison by stripping accents,
    lowercasing, dropping punctuation, and collapsing repeated whitespace.
    """
    if not a:
        return ""
    a2 = strip_accents(str(a)).lower()
    a2 = re.sub(r"[^a-z0-9\s]", " ", a2)
    return " ".join(a2.split())


def affiliation_similarity(a: Optional[str], b: Optional[str]) -> float:
    """
    Compute a similarity score between two affiliation strings after
    normalization, returning a value between 0 and 1.
    """
    norm_a = normalize_affiliation(a)
    norm_b = normalize_affiliation(b)
    if norm_a == norm_b:
        return 1.0
    # rapidfuzz.fuzz.ratio returns 0-100, normalize to 0-1
    return fuzz_ratio(norm_a, norm_b) / 100.0


def latex_escape(s: str) -> str:
    """
    Escape LaTeX reserved characters in names and affiliations. Backslashes are
    left alone since they are most likely intentional escapes already.
    """
    s = _LATEX_ESCAPE_REGEX.sub(r"\\\1", s)
    for ch, repl in _LATEX_SPECIAL_CHARS.items():
        s = s.replace(ch, repl)
    return s
