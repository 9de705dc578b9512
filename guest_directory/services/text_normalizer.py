"""Canonical comparison forms for Arabic and Latin display names.

Both functions are pure and idempotent. The Arabic form keeps ASCII word
characters and the Arabic Unicode block and drops everything else,
including whitespace, so "مينا فايق" and "مينافايق" compare equal.
"""

from __future__ import annotations

import re
import unicodedata


_ARABIC_LETTER_VARIANTS = str.maketrans(
    {
        "أ": "ا",
        "إ": "ا",
        "آ": "ا",
        "ة": "ه",
        "ى": "ي",
        "ؤ": "و",
        "ئ": "ي",
    }
)

# \w is ASCII-only here so that letters of other scripts are stripped.
_NON_ARABIC_FORM_CHARS = re.compile(r"[^\w\u0600-\u06FF]", re.ASCII)
_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_NON_LATIN_FORM_CHARS = re.compile(r"[^a-z0-9]")


def normalize_arabic_form(text: str) -> str:
    lowered = text.lower()
    canonical = lowered.translate(_ARABIC_LETTER_VARIANTS)
    return _NON_ARABIC_FORM_CHARS.sub("", canonical).strip()


def normalize_latin_form(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = _COMBINING_MARKS.sub("", decomposed)
    return _NON_LATIN_FORM_CHARS.sub("", stripped).strip()


def contains_arabic(text: str) -> bool:
    return any("\u0600" <= char <= "\u06FF" for char in text)
