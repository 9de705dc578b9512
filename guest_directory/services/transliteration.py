"""Latin-to-Arabic name fragment table used for query expansion."""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Mapping

from guest_directory.services.text_normalizer import normalize_arabic_form, normalize_latin_form


# Shorter Latin tokens ("jo") would match inside unrelated Latin names.
MIN_REVERSE_TOKEN_LENGTH = 3

class TransliterationTable:
    """Maps Latin name tokens to Arabic spellings, and back.

    Keys are stored in their Latin-normalized form so lookups tolerate case
    and diacritics. The reverse direction indexes every fragment by its
    Arabic-normalized form and lets Arabic input reach Latin-script names.
    Entries are only ever added.
    """

    def __init__(self, entries: Mapping[str, Iterable[str]] | None = None) -> None:
        self._forward: dict[str, list[str]] = {}
        self._reverse: dict[str, list[str]] = defaultdict(list)
        if entries:
            self.extend(entries)

    def __len__(self) -> int:
        return len(self._forward)

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and normalize_latin_form(token) in self._forward

    def extend(self, entries: Mapping[str, Iterable[str]]) -> None:
        for raw_token, fragments in entries.items():
            token = normalize_latin_form(raw_token)
            if not token:
                continue
            known = self._forward.setdefault(token, [])
            for fragment in fragments:
                if fragment in known:
                    continue
                known.append(fragment)
                if len(token) < MIN_REVERSE_TOKEN_LENGTH:
                    continue
                arabic_key = normalize_arabic_form(fragment)
                if arabic_key and token not in self._reverse[arabic_key]:
                    self._reverse[arabic_key].append(token)

    def arabic_fragments(self, latin_token: str) -> list[str]:
        return list(self._forward.get(normalize_latin_form(latin_token), ()))

    def latin_tokens(self, arabic_token: str) -> list[str]:
        key = normalize_arabic_form(arabic_token)
        if not key:
            return []
        return list(self._reverse.get(key, ()))

    def as_dict(self) -> dict[str, list[str]]:
        return {token: list(fragments) for token, fragments in self._forward.items()}
