"""Directory index and bilingual substring matching."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from guest_directory.domain.models import DirectoryEntry
from guest_directory.services.text_normalizer import (
    contains_arabic,
    normalize_arabic_form,
    normalize_latin_form,
)
from guest_directory.services.transliteration import TransliterationTable


MIN_QUERY_LENGTH = 2


@dataclass(frozen=True)
class DirectoryIndex:
    entries: tuple[DirectoryEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)


def build_index(names: Iterable[str]) -> DirectoryIndex:
    """Normalize every name once; order and duplicates are preserved."""
    return DirectoryIndex(
        entries=tuple(
            DirectoryEntry(original_name=name, normalized_arabic=normalize_arabic_form(name))
            for name in names
        )
    )


def expand_aliases(query_text: str, table: TransliterationTable) -> set[str]:
    """Collect the normalized aliases of every whitespace token in ``query_text``.

    Latin tokens expand to their Arabic fragments. Arabic tokens expand to
    the Latin tokens that spell them, so Latin-script names stay reachable.
    """
    aliases: set[str] = set()
    for token in query_text.split():
        latin_token = normalize_latin_form(token)
        if latin_token:
            aliases.update(table.arabic_fragments(latin_token))
        if contains_arabic(token):
            aliases.update(table.latin_tokens(token))

    normalized: set[str] = set()
    for alias in aliases:
        form = normalize_arabic_form(alias)
        if form:
            normalized.add(form)
    return normalized


def query(
    query_text: str,
    index: DirectoryIndex,
    table: TransliterationTable,
    *,
    min_length: Optional[int] = None,
) -> list[str]:
    """Return original names whose normalized form contains the query or any alias.

    A single matching alias is enough: a multi-word query matches a person
    when any one of its tokens expands to a fragment of their name. A query
    that normalizes to nothing, such as punctuation or non-Arabic letters,
    is a substring of every entry and matches them all.
    """
    threshold = MIN_QUERY_LENGTH if min_length is None else min_length
    if not query_text or len(query_text) < threshold:
        return []

    norm_query = normalize_arabic_form(query_text)
    aliases = expand_aliases(query_text, table)

    matches: list[str] = []
    for entry in index.entries:
        if norm_query in entry.normalized_arabic:
            matches.append(entry.original_name)
            continue
        if any(alias in entry.normalized_arabic for alias in aliases):
            matches.append(entry.original_name)
    return matches
