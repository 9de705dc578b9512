from __future__ import annotations

import pytest

from guest_directory.repository.static_data import load_roster, load_transliteration_table
from guest_directory.services.search_service import build_index, expand_aliases, query
from guest_directory.services.transliteration import TransliterationTable
from guest_directory.utils.config import get_settings


@pytest.fixture(scope="module")
def table() -> TransliterationTable:
    get_settings.cache_clear()
    return load_transliteration_table(get_settings().transliteration_path)


@pytest.fixture(scope="module")
def roster_names() -> list[str]:
    get_settings.cache_clear()
    return [person.display_name for person in load_roster(get_settings().roster_path)]


# --- Transliteration table ---

def test_table_lookup_ignores_case_and_diacritics(table: TransliterationTable) -> None:
    assert table.arabic_fragments("MINA") == ["مينا"]
    assert table.arabic_fragments("Mína") == ["مينا"]
    assert table.arabic_fragments("unknownname") == []


def test_table_reverse_lookup_finds_latin_spellings(table: TransliterationTable) -> None:
    assert "mina" in table.latin_tokens("مينا")
    assert set(table.latin_tokens("كيرلس")) >= {"cyril", "kyrillos", "kerlos", "kirollos"}
    assert table.latin_tokens("") == []


def test_table_extend_only_appends() -> None:
    table = TransliterationTable({"mina": ["مينا"]})
    table.extend({"Mina": ["ميناء", "مينا"], "fayek": ["فايق"]})

    assert table.arabic_fragments("mina") == ["مينا", "ميناء"]
    assert "fayek" in table
    assert len(table) == 2


# --- Index ---

def test_build_index_preserves_order_and_duplicates() -> None:
    index = build_index(["مينا فايق", "سارة", "مينا فايق"])

    assert [entry.original_name for entry in index.entries] == ["مينا فايق", "سارة", "مينا فايق"]
    assert [entry.normalized_arabic for entry in index.entries] == [
        "مينافايق",
        "ساره",
        "مينافايق",
    ]


def test_duplicate_normalized_names_are_both_returned(table: TransliterationTable) -> None:
    index = build_index(["سارة ماهر", "ساره ماهر"])
    assert query("سارة", index, table) == ["سارة ماهر", "ساره ماهر"]


# --- Query ---

def test_short_queries_return_nothing(table: TransliterationTable, roster_names: list[str]) -> None:
    index = build_index(roster_names)
    assert query("", index, table) == []
    assert query("م", index, table) == []
    assert query("a", index, table) == []


def test_query_normalizing_to_nothing_matches_every_entry(
    table: TransliterationTable,
    roster_names: list[str],
) -> None:
    index = build_index(roster_names)
    assert query("!!", index, table) == roster_names
    assert query("  ", index, table) == roster_names


def test_every_name_finds_itself(table: TransliterationTable, roster_names: list[str]) -> None:
    index = build_index(roster_names)
    for name in roster_names:
        assert name in query(name, index, table)


def test_name_without_arabic_form_finds_itself(table: TransliterationTable) -> None:
    index = build_index(["Ωμέγα", "Mina Fayek"])

    assert index.entries[0].normalized_arabic == ""
    assert "Ωμέγα" in query("Ωμέγα", index, table)


def test_latin_token_expands_to_arabic(table: TransliterationTable, roster_names: list[str]) -> None:
    index = build_index(roster_names)
    expected = [entry.original_name for entry in index.entries if "مينا" in entry.normalized_arabic]

    assert expected
    assert query("mina", index, table) == expected
    assert query("Mína", index, table) == expected


def test_any_single_token_is_enough(table: TransliterationTable, roster_names: list[str]) -> None:
    index = build_index(roster_names)
    assert query("mina zzzz", index, table) == query("mina", index, table)

    both = query("mina fayek", index, table)
    assert "مينا فايق" in both
    assert "مينا بولس" in both


def test_hamza_variants_in_query_and_names_match(
    table: TransliterationTable,
    roster_names: list[str],
) -> None:
    index = build_index(roster_names)
    assert "أندرو أسامة" in query("اندرو اسامه", index, table)
    assert "إبرام رأفت" in query("ابرام", index, table)


def test_latin_query_reaches_arabic_surname(
    table: TransliterationTable,
    roster_names: list[str],
) -> None:
    index = build_index(roster_names)
    assert query("Jonathan", index, table) == ["جوناثان"]


def test_arabic_query_reaches_latin_names(table: TransliterationTable) -> None:
    index = build_index(["Mina Fayek", "Mina Shawky", "George Magdy"])
    assert query("مينا", index, table) == ["Mina Fayek", "Mina Shawky"]


def test_short_reverse_tokens_do_not_become_aliases() -> None:
    table = TransliterationTable({"joseph": ["يوسف"], "youssef": ["يوسف"], "jo": ["يوسف"]})
    index = build_index(["Joanna Adel", "Youssef Nabil"])

    assert table.arabic_fragments("jo") == ["يوسف"]
    assert "jo" not in table.latin_tokens("يوسف")
    assert query("يوسف", index, table) == ["Youssef Nabil"]


def test_no_match_returns_empty_list(table: TransliterationTable, roster_names: list[str]) -> None:
    index = build_index(roster_names)
    assert query("zzzz", index, table) == []


def test_expand_aliases_collects_all_tokens(table: TransliterationTable) -> None:
    aliases = expand_aliases("mina fayek unknown", table)
    assert aliases == {"مينا", "فايق"}


def test_min_length_override(table: TransliterationTable) -> None:
    index = build_index(["مينا فايق"])
    assert query("مينا", index, table, min_length=5) == []
    assert query("مينا", index, table, min_length=2) == ["مينا فايق"]
