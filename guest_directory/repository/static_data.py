"""Loaders for the static roster and transliteration data assets."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from guest_directory.domain.models import Cohort, Person
from guest_directory.services.transliteration import TransliterationTable
from guest_directory.utils.logger import get_logger


logger = get_logger(__name__)


class StaticDataError(Exception):
    """Raised when a bundled data asset is missing or malformed."""


def _read_json(path: Path) -> Any:
    try:
        with Path(path).open(encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise StaticDataError(f"Data asset not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise StaticDataError(f"Data asset {path} is not valid JSON: {exc}") from exc


def parse_roster(rows: list[dict[str, Any]]) -> list[Person]:
    people: list[Person] = []
    for position, row in enumerate(rows):
        try:
            name = str(row["name"]).strip()
            cohort = Cohort(row["cohort"])
        except (KeyError, ValueError) as exc:
            raise StaticDataError(f"Invalid roster row at position {position}: {row!r}") from exc
        if not name:
            raise StaticDataError(f"Roster row at position {position} has an empty name")
        people.append(
            Person(
                display_name=name,
                cohort=cohort,
                is_filler=bool(row.get("is_filler", False)),
            )
        )
    return people


def load_roster(path: Path) -> list[Person]:
    rows = _read_json(path)
    if not isinstance(rows, list):
        raise StaticDataError(f"Roster asset {path} must contain a JSON list")
    people = parse_roster(rows)
    seen: set[tuple[Cohort, str]] = set()
    for person in people:
        key = (person.cohort, person.display_name)
        if key in seen:
            logger.warning(
                "Duplicate roster name within cohort | cohort=%s | name=%s",
                person.cohort.value,
                person.display_name,
            )
        seen.add(key)
    logger.info(
        "Roster loaded | path=%s | people=%s | fillers=%s",
        path,
        len(people),
        sum(1 for person in people if person.is_filler),
    )
    return people


def load_transliteration_table(path: Path) -> TransliterationTable:
    entries = _read_json(path)
    if not isinstance(entries, dict):
        raise StaticDataError(f"Transliteration asset {path} must contain a JSON object")
    table = TransliterationTable(
        {str(token): [str(fragment) for fragment in fragments] for token, fragments in entries.items()}
    )
    logger.info("Transliteration table loaded | path=%s | tokens=%s", path, len(table))
    return table
