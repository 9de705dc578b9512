"""Environment-driven application settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path


PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = PACKAGE_ROOT / "data"


def _env_floors(name: str, default: str) -> tuple[int, ...]:
    raw = os.getenv(name, default)
    return tuple(int(item) for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    app_name: str = "Event Guest Directory"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    database_path: Path = Path("data/guest_directory.db")
    roster_path: Path = DATA_DIR / "roster.json"
    transliteration_path: Path = DATA_DIR / "transliteration.json"

    hotel_floors: tuple[int, ...] = (1, 2, 3)
    group_a_floors: tuple[int, ...] = (2, 3)
    group_b_floors: tuple[int, ...] = (1,)

    allocation_seed_a: int = 20240101
    allocation_seed_b: int = 20240202

    search_min_query_length: int = 2
    unassigned_bed_label: str = "Unassigned Bed"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process; tests derive copies with ``replace``."""
    return Settings(
        app_name=os.getenv("APP_NAME", "Event Guest Directory"),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        database_path=Path(os.getenv("DATABASE_PATH", "data/guest_directory.db")),
        roster_path=Path(os.getenv("ROSTER_PATH", str(DATA_DIR / "roster.json"))),
        transliteration_path=Path(
            os.getenv("TRANSLITERATION_PATH", str(DATA_DIR / "transliteration.json"))
        ),
        hotel_floors=_env_floors("HOTEL_FLOORS", "1,2,3"),
        group_a_floors=_env_floors("GROUP_A_FLOORS", "2,3"),
        group_b_floors=_env_floors("GROUP_B_FLOORS", "1"),
        allocation_seed_a=int(os.getenv("ALLOCATION_SEED_A", "20240101")),
        allocation_seed_b=int(os.getenv("ALLOCATION_SEED_B", "20240202")),
        search_min_query_length=int(os.getenv("SEARCH_MIN_QUERY_LENGTH", "2")),
    )
