"""Repository layer for persisted room assignment overrides."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterable, Optional

from guest_directory.domain.models import AssignmentRecord, ViewCategory
from guest_directory.utils.config import Settings, get_settings
from guest_directory.utils.logger import get_logger


logger = get_logger(__name__)


class AssignmentRepository:
    """Encapsulates SQLite access so the directory stays storage-agnostic."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        return connection

    def initialize_database(self) -> None:
        """Create the override table before the directory serves requests."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS RoomAssignments (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        person_name TEXT NOT NULL UNIQUE,
                        floor INTEGER NOT NULL,
                        room_code TEXT NOT NULL,
                        bed_label TEXT NOT NULL,
                        view_category TEXT,
                        source TEXT NOT NULL DEFAULT 'manual',
                        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )
                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_room_assignments_room
                    ON RoomAssignments(floor, room_code);
                    """
                )
                conn.commit()
            logger.info("Database initialized at %s", self._db_path)
        except sqlite3.Error as exc:
            raise RuntimeError(f"Database initialization failed: {exc}") from exc

    @staticmethod
    def _to_record(row: sqlite3.Row) -> AssignmentRecord:
        view = row["view_category"]
        return AssignmentRecord(
            person_name=str(row["person_name"]),
            floor=int(row["floor"]),
            room_code=str(row["room_code"]),
            bed_label=str(row["bed_label"]),
            view_category=ViewCategory(view) if view else None,
        )

    def list_overrides(self) -> list[AssignmentRecord]:
        """Return overrides in the order they were first persisted."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT person_name, floor, room_code, bed_label, view_category
                FROM RoomAssignments
                ORDER BY id ASC;
                """
            )
            return [self._to_record(row) for row in cursor.fetchall()]

    def get_override(self, person_name: str) -> Optional[AssignmentRecord]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT person_name, floor, room_code, bed_label, view_category
                FROM RoomAssignments
                WHERE person_name = ?;
                """,
                (person_name,),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            return self._to_record(row)

    def upsert_override(self, record: AssignmentRecord, source: str = "manual") -> None:
        """Insert or overwrite one person's override, keeping its original position."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO RoomAssignments (
                    person_name,
                    floor,
                    room_code,
                    bed_label,
                    view_category,
                    source
                )
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(person_name) DO UPDATE SET
                    floor = excluded.floor,
                    room_code = excluded.room_code,
                    bed_label = excluded.bed_label,
                    view_category = excluded.view_category,
                    source = excluded.source,
                    updated_at = CURRENT_TIMESTAMP;
                """,
                (
                    record.person_name,
                    record.floor,
                    record.room_code,
                    record.bed_label,
                    record.view_category.value if record.view_category else None,
                    source,
                ),
            )
            conn.commit()

    def replace_overrides(
        self,
        records: Iterable[AssignmentRecord],
        source: str = "import",
    ) -> int:
        """Swap the whole override set in one transaction; later duplicates win."""
        rows = [
            (
                record.person_name,
                record.floor,
                record.room_code,
                record.bed_label,
                record.view_category.value if record.view_category else None,
                source,
            )
            for record in records
        ]
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM RoomAssignments;")
            cursor.executemany(
                """
                INSERT INTO RoomAssignments (
                    person_name,
                    floor,
                    room_code,
                    bed_label,
                    view_category,
                    source
                )
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(person_name) DO UPDATE SET
                    floor = excluded.floor,
                    room_code = excluded.room_code,
                    bed_label = excluded.bed_label,
                    view_category = excluded.view_category,
                    source = excluded.source;
                """,
                rows,
            )
            conn.commit()
        return len(rows)

    def clear_overrides(self) -> int:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM RoomAssignments;")
            conn.commit()
            return int(cursor.rowcount)

    def count_overrides(self) -> int:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS count FROM RoomAssignments;")
            return int(cursor.fetchone()["count"])
