#!/usr/bin/env python3
"""Validate local guest directory environment readiness."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from guest_directory.domain.layout import build_hotel_layout
from guest_directory.repository.assignment_repository import AssignmentRepository
from guest_directory.repository.static_data import (
    StaticDataError,
    load_roster,
    load_transliteration_table,
)
from guest_directory.services.allocation_service import AllocationService
from guest_directory.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="guest-directory-env-")

    # CHECK 1: Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable
    import_errors: list[str] = []
    for module_name in ("fastapi", "uvicorn", "pydantic", "httpx", "pytest"):
        try:
            importlib.import_module(module_name)
        except ImportError as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages", True)
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 3: Data assets load and the allocation fits the layout
    settings = replace(get_settings(), database_path=Path(temp_dir) / "validate.db")
    try:
        roster = load_roster(settings.roster_path)
        table = load_transliteration_table(settings.transliteration_path)
        allocation_service = AllocationService(
            roster=roster,
            layout=build_hotel_layout(settings.hotel_floors),
            settings=settings,
        )
        assignments = allocation_service.assignments()
        detail = (
            f" ({len(roster)} people, {len(table)} transliterations, "
            f"{len(assignments)} placed)"
        )
        ok, line = _print_result("Data assets", True, detail)
    except (StaticDataError, ValueError) as exc:
        ok, line = _print_result("Data assets", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 4: SQLite override store is writable
    try:
        repository = AssignmentRepository(settings)
        repository.initialize_database()
        ok, line = _print_result(
            "Override store",
            True,
            f" ({repository.count_overrides()} overrides)",
        )
    except RuntimeError as exc:
        ok, line = _print_result("Override store", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    for line in results:
        print(line)
    print(SEPARATOR_LINE)
    print("READY" if all_passed else "NOT READY")
    return 0 if all_passed else 1


if __name__ == "__main__":
    raise SystemExit(main())
