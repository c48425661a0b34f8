"""
CSV export and import.

Export writes one file per collection:
  healthtrack_weights.csv, healthtrack_water.csv,
  healthtrack_sleep.csv, healthtrack_settings.csv

Import looks at the file name to decide which collection the file holds and
replaces that collection wholesale. Every row is validated before anything
is written, so a bad file leaves the store untouched. If the store fails
partway through the replacement, the previous entries are written back.
"""
import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError

from healthtrack.models.settings import UserSettingsUpdate
from healthtrack.models.snapshot import HealthData
from healthtrack.store.base import ENTRY_SCHEMAS, EntryKind, RepositoryError

logger = logging.getLogger(__name__)

EXPORT_FILES: Dict[str, str] = {
    "weights": "healthtrack_weights.csv",
    "water_intake": "healthtrack_water.csv",
    "sleep_entries": "healthtrack_sleep.csv",
    "settings": "healthtrack_settings.csv",
}

# File-name keyword -> entry kind, checked in order
_IMPORT_KINDS = [
    ("weight", EntryKind.WEIGHT),
    ("water", EntryKind.WATER),
    ("sleep", EntryKind.SLEEP),
]

_SETTINGS_FIELDS = list(UserSettingsUpdate.model_fields)


@dataclass
class ImportResult:
    success: bool
    message: str


def _csv_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _write_csv(path: Path, fieldnames: List[str], rows: List[dict]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow({k: _csv_value(v) for k, v in row.items()})


def export_csv(data: HealthData, out_dir: Path) -> List[Path]:
    """
    Write the four collections of `data` into out_dir.

    Returns:
        Paths of the files written.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []

    for kind, schema in ENTRY_SCHEMAS.items():
        path = out_dir / EXPORT_FILES[schema.snapshot_field]
        fieldnames = ["id"] + list(schema.base.model_fields)
        rows = [e.model_dump(mode="json") for e in getattr(data, schema.snapshot_field)]
        _write_csv(path, fieldnames, rows)
        written.append(path)

    path = out_dir / EXPORT_FILES["settings"]
    _write_csv(path, _SETTINGS_FIELDS, [data.settings.model_dump(mode="json")])
    written.append(path)

    logger.info("Exported %d files to %s", len(written), out_dir)
    return written


def _read_rows(path: Path) -> List[Dict[str, str]]:
    with open(path, newline="", encoding="utf-8") as f:
        return [
            # Empty cells mean "not set"
            {k: v for k, v in row.items() if k and v not in ("", None)}
            for row in csv.DictReader(f)
        ]


def _restore(store, kind: EntryKind, previous: List) -> bool:
    """Put a collection back the way it was. Restored entries get new ids."""
    base = ENTRY_SCHEMAS[kind].base
    try:
        for current in list(store.entries(kind)):
            store.delete(kind, current.id)
        for old in previous:
            store.add(kind, base.model_validate(old.model_dump()))
    except RepositoryError as exc:
        logger.error("Could not restore %s entries: %s", kind.value, exc)
        return False
    return True


def import_csv(store, path: Path) -> ImportResult:
    """
    Replace one collection of `store` with the rows of an exported CSV file.

    Args:
        store: HealthDataStore (or anything exposing entries/add/delete/
            save_settings the same way).
        path: a file produced by export_csv (any name containing
            "weight", "water", "sleep" or "settings").
    """
    path = Path(path)
    name = path.name.lower()
    try:
        rows = _read_rows(path)
    except (OSError, csv.Error, UnicodeDecodeError) as exc:
        logger.error("Error parsing CSV %s: %s", path, exc)
        return ImportResult(False, f"Failed to parse CSV file: {exc}")

    if "settings" in name:
        if not rows:
            return ImportResult(False, "Settings file is empty")
        try:
            update = UserSettingsUpdate.model_validate(
                {k: v for k, v in rows[0].items() if k in _SETTINGS_FIELDS}
            )
        except ValidationError as exc:
            return ImportResult(False, f"Failed to import data: {exc.error_count()} invalid field(s)")
        store.save_settings(update)
        return ImportResult(True, "Settings imported successfully")

    for keyword, kind in _IMPORT_KINDS:
        if keyword in name:
            break
    else:
        return ImportResult(False, "Unknown file type. Please use exported files from HealthTrack.")

    schema = ENTRY_SCHEMAS[kind]
    try:
        entries = [schema.base.model_validate(row) for row in rows]
    except ValidationError as exc:
        logger.error("Rejected %s: %s", path, exc)
        return ImportResult(False, "Failed to import data. Please check the file format.")

    previous = list(store.entries(kind))
    try:
        for existing in previous:
            store.delete(kind, existing.id)
        for entry in entries:
            store.add(kind, entry)
    except RepositoryError as exc:
        logger.error("Import of %s failed partway, restoring %d %s entries: %s",
                     path, len(previous), keyword, exc)
        if not _restore(store, kind, previous):
            return ImportResult(False, "Failed to import data and the previous data could not be restored.")
        return ImportResult(False, "Failed to import data. Please try again.")

    label = {"weight": "Weight", "water": "Water intake", "sleep": "Sleep"}[keyword]
    logger.info("Imported %d %s entries from %s", len(entries), keyword, path)
    return ImportResult(True, f"{label} data imported successfully")
