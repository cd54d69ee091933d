"""
Local disk storage helpers for drafts and exported artifacts.
"""
from __future__ import annotations

import hashlib
import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from packages.shared.models import DischargeData

logger = logging.getLogger(__name__)

DATA_DIR = Path(os.environ.get("DATA_DIR", "./data"))
DRAFT_FILENAME = "dischargeSummaryData_v2.json"


def drafts_dir() -> Path:
    return DATA_DIR / "drafts"


def exports_dir() -> Path:
    return DATA_DIR / "exports"


def ensure_dirs() -> None:
    """Create data directories if they don't exist."""
    drafts_dir().mkdir(parents=True, exist_ok=True)
    exports_dir().mkdir(parents=True, exist_ok=True)


def sha256_bytes(data: bytes) -> str:
    """Compute sha256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def get_draft_path() -> Path:
    return drafts_dir() / DRAFT_FILENAME


def save_draft(data: DischargeData) -> Path:
    """Persist the working draft with camelCase keys. Returns the file path."""
    ensure_dirs()
    path = get_draft_path()
    path.write_text(data.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    return path


def load_draft() -> DischargeData | None:
    """
    Load the saved draft, or None when there is none.

    Unreadable files and drafts from the old layout (investigations and
    treatments not stored as lists) are ignored so the editor starts fresh.
    """
    path = get_draft_path()
    if not path.exists():
        return None
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to read saved draft at %s", path)
        return None
    if not isinstance(raw, dict) or not isinstance(raw.get("investigations"), list) or not isinstance(raw.get("treatmentGiven"), list):
        logger.warning("Legacy draft detected at %s, starting fresh", path)
        return None
    try:
        return DischargeData.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Saved draft failed validation (%d errors), starting fresh", exc.error_count())
        return None


def clear_draft() -> bool:
    """Delete the saved draft. Returns True if a file was removed."""
    path = get_draft_path()
    if path.exists():
        path.unlink()
        return True
    return False


def save_export(export_id: str, filename: str, data: bytes) -> Path:
    """Save a generated artifact (DOCX/PDF) to the export's directory."""
    ensure_dirs()
    export_dir = exports_dir() / export_id
    export_dir.mkdir(parents=True, exist_ok=True)
    path = export_dir / filename
    path.write_bytes(data)
    return path
