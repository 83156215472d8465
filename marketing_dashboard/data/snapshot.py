"""
JSON snapshots of processed uploads under the public static directory.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from marketing_dashboard import config

logger = logging.getLogger(__name__)


def snapshot_path(filename: str) -> Path:
    return config.PUBLIC_FOLDER / filename


def write_snapshot(filename: str, data: Any) -> Path:
    """Write the full result as JSON, overwriting any previous upload."""
    path = snapshot_path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2, default=str), encoding="utf-8")
    logger.info("Wrote snapshot %s", path)
    return path


def read_snapshot(filename: str) -> Optional[Any]:
    path = snapshot_path(filename)
    if not path.exists():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def delete_snapshot(filename: str) -> bool:
    path = snapshot_path(filename)
    if not path.exists():
        return False
    path.unlink()
    return True
