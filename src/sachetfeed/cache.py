"""Reading and writing the GeoJSON cache file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def write_feature_collection(path: Path, collection: dict[str, Any]) -> int:
    """Overwrite ``path`` with the pretty-printed collection; returns bytes written."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(collection, indent=2, ensure_ascii=False, allow_nan=False)
    path.write_text(text, encoding="utf-8")
    return len(text.encode("utf-8"))


def read_feature_collection(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as fp:
        return json.load(fp)
