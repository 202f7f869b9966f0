"""
Output writer: persists strategy results as pretty-printed JSON files.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Sequence

from pydantic import BaseModel

from relbench.utils.logging import get_logger

log = get_logger(__name__)


def serialize_records(records: Sequence[BaseModel]) -> List[dict[str, Any]]:
    """Dump records to JSON-compatible dicts using their output key names."""
    return [record.model_dump(mode="json", by_alias=True) for record in records]


def write_records(records: Sequence[BaseModel], path: Path | str) -> Path:
    """
    Write records to `path` as an indented JSON array, replacing any existing file.

    The document is rendered fully before the file is opened, so a
    serialization error never truncates a previous output.

    Raises
    ------
    pydantic_core.PydanticSerializationError, TypeError, ValueError
        If a record cannot be rendered as JSON.
    OSError
        If the file cannot be written.
    """
    target = Path(path)
    document = json.dumps(serialize_records(records), indent=2, ensure_ascii=False)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as f:
        f.write(document)
        f.write("\n")

    log.info("Output written", extra={"path": str(target), "records": len(records)})
    return target


__all__ = ["serialize_records", "write_records"]
