from __future__ import annotations
from typing import Any, Dict, Iterable, List

from .model import Exif, Field, Result


def field_asdict(f: Field) -> Dict[str, Any]:
    return {"tag": str(f.tag), "context": f.tag.context.value, "ifd": f.ifd_num, "value": f.value.as_json()}


def exif_asdict(exif: Exif, *, fields: Iterable[str] | None = None) -> Dict[str, Any]:
    """Return a JSON-serialisable view of ``exif``, optionally limited to tag names."""
    wanted = set(fields) if fields else None
    items: List[Dict[str, Any]] = [
        field_asdict(f) for f in exif.fields if wanted is None or str(f.tag) in wanted
    ]
    return {"byte_order": "little" if exif.little_endian else "big", "fields": items}


def result_asdict(res: Result) -> Dict[str, Any]:
    """Flatten a Result for JSON output."""
    if not res.success or res.data is None:
        return {"success": False, "error": res.error}
    payload = dict(res.data)
    payload["success"] = True
    if res.errors:
        payload["errors"] = list(res.errors)
    return payload
