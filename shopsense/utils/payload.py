# shopsense/utils/payload.py
import json
from typing import Any

def prune_empty(obj):
    """
    Recursively remove:
      - None
      - empty strings (after strip)
      - empty lists/dicts
    Keep: 0, False, and non-empty values.
    """
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            pv = prune_empty(v)
            if _is_empty(pv):
                continue
            out[k] = pv
        return out
    if isinstance(obj, (list, tuple)):
        out = []
        for v in obj:
            pv = prune_empty(v)
            if _is_empty(pv):
                continue
            out.append(pv)
        return out
    if isinstance(obj, str):
        s = obj.strip()
        return s if s != "" else None
    return obj

def _is_empty(v) -> bool:
    if v is None:
        return True
    if isinstance(v, str) and v.strip() == "":
        return True
    return isinstance(v, (list, dict)) and len(v) == 0

def json_minify(obj: Any) -> str:
    """
    Prune empty/null fields and serialize to compact JSON (no spaces).
    """
    return json.dumps(prune_empty(obj), ensure_ascii=False, separators=(',', ':'))

def truncate(text, max_chars: int) -> str:
    """Head-only truncation with an ellipsis marker."""
    if not text:
        return ""
    return text if len(text) <= max_chars else text[:max_chars].rstrip() + "…"
