from __future__ import annotations
from typing import Any, List, Optional
import math

from pydantic import BaseModel

PRIORITIES = {"price", "quality", "ratings", "brand", "delivery"}
SENTIMENTS = {"positive", "neutral", "negative"}

class Budget(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None
    model_config = {"frozen": True}

class SearchQuery(BaseModel):
    text: str
    budget: Optional[Budget] = None
    brands: List[str] = []
    categories: List[str] = []
    language: Optional[str] = None
    model_config = {"frozen": True}


# ---------- Tolerant coercion helpers ----------------------------------------

def _as_number(v: Any) -> Optional[float]:
    """Numbers and numeric strings pass; booleans, NaN and junk become None."""
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        f = float(v)
    elif isinstance(v, str):
        try:
            f = float(v.replace(",", "").strip())
        except ValueError:
            return None
    else:
        return None
    return f if math.isfinite(f) else None

def _as_str(v: Any) -> Optional[str]:
    if isinstance(v, str):
        s = v.strip()
        return s or None
    return None

def _as_str_list(v: Any) -> List[str]:
    if isinstance(v, str):
        v = [v]
    if not isinstance(v, (list, tuple)):
        return []
    return [s for s in (_as_str(x) for x in v) if s]

def _as_choice(v: Any, allowed: set) -> Optional[str]:
    s = _as_str(v)
    if s is None:
        return None
    s = s.lower()
    return s if s in allowed else None


class ExtractedIntent(BaseModel):
    """
    Structured view of a shopping query as returned by the intent extractor.
    Advisory only: every field may be missing, so consumers must branch on presence.
    """
    product_type: Optional[str] = None
    budget: Optional[Budget] = None
    brands: List[str] = []
    features: List[str] = []
    priority: Optional[str] = None
    sentiment: Optional[str] = None
    language: Optional[str] = None
    model_config = {"frozen": True}

    @classmethod
    def empty(cls) -> "ExtractedIntent":
        return cls()

    @classmethod
    def from_raw(cls, data: Any) -> "ExtractedIntent":
        """
        Build an intent from whatever JSON the LLM produced.
        Each malformed field degrades to "absent" instead of failing the whole payload.
        """
        if not isinstance(data, dict):
            return cls.empty()

        product_type = _as_str(data.get("productType", data.get("product_type")))

        budget = None
        raw_budget = data.get("budget")
        if isinstance(raw_budget, dict):
            b_min = _as_number(raw_budget.get("min"))
            b_max = _as_number(raw_budget.get("max"))
            if b_min is not None or b_max is not None:
                budget = Budget(min=b_min, max=b_max)
        elif (n := _as_number(raw_budget)) is not None:
            # A bare number is read as a ceiling
            budget = Budget(max=n)

        return cls(
            product_type=product_type,
            budget=budget,
            brands=_as_str_list(data.get("brands")),
            features=_as_str_list(data.get("features")),
            priority=_as_choice(data.get("priority"), PRIORITIES),
            sentiment=_as_choice(data.get("sentiment"), SENTIMENTS),
            language=_as_str(data.get("language")),
        )
