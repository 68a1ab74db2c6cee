from typing import Iterable, List, Optional

from shopsense.domain.models.product import Product
from shopsense.domain.models.query import ExtractedIntent, SearchQuery

def _normalize(s) -> str:
    """Lower-case and strip; None becomes an empty string."""
    if s is None:
        return ""
    return str(s).strip().lower()

def category_matches(category: str, product_type: Optional[str]) -> bool:
    """
    A category is relevant when either name contains the other, case-insensitively.
    Both directions are checked so "gaming laptops" finds "laptops" and
    "laptop" finds "laptops".
    An empty product type is a substring of every category and matches them all.
    """
    cat = _normalize(category)
    wanted = _normalize(product_type)
    return wanted in cat or cat in wanted

def resolve_max_budget(query: SearchQuery, intent: Optional[ExtractedIntent]) -> Optional[float]:
    """
    Effective price ceiling for a request:
      - the query's own budget.max wins when present
      - else the extracted budget.max, but only when it is > 0
      - else None (no budget filter)
    """
    if query.budget is not None and query.budget.max is not None:
        return query.budget.max
    if intent is not None and intent.budget is not None:
        extracted = intent.budget.max
        if extracted is not None and extracted > 0:
            return extracted
    return None

def within_budget(product: Product, max_budget: Optional[float]) -> bool:
    return max_budget is None or product.price <= max_budget

def matches_brands(product: Product, brands: Iterable[str]) -> bool:
    """
    True when the product name mentions at least one requested brand.
    An empty brand list keeps everything.
    """
    wanted = [b for b in (_normalize(x) for x in brands) if b]
    if not wanted:
        return True
    name = _normalize(product.name)
    return any(b in name for b in wanted)

def apply_filters(products: Iterable[Product], *, max_budget: Optional[float], brands: Iterable[str]) -> List[Product]:
    """Budget then brand filter, preserving input order."""
    brands = list(brands or [])
    return [
        p for p in products
        if within_budget(p, max_budget) and matches_brands(p, brands)
    ]
