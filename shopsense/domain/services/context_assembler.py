"""Context assembler: packages candidates and user preferences for the reasoning calls."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel

from shopsense.domain.models.product import Product
from shopsense.domain.models.query import SearchQuery
from shopsense.domain.services.constants import (
    COMPARISON_LIMIT,
    DESCRIPTION_MAX_CHARS,
    RETRIEVAL_LIMIT,
    REVIEWS_MAX_CHARS,
)
from shopsense.utils.payload import prune_empty, truncate

logger = logging.getLogger(__name__)


# ---------- Data structures ----------

class UserPreferences(BaseModel):
    budget: Optional[float] = None  # ceiling only
    brands: List[str] = []
    categories: List[str] = []
    language: Optional[str] = None
    model_config = {"frozen": True}


class RAGContext(BaseModel):
    """Everything the recommendation-generation call gets besides the query text."""
    product_data: List[Product]
    user_preferences: UserPreferences
    model_config = {"frozen": True}


# ---------- Assembly ----------

def user_preferences_for(query: SearchQuery) -> UserPreferences:
    return UserPreferences(
        budget=query.budget.max if query.budget is not None else None,
        brands=list(query.brands),
        categories=list(query.categories),
        language=query.language,
    )


def assemble_context(
    query: SearchQuery,
    candidates: Sequence[Product],
    limit: int = RETRIEVAL_LIMIT,
) -> RAGContext:
    """
    Build the context for the general recommendation call.
    Carries the full candidate list (up to `limit`), unlike the comparison call.
    """
    ctx = RAGContext(
        product_data=list(candidates[:limit]),
        user_preferences=user_preferences_for(query),
    )
    logger.debug(f"Assembled RAG context: products={len(ctx.product_data)} prefs={ctx.user_preferences.model_dump()}")
    return ctx


def comparison_subset(candidates: Sequence[Product], limit: int = COMPARISON_LIMIT) -> List[Product]:
    """Top candidates for the comparison call, which is pricier per item."""
    return list(candidates[:limit])


# ---------- Compact helpers ----------

def compact_product(product: Product) -> Dict[str, Any]:
    """
    Reduce a product to the fields the LLM needs.
    Empty fields are dropped and long text is shortened.
    """
    data = {
        "id": product.id,
        "name": product.name,
        "platform": product.platform,
        "price": product.price,
        "rating": product.rating,
        "in_stock": product.in_stock,
        "reviews": truncate(product.reviews, REVIEWS_MAX_CHARS),
        "desc": truncate(product.description, DESCRIPTION_MAX_CHARS),
        "url": product.url,
    }
    return prune_empty(data)


def compact_preferences(prefs: UserPreferences) -> Dict[str, Any]:
    return prune_empty(prefs.model_dump())
