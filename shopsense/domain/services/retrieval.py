import logging
from typing import List, Optional

from shopsense.domain.models.product import Product
from shopsense.domain.models.query import ExtractedIntent, SearchQuery
from shopsense.domain.repositories.catalog_store import CatalogStore
from shopsense.domain.services.constants import RETRIEVAL_LIMIT
from shopsense.domain.services.filters import apply_filters, category_matches, resolve_max_budget

logger = logging.getLogger(__name__)

def retrieve_candidates(
    catalog: CatalogStore,
    query: SearchQuery,
    intent: Optional[ExtractedIntent],
    limit: int = RETRIEVAL_LIMIT,
) -> List[Product]:
    """
    Select the catalog products relevant to a query, best-rated first.

    Steps:
      1) Keep categories related to intent.product_type (substring either way).
      2) Drop products above the effective budget ceiling.
      3) Keep products naming one of query.brands, when brands were given.
      4) Concatenate matches across categories (no dedup).
      5) Stable sort by rating, descending.
      6) Truncate to `limit`.

    Never raises: on unexpected errors the failure is logged and an empty
    list comes back so the caller can report "no results".
    """
    try:
        intent = intent or ExtractedIntent.empty()
        product_type = intent.product_type or ""
        max_budget = resolve_max_budget(query, intent)
        logger.debug(
            f"Retrieval filters: product_type='{product_type}', max_budget={max_budget}, brands={query.brands}"
        )

        relevant: List[Product] = []
        for category, products in catalog.snapshot().items():
            if not category_matches(category, product_type):
                continue
            filtered = apply_filters(products, max_budget=max_budget, brands=query.brands)
            logger.debug(f"Category '{category}' matched: kept {len(filtered)}/{len(products)} products")
            relevant.extend(filtered)

        relevant.sort(key=lambda p: p.rating, reverse=True)
        logger.info(f"Retrieved {len(relevant)} relevant products (returning up to {limit})")
        return relevant[:limit]
    except Exception as e:
        logger.error(f"Failed to retrieve products: {e}")
        return []
