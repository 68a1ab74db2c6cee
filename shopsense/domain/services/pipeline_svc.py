import logging
import math
import uuid
from enum import Enum
from typing import Awaitable, Iterable, List, TypeVar

from shopsense.domain.errors import (
    ExternalCallError,
    NoMatchError,
    QueryValidationError,
    STAGE_COMPARISON,
    STAGE_GENERATION,
)
from shopsense.domain.models.product import KnowledgeBaseStats, Product, RAGRecommendation
from shopsense.domain.models.query import ExtractedIntent, SearchQuery
from shopsense.domain.repositories.catalog_store import CatalogStore
from shopsense.domain.services.constants import COMPARISON_LIMIT, RETRIEVAL_LIMIT
from shopsense.domain.services.context_assembler import assemble_context, comparison_subset
from shopsense.domain.services.ranking import select_picks
from shopsense.domain.services.retrieval import retrieve_candidates

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PipelineState(str, Enum):
    IDLE = "idle"
    EXTRACTING_INTENT = "extracting_intent"
    RETRIEVING = "retrieving"
    REASONING = "reasoning"
    COMPARING = "comparing"
    SELECTING = "selecting"
    COMPLETED = "completed"
    FAILED = "failed"


class _Run:
    """State of one recommendation request. Never shared between requests."""

    def __init__(self):
        self.request_id = uuid.uuid4().hex[:8]
        self.state = PipelineState.IDLE

    def advance(self, state: PipelineState) -> None:
        logger.debug(f"[{self.request_id}] state {self.state.value} -> {state.value}")
        self.state = state


def validate_query(query: SearchQuery) -> None:
    """Reject malformed queries before any work is done."""
    if not query.text or not query.text.strip():
        raise QueryValidationError("Query text is required")
    budget = query.budget
    if budget is None:
        return
    for bound in (budget.min, budget.max):
        if bound is not None and not math.isfinite(bound):
            raise QueryValidationError(f"Budget bounds must be finite numbers, got {bound}")
    if budget.min is not None and budget.min < 0:
        raise QueryValidationError(f"Budget min must be >= 0, got {budget.min}")
    if budget.max is not None and budget.max < 0:
        raise QueryValidationError(f"Budget max must be >= 0, got {budget.max}")
    if budget.min is not None and budget.max is not None and budget.min > budget.max:
        raise QueryValidationError(f"Budget min ({budget.min}) is above max ({budget.max})")


class RecommendationPipeline:
    """
    End-to-end RAG recommendation pipeline.

    High-level flow:
      1) Validate the query (QueryValidationError).
      2) Extract intent via the LLM. Failure here is absorbed: we log a warning
         and continue with an empty intent, since intent is only advisory.
      3) Retrieve candidates from the catalog (never raises; empty on error).
      4) Empty candidates -> NoMatchError. Reasoning over nothing is not allowed.
      5) Generation call with the full context (up to `retrieval_limit`).
      6) Comparison call with the top `comparison_limit` only.
      7) Pick best value / top rated over the full relevant set.

    Failures in 5) and 6) are logged and raised as ExternalCallError: a
    recommendation without the LLM's analysis is not a valid answer.

    Collaborators are injected; `llm` must provide extract_query_entities,
    generate_recommendations, compare_products and value_proposition.
    """

    def __init__(
        self,
        llm,
        catalog: CatalogStore,
        *,
        retrieval_limit: int = RETRIEVAL_LIMIT,
        comparison_limit: int = COMPARISON_LIMIT,
    ):
        self.llm = llm
        self.catalog = catalog
        self.retrieval_limit = retrieval_limit
        self.comparison_limit = comparison_limit

    # ---------- Knowledge base ----------

    def index_products(self, products: Iterable[Product], category: str) -> int:
        count = self.catalog.index(category, products)
        logger.info(f"Indexed {count} products for category: {category}")
        return count

    def get_knowledge_base_stats(self) -> KnowledgeBaseStats:
        return self.catalog.stats()

    async def augment_product_data(self, product: Product) -> Product:
        """
        Attach a one-line value proposition as the product description.
        Fail-open: if the LLM call fails, the original product is returned unchanged.
        """
        try:
            pitch = await self.llm.value_proposition(product)
        except Exception as e:
            logger.warning(f"Failed to augment product data for id={product.id}: {e}")
            return product
        return product.model_copy(update={"description": pitch})

    # ---------- Recommendation ----------

    async def _extract_intent(self, run: _Run, query: SearchQuery) -> ExtractedIntent:
        try:
            intent = await self.llm.extract_query_entities(query.text)
        except Exception as e:
            logger.warning(f"[{run.request_id}] Intent extraction failed, continuing with empty intent: {e}")
            return ExtractedIntent.empty()
        if not isinstance(intent, ExtractedIntent):
            logger.warning(f"[{run.request_id}] Intent extractor returned {type(intent).__name__}, coercing")
            intent = ExtractedIntent.from_raw(intent)
        return intent

    async def _external(self, run: _Run, stage: str, call: Awaitable[T]) -> T:
        try:
            result = await call
        except ExternalCallError as e:
            run.advance(PipelineState.FAILED)
            logger.error(f"[{run.request_id}] {stage} call failed: {e}")
            raise
        except Exception as e:
            run.advance(PipelineState.FAILED)
            logger.error(f"[{run.request_id}] {stage} call failed: {e}")
            raise ExternalCallError(stage, str(e) or type(e).__name__, cause=e) from e
        logger.info(f"[{run.request_id}] {stage} call succeeded")
        return result

    async def generate_recommendations(self, query: SearchQuery) -> RAGRecommendation:
        run = _Run()
        logger.info(f"[{run.request_id}] Starting RAG recommendation pipeline: text={query.text!r}")

        try:
            validate_query(query)
        except QueryValidationError as e:
            run.advance(PipelineState.FAILED)
            logger.warning(f"[{run.request_id}] Rejected query: {e}")
            raise

        try:
            return await self._run_stages(run, query)
        except Exception as e:
            if run.state is not PipelineState.FAILED:
                run.advance(PipelineState.FAILED)
                logger.error(f"[{run.request_id}] Pipeline aborted by unexpected error: {e!r}")
            raise

    async def _run_stages(self, run: _Run, query: SearchQuery) -> RAGRecommendation:
        # ---- 1) Intent --------------------------------------------------------
        run.advance(PipelineState.EXTRACTING_INTENT)
        intent = await self._extract_intent(run, query)

        # ---- 2) Retrieval -----------------------------------------------------
        run.advance(PipelineState.RETRIEVING)
        relevant: List[Product] = retrieve_candidates(self.catalog, query, intent, limit=self.retrieval_limit)
        logger.info(f"[{run.request_id}] Retrieved {len(relevant)} candidates")
        if not relevant:
            run.advance(PipelineState.FAILED)
            logger.warning(f"[{run.request_id}] No products matched query")
            raise NoMatchError()

        # ---- 3) Reasoning over the full context -------------------------------
        run.advance(PipelineState.REASONING)
        context = assemble_context(query, relevant, limit=self.retrieval_limit)
        analysis = await self._external(
            run, STAGE_GENERATION, self.llm.generate_recommendations(query.text, context)
        )

        # ---- 4) Comparison over the top subset --------------------------------
        run.advance(PipelineState.COMPARING)
        top = comparison_subset(relevant, limit=self.comparison_limit)
        reasoning = await self._external(
            run, STAGE_COMPARISON, self.llm.compare_products(top, query.text)
        )

        # ---- 5) Deterministic picks over everything retrieved -----------------
        run.advance(PipelineState.SELECTING)
        picks = select_picks(relevant)

        recommendation = RAGRecommendation(
            products=top,
            analysis=analysis,
            reasoning=reasoning,
            alternatives=relevant[len(top):],
            best_value=picks.best_value,
            top_rated=picks.top_rated,
        )
        run.advance(PipelineState.COMPLETED)
        logger.info(f"[{run.request_id}] RAG recommendation pipeline completed successfully")
        return recommendation
