# shopsense/api/v1/routers/recommendations.py
from fastapi import APIRouter, Depends
import time
import logging

from shopsense.api.deps import llm_dep, multilingual_dep, pipeline_dep
from shopsense.api.v1.schemas.reco import (
    CompareRequest,
    EntitiesRequest,
    RecommendationOut,
    RecommendationRequest,
    TextOut,
)
from shopsense.domain.models.query import ExtractedIntent
from shopsense.domain.services.context_assembler import comparison_subset

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.post("", response_model=RecommendationOut)
async def generate_recommendations(
    body: RecommendationRequest,
    pipeline = Depends(pipeline_dep),
    multilingual = Depends(multilingual_dep),
):
    """
    Personalized recommendations grounded in the indexed catalog.
    Pipeline: intent extraction → retrieval (top 10) → LLM analysis → LLM comparison (top 5) → picks.
    """
    logger.info(
        "Request: recommendations query=%r, budget=%s, brands=%s, translate_to=%s",
        body.query, body.budget, body.brands, body.translate_to,
    )
    start_time = time.perf_counter()

    reco = await pipeline.generate_recommendations(body.to_search_query())
    out = RecommendationOut(**reco.model_dump())

    if body.translate_to:
        out.analysis = await multilingual.translate(reco.analysis, body.translate_to)
        out.reasoning = await multilingual.translate(reco.reasoning, body.translate_to)
        out.language = body.translate_to

    logger.info(
        "Response: recommendations count=%s, alternatives=%s, elapsed_time=%.4fs",
        len(out.products), len(out.alternatives), time.perf_counter() - start_time,
    )
    return out


@router.post("/compare", response_model=TextOut)
async def compare_products(body: CompareRequest, llm = Depends(llm_dep)):
    """Compare the given products (only the first five are sent to the model)."""
    top = comparison_subset(body.products)
    logger.info("Request: compare products=%s (using %s)", len(body.products), len(top))
    return TextOut(result=await llm.compare_products(top, body.user_query))


@router.post("/entities", response_model=ExtractedIntent)
async def extract_entities(body: EntitiesRequest, llm = Depends(llm_dep)):
    """Extract shopping entities (product type, budget, preferences) from a query."""
    return await llm.extract_query_entities(body.query)
