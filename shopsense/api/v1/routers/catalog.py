# shopsense/api/v1/routers/catalog.py
from fastapi import APIRouter, Depends
import logging

from shopsense.api.deps import pipeline_dep
from shopsense.api.v1.schemas.reco import AugmentRequest, IndexRequest, IndexResult
from shopsense.domain.models.product import KnowledgeBaseStats, Product

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/stats", response_model=KnowledgeBaseStats)
async def knowledge_base_stats(pipeline = Depends(pipeline_dep)):
    return pipeline.get_knowledge_base_stats()


@router.put("/{category}", response_model=IndexResult)
async def index_category(category: str, body: IndexRequest, pipeline = Depends(pipeline_dep)):
    """Replace every product in `category` with the given list."""
    indexed = pipeline.index_products(body.products, category)
    return IndexResult(category=category, indexed=indexed)


@router.post("/augment", response_model=Product)
async def augment_product(body: AugmentRequest, pipeline = Depends(pipeline_dep)):
    """Add an LLM-written value proposition; returns the product unchanged if the LLM fails."""
    return await pipeline.augment_product_data(body.product)
