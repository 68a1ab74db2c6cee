# shopsense/api/v1/routers/images.py
from fastapi import APIRouter, Depends
import logging

from shopsense.api.deps import llm_dep
from shopsense.api.v1.schemas.reco import ImageAnalyzeRequest, TextOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/images", tags=["images"])


@router.post("/analyze", response_model=TextOut)
async def analyze_product_image(body: ImageAnalyzeRequest, llm = Depends(llm_dep)):
    """Extract features, quality, and pricing insights from a product image."""
    logger.info("Request: analyze image mime_type=%s size=%s", body.mime_type, len(body.image_base64))
    return TextOut(result=await llm.analyze_product_image(body.image_base64, body.mime_type))
