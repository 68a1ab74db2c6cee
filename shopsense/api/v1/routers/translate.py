# shopsense/api/v1/routers/translate.py
from fastapi import APIRouter, Depends
from typing import List
import logging

from shopsense.api.deps import multilingual_dep
from shopsense.api.v1.schemas.reco import TranslateOut, TranslateRequest
from shopsense.domain.services.multilingual_svc import LanguageConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/translate", tags=["translate"])


@router.post("", response_model=TranslateOut)
async def translate_content(body: TranslateRequest, multilingual = Depends(multilingual_dep)):
    """Translate shopping content to an Indian regional language."""
    translated = await multilingual.translate(body.text, body.target_language, use_cache=body.use_cache)
    return TranslateOut(text=body.text, language=body.target_language, translated_text=translated)


@router.get("/languages", response_model=List[LanguageConfig])
async def supported_languages(multilingual = Depends(multilingual_dep)):
    return multilingual.supported_languages()
