# shopsense/core/lifespan.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from shopsense.core.config import get_settings
from shopsense.domain.repositories.catalog_store import CatalogStore
from shopsense.domain.repositories.translation_cache_repo import TranslationCache
from shopsense.domain.services.llm_svc import LLMService
from shopsense.domain.services.multilingual_svc import MultilingualService
from shopsense.domain.services.pipeline_svc import RecommendationPipeline

logger = logging.getLogger(__name__)


def build_services(app: FastAPI, settings=None) -> None:
    """
    Create the process-wide collaborators and hang them on app.state.
    The catalog and translation cache live as long as the process; nothing is persisted.
    """
    settings = settings or get_settings()
    llm = LLMService(settings)
    catalog = CatalogStore()
    cache = TranslationCache()

    app.state.settings = settings
    app.state.llm = llm
    app.state.catalog = catalog
    app.state.translation_cache = cache
    app.state.pipeline = RecommendationPipeline(
        llm,
        catalog,
        retrieval_limit=settings.retrieval_limit,
        comparison_limit=settings.comparison_limit,
    )
    app.state.multilingual = MultilingualService(llm, cache, fallback_language=settings.fallback_language)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # --- Startup ---
    build_services(app, settings)
    if not settings.OPENAI_API_KEY:
        logger.warning("⚠️ OPENAI_API_KEY is empty, every LLM call will fail")
    logger.info(f"✅ {settings.APP_NAME} ready (env={settings.APP_ENV}, model={settings.OPENAI_RAG_MODEL})")

    # Application runs
    yield

    # --- Shutdown ---
    client = getattr(app.state.llm, "_client", None)
    if client is not None:
        await client.close()
        logger.info("🔌 OpenAI client closed")
