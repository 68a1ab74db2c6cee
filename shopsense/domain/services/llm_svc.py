# shopsense/domain/services/llm_svc.py

from __future__ import annotations
from typing import List, Optional, Sequence
import json
import re
import logging
from time import monotonic as _now

from openai import AsyncOpenAI

from shopsense.core.config import Settings
from shopsense.domain.errors import (
    ExternalCallError,
    QueryValidationError,
    STAGE_AUGMENTATION,
    STAGE_COMPARISON,
    STAGE_EXTRACTION,
    STAGE_GENERATION,
    STAGE_TRANSLATION,
    STAGE_VISION,
)
from shopsense.domain.models.product import Product
from shopsense.domain.models.query import ExtractedIntent
from shopsense.domain.services.constants import IMAGE_MIME_TYPES
from shopsense.domain.services.context_assembler import RAGContext
from shopsense.domain.services import prompts

logger = logging.getLogger(__name__)

# Completion token caps
EXTRACTION_MAX_TOKENS = 256
VALUE_PROP_MAX_TOKENS = 120
HEALTH_MAX_TOKENS = 5

# Regex to strip code fences (``` or ```json) from LLM output
_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.MULTILINE)

def _strip_fences(s: str) -> str:
    """Remove ``` or ```json fences the LLM might add."""
    return _CODE_FENCE_RE.sub("", s).strip()

def _parse_intent(json_text: str) -> ExtractedIntent:
    """
    Parse the extraction response into an ExtractedIntent.
    Raises ValueError when the text is not a JSON object.
    """
    raw = _strip_fences(json_text)
    logger.debug(f"Extraction raw response after fence stripping: {raw[:500]}")
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid LLM JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return ExtractedIntent.from_raw(parsed)


class LLMService:
    """
    Text and vision completions against the OpenAI chat API.

    Every call is bounded by `settings.openai_timeout_s`. Any failure (timeout,
    transport, API error, unusable output) is raised as ExternalCallError tagged
    with the pipeline stage. Nothing is retried here.
    """

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.OPENAI_API_KEY,
                timeout=self.settings.openai_timeout_s,
                max_retries=0,
            )
        return self._client

    async def _call_llm(
        self,
        messages: List[dict],
        *,
        stage: str,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        json_mode: bool = False,
    ) -> str:
        """
        Call the LLM and return the raw content string.
        Wraps every failure into ExternalCallError(stage).
        """
        model = model or self.settings.OPENAI_RAG_MODEL
        kwargs: dict = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens or self.settings.llm_max_tokens,
            "temperature": self.settings.llm_temperature if temperature is None else temperature,
            "timeout": self.settings.openai_timeout_s,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        t0 = _now()
        try:
            resp = await self.client.chat.completions.create(**kwargs)
            content = resp.choices[0].message.content
        except Exception as e:
            logger.error(f"LLM call failed stage={stage} model={model} after {_now() - t0:.3f}s: {e}")
            raise ExternalCallError(stage, str(e) or type(e).__name__, cause=e) from e
        dt = _now() - t0

        # Best-effort usage logging
        u = getattr(resp, "usage", None)
        logger.info(
            f"LLM call stage={stage} model={getattr(resp, 'model', model)} duration={dt:.3f}s "
            f"tokens(prompt={getattr(u, 'prompt_tokens', None)}, completion={getattr(u, 'completion_tokens', None)}, "
            f"total={getattr(u, 'total_tokens', None)})"
        )

        if not isinstance(content, str) or not content.strip():
            logger.error(f"LLM returned empty content stage={stage}")
            raise ExternalCallError(stage, "LLM returned an empty response")
        return content.strip()

    # =========================================================================
    #                               PUBLIC API
    # =========================================================================

    async def extract_query_entities(self, user_query: str) -> ExtractedIntent:
        """Turn free text into structured shopping intent."""
        messages = [
            {"role": "system", "content": prompts.EXTRACTION_SYSTEM},
            {"role": "user", "content": prompts.extraction_task(user_query)},
        ]
        content = await self._call_llm(
            messages,
            stage=STAGE_EXTRACTION,
            max_tokens=EXTRACTION_MAX_TOKENS,
            temperature=0.0,
            json_mode=True,
        )
        try:
            intent = _parse_intent(content)
        except ValueError as e:
            logger.error(f"Failed to parse extracted entities: {e}")
            raise ExternalCallError(STAGE_EXTRACTION, str(e), cause=e) from e
        logger.info(f"Query entities extracted: product_type={intent.product_type!r}")
        return intent

    async def generate_recommendations(self, query_text: str, context: RAGContext) -> str:
        messages = [
            {"role": "system", "content": prompts.SHOPPING_ASSISTANT_SYSTEM},
            {"role": "user", "content": f"User Query: {query_text}\n\n{prompts.recommendation_task(query_text, context)}"},
        ]
        logger.debug(f"Generating recommendations for {len(context.product_data)} products")
        text = await self._call_llm(messages, stage=STAGE_GENERATION)
        logger.info("Recommendations generated successfully")
        return text

    async def compare_products(self, products: Sequence[Product], user_query: str) -> str:
        messages = [
            {"role": "system", "content": prompts.SHOPPING_ASSISTANT_SYSTEM},
            {"role": "user", "content": f"User Query: {user_query}\n\n{prompts.comparison_task(products, user_query)}"},
        ]
        text = await self._call_llm(messages, stage=STAGE_COMPARISON)
        logger.info(f"Product comparison completed for {len(products)} products")
        return text

    async def translate(self, text: str, language: str) -> str:
        messages = [
            {"role": "system", "content": prompts.TRANSLATION_SYSTEM},
            {"role": "user", "content": prompts.translation_task(text, language)},
        ]
        translated = await self._call_llm(messages, stage=STAGE_TRANSLATION, temperature=0.2)
        logger.info(f"Translation to {language} completed")
        return translated

    async def analyze_product_image(self, image_base64: str, mime_type: str) -> str:
        """Describe a product photo with the vision model."""
        if mime_type not in IMAGE_MIME_TYPES:
            raise QueryValidationError(f"Unsupported image type: {mime_type}")
        if not image_base64:
            raise QueryValidationError("Image payload is empty")
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{image_base64}"}},
                    {"type": "text", "text": prompts.IMAGE_ANALYSIS_TASK},
                ],
            },
        ]
        text = await self._call_llm(messages, stage=STAGE_VISION, model=self.settings.OPENAI_VISION_MODEL)
        logger.info("Image analysis completed")
        return text

    async def value_proposition(self, product: Product) -> str:
        messages = [
            {"role": "system", "content": prompts.SHOPPING_ASSISTANT_SYSTEM},
            {"role": "user", "content": prompts.value_proposition_task(product)},
        ]
        return await self._call_llm(messages, stage=STAGE_AUGMENTATION, max_tokens=VALUE_PROP_MAX_TOKENS)

    async def health_check(self) -> bool:
        """Ping the model. Never raises."""
        try:
            await self._call_llm(
                [{"role": "user", "content": "Say 'OK' if you are ready."}],
                stage="health",
                max_tokens=HEALTH_MAX_TOKENS,
                temperature=0.0,
            )
        except ExternalCallError as e:
            logger.error(f"LLM health check failed: {e}")
            return False
        logger.info("LLM health check passed")
        return True
