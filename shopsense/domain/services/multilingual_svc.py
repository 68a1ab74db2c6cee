import logging
from typing import Dict, List

from pydantic import BaseModel

from shopsense.domain.errors import QueryValidationError
from shopsense.domain.repositories.translation_cache_repo import TranslationCache
from shopsense.domain.services.constants import (
    EXTENDED_LANGUAGES,
    FALLBACK_LANGUAGE,
    NATIVE_LANGUAGES,
)

logger = logging.getLogger(__name__)


class LanguageConfig(BaseModel):
    code: str
    name: str
    native_name: str
    speakers: int
    native: bool = True
    model_config = {"frozen": True}


LANGUAGES: Dict[str, LanguageConfig] = {
    c.code: c for c in [
        LanguageConfig(code="hindi", name="Hindi", native_name="हिंदी", speakers=345_000_000),
        LanguageConfig(code="tamil", name="Tamil", native_name="தமிழ்", speakers=78_000_000),
        LanguageConfig(code="telugu", name="Telugu", native_name="తెలుగు", speakers=84_000_000),
        LanguageConfig(code="kannada", name="Kannada", native_name="ಕನ್ನಡ", speakers=44_000_000),
        LanguageConfig(code="marathi", name="Marathi", native_name="मराठी", speakers=84_000_000),
        LanguageConfig(code="gujarati", name="Gujarati", native_name="ગુજરાતી", speakers=54_000_000),
        LanguageConfig(code="bengali", name="Bengali", native_name="বাংলা", speakers=265_000_000, native=False),
        LanguageConfig(code="punjabi", name="Punjabi", native_name="ਪੰਜਾਬੀ", speakers=125_000_000, native=False),
    ]
}


def fallback_marker(fallback_language: str) -> str:
    return f"[Fallback via {fallback_language.title()}]"


class MultilingualService:
    """
    Translates shopping text into Indian regional languages.

    Languages outside NATIVE_LANGUAGES (bengali, punjabi, or anything unknown)
    are translated through the fallback language and the result is prefixed
    with a visible marker. Results are cached under the language the caller
    asked for; failures are raised and never cached.
    """

    def __init__(self, llm, cache: TranslationCache, fallback_language: str = FALLBACK_LANGUAGE):
        if fallback_language not in NATIVE_LANGUAGES:
            raise ValueError(f"Fallback language must be natively supported, got {fallback_language!r}")
        self.llm = llm
        self.cache = cache
        self.fallback_language = fallback_language

    def supported_languages(self) -> List[LanguageConfig]:
        return list(LANGUAGES.values())

    async def translate(self, text: str, language: str, use_cache: bool = True) -> str:
        if not text or not text.strip():
            raise QueryValidationError("Text to translate is empty")
        language = (language or "").strip().lower()
        if not language:
            raise QueryValidationError("Target language is required")

        if use_cache and (hit := self.cache.get(text, language)):
            logger.info(f"Cache hit for translation: {language}")
            return hit.translated_text
        logger.info(f"Cache miss for translation: {language}")

        try:
            if language in NATIVE_LANGUAGES:
                translated = await self.llm.translate(text, language)
            else:
                known = "known" if language in EXTENDED_LANGUAGES else "unknown"
                logger.warning(
                    f"Language {language} ({known}) not natively supported, using {self.fallback_language} as fallback"
                )
                translated = await self.llm.translate(text, self.fallback_language)
                translated = f"{fallback_marker(self.fallback_language)} {translated}"
        except Exception as e:
            logger.error(f"Failed to translate to {language}: {e}")
            raise

        self.cache.set(text, language, translated)
        logger.info(f"Translation completed for: {language}")
        return translated
