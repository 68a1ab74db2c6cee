from functools import lru_cache
from typing import Literal
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "ShopSense"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # OpenAI
    OPENAI_API_KEY: str # required
    OPENAI_RAG_MODEL: str = "gpt-4o-mini"
    OPENAI_VISION_MODEL: str = "gpt-4o-mini"
    openai_timeout_s: int = 30  # seconds, applies to every LLM call
    llm_temperature: float = 0.7
    llm_max_tokens: int = 2048

    # Pipeline bounds
    retrieval_limit: int = 10     # candidates kept after ranking
    comparison_limit: int = 5     # candidates sent to the comparison call

    # Translation
    fallback_language: str = "hindi"

    # API
    ALLOWED_ORIGINS: str = ""

    model_config = SettingsConfigDict(env_file=None, case_sensitive=True, extra="ignore")

    @property
    def allowed_origin_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
