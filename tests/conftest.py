"""
Pytest configuration for ShopSense tests.

Sets up the test environment and shared fixtures.
"""
import itertools
import os
from unittest.mock import AsyncMock

import pytest

# Settings require an API key; tests never reach OpenAI
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("APP_ENV", "development")

from shopsense.domain.models.product import Product
from shopsense.domain.models.query import ExtractedIntent
from shopsense.domain.repositories.catalog_store import CatalogStore
from shopsense.domain.repositories.translation_cache_repo import TranslationCache
from shopsense.domain.services.llm_svc import LLMService


@pytest.fixture
def make_product():
    """Factory for products with sensible defaults and unique ids."""
    counter = itertools.count(1)

    def _make(**overrides) -> Product:
        n = next(counter)
        data = {
            "id": f"p{n}",
            "name": f"Product {n}",
            "price": 1000.0,
            "platform": "Amazon",
            "rating": 4.0,
            "reviews": "Solid build, good battery",
        }
        data.update(overrides)
        return Product(**data)

    return _make


@pytest.fixture
def catalog():
    return CatalogStore()


@pytest.fixture
def translation_cache():
    return TranslationCache()


@pytest.fixture
def mock_llm():
    """LLM collaborator with canned, successful answers."""
    llm = AsyncMock(spec=LLMService)
    llm.extract_query_entities.return_value = ExtractedIntent(product_type="laptops")
    llm.generate_recommendations.return_value = "Here are my picks"
    llm.compare_products.return_value = "Comparison table"
    llm.translate.side_effect = lambda text, language: f"<{language}>{text}"
    llm.value_proposition.return_value = "Great battery for the price"
    llm.analyze_product_image.return_value = "A red running shoe"
    llm.health_check.return_value = True
    return llm
