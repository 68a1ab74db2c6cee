"""
HTTP tests for the FastAPI app.

Services are placed on app.state by hand around a mocked LLM, so the
lifespan (and its real OpenAI client) is never started.
"""

import pytest
from fastapi.testclient import TestClient

from shopsense.domain.errors import ExternalCallError, STAGE_GENERATION
from shopsense.domain.repositories.catalog_store import CatalogStore
from shopsense.domain.repositories.translation_cache_repo import TranslationCache
from shopsense.domain.services.multilingual_svc import MultilingualService
from shopsense.domain.services.pipeline_svc import RecommendationPipeline
from shopsense.main import app

LAPTOPS = [
    {"id": "l40", "name": "Acer Aspire", "price": 40000, "platform": "Flipkart", "rating": 4.0, "reviews": "ok"},
    {"id": "l55", "name": "Dell Inspiron", "price": 55000, "platform": "Amazon", "rating": 4.8, "reviews": "great", "inStock": True},
    {"id": "l70", "name": "HP Spectre", "price": 70000, "platform": "Amazon", "rating": 3.0, "reviews": "meh"},
]


@pytest.fixture
def client(mock_llm):
    catalog = CatalogStore()
    app.state.llm = mock_llm
    app.state.catalog = catalog
    app.state.pipeline = RecommendationPipeline(mock_llm, catalog)
    app.state.multilingual = MultilingualService(mock_llm, TranslationCache())
    return TestClient(app)


@pytest.fixture
def indexed(client):
    response = client.put("/catalog/laptops", json={"products": LAPTOPS})
    assert response.status_code == 200
    return client


def test_index_and_stats(client):
    response = client.put("/catalog/laptops", json={"products": LAPTOPS})
    assert response.json() == {"category": "laptops", "indexed": 3}

    stats = client.get("/catalog/stats").json()
    assert stats["categories_count"] == 1
    assert stats["total_products"] == 3
    assert stats["categories"] == [{"name": "laptops", "product_count": 3}]


def test_reindex_replaces_category(indexed):
    indexed.put("/catalog/laptops", json={"products": LAPTOPS[:1]})
    assert indexed.get("/catalog/stats").json()["total_products"] == 1


def test_index_rejects_negative_price(client):
    bad = dict(LAPTOPS[0], price=-10)
    assert client.put("/catalog/laptops", json={"products": [bad]}).status_code == 422


def test_index_rejects_nan_rating(client):
    # Python's json parser accepts the bare NaN token
    body = '{"products":[{"id":"x","name":"n","price":100,"platform":"Amazon","rating":NaN}]}'
    response = client.put("/catalog/laptops", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 422
    assert client.get("/catalog/stats").json()["total_products"] == 0


def test_recommendations_nan_budget_is_rejected(indexed):
    body = '{"query":"laptop","budget":{"max":NaN}}'
    response = indexed.post("/recommendations", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 422


def test_recommendations(indexed):
    response = indexed.post("/recommendations", json={"query": "good laptop", "budget": {"max": 60000}})

    assert response.status_code == 200
    body = response.json()
    assert [p["id"] for p in body["products"]] == ["l55", "l40"]
    assert body["top_rated"]["id"] == "l55"
    assert body["best_value"]["id"] == "l40"
    assert body["products"][0]["inStock"] is True
    assert body["analysis"] == "Here are my picks"
    assert body["language"] is None


def test_recommendations_translated(indexed):
    body = indexed.post("/recommendations", json={"query": "laptop", "translate_to": "tamil"}).json()
    assert body["analysis"] == "<tamil>Here are my picks"
    assert body["reasoning"] == "<tamil>Comparison table"
    assert body["language"] == "tamil"


def test_recommendations_no_match(client):
    response = client.post("/recommendations", json={"query": "laptop"})
    assert response.status_code == 404


def test_recommendations_invalid_budget(indexed):
    response = indexed.post("/recommendations", json={"query": "laptop", "budget": {"min": 9, "max": 1}})
    assert response.status_code == 422


def test_recommendations_external_failure(indexed, mock_llm):
    mock_llm.generate_recommendations.side_effect = ExternalCallError(STAGE_GENERATION, "upstream timeout")
    response = indexed.post("/recommendations", json={"query": "laptop"})
    assert response.status_code == 502
    assert response.json() == {"detail": "upstream timeout", "stage": STAGE_GENERATION}


def test_compare_sends_at_most_five(client, mock_llm):
    products = [dict(LAPTOPS[0], id=f"c{i}") for i in range(8)]
    response = client.post("/recommendations/compare", json={"products": products, "user_query": "which?"})

    assert response.json() == {"result": "Comparison table"}
    sent, query = mock_llm.compare_products.call_args.args
    assert len(sent) == 5
    assert query == "which?"


def test_compare_requires_products(client):
    response = client.post("/recommendations/compare", json={"products": [], "user_query": "which?"})
    assert response.status_code == 422


def test_entities(client):
    response = client.post("/recommendations/entities", json={"query": "laptop under 60k"})
    assert response.status_code == 200
    assert response.json()["product_type"] == "laptops"


def test_translate_and_languages(client, mock_llm):
    payload = {"text": "Best phone", "target_language": "bengali"}
    first = client.post("/translate", json=payload).json()
    second = client.post("/translate", json=payload).json()

    assert first["translated_text"] == "[Fallback via Hindi] <hindi>Best phone"
    assert first == second
    assert mock_llm.translate.await_count == 1

    languages = client.get("/translate/languages").json()
    assert len(languages) == 8


def test_translate_empty_text(client):
    response = client.post("/translate", json={"text": " ", "target_language": "tamil"})
    assert response.status_code == 422


def test_augment(client):
    response = client.post("/catalog/augment", json={"product": LAPTOPS[0]})
    assert response.json()["description"] == "Great battery for the price"


def test_image_analysis(client, mock_llm):
    response = client.post("/images/analyze", json={"image_base64": "aGVsbG8=", "mime_type": "image/png"})
    assert response.json() == {"result": "A red running shoe"}
    mock_llm.analyze_product_image.assert_awaited_once_with("aGVsbG8=", "image/png")


def test_health(client, mock_llm):
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["checks"]["llm"] == "skipped"
    mock_llm.health_check.assert_not_called()

    mock_llm.health_check.return_value = False
    deep = client.get("/health", params={"deep": True}).json()
    assert deep["status"] == "error"
    assert deep["checks"]["llm"] == "error"
