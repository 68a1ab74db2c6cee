"""Tests for the domain records and the tolerant intent parser."""

import pytest
from pydantic import ValidationError

from shopsense.domain.models.product import Product
from shopsense.domain.models.query import ExtractedIntent, SearchQuery


class TestProduct:

    def test_rating_is_clamped(self, make_product):
        assert make_product(rating=7.2).rating == 5.0
        assert make_product(rating=-1).rating == 0.0

    def test_negative_price_rejected(self, make_product):
        with pytest.raises(ValidationError):
            make_product(price=-1)

    def test_non_numeric_rating_rejected(self, make_product):
        with pytest.raises(ValidationError):
            make_product(rating="great")

    @pytest.mark.parametrize("rating", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_rating_rejected(self, make_product, rating):
        with pytest.raises(ValidationError):
            make_product(rating=rating)

    @pytest.mark.parametrize("price", [float("nan"), float("inf")])
    def test_non_finite_price_rejected(self, make_product, price):
        with pytest.raises(ValidationError):
            make_product(price=price)

    def test_in_stock_alias(self):
        p = Product.model_validate({
            "id": "x", "name": "n", "price": 1, "platform": "Flipkart",
            "rating": 4, "reviews": "", "inStock": True,
        })
        assert p.in_stock is True
        assert p.model_dump(by_alias=True)["inStock"] is True

    def test_frozen(self, make_product):
        p = make_product()
        with pytest.raises(ValidationError):
            p.price = 5


class TestExtractedIntentFromRaw:

    def test_full_payload(self):
        intent = ExtractedIntent.from_raw({
            "productType": "laptops",
            "budget": {"min": 20000, "max": "60,000"},
            "brands": ["Dell", "HP"],
            "features": ["backlit keyboard"],
            "priority": "Ratings",
            "sentiment": "positive",
            "language": "hindi",
        })
        assert intent.product_type == "laptops"
        assert intent.budget.min == 20000
        assert intent.budget.max == 60000
        assert intent.brands == ["Dell", "HP"]
        assert intent.priority == "ratings"
        assert intent.sentiment == "positive"

    def test_snake_case_product_type_accepted(self):
        assert ExtractedIntent.from_raw({"product_type": "phones"}).product_type == "phones"

    @pytest.mark.parametrize("budget", ["cheap", {"max": "lots"}, {"max": None}, [1, 2], True])
    def test_malformed_budget_degrades_to_none(self, budget):
        intent = ExtractedIntent.from_raw({"productType": "tv", "budget": budget})
        assert intent.product_type == "tv"
        assert intent.budget is None

    def test_bare_number_budget_is_a_ceiling(self):
        assert ExtractedIntent.from_raw({"budget": 15000}).budget.max == 15000

    def test_unknown_priority_and_sentiment_dropped(self):
        intent = ExtractedIntent.from_raw({"priority": "speed", "sentiment": 42})
        assert intent.priority is None
        assert intent.sentiment is None

    def test_brands_as_string_and_junk(self):
        assert ExtractedIntent.from_raw({"brands": "Sony"}).brands == ["Sony"]
        assert ExtractedIntent.from_raw({"brands": ["Sony", 3, "", None]}).brands == ["Sony"]
        assert ExtractedIntent.from_raw({"brands": 7}).brands == []

    @pytest.mark.parametrize("payload", [None, [], "laptops", 12])
    def test_non_dict_payload_is_empty_intent(self, payload):
        assert ExtractedIntent.from_raw(payload) == ExtractedIntent.empty()


def test_search_query_defaults():
    q = SearchQuery(text="phone under 20k")
    assert q.budget is None
    assert q.brands == []
    assert q.language is None
