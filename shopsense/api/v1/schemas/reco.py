# shopsense/api/v1/schemas/reco.py
from pydantic import BaseModel, Field
from typing import List, Optional

from shopsense.domain.models.product import Product
from shopsense.domain.models.query import Budget, SearchQuery

class BudgetIn(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None

class RecommendationRequest(BaseModel):
    query: str = Field(..., description="The user's shopping query or requirements")
    budget: Optional[BudgetIn] = None
    brands: List[str] = Field(default_factory=list, description="Preferred brands (optional)")
    categories: List[str] = Field(default_factory=list, description="Product categories of interest (optional)")
    language: Optional[str] = None
    translate_to: Optional[str] = Field(default=None, description="Translate analysis and reasoning into this language")

    def to_search_query(self) -> SearchQuery:
        budget = Budget(min=self.budget.min, max=self.budget.max) if self.budget else None
        return SearchQuery(
            text=self.query,
            budget=budget,
            brands=self.brands,
            categories=self.categories,
            language=self.language,
        )

class RecommendationOut(BaseModel):
    products: List[Product]
    analysis: str
    reasoning: str
    alternatives: List[Product]
    best_value: Product
    top_rated: Product
    language: Optional[str] = None

class CompareRequest(BaseModel):
    products: List[Product] = Field(..., min_length=1)
    user_query: str

class EntitiesRequest(BaseModel):
    query: str

class TextOut(BaseModel):
    result: str

class IndexRequest(BaseModel):
    products: List[Product]

class IndexResult(BaseModel):
    category: str
    indexed: int

class AugmentRequest(BaseModel):
    product: Product

class TranslateRequest(BaseModel):
    text: str
    target_language: str
    use_cache: bool = True

class TranslateOut(BaseModel):
    text: str
    language: str
    translated_text: str

class ImageAnalyzeRequest(BaseModel):
    image_base64: str = Field(..., description="Base64 encoded product image")
    mime_type: str = Field(..., description="MIME type of the image (image/jpeg, image/png, etc.)")
