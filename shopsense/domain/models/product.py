from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List

RATING_MIN = 0.0
RATING_MAX = 5.0

class Product(BaseModel):
    id: str
    name: str
    price: float = Field(ge=0, allow_inf_nan=False)
    platform: str
    rating: float = Field(default=0.0, allow_inf_nan=False)
    reviews: str = ""
    description: Optional[str] = None
    url: Optional[str] = None
    thumbnail: Optional[str] = None
    in_stock: Optional[bool] = Field(default=None, alias="inStock")

    model_config = ConfigDict(frozen=True, populate_by_name=True)  # immuable = safe

    @field_validator("rating", mode="after")
    @classmethod
    def _clamp_rating(cls, v: float) -> float:
        # Ingested ratings occasionally overshoot the 0-5 scale
        return min(max(v, RATING_MIN), RATING_MAX)

class CategoryStats(BaseModel):
    name: str
    product_count: int
    model_config = {"frozen": True}

class KnowledgeBaseStats(BaseModel):
    categories_count: int
    total_products: int
    categories: List[CategoryStats]
    model_config = {"frozen": True}

class RAGRecommendation(BaseModel):
    products: List[Product]
    analysis: str
    reasoning: str
    alternatives: List[Product] = []
    best_value: Product
    top_rated: Product
    model_config = {"frozen": True}
