# shopsense/api/deps.py
from fastapi import Request

from shopsense.domain.repositories.catalog_store import CatalogStore
from shopsense.domain.services.multilingual_svc import MultilingualService
from shopsense.domain.services.pipeline_svc import RecommendationPipeline

# Services are built once in the lifespan and read from app.state here,
# so tests can swap them with app.dependency_overrides.

def pipeline_dep(request: Request) -> RecommendationPipeline:
    return request.app.state.pipeline

def llm_dep(request: Request):
    return request.app.state.llm

def multilingual_dep(request: Request) -> MultilingualService:
    return request.app.state.multilingual

def catalog_dep(request: Request) -> CatalogStore:
    return request.app.state.catalog
