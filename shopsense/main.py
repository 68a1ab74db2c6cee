from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from shopsense.core.config import get_settings
from shopsense.core.lifespan import lifespan
from shopsense.core.logging import configure_logging
from shopsense.api.v1.routers.health import router as health_router
from shopsense.api.v1.routers.catalog import router as catalog_router
from shopsense.api.v1.routers.recommendations import router as recommendations_router
from shopsense.api.v1.routers.translate import router as translate_router
from shopsense.api.v1.routers.images import router as images_router
from shopsense.domain.errors import ExternalCallError, NoMatchError, QueryValidationError

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ------- CORS -------
# ALLOWED_ORIGINS is a CSV, e.g. "https://shop.example.com,https://www.shop.example.com"
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origin_list or ["http://localhost:3000"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["*"],
    max_age=86400,
)

# ------- Error mapping -------
@app.exception_handler(QueryValidationError)
async def _invalid_query(request: Request, exc: QueryValidationError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})

@app.exception_handler(NoMatchError)
async def _no_match(request: Request, exc: NoMatchError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(ExternalCallError)
async def _external_failure(request: Request, exc: ExternalCallError):
    logger.error(f"External call failed on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": exc.message, "stage": exc.stage})

# ------- Routes -------
app.include_router(health_router)
app.include_router(catalog_router)            # index / stats / augment
app.include_router(recommendations_router)    # RAG pipeline, compare, entities
app.include_router(translate_router)          # regional languages
app.include_router(images_router)             # vision
