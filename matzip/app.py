from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from .recommendations.models import (
    CompareRequest,
    CompareResponse,
    EnrichedRestaurant,
    EstimateRequest,
    Location,
    PlaceSearchResult,
    ReviewRequest,
    ReviewResponse,
)
from .recommendations.pipeline import EnrichmentPipeline, build_pipeline

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_pipeline() -> EnrichmentPipeline:
    return build_pipeline()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    # Only tear down what was actually created.
    if get_pipeline.cache_info().currsize:
        logger.info("Closing pipeline resources")
        get_pipeline().close()


app = FastAPI(title="Matzip Finder API", version="1.0.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip()
        for o in os.environ.get("CORS_ORIGINS", "http://localhost:3000").split(",")
        if o.strip()
    ],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/places/search", response_model=list[PlaceSearchResult])
def places_search(
    query: str = Query(..., min_length=1, max_length=100),
    pipeline: EnrichmentPipeline = Depends(get_pipeline),
) -> list[PlaceSearchResult]:
    return pipeline.search_places(query)


# ── Restaurant endpoints ─────────────────────────────────────────────────


@app.post("/restaurants/search-nearby", response_model=list[EnrichedRestaurant])
def search_nearby(
    body: Location,
    pipeline: EnrichmentPipeline = Depends(get_pipeline),
) -> list[EnrichedRestaurant]:
    logger.info("search-nearby address=%r lat=%s lng=%s", body.address, body.lat, body.lng)
    restaurants = pipeline.recommend_near(body)
    if not restaurants:
        logger.info("No restaurants found for %r", body.address)
    return restaurants


@app.post("/restaurants/compare", response_model=CompareResponse)
def compare(
    body: CompareRequest,
    pipeline: EnrichmentPipeline = Depends(get_pipeline),
) -> CompareResponse:
    logger.info("compare %d restaurants", len(body.restaurants))
    return CompareResponse(result=pipeline.compare(body.restaurants, body.user_preference))


@app.post("/restaurants/get-review", response_model=ReviewResponse)
def get_review(
    body: ReviewRequest,
    pipeline: EnrichmentPipeline = Depends(get_pipeline),
) -> ReviewResponse:
    return ReviewResponse(review=pipeline.review(body.name, body.location))


@app.post("/restaurants/estimate-nearby", response_model=list[EnrichedRestaurant])
def estimate_nearby(
    body: EstimateRequest,
    pipeline: EnrichmentPipeline = Depends(get_pipeline),
) -> list[EnrichedRestaurant]:
    return pipeline.estimate_near(body.lat, body.lng)
