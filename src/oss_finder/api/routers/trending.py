"""트렌딩 라우터."""

from typing import Annotated

from fastapi import APIRouter, Query

from oss_finder.api.dependencies import PoolDep
from oss_finder.models import Timeframe
from oss_finder.scoring import (
    TrendingCategory,
    TrendingProject,
    TrendingSummary,
    seasonal_trending,
    trending_by_category,
    trending_by_language,
    trending_by_topic,
    trending_for_beginners,
    trending_projects,
    trending_summary,
)

router = APIRouter(prefix="/api/trending", tags=["trending"])


@router.get("")
async def trending(
    pool: PoolDep,
    timeframe: Timeframe = Timeframe.weekly,
    language: str | None = None,
    topic: str | None = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> list[TrendingProject]:
    """트렌딩 프로젝트. language나 topic을 주면 해당 프로젝트만 본다."""
    if language:
        return trending_by_language(pool, language, limit)
    if topic:
        return trending_by_topic(pool, topic, limit)
    return trending_projects(pool, timeframe, limit)


@router.get("/categories")
async def categories(pool: PoolDep) -> list[TrendingCategory]:
    return trending_by_category(pool)


@router.get("/summary")
async def summary(pool: PoolDep) -> TrendingSummary:
    return trending_summary(pool)


@router.get("/beginners")
async def beginners(
    pool: PoolDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 15,
) -> list[TrendingProject]:
    return trending_for_beginners(pool, limit)


@router.get("/seasonal")
async def seasonal(pool: PoolDep) -> list[TrendingProject]:
    return seasonal_trending(pool)
