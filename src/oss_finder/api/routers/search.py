"""고급 검색 라우터."""

from enum import Enum
from typing import Annotated, Any

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from oss_finder.api.dependencies import PoolDep, PreferencesDep, UserIdDep
from oss_finder.exceptions import NotFoundError, ValidationError
from oss_finder.models import Project, Timeframe
from oss_finder.scoring import (
    SearchFilters,
    SearchQuery,
    create_topic_clusters,
    find_similar_projects,
    related_topics,
    search_projects,
    search_suggestions,
    trending_by_category,
    trending_projects,
    trending_summary,
)
from oss_finder.validation import validate_search_query

router = APIRouter(prefix="/api/search", tags=["search"])


class SearchType(str, Enum):
    semantic = "semantic"
    similar = "similar"
    clusters = "clusters"
    trending = "trending"
    trending_categories = "trending-categories"
    trending_summary = "trending-summary"


class AdvancedSearchRequest(BaseModel):
    """고급 검색 요청."""

    query: str = ""
    type: SearchType = SearchType.semantic
    filters: SearchFilters = Field(default_factory=SearchFilters)
    project_id: int | None = None
    timeframe: Timeframe = Timeframe.weekly
    limit: int = Field(default=20, ge=1, le=100)
    page: int = Field(default=1, ge=1)


def run_search(request: AdvancedSearchRequest, projects: list[Project]) -> dict[str, Any]:
    """검색 종류에 맞는 점수 계산을 실행한다."""
    if request.type == SearchType.semantic:
        results = search_projects(projects, SearchQuery(text=request.query, filters=request.filters))
        start = (request.page - 1) * request.limit
        return {
            "type": request.type,
            "results": results[start : start + request.limit],
            "total": len(results),
            "page": request.page,
            "limit": request.limit,
        }

    if request.type == SearchType.similar:
        if request.project_id is None:
            raise ValidationError("Project ID required for similarity search")
        target = next((p for p in projects if p.id == request.project_id), None)
        if target is None:
            raise NotFoundError("Project not found")
        similar = find_similar_projects(target, projects, request.limit)
        return {
            "type": request.type,
            "results": similar,
            "target_project": target,
            "total": len(similar),
        }

    if request.type == SearchType.clusters:
        clusters = create_topic_clusters(projects)
        return {"type": request.type, "results": clusters, "total": len(clusters)}

    if request.type == SearchType.trending:
        trending = trending_projects(projects, request.timeframe, request.limit)
        return {
            "type": request.type,
            "results": trending,
            "timeframe": request.timeframe,
            "total": len(trending),
        }

    if request.type == SearchType.trending_categories:
        categories = trending_by_category(projects)
        return {"type": request.type, "results": categories, "total": len(categories)}

    return {"type": request.type, "results": trending_summary(projects)}


def _split(value: str | None) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()] if value else []


@router.post("/advanced")
async def advanced_search_post(
    request: AdvancedSearchRequest,
    pool: PoolDep,
    tracker: PreferencesDep,
    user_id: UserIdDep,
) -> dict[str, Any]:
    if request.type == SearchType.semantic and request.query:
        request.query = validate_search_query(request.query)
        tracker.add_search(user_id, request.query)
    return run_search(request, pool)


@router.get("/advanced")
async def advanced_search(
    pool: PoolDep,
    tracker: PreferencesDep,
    user_id: UserIdDep,
    q: str = "",
    type: SearchType = SearchType.semantic,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    page: Annotated[int, Query(ge=1)] = 1,
    languages: str | None = None,
    topics: str | None = None,
    min_stars: int | None = None,
    max_stars: int | None = None,
    has_good_first_issues: bool = False,
    project_id: int | None = None,
    timeframe: Timeframe = Timeframe.weekly,
) -> dict[str, Any]:
    """쿼리 파라미터 버전. 목록 값은 쉼표로 구분한다."""
    request = AdvancedSearchRequest(
        query=q,
        type=type,
        filters=SearchFilters(
            languages=_split(languages),
            topics=_split(topics),
            min_stars=min_stars,
            max_stars=max_stars,
            has_good_first_issues=has_good_first_issues,
        ),
        project_id=project_id,
        timeframe=timeframe,
        limit=limit,
        page=page,
    )
    return await advanced_search_post(request, pool, tracker, user_id)


@router.get("/suggestions")
async def suggestions(pool: PoolDep, q: str = "") -> dict[str, list[str]]:
    """자동 완성 후보와 같은 클러스터의 관련 토픽."""
    if not q.strip():
        return {"suggestions": [], "related_topics": []}
    query = validate_search_query(q)
    return {
        "suggestions": search_suggestions(query, pool),
        "related_topics": related_topics(query),
    }


@router.get("/history")
async def get_history(tracker: PreferencesDep, user_id: UserIdDep) -> list[str]:
    return tracker.get_search_history(user_id)


@router.delete("/history", status_code=204)
async def clear_history(tracker: PreferencesDep, user_id: UserIdDep) -> None:
    tracker.clear_search_history(user_id)
