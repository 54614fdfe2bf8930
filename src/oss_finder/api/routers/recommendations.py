"""추천 라우터."""

from typing import Annotated, Any

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from oss_finder.api.dependencies import CatalogDep, PoolDep, PreferencesDep, UserIdDep
from oss_finder.models import FeedbackData, FeedbackType, UserPreferences
from oss_finder.scoring import (
    RecommendedProject,
    apply_feedback,
    explain_recommendation,
    generate_recommendations,
    trending_recommendations,
)

router = APIRouter(prefix="/api/recommendations", tags=["recommendations"])


class RecommendationRequest(BaseModel):
    preferences: UserPreferences
    limit: int = Field(default=10, ge=1, le=50)


class FeedbackRequest(BaseModel):
    project_id: int
    feedback_type: FeedbackType


def _with_explanations(results: list[RecommendedProject]) -> list[dict[str, Any]]:
    """추천마다 신뢰도가 높은 근거만 모은 explanation을 붙인다."""
    return [{**r.model_dump(), "explanation": explain_recommendation(r)} for r in results]


@router.get("")
async def recommendations(
    pool: PoolDep,
    tracker: PreferencesDep,
    user_id: UserIdDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> dict[str, Any]:
    """저장된 선호도로 추천한다. 선호 정보가 없으면 인기 프로젝트를 추천한다."""
    preferences = tracker.get_preferences(user_id)
    if preferences.is_empty:
        results = trending_recommendations(pool, limit)
    else:
        results = generate_recommendations(pool, preferences, limit)
    return {
        "recommendations": _with_explanations(results),
        "count": len(results),
        "personalized": not preferences.is_empty,
    }


@router.post("")
async def recommend_for(request: RecommendationRequest, pool: PoolDep) -> dict[str, Any]:
    """요청에 담긴 선호도로 추천한다."""
    results = generate_recommendations(pool, request.preferences, request.limit)
    return {"recommendations": _with_explanations(results), "count": len(results)}


@router.post("/feedback")
async def feedback(
    request: FeedbackRequest,
    catalog: CatalogDep,
    tracker: PreferencesDep,
    user_id: UserIdDep,
) -> dict[str, Any]:
    """추천 피드백을 기록하고 선호도에 반영한다."""
    project = await catalog.get_project(request.project_id)
    data = FeedbackData(
        project_id=request.project_id,
        user_id=user_id,
        feedback_type=request.feedback_type,
    )
    tracker.record_feedback(data)
    preferences = apply_feedback(tracker.get_preferences(user_id), data, project)
    tracker.save_preferences(user_id, preferences)
    return {"success": True, "message": "Feedback recorded successfully"}
