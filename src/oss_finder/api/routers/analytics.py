"""분석 라우터."""

import logging
from typing import Any, Literal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from oss_finder.achievements import UserAchievement
from oss_finder.analytics import (
    ActionType,
    ContributionImpactMetrics,
    ContributionSize,
    ProjectPopularityMetrics,
    UserAction,
    community_health,
    community_health_summary,
    maintainer_analytics,
    maintainer_summary,
    recommended_skill_level,
)
from oss_finder.api.dependencies import (
    AchievementsDep,
    AnalyticsDep,
    CatalogDep,
    PoolDep,
    UserIdDep,
)
from oss_finder.exceptions import GitHubAPIError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


class EngagementEvent(BaseModel):
    """참여도 이벤트. event가 action이면 action 필드가 필요하다."""

    event: Literal["action", "session_start", "session_end"] = "action"
    action: ActionType | None = None
    page: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class ContributionEvent(BaseModel):
    project_id: int
    size: ContributionSize = "medium"


class PopularityEvent(BaseModel):
    project_id: int
    action: Literal["view", "bookmark", "unbookmark", "share", "click_through"]
    duration: float | None = Field(default=None, description="체류 시간 (초)")


@router.get("/engagement")
async def get_engagement(analytics: AnalyticsDep, user_id: UserIdDep) -> dict[str, Any]:
    return {
        "metrics": analytics.get_engagement(user_id),
        "session": analytics.get_session(user_id),
    }


@router.post("/engagement")
async def track_engagement(
    event: EngagementEvent,
    analytics: AnalyticsDep,
    user_id: UserIdDep,
) -> dict[str, Any]:
    """행동을 기록하거나 세션을 시작, 종료한다."""
    if event.event == "session_start":
        return {"session": analytics.start_session(user_id)}
    if event.event == "session_end":
        session = analytics.end_session(user_id)
        if session is None:
            raise NotFoundError("No active session")
        return {"session": session, "metrics": analytics.get_engagement(user_id)}

    if event.action is None:
        raise ValidationError("Action is required")
    action = UserAction(type=event.action, metadata=event.metadata)
    return {"metrics": analytics.track_user_engagement(user_id, action, event.page)}


@router.get("/contribution")
async def get_contribution(analytics: AnalyticsDep, user_id: UserIdDep) -> ContributionImpactMetrics:
    return analytics.get_contribution_impact(user_id)


@router.post("/contribution")
async def track_contribution(
    event: ContributionEvent,
    analytics: AnalyticsDep,
    user_id: UserIdDep,
) -> ContributionImpactMetrics:
    return analytics.track_contribution(user_id, event.project_id, event.size)


@router.get("/popularity", response_model=None)
async def get_popularity(
    analytics: AnalyticsDep,
    project_id: int | None = None,
    project_ids: str | None = None,
) -> ProjectPopularityMetrics | dict[str, Any]:
    """project_id 하나의 지표, 또는 project_ids (쉼표 구분) 중 인기 순위."""
    if project_id is not None:
        return analytics.get_popularity(project_id)
    if project_ids:
        try:
            ids = [int(pid) for pid in project_ids.split(",") if pid.strip()]
        except ValueError as e:
            raise ValidationError("Invalid project IDs") from e
        return {"top_projects": analytics.top_projects(ids)}
    raise ValidationError("Project ID or IDs are required")


@router.post("/popularity")
async def track_popularity(
    event: PopularityEvent,
    analytics: AnalyticsDep,
    achievements: AchievementsDep,
    user_id: UserIdDep,
) -> dict[str, Any]:
    """인기도 이벤트를 기록한다. 공유는 share 업적도 갱신한다."""
    unlocked: list[UserAchievement] = []
    if event.action == "view":
        metrics = analytics.track_project_view(event.project_id, user_id, event.duration)
    elif event.action in ("bookmark", "unbookmark"):
        metrics = analytics.track_project_bookmark(event.project_id, event.action == "bookmark")
    elif event.action == "share":
        metrics = analytics.track_project_share(event.project_id)
        unlocked = achievements.track_share(user_id, event.project_id)
    else:
        metrics = analytics.track_click_through(event.project_id)
    return {"metrics": metrics, "unlocked": unlocked}


@router.get("/community-health")
async def get_community_health(
    catalog: CatalogDep,
    pool: PoolDep,
    project_id: int | None = None,
) -> dict[str, Any]:
    """프로젝트 하나의 건강도, 또는 현재 목록 전체의 요약."""
    if project_id is None:
        return {"summary": community_health_summary(pool)}
    project = await catalog.get_project(project_id)
    health = community_health(project)
    return {
        "project": project,
        "health": health,
        "recommended_skill_level": recommended_skill_level(health),
    }


@router.get("/maintainer")
async def get_maintainer_dashboard(
    project_id: int,
    catalog: CatalogDep,
    analytics: AnalyticsDep,
    user_id: UserIdDep,
) -> dict[str, Any]:
    """메인테이너 대시보드 지표와 요약."""
    project = await catalog.get_project(project_id)
    try:
        contributors = await catalog.list_contributors(project)
    except (GitHubAPIError, NotFoundError) as e:
        logger.warning(f"Contributors unavailable for {project.full_name}: {e}")
        contributors = []

    data = maintainer_analytics(project, user_id, analytics.get_popularity(project_id), contributors)
    return {"analytics": data, "summary": maintainer_summary(data)}
