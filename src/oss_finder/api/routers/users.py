"""사용자 상태 라우터.

사용자는 ``X-User-Id`` 헤더로 구분한다.
"""

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from oss_finder.achievements import AchievementCategory, UserAchievement, UserStats
from oss_finder.api.dependencies import (
    AchievementsDep,
    AnalyticsDep,
    CatalogDep,
    PreferencesDep,
    UserIdDep,
)
from oss_finder.models import SkillLevel, UserPreferences
from oss_finder.preferences import UserDataExport

router = APIRouter(prefix="/api/users/me", tags=["users"])


@router.get("/preferences")
async def get_preferences(tracker: PreferencesDep, user_id: UserIdDep) -> UserPreferences:
    return tracker.get_preferences(user_id)


@router.put("/preferences")
async def put_preferences(
    preferences: UserPreferences,
    tracker: PreferencesDep,
    achievements: AchievementsDep,
    user_id: UserIdDep,
) -> dict[str, Any]:
    """선호도 전체를 저장한다."""
    saved = tracker.save_preferences(user_id, preferences)
    unlocked = achievements.track_profile_completed(user_id, saved)
    return {"preferences": saved, "unlocked": unlocked}


class SkillLevelRequest(BaseModel):
    skill_level: SkillLevel


@router.put("/preferences/skill-level")
async def put_skill_level(
    request: SkillLevelRequest,
    tracker: PreferencesDep,
    user_id: UserIdDep,
) -> UserPreferences:
    return tracker.set_skill_level(user_id, request.skill_level)


@router.post("/preferences/languages/{language}")
async def add_language(language: str, tracker: PreferencesDep, user_id: UserIdDep) -> UserPreferences:
    return tracker.add_language(user_id, language)


@router.delete("/preferences/languages/{language}")
async def remove_language(language: str, tracker: PreferencesDep, user_id: UserIdDep) -> UserPreferences:
    return tracker.remove_language(user_id, language)


@router.post("/preferences/interests/{interest}")
async def add_interest(interest: str, tracker: PreferencesDep, user_id: UserIdDep) -> UserPreferences:
    return tracker.add_interest(user_id, interest)


@router.delete("/preferences/interests/{interest}")
async def remove_interest(interest: str, tracker: PreferencesDep, user_id: UserIdDep) -> UserPreferences:
    return tracker.remove_interest(user_id, interest)


@router.post("/bookmarks/{project_id}")
async def add_bookmark(
    project_id: int,
    tracker: PreferencesDep,
    achievements: AchievementsDep,
    analytics: AnalyticsDep,
    user_id: UserIdDep,
) -> dict[str, Any]:
    preferences = tracker.track_bookmark(user_id, project_id, bookmarked=True)
    analytics.track_project_bookmark(project_id, bookmarked=True)
    unlocked = achievements.track_bookmark(user_id, project_id)
    return {"preferences": preferences, "unlocked": unlocked}


@router.delete("/bookmarks/{project_id}")
async def remove_bookmark(
    project_id: int,
    tracker: PreferencesDep,
    analytics: AnalyticsDep,
    user_id: UserIdDep,
) -> UserPreferences:
    analytics.track_project_bookmark(project_id, bookmarked=False)
    return tracker.track_bookmark(user_id, project_id, bookmarked=False)


@router.post("/views/{project_id}")
async def record_view(
    project_id: int,
    catalog: CatalogDep,
    tracker: PreferencesDep,
    achievements: AchievementsDep,
    analytics: AnalyticsDep,
    user_id: UserIdDep,
    duration: float | None = None,
) -> dict[str, Any]:
    """프로젝트 조회를 기록한다. duration은 체류 시간 (초)."""
    project = await catalog.get_project(project_id)
    preferences = tracker.track_view(user_id, project_id)
    analytics.track_project_view(project_id, user_id, duration)
    unlocked = achievements.track_project_view(user_id, project_id)
    unlocked += achievements.track_language_explored(user_id, project.language)
    return {"preferences": preferences, "unlocked": unlocked}


@router.post("/contributions/{project_id}")
async def record_contribution(
    project_id: int,
    tracker: PreferencesDep,
    achievements: AchievementsDep,
    analytics: AnalyticsDep,
    user_id: UserIdDep,
) -> dict[str, Any]:
    preferences = tracker.track_contribution(user_id, project_id)
    analytics.track_contribution(user_id, project_id)
    unlocked = achievements.track_contribution(user_id, project_id)
    return {
        "preferences": preferences,
        "stats": achievements.get_stats(user_id),
        "unlocked": unlocked,
    }


@router.get("/achievements")
async def list_achievements(
    achievements: AchievementsDep,
    user_id: UserIdDep,
    category: AchievementCategory | None = None,
) -> list[UserAchievement]:
    if category is not None:
        return achievements.get_by_category(user_id, category)
    return achievements.get_achievements(user_id)


@router.get("/stats")
async def get_stats(achievements: AchievementsDep, user_id: UserIdDep) -> UserStats:
    return achievements.get_stats(user_id)


@router.get("/export")
async def export(tracker: PreferencesDep, user_id: UserIdDep) -> UserDataExport:
    return tracker.export(user_id)


@router.delete("", status_code=204)
async def delete_user(
    tracker: PreferencesDep,
    achievements: AchievementsDep,
    user_id: UserIdDep,
) -> None:
    """사용자 데이터를 모두 삭제한다."""
    tracker.clear(user_id)
    achievements.clear_user_data(user_id)
