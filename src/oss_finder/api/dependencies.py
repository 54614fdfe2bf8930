"""FastAPI 의존성 모듈."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header

from oss_finder.achievements import AchievementSystem
from oss_finder.analytics import AnalyticsEngine
from oss_finder.config import settings
from oss_finder.models import Project
from oss_finder.notifiers import SlackNotifier
from oss_finder.preferences import PreferenceTracker
from oss_finder.sources import GitHubClient, ProjectCatalog, ProjectSource
from oss_finder.storage import KeyValueStore, create_store
from oss_finder.submissions import SubmissionService

ANONYMOUS_USER = "anonymous"
PROJECT_POOL_SIZE = 50


@lru_cache
def get_store() -> KeyValueStore:
    """설정된 저장소 백엔드 (프로세스당 하나)."""
    return create_store(settings)


def get_source() -> ProjectSource:
    return GitHubClient()


def get_catalog(source: Annotated[ProjectSource, Depends(get_source)]) -> ProjectCatalog:
    return ProjectCatalog(source)


def get_notifier() -> SlackNotifier:
    return SlackNotifier(settings.slack_webhook_url)


def get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """인증 제공자가 넘겨준 사용자 ID. 없으면 익명 사용자."""
    return x_user_id or ANONYMOUS_USER


def get_preference_tracker(store: Annotated[KeyValueStore, Depends(get_store)]) -> PreferenceTracker:
    return PreferenceTracker(store)


def get_achievement_system(store: Annotated[KeyValueStore, Depends(get_store)]) -> AchievementSystem:
    return AchievementSystem(store)


def get_analytics(store: Annotated[KeyValueStore, Depends(get_store)]) -> AnalyticsEngine:
    return AnalyticsEngine(store)


def get_submission_service(
    store: Annotated[KeyValueStore, Depends(get_store)],
    source: Annotated[ProjectSource, Depends(get_source)],
    notifier: Annotated[SlackNotifier, Depends(get_notifier)],
) -> SubmissionService:
    return SubmissionService(store, source, notifier)


async def get_project_pool(catalog: Annotated[ProjectCatalog, Depends(get_catalog)]) -> list[Project]:
    """점수 계산에 쓸 후보 프로젝트 목록."""
    return await catalog.list_projects(per_page=PROJECT_POOL_SIZE)


StoreDep = Annotated[KeyValueStore, Depends(get_store)]
CatalogDep = Annotated[ProjectCatalog, Depends(get_catalog)]
UserIdDep = Annotated[str, Depends(get_user_id)]
PoolDep = Annotated[list[Project], Depends(get_project_pool)]
PreferencesDep = Annotated[PreferenceTracker, Depends(get_preference_tracker)]
AchievementsDep = Annotated[AchievementSystem, Depends(get_achievement_system)]
AnalyticsDep = Annotated[AnalyticsEngine, Depends(get_analytics)]
SubmissionsDep = Annotated[SubmissionService, Depends(get_submission_service)]
