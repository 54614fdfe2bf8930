"""사용자 선호도와 활동 기록 관리 모듈."""

import logging

from pydantic import BaseModel, Field

from oss_finder.config import settings
from oss_finder.models import FeedbackData, SkillLevel, UserPreferences, utcnow
from oss_finder.storage import KeyValueStore, read_model, read_model_list, write_model

logger = logging.getLogger(__name__)

PREFERENCES_PREFIX = "user_preferences_"
FEEDBACK_PREFIX = "user_feedback_"
SEARCH_HISTORY_PREFIX = "oss-finder-search-history_"


class UserDataExport(BaseModel):
    """사용자 데이터 내보내기 결과."""

    user_id: str
    preferences: UserPreferences
    feedback: list[FeedbackData] = Field(default_factory=list)
    search_history: list[str] = Field(default_factory=list)


def _append_bounded(items: list[int], value: int, limit: int) -> list[int]:
    if value not in items:
        items.append(value)
    return items[-limit:]


class PreferenceTracker:
    """사용자별 선호도, 피드백, 검색 기록을 키-값 저장소에 보관한다."""

    def __init__(
        self,
        store: KeyValueStore,
        history_limit: int | None = None,
        feedback_limit: int | None = None,
        search_history_limit: int | None = None,
    ) -> None:
        """
        Args:
            store: 키-값 저장소
            history_limit: 조회/북마크/기여 목록 최대 길이. None이면 설정값.
            feedback_limit: 피드백 기록 최대 길이. None이면 설정값.
            search_history_limit: 검색 기록 최대 길이. None이면 설정값.
        """
        self.store = store
        self.history_limit = history_limit or settings.history_limit
        self.feedback_limit = feedback_limit or settings.feedback_limit
        self.search_history_limit = search_history_limit or settings.search_history_limit

    def get_preferences(self, user_id: str) -> UserPreferences:
        """선호도를 가져온다. 처음이면 기본값."""
        return read_model(self.store, f"{PREFERENCES_PREFIX}{user_id}", UserPreferences, UserPreferences)

    def save_preferences(self, user_id: str, preferences: UserPreferences) -> UserPreferences:
        """선호도 전체를 덮어쓴다."""
        preferences.updated_at = utcnow()
        write_model(self.store, f"{PREFERENCES_PREFIX}{user_id}", preferences)
        return preferences

    def update_preferences(self, user_id: str, **updates: object) -> UserPreferences:
        """일부 필드만 바꿔 저장한다."""
        current = self.get_preferences(user_id)
        merged = UserPreferences.model_validate({**current.model_dump(), **updates})
        return self.save_preferences(user_id, merged)

    def track_view(self, user_id: str, project_id: int) -> UserPreferences:
        """프로젝트 조회를 기록한다. 최근 목록만 유지한다."""
        prefs = self.get_preferences(user_id)
        if project_id in prefs.viewed_projects:
            return prefs
        prefs.viewed_projects = _append_bounded(
            prefs.viewed_projects, project_id, self.history_limit
        )
        return self.save_preferences(user_id, prefs)

    def track_bookmark(self, user_id: str, project_id: int, bookmarked: bool) -> UserPreferences:
        """북마크 추가 또는 해제를 기록한다."""
        prefs = self.get_preferences(user_id)
        if bookmarked:
            prefs.bookmarked_projects = _append_bounded(
                prefs.bookmarked_projects, project_id, self.history_limit
            )
        else:
            prefs.bookmarked_projects = [
                pid for pid in prefs.bookmarked_projects if pid != project_id
            ]
        return self.save_preferences(user_id, prefs)

    def track_contribution(self, user_id: str, project_id: int) -> UserPreferences:
        """기여한 프로젝트를 기록한다."""
        prefs = self.get_preferences(user_id)
        prefs.contributed_projects = _append_bounded(
            prefs.contributed_projects, project_id, self.history_limit
        )
        return self.save_preferences(user_id, prefs)

    def add_language(self, user_id: str, language: str) -> UserPreferences:
        prefs = self.get_preferences(user_id)
        if language in prefs.preferred_languages:
            return prefs
        prefs.preferred_languages.append(language)
        return self.save_preferences(user_id, prefs)

    def remove_language(self, user_id: str, language: str) -> UserPreferences:
        prefs = self.get_preferences(user_id)
        prefs.preferred_languages = [lang for lang in prefs.preferred_languages if lang != language]
        return self.save_preferences(user_id, prefs)

    def add_interest(self, user_id: str, interest: str) -> UserPreferences:
        prefs = self.get_preferences(user_id)
        if interest in prefs.interests:
            return prefs
        prefs.interests.append(interest)
        return self.save_preferences(user_id, prefs)

    def remove_interest(self, user_id: str, interest: str) -> UserPreferences:
        prefs = self.get_preferences(user_id)
        prefs.interests = [i for i in prefs.interests if i != interest]
        return self.save_preferences(user_id, prefs)

    def set_skill_level(self, user_id: str, skill_level: SkillLevel) -> UserPreferences:
        return self.update_preferences(user_id, skill_level=skill_level)

    def record_feedback(self, feedback: FeedbackData) -> None:
        """추천 피드백을 기록한다. 최근 기록만 유지한다."""
        key = f"{FEEDBACK_PREFIX}{feedback.user_id}"
        history = read_model_list(self.store, key, FeedbackData)
        history.append(feedback)
        write_model(self.store, key, history[-self.feedback_limit :])

    def get_feedback(self, user_id: str) -> list[FeedbackData]:
        return read_model_list(self.store, f"{FEEDBACK_PREFIX}{user_id}", FeedbackData)

    def get_search_history(self, user_id: str) -> list[str]:
        """최근 검색어 목록 (최신순)."""
        raw = self.store.get(f"{SEARCH_HISTORY_PREFIX}{user_id}")
        if not isinstance(raw, list):
            return []
        return [str(q) for q in raw]

    def add_search(self, user_id: str, query: str) -> list[str]:
        """검색어를 맨 앞에 추가한다. 중복은 제거한다."""
        query = query.strip()
        if not query:
            return self.get_search_history(user_id)
        history = [q for q in self.get_search_history(user_id) if q != query]
        history = [query, *history][: self.search_history_limit]
        self.store.set(f"{SEARCH_HISTORY_PREFIX}{user_id}", history)
        return history

    def clear_search_history(self, user_id: str) -> None:
        self.store.delete(f"{SEARCH_HISTORY_PREFIX}{user_id}")

    def export(self, user_id: str) -> UserDataExport:
        """사용자 데이터를 한 번에 내보낸다."""
        return UserDataExport(
            user_id=user_id,
            preferences=self.get_preferences(user_id),
            feedback=self.get_feedback(user_id),
            search_history=self.get_search_history(user_id),
        )

    def clear(self, user_id: str) -> None:
        """사용자 데이터를 모두 삭제한다."""
        for prefix in (PREFERENCES_PREFIX, FEEDBACK_PREFIX, SEARCH_HISTORY_PREFIX):
            self.store.delete(f"{prefix}{user_id}")
        logger.info(f"Cleared preference data for user {user_id}")
