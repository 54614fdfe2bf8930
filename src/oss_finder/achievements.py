"""업적, 경험치, 레벨 관리 모듈."""

import logging
import math
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from oss_finder.models import UserPreferences, utcnow
from oss_finder.storage import KeyValueStore, read_counter, read_model, read_model_list, write_model

logger = logging.getLogger(__name__)

ACHIEVEMENTS_PREFIX = "user_achievements_"
STATS_PREFIX = "user_stats_"
VIEW_COUNT_PREFIX = "view_count_"
BOOKMARK_COUNT_PREFIX = "bookmark_count_"
SHARE_COUNT_PREFIX = "share_count_"
EXPLORED_LANGUAGES_PREFIX = "explored_languages_"


class AchievementCategory(str, Enum):
    """업적 분류."""

    contribution = "contribution"
    social = "social"
    exploration = "exploration"
    milestone = "milestone"


class AchievementRarity(str, Enum):
    """업적 희귀도."""

    common = "common"
    rare = "rare"
    epic = "epic"
    legendary = "legendary"


class Achievement(BaseModel):
    """업적 정의."""

    id: str
    title: str
    description: str
    icon: str
    category: AchievementCategory
    rarity: AchievementRarity
    max_progress: int = Field(ge=1)
    experience_reward: int = Field(ge=0)


class AchievementProgress(BaseModel):
    """사용자별 업적 진행 상태 (저장 형태)."""

    id: str
    progress: int = 0
    is_unlocked: bool = False
    unlocked_at: datetime | None = None


class UserAchievement(Achievement):
    """업적 정의와 사용자 진행 상태를 합친 것."""

    progress: int = 0
    is_unlocked: bool = False
    unlocked_at: datetime | None = None


class UserStats(BaseModel):
    """사용자 레벨과 활동 통계."""

    level: int = 1
    experience: int = 0
    experience_to_next_level: int = Field(default_factory=lambda: experience_for_level(2))
    total_achievements: int = Field(default_factory=lambda: len(ACHIEVEMENTS))
    unlocked_achievements: int = 0
    contribution_streak: int = 0
    total_contributions: int = 0
    last_contribution_date: datetime | None = None


class ExperienceResult(BaseModel):
    """경험치 추가 결과."""

    leveled_up: bool
    new_level: int | None = None
    stats: UserStats


def _achievement(
    achievement_id: str,
    title: str,
    description: str,
    icon: str,
    category: AchievementCategory,
    rarity: AchievementRarity,
    max_progress: int,
    experience_reward: int,
) -> Achievement:
    return Achievement(
        id=achievement_id,
        title=title,
        description=description,
        icon=icon,
        category=category,
        rarity=rarity,
        max_progress=max_progress,
        experience_reward=experience_reward,
    )


_C, _S, _E, _M = (
    AchievementCategory.contribution,
    AchievementCategory.social,
    AchievementCategory.exploration,
    AchievementCategory.milestone,
)
_COMMON, _RARE, _EPIC, _LEGENDARY = (
    AchievementRarity.common,
    AchievementRarity.rare,
    AchievementRarity.epic,
    AchievementRarity.legendary,
)

ACHIEVEMENTS: list[Achievement] = [
    _achievement("first-contribution", "First Steps",
                 "Make your first contribution to an open source project",
                 "🌱", _C, _COMMON, 1, 100),
    _achievement("contributor-5", "Getting Started",
                 "Contribute to 5 different projects", "🚀", _C, _COMMON, 5, 250),
    _achievement("contributor-10", "Active Contributor",
                 "Contribute to 10 different projects", "⭐", _C, _RARE, 10, 500),
    _achievement("contributor-25", "Open Source Champion",
                 "Contribute to 25 different projects", "🏆", _C, _EPIC, 25, 1000),
    _achievement("contributor-50", "Open Source Legend",
                 "Contribute to 50 different projects", "👑", _C, _LEGENDARY, 50, 2500),
    _achievement("streak-7", "Week Warrior",
                 "Maintain a 7-day contribution streak", "🔥", _C, _COMMON, 7, 200),
    _achievement("streak-30", "Monthly Master",
                 "Maintain a 30-day contribution streak", "💪", _C, _RARE, 30, 750),
    _achievement("streak-100", "Centurion",
                 "Maintain a 100-day contribution streak", "💯", _C, _EPIC, 100, 2000),
    _achievement("first-bookmark", "Bookworm",
                 "Bookmark your first project", "📚", _S, _COMMON, 1, 50),
    _achievement("bookmarks-10", "Curator",
                 "Bookmark 10 projects", "🗂️", _S, _RARE, 10, 300),
    _achievement("share-5", "Community Builder",
                 "Share 5 projects with others", "🤝", _S, _RARE, 5, 400),
    _achievement("explorer-10", "Explorer",
                 "View 10 different projects", "🧭", _E, _COMMON, 10, 100),
    _achievement("explorer-50", "Adventurer",
                 "View 50 different projects", "🗺️", _E, _RARE, 50, 400),
    _achievement("explorer-100", "Pathfinder",
                 "View 100 different projects", "🏔️", _E, _EPIC, 100, 800),
    _achievement("language-diversity", "Polyglot",
                 "Explore projects in 5 different programming languages",
                 "🌐", _E, _RARE, 5, 500),
    _achievement("profile-complete", "Profile Pro",
                 "Complete your profile with preferences and interests",
                 "✅", _M, _COMMON, 1, 150),
    _achievement("level-5", "Rising Star", "Reach level 5", "🌟", _M, _RARE, 1, 500),
    _achievement("level-10", "Veteran", "Reach level 10", "🎖️", _M, _EPIC, 1, 1000),
    _achievement("level-25", "Master", "Reach level 25", "🧙", _M, _LEGENDARY, 1, 2500),
]  # fmt: skip

ACHIEVEMENTS_BY_ID = {a.id: a for a in ACHIEVEMENTS}

CONTRIBUTION_ACHIEVEMENTS = [
    "first-contribution",
    "contributor-5",
    "contributor-10",
    "contributor-25",
    "contributor-50",
]
STREAK_ACHIEVEMENTS = ["streak-7", "streak-30", "streak-100"]
EXPLORER_ACHIEVEMENTS = ["explorer-10", "explorer-50", "explorer-100"]
BOOKMARK_ACHIEVEMENTS = ["first-bookmark", "bookmarks-10"]
LEVEL_ACHIEVEMENTS = {"level-5": 5, "level-10": 10, "level-25": 25}


def experience_for_level(level: int) -> int:
    """level에 도달하는 데 필요한 경험치 (해당 레벨 구간만)."""
    return math.floor(100 * level**1.5)


def total_experience_for_level(level: int) -> int:
    """레벨 2부터 level까지 필요한 누적 경험치."""
    return sum(experience_for_level(n) for n in range(2, level + 1))


def level_from_experience(experience: int) -> int:
    """누적 경험치로 레벨을 계산한다. 최저 레벨은 1이다."""
    experience = max(experience, 0)
    level = 1
    total = 0
    while total <= experience:
        level += 1
        total += experience_for_level(level)
    return level - 1


class AchievementSystem:
    """사용자 업적 진행과 레벨을 키-값 저장소에 기록한다."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # 저장소 입출력

    def _load_progress(self, user_id: str) -> dict[str, AchievementProgress]:
        entries = read_model_list(self.store, f"{ACHIEVEMENTS_PREFIX}{user_id}", AchievementProgress)
        return {entry.id: entry for entry in entries}

    def _save_progress(self, user_id: str, progress: dict[str, AchievementProgress]) -> None:
        write_model(self.store, f"{ACHIEVEMENTS_PREFIX}{user_id}", list(progress.values()))

    def _save_stats(self, user_id: str, stats: UserStats) -> None:
        write_model(self.store, f"{STATS_PREFIX}{user_id}", stats)

    def _bump_counter(self, prefix: str, user_id: str) -> int:
        key = f"{prefix}{user_id}"
        count = read_counter(self.store, key) + 1
        self.store.set(key, count)
        return count

    # 조회

    def get_stats(self, user_id: str) -> UserStats:
        """사용자 통계. 처음이면 기본값."""
        return read_model(self.store, f"{STATS_PREFIX}{user_id}", UserStats, UserStats)

    def get_achievements(self, user_id: str) -> list[UserAchievement]:
        """모든 업적 정의에 사용자 진행 상태를 합쳐 반환한다."""
        progress = self._load_progress(user_id)
        result = []
        for definition in ACHIEVEMENTS:
            state = progress.get(definition.id) or AchievementProgress(id=definition.id)
            result.append(
                UserAchievement(
                    **definition.model_dump(),
                    progress=state.progress,
                    is_unlocked=state.is_unlocked,
                    unlocked_at=state.unlocked_at,
                )
            )
        return result

    def get_by_category(self, user_id: str, category: AchievementCategory) -> list[UserAchievement]:
        return [a for a in self.get_achievements(user_id) if a.category == category]

    def get_unlocked(self, user_id: str) -> list[UserAchievement]:
        return [a for a in self.get_achievements(user_id) if a.is_unlocked]

    def get_in_progress(self, user_id: str) -> list[UserAchievement]:
        return [a for a in self.get_achievements(user_id) if not a.is_unlocked and a.progress > 0]

    # 경험치와 진행

    def add_experience(self, user_id: str, amount: int) -> ExperienceResult:
        """경험치를 더하고 레벨을 다시 계산한다."""
        stats = self.get_stats(user_id)
        old_level = stats.level

        stats.experience += amount
        stats.level = level_from_experience(stats.experience)
        stats.experience_to_next_level = (
            total_experience_for_level(stats.level + 1) - stats.experience
        )
        self._save_stats(user_id, stats)

        leveled_up = stats.level > old_level
        if leveled_up:
            logger.info(f"User {user_id} reached level {stats.level}")
            self._check_level_milestones(user_id, stats.level)
            stats = self.get_stats(user_id)

        return ExperienceResult(
            leveled_up=leveled_up,
            new_level=stats.level if leveled_up else None,
            stats=stats,
        )

    def update_achievement_progress(
        self,
        user_id: str,
        achievement_id: str,
        progress: int,
    ) -> UserAchievement | None:
        """업적 진행도를 갱신한다.

        이번 호출로 잠금이 해제되면 해제된 업적을, 아니면 None을 반환한다.
        없는 업적이나 이미 해제된 업적은 무시한다.
        """
        definition = ACHIEVEMENTS_BY_ID.get(achievement_id)
        if definition is None:
            return None

        states = self._load_progress(user_id)
        state = states.get(achievement_id) or AchievementProgress(id=achievement_id)
        if state.is_unlocked:
            return None

        state.progress = max(0, min(progress, definition.max_progress))
        unlocked = state.progress >= definition.max_progress
        if unlocked:
            state.is_unlocked = True
            state.unlocked_at = utcnow()
        states[achievement_id] = state
        self._save_progress(user_id, states)

        if not unlocked:
            return None

        stats = self.get_stats(user_id)
        stats.unlocked_achievements += 1
        self._save_stats(user_id, stats)

        logger.info(f"User {user_id} unlocked {achievement_id}")
        self.add_experience(user_id, definition.experience_reward)

        return UserAchievement(
            **definition.model_dump(),
            progress=state.progress,
            is_unlocked=True,
            unlocked_at=state.unlocked_at,
        )

    def _update_many(self, user_id: str, achievement_ids: list[str], progress: int) -> list[UserAchievement]:
        unlocked = []
        for achievement_id in achievement_ids:
            result = self.update_achievement_progress(user_id, achievement_id, progress)
            if result is not None:
                unlocked.append(result)
        return unlocked

    def _check_level_milestones(self, user_id: str, level: int) -> None:
        for achievement_id, required in LEVEL_ACHIEVEMENTS.items():
            if level >= required:
                self.update_achievement_progress(user_id, achievement_id, 1)

    # 활동 추적

    def track_contribution(
        self,
        user_id: str,
        project_id: int,
        now: datetime | None = None,
    ) -> list[UserAchievement]:
        """기여를 기록하고 기여, 연속 기여 업적을 갱신한다."""
        now = now or utcnow()
        stats = self.get_stats(user_id)
        stats.total_contributions += 1

        if stats.last_contribution_date is None:
            stats.contribution_streak = 1
        else:
            days = math.floor((now - stats.last_contribution_date).total_seconds() / 86400)
            if days == 1:
                stats.contribution_streak += 1
            elif days > 1:
                stats.contribution_streak = 1
        stats.last_contribution_date = now
        self._save_stats(user_id, stats)
        logger.debug(f"User {user_id} contributed to project {project_id}")

        unlocked = self._update_many(user_id, CONTRIBUTION_ACHIEVEMENTS, stats.total_contributions)
        unlocked += self._update_many(user_id, STREAK_ACHIEVEMENTS, stats.contribution_streak)
        return unlocked

    def track_project_view(self, user_id: str, project_id: int) -> list[UserAchievement]:
        """프로젝트 조회 수를 세고 탐험 업적을 갱신한다."""
        count = self._bump_counter(VIEW_COUNT_PREFIX, user_id)
        return self._update_many(user_id, EXPLORER_ACHIEVEMENTS, count)

    def track_bookmark(self, user_id: str, project_id: int) -> list[UserAchievement]:
        """북마크 수를 세고 북마크 업적을 갱신한다."""
        count = self._bump_counter(BOOKMARK_COUNT_PREFIX, user_id)
        return self._update_many(user_id, BOOKMARK_ACHIEVEMENTS, count)

    def track_share(self, user_id: str, project_id: int) -> list[UserAchievement]:
        """공유 수를 세고 share-5 업적을 갱신한다."""
        count = self._bump_counter(SHARE_COUNT_PREFIX, user_id)
        return self._update_many(user_id, ["share-5"], count)

    def track_language_explored(self, user_id: str, language: str | None) -> list[UserAchievement]:
        """조회한 프로젝트 언어를 모아 language-diversity 업적을 갱신한다."""
        if not language:
            return []
        key = f"{EXPLORED_LANGUAGES_PREFIX}{user_id}"
        raw = self.store.get(key)
        languages = [str(lang) for lang in raw] if isinstance(raw, list) else []
        if language.lower() not in languages:
            languages.append(language.lower())
            self.store.set(key, languages)
        return self._update_many(user_id, ["language-diversity"], len(languages))

    def track_profile_completed(self, user_id: str, preferences: UserPreferences) -> list[UserAchievement]:
        """선호 언어와 관심사를 모두 채웠으면 profile-complete 업적을 해제한다."""
        if not (preferences.preferred_languages and preferences.interests):
            return []
        return self._update_many(user_id, ["profile-complete"], 1)

    def clear_user_data(self, user_id: str) -> None:
        """업적 관련 데이터를 모두 삭제한다."""
        for prefix in (
            ACHIEVEMENTS_PREFIX,
            STATS_PREFIX,
            VIEW_COUNT_PREFIX,
            BOOKMARK_COUNT_PREFIX,
            SHARE_COUNT_PREFIX,
            EXPLORED_LANGUAGES_PREFIX,
        ):
            self.store.delete(f"{prefix}{user_id}")
        logger.info(f"Cleared achievement data for user {user_id}")
