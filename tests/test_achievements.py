"""업적 시스템 테스트."""

from datetime import datetime, timedelta

import pytest

from oss_finder.achievements import (
    AchievementCategory,
    AchievementSystem,
    experience_for_level,
    level_from_experience,
)
from oss_finder.models import UserPreferences
from oss_finder.storage import MemoryStore


@pytest.fixture
def system(store: MemoryStore) -> AchievementSystem:
    return AchievementSystem(store)


def _unlocked_ids(system: AchievementSystem, user_id: str = "u1") -> set[str]:
    return {a.id for a in system.get_unlocked(user_id)}


class TestLevelCurve:
    """레벨 곡선 테스트."""

    def test_experience_for_level(self) -> None:
        assert experience_for_level(2) == 282
        assert experience_for_level(3) == 519

    @pytest.mark.parametrize(
        ("experience", "level"),
        [(-50, 1), (0, 1), (281, 1), (282, 2), (800, 2), (801, 3), (10500, 8)],
    )
    def test_level_from_experience(self, experience: int, level: int) -> None:
        assert level_from_experience(experience) == level

    def test_monotonic(self) -> None:
        levels = [level_from_experience(xp) for xp in range(0, 20000, 137)]
        assert levels == sorted(levels)


class TestContributions:
    """기여 업적 테스트."""

    def test_first_and_fifth_contribution(self, system: AchievementSystem, now: datetime) -> None:
        unlocked_per_call = [
            [a.id for a in system.track_contribution("u1", project_id=i, now=now)]
            for i in range(1, 7)
        ]

        assert unlocked_per_call == [["first-contribution"], [], [], [], ["contributor-5"], []]

        stats = system.get_stats("u1")
        assert stats.total_contributions == 6
        assert stats.experience == 350
        assert stats.level == 2
        assert stats.unlocked_achievements == 2
        assert stats.experience_to_next_level == 801 - 350

    def test_streak(self, system: AchievementSystem, now: datetime) -> None:
        for day in range(3):
            system.track_contribution("u1", 1, now + timedelta(days=day))
        assert system.get_stats("u1").contribution_streak == 3

        # 같은 날은 유지, 하루 넘게 쉬면 1로 초기화
        system.track_contribution("u1", 1, now + timedelta(days=2, hours=3))
        assert system.get_stats("u1").contribution_streak == 3
        system.track_contribution("u1", 1, now + timedelta(days=6))
        assert system.get_stats("u1").contribution_streak == 1

    def test_in_progress(self, system: AchievementSystem, now: datetime) -> None:
        system.track_contribution("u1", 1, now)
        in_progress = {a.id: a.progress for a in system.get_in_progress("u1")}
        assert in_progress["contributor-5"] == 1
        assert "first-contribution" not in in_progress


class TestProgress:
    """update_achievement_progress 테스트."""

    def test_progress_is_clamped(self, system: AchievementSystem) -> None:
        unlocked = system.update_achievement_progress("u1", "explorer-10", 50)
        assert unlocked is not None
        assert unlocked.progress == 10

        system.update_achievement_progress("u1", "contributor-10", -3)
        by_id = {a.id: a for a in system.get_achievements("u1")}
        assert by_id["contributor-10"].progress == 0

    def test_unlock_is_one_way(self, system: AchievementSystem) -> None:
        system.update_achievement_progress("u1", "first-bookmark", 1)

        assert system.update_achievement_progress("u1", "first-bookmark", 0) is None
        assert "first-bookmark" in _unlocked_ids(system)
        assert system.get_stats("u1").experience == 50

    def test_unknown_achievement(self, system: AchievementSystem) -> None:
        assert system.update_achievement_progress("u1", "nope", 1) is None

    def test_level_milestones(self, system: AchievementSystem) -> None:
        result = system.add_experience("u1", 10000)

        assert result.leveled_up
        assert result.new_level == 8
        assert "level-5" in _unlocked_ids(system)
        assert "level-10" not in _unlocked_ids(system)
        assert system.get_stats("u1").experience == 10500


class TestTracking:
    """활동 추적 테스트."""

    def test_bookmarks(self, system: AchievementSystem) -> None:
        assert [a.id for a in system.track_bookmark("u1", 1)] == ["first-bookmark"]
        assert system.track_bookmark("u1", 2) == []

    def test_shares(self, system: AchievementSystem) -> None:
        for project_id in range(4):
            assert system.track_share("u1", project_id) == []
        assert [a.id for a in system.track_share("u1", 4)] == ["share-5"]
        assert system.get_stats("u1").experience == 400

    def test_views(self, system: AchievementSystem) -> None:
        for project_id in range(9):
            assert system.track_project_view("u1", project_id) == []
        assert [a.id for a in system.track_project_view("u1", 9)] == ["explorer-10"]

    def test_language_diversity_ignores_case_and_none(self, system: AchievementSystem) -> None:
        for language in ["Python", "python", None, "Go", "Rust", "C"]:
            system.track_language_explored("u1", language)
        assert "language-diversity" not in _unlocked_ids(system)

        system.track_language_explored("u1", "Zig")
        assert "language-diversity" in _unlocked_ids(system)

    def test_profile_completed(self, system: AchievementSystem) -> None:
        assert system.track_profile_completed("u1", UserPreferences()) == []

        prefs = UserPreferences(preferred_languages=["Go"], interests=["cli"])
        assert [a.id for a in system.track_profile_completed("u1", prefs)] == ["profile-complete"]

    def test_by_category(self, system: AchievementSystem) -> None:
        social = system.get_by_category("u1", AchievementCategory.social)
        assert {a.id for a in social} == {"first-bookmark", "bookmarks-10", "share-5"}

    def test_clear_user_data(self, system: AchievementSystem, store: MemoryStore) -> None:
        system.track_bookmark("u1", 1)
        system.track_bookmark("u2", 1)

        system.clear_user_data("u1")

        assert system.get_stats("u1").experience == 0
        assert _unlocked_ids(system) == set()
        assert _unlocked_ids(system, "u2") == {"first-bookmark"}
