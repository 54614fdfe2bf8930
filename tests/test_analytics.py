"""분석 엔진 테스트."""

from datetime import datetime, timedelta

import pytest

from oss_finder.analytics import (
    ActionType,
    AnalyticsEngine,
    ProjectPopularityMetrics,
    UserAction,
    UserEngagementMetrics,
    activity_level,
    community_health,
    community_health_summary,
    engagement_score,
    maintainer_analytics,
    maintainer_summary,
    recommended_skill_level,
)
from oss_finder.models import Contributor, Project, SkillLevel
from oss_finder.storage import MemoryStore


@pytest.fixture
def engine(store: MemoryStore) -> AnalyticsEngine:
    return AnalyticsEngine(store)


@pytest.fixture
def healthy(make_project) -> Project:
    return make_project(
        "healthy",
        id=1,
        description="A terminal UI toolkit with a friendly community and good docs",
        topics=["good-first-issue", "cli", "rust", "tui"],
        stars=1000,
        forks=100,
        open_issues=2,
    )


@pytest.fixture
def dormant(make_project) -> Project:
    return make_project("dormant", id=2, updated_days_ago=400, license=None)


class TestEngagement:
    """사용자 참여도 테스트."""

    def test_engagement_score_is_capped(self) -> None:
        metrics = UserEngagementMetrics(
            user_id="u1",
            session_count=500,
            total_time_spent=5000,
            projects_viewed=1000,
            projects_bookmarked=200,
            searches_performed=500,
            contributions_initiated=100,
        )
        assert engagement_score(metrics) == 100

    @pytest.mark.parametrize(
        ("score", "level"), [(0, "low"), (25, "medium"), (50, "high"), (75, "very_high")]
    )
    def test_activity_level(self, score: int, level: str) -> None:
        assert activity_level(score) == level

    def test_track_actions(self, engine: AnalyticsEngine) -> None:
        engine.track_user_engagement("u1", UserAction(type=ActionType.view_project), page="/p/1")
        engine.track_user_engagement("u1", UserAction(type=ActionType.view_project), page="/p/1")
        metrics = engine.track_user_engagement("u1", UserAction(type=ActionType.search))

        assert metrics.projects_viewed == 2
        assert metrics.searches_performed == 1
        assert metrics.pages_viewed == 1
        assert metrics.activity_level == "low"

        session = engine.get_session("u1")
        assert session is not None
        assert len(session.actions_performed) == 3

    def test_session_lifecycle(self, engine: AnalyticsEngine) -> None:
        session = engine.start_session("u1")

        ended = engine.end_session("u1", now=session.start_time + timedelta(minutes=30))

        assert ended is not None
        assert ended.duration == pytest.approx(30)
        metrics = engine.get_engagement("u1")
        assert metrics.session_count == 1
        assert metrics.total_time_spent == pytest.approx(30)
        assert engine.get_session("u1") is None

    def test_end_without_session(self, engine: AnalyticsEngine) -> None:
        assert engine.end_session("u1") is None


class TestPopularity:
    """프로젝트 인기도 테스트."""

    def test_views_and_unique_viewers(self, engine: AnalyticsEngine) -> None:
        engine.track_project_view(1, "u1", duration=10)
        engine.track_project_view(1, "u1", duration=20)
        metrics = engine.track_project_view(1, "u2")

        assert metrics.view_count == 3
        assert metrics.unique_viewers == 2
        assert metrics.average_time_on_page == pytest.approx(15)

    def test_click_through_rate(self, engine: AnalyticsEngine) -> None:
        for user in ["u1", "u2", "u3", "u4"]:
            engine.track_project_view(1, user)

        metrics = engine.track_click_through(1)

        assert metrics.click_through_rate == pytest.approx(25)

    def test_click_through_without_views(self, engine: AnalyticsEngine) -> None:
        assert engine.track_click_through(1).click_through_rate == 0

    def test_click_through_rate_is_capped(self, engine: AnalyticsEngine) -> None:
        engine.track_project_view(1, "u1")
        for _ in range(3):
            metrics = engine.track_click_through(1)

        assert metrics.click_through_rate == 100

    def test_bookmark_count_never_negative(self, engine: AnalyticsEngine) -> None:
        engine.track_project_bookmark(1, bookmarked=False)
        engine.track_project_bookmark(1, bookmarked=True)
        assert engine.track_project_bookmark(1, bookmarked=False).bookmark_count == 0

    def test_top_projects(self, engine: AnalyticsEngine) -> None:
        for _ in range(5):
            engine.track_project_share(2)
        for _ in range(4):
            engine.track_project_share(3)

        assert engine.top_projects([1, 2, 3], limit=2) == [2, 3]


class TestContributionImpact:
    """기여 영향력 테스트."""

    def test_track_contribution(self, engine: AnalyticsEngine, now: datetime) -> None:
        engine.track_contribution("u1", 1, now=now)
        engine.track_contribution("u1", 1, now=now + timedelta(days=10))
        metrics = engine.track_contribution("u1", 2, size="large", now=now + timedelta(days=60))

        assert metrics.total_contributions == 3
        assert metrics.projects_contributed == 2
        assert metrics.contribution_frequency == pytest.approx(1.5)
        assert metrics.average_contribution_size == "large"
        assert metrics.first_contribution_at == now
        assert metrics.impact_score == 6
        assert metrics.contribution_quality == "beginner"


class TestCommunityHealth:
    """커뮤니티 건강도 테스트."""

    def test_healthy_project(self, healthy: Project, now: datetime) -> None:
        health = community_health(healthy, now)

        assert health.activity_level == "very_active"
        assert health.maintainer_responsiveness == 100
        assert health.contributor_diversity == 20
        assert health.documentation_quality == 100
        assert health.new_contributor_friendliness == 90
        assert health.growth_score == 25
        assert health.health_score == 79
        assert recommended_skill_level(health) == SkillLevel.beginner

    def test_dormant_project(self, dormant: Project, now: datetime) -> None:
        health = community_health(dormant, now)

        assert health.activity_level == "dormant"
        assert health.health_score < 50
        assert recommended_skill_level(health) == SkillLevel.intermediate

    def test_summary(self, healthy: Project, dormant: Project, now: datetime) -> None:
        summary = community_health_summary([healthy, dormant], now)

        assert summary.healthy_projects == 1
        assert summary.active_projects == 1
        assert summary.needs_attention == 1

    def test_empty_summary(self) -> None:
        assert community_health_summary([]).average_health_score == 0


class TestMaintainerAnalytics:
    """메인테이너 대시보드 테스트."""

    @pytest.fixture
    def popularity(self) -> ProjectPopularityMetrics:
        return ProjectPopularityMetrics(
            project_id=1,
            view_count=28,
            unique_viewers=5,
            share_count=3,
            average_time_on_page=120,
        )

    def test_dashboard(
        self, healthy: Project, popularity: ProjectPopularityMetrics, now: datetime
    ) -> None:
        contributors = [
            Contributor(id=i, login=login, contributions=count)
            for i, (login, count) in enumerate([("d", 1), ("a", 50), ("c", 5), ("b", 25)])
        ]

        analytics = maintainer_analytics(healthy, "m1", popularity, contributors, now)

        assert analytics.conversion_rate == 100
        assert analytics.contributor_retention == 100
        assert analytics.issue_metrics.total_issues == 4
        assert analytics.contributor_metrics.total_contributors == 10
        assert [(c.username, c.impact) for c in analytics.contributor_metrics.top_contributors] == [
            ("a", 100),
            ("b", 50),
            ("c", 10),
        ]
        assert analytics.engagement_metrics.average_session_duration == pytest.approx(2)
        growth = analytics.audience_growth
        assert len(growth) == 7
        assert [g.views for g in growth][::6] == [1, 7]
        assert growth[-1].date == now

    def test_conversion_rate_is_capped(self, make_project, now: datetime) -> None:
        popular = make_project("popular", forks=1000)
        analytics = maintainer_analytics(
            popular, "m1", ProjectPopularityMetrics(project_id=popular.id, unique_viewers=1), now=now
        )
        assert analytics.conversion_rate == 100

    def test_no_viewers(self, healthy: Project, now: datetime) -> None:
        analytics = maintainer_analytics(
            healthy, "m1", ProjectPopularityMetrics(project_id=1), now=now
        )
        assert analytics.conversion_rate == 0
        assert analytics.contributor_metrics.top_contributors == []

    def test_summary(
        self, healthy: Project, popularity: ProjectPopularityMetrics, now: datetime
    ) -> None:
        summary = maintainer_summary(maintainer_analytics(healthy, "m1", popularity, now=now))

        assert summary.performance_score == 62
        assert summary.insights == [
            "Low visibility - consider improving project discoverability",
            "Excellent conversion rate - visitors are becoming contributors",
            "Great responsiveness - issues are being addressed quickly",
        ]
        assert summary.recommendations == [
            "Add more descriptive tags and improve README",
            "Improve project documentation to increase engagement",
        ]
