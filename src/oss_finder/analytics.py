"""사용자 참여도, 프로젝트 인기도, 커뮤니티 건강도 분석 모듈."""

import logging
import math
import uuid
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

from oss_finder.models import Contributor, Project, SkillLevel, utcnow
from oss_finder.scoring.utils import days_since, project_age_days
from oss_finder.storage import KeyValueStore, read_counter, read_model, write_model

logger = logging.getLogger(__name__)

ENGAGEMENT_PREFIX = "analytics_data_engagement_"
SESSION_PREFIX = "current_session_"
POPULARITY_PREFIX = "analytics_data_popularity_"
VIEWERS_PREFIX = "analytics_data_viewers_"
CLICKS_PREFIX = "analytics_data_clicks_"
IMPACT_PREFIX = "contribution_analytics_impact_"
IMPACT_PROJECTS_PREFIX = "contribution_analytics_projects_"

BEGINNER_TOPICS = {"good-first-issue", "beginner-friendly", "hacktoberfest", "first-timers-only"}

ActivityLevel = Literal["low", "medium", "high", "very_high"]
ProjectActivityLevel = Literal["dormant", "low", "moderate", "active", "very_active"]
ContributionSize = Literal["small", "medium", "large"]
ContributionQuality = Literal["beginner", "intermediate", "advanced", "expert"]


class ActionType(str, Enum):
    """추적하는 사용자 행동."""

    view_project = "view_project"
    bookmark = "bookmark"
    search = "search"
    filter = "filter"
    share = "share"
    rate = "rate"
    comment = "comment"
    click_contribute = "click_contribute"


class UserAction(BaseModel):
    """사용자 행동 이벤트."""

    type: ActionType
    timestamp: datetime = Field(default_factory=utcnow)
    metadata: dict[str, Any] = Field(default_factory=dict)


class SessionData(BaseModel):
    """진행 중인 세션."""

    session_id: str = Field(default_factory=lambda: f"session_{uuid.uuid4().hex}")
    user_id: str
    start_time: datetime = Field(default_factory=utcnow)
    end_time: datetime | None = None
    duration: float | None = Field(default=None, description="세션 길이 (분)")
    pages_viewed: list[str] = Field(default_factory=list)
    actions_performed: list[UserAction] = Field(default_factory=list)


class UserEngagementMetrics(BaseModel):
    """사용자 참여도 지표."""

    user_id: str
    session_count: int = 0
    total_time_spent: float = Field(default=0.0, description="누적 사용 시간 (분)")
    pages_viewed: int = 0
    projects_viewed: int = 0
    projects_bookmarked: int = 0
    searches_performed: int = 0
    filters_applied: int = 0
    contributions_initiated: int = 0
    last_active_date: datetime = Field(default_factory=utcnow)
    engagement_score: int = Field(default=0, ge=0, le=100)
    activity_level: ActivityLevel = "low"


class ProjectPopularityMetrics(BaseModel):
    """프로젝트 인기도 지표."""

    project_id: int
    view_count: int = 0
    unique_viewers: int = 0
    bookmark_count: int = 0
    share_count: int = 0
    click_through_rate: float = Field(default=0.0, description="조회 대비 GitHub 이동 비율 (%)")
    average_time_on_page: float = Field(default=0.0, description="평균 체류 시간 (초)")
    popularity_score: int = Field(default=0, ge=0, le=100)


class ContributionImpactMetrics(BaseModel):
    """사용자 기여 영향력 지표."""

    user_id: str
    total_contributions: int = 0
    projects_contributed: int = 0
    impact_score: int = Field(default=0, ge=0, le=100)
    contribution_quality: ContributionQuality = "beginner"
    average_contribution_size: ContributionSize = "medium"
    contribution_frequency: float = Field(default=0.0, description="월 평균 기여 수")
    mentorship_provided: int = 0
    community_influence: float = Field(default=0.0, ge=0, le=100)
    first_contribution_at: datetime | None = None


class CommunityHealthMetrics(BaseModel):
    """프로젝트 커뮤니티 건강도."""

    project_id: int
    health_score: int = Field(ge=0, le=100)
    activity_level: ProjectActivityLevel
    maintainer_responsiveness: int = Field(ge=0, le=100)
    contributor_diversity: int = Field(ge=0, le=100)
    new_contributor_friendliness: int = Field(ge=0, le=100)
    documentation_quality: int = Field(ge=0, le=100)
    growth_score: int = Field(ge=0, le=100)


class CommunityHealthSummary(BaseModel):
    """여러 프로젝트의 건강도 요약."""

    healthy_projects: int
    active_projects: int
    needs_attention: int
    average_health_score: int


class GrowthData(BaseModel):
    """주간 성장 추정치."""

    date: datetime
    views: int
    stars: int
    forks: int
    contributors: int


class IssueMetrics(BaseModel):
    """이슈 지표 (열린 이슈 수 기반 추정)."""

    total_issues: int
    open_issues: int
    closed_issues: int
    average_time_to_close: float = Field(description="평균 해결 기간 (일)")
    issues_with_responses: int
    average_response_time: float = Field(description="평균 응답 시간 (시간)")


class TopContributor(BaseModel):
    username: str
    contributions: int
    impact: int


class ContributorMetrics(BaseModel):
    """기여자 지표 (포크 수 기반 추정)."""

    total_contributors: int
    new_contributors_this_month: int
    active_contributors: int
    contributor_retention_rate: float
    top_contributors: list[TopContributor] = Field(default_factory=list)


class EngagementMetrics(BaseModel):
    """방문자 참여 지표."""

    average_session_duration: float = Field(description="평균 체류 시간 (분)")
    bounce_rate: float
    return_visitor_rate: float
    social_shares: int


class MaintainerAnalytics(BaseModel):
    """메인테이너 대시보드 지표."""

    project_id: int
    maintainer_id: str
    total_views: int
    unique_visitors: int
    conversion_rate: float
    audience_growth: list[GrowthData]
    contributor_retention: int
    issue_metrics: IssueMetrics
    contributor_metrics: ContributorMetrics
    engagement_metrics: EngagementMetrics
    community_health: CommunityHealthMetrics


class MaintainerSummary(BaseModel):
    """메인테이너 대시보드 요약."""

    performance_score: int = Field(ge=0, le=100)
    insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


def engagement_score(metrics: UserEngagementMetrics) -> int:
    """참여도 점수 (0~100)."""
    score = (
        min(metrics.session_count / 50, 1) * 0.15
        + min(metrics.total_time_spent / 500, 1) * 0.20
        + min(metrics.projects_viewed / 100, 1) * 0.20
        + min(metrics.projects_bookmarked / 20, 1) * 0.15
        + min(metrics.searches_performed / 50, 1) * 0.10
        + min(metrics.contributions_initiated / 10, 1) * 0.20
    )
    return round(score * 100)


def activity_level(score: int) -> ActivityLevel:
    if score >= 75:
        return "very_high"
    if score >= 50:
        return "high"
    if score >= 25:
        return "medium"
    return "low"


def popularity_score(metrics: ProjectPopularityMetrics) -> int:
    """인기도 점수 (0~100)."""
    score = (
        min(metrics.view_count / 1000, 1) * 0.25
        + min(metrics.unique_viewers / 500, 1) * 0.20
        + min(metrics.bookmark_count / 100, 1) * 0.25
        + min(metrics.share_count / 50, 1) * 0.15
        + min(metrics.click_through_rate / 50, 1) * 0.15
    )
    return round(score * 100)


def impact_score(metrics: ContributionImpactMetrics) -> int:
    """기여 영향력 점수 (0~100)."""
    score = (
        min(metrics.total_contributions / 100, 1) * 0.30
        + min(metrics.projects_contributed / 20, 1) * 0.25
        + min(metrics.contribution_frequency / 10, 1) * 0.20
        + min(metrics.mentorship_provided / 10, 1) * 0.15
        + metrics.community_influence / 100 * 0.10
    )
    return round(score * 100)


def contribution_quality(score: int) -> ContributionQuality:
    if score >= 80:
        return "expert"
    if score >= 60:
        return "advanced"
    if score >= 30:
        return "intermediate"
    return "beginner"


class AnalyticsEngine:
    """사용자 행동과 프로젝트 인기도를 키-값 저장소에 집계한다."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # 사용자 참여도

    def get_engagement(self, user_id: str) -> UserEngagementMetrics:
        return read_model(
            self.store,
            f"{ENGAGEMENT_PREFIX}{user_id}",
            UserEngagementMetrics,
            lambda: UserEngagementMetrics(user_id=user_id),
        )

    def _save_engagement(self, metrics: UserEngagementMetrics) -> None:
        write_model(self.store, f"{ENGAGEMENT_PREFIX}{metrics.user_id}", metrics)

    def get_session(self, user_id: str) -> SessionData | None:
        raw = self.store.get(f"{SESSION_PREFIX}{user_id}")
        if raw is None:
            return None
        return read_model(
            self.store,
            f"{SESSION_PREFIX}{user_id}",
            SessionData,
            lambda: SessionData(user_id=user_id),
        )

    def start_session(self, user_id: str) -> SessionData:
        """새 세션을 시작한다."""
        session = SessionData(user_id=user_id)
        write_model(self.store, f"{SESSION_PREFIX}{user_id}", session)
        return session

    def end_session(self, user_id: str, now: datetime | None = None) -> SessionData | None:
        """세션을 끝내고 사용 시간과 세션 수를 누적한다."""
        session = self.get_session(user_id)
        if session is None:
            return None

        session.end_time = now or utcnow()
        session.duration = (session.end_time - session.start_time).total_seconds() / 60

        metrics = self.get_engagement(user_id)
        metrics.total_time_spent += session.duration
        metrics.session_count += 1
        metrics.engagement_score = engagement_score(metrics)
        metrics.activity_level = activity_level(metrics.engagement_score)
        self._save_engagement(metrics)

        self.store.delete(f"{SESSION_PREFIX}{user_id}")
        return session

    def track_user_engagement(
        self,
        user_id: str,
        action: UserAction,
        page: str | None = None,
    ) -> UserEngagementMetrics:
        """사용자 행동을 현재 세션과 참여도 지표에 반영한다."""
        metrics = self.get_engagement(user_id)
        session = self.get_session(user_id) or self.start_session(user_id)

        session.actions_performed.append(action)
        if page and page not in session.pages_viewed:
            session.pages_viewed.append(page)
            metrics.pages_viewed += 1

        if action.type == ActionType.view_project:
            metrics.projects_viewed += 1
        elif action.type == ActionType.bookmark:
            metrics.projects_bookmarked += 1
        elif action.type == ActionType.search:
            metrics.searches_performed += 1
        elif action.type == ActionType.filter:
            metrics.filters_applied += 1
        elif action.type == ActionType.click_contribute:
            metrics.contributions_initiated += 1

        metrics.last_active_date = action.timestamp
        metrics.engagement_score = engagement_score(metrics)
        metrics.activity_level = activity_level(metrics.engagement_score)

        self._save_engagement(metrics)
        write_model(self.store, f"{SESSION_PREFIX}{user_id}", session)
        return metrics

    # 프로젝트 인기도

    def get_popularity(self, project_id: int) -> ProjectPopularityMetrics:
        return read_model(
            self.store,
            f"{POPULARITY_PREFIX}{project_id}",
            ProjectPopularityMetrics,
            lambda: ProjectPopularityMetrics(project_id=project_id),
        )

    def _save_popularity(self, metrics: ProjectPopularityMetrics) -> ProjectPopularityMetrics:
        metrics.popularity_score = popularity_score(metrics)
        write_model(self.store, f"{POPULARITY_PREFIX}{metrics.project_id}", metrics)
        return metrics

    def track_project_view(
        self,
        project_id: int,
        user_id: str,
        duration: float | None = None,
    ) -> ProjectPopularityMetrics:
        """프로젝트 조회를 기록한다.

        Args:
            project_id: 프로젝트 ID
            user_id: 조회한 사용자
            duration: 페이지 체류 시간 (초)
        """
        metrics = self.get_popularity(project_id)
        metrics.view_count += 1

        viewers_key = f"{VIEWERS_PREFIX}{project_id}"
        raw = self.store.get(viewers_key)
        viewers = [str(v) for v in raw] if isinstance(raw, list) else []
        if user_id not in viewers:
            viewers.append(user_id)
            metrics.unique_viewers += 1
            self.store.set(viewers_key, viewers)

        if duration:
            total = metrics.average_time_on_page * (metrics.view_count - 1) + duration
            metrics.average_time_on_page = total / metrics.view_count

        return self._save_popularity(metrics)

    def track_project_bookmark(self, project_id: int, bookmarked: bool) -> ProjectPopularityMetrics:
        metrics = self.get_popularity(project_id)
        metrics.bookmark_count = max(0, metrics.bookmark_count + (1 if bookmarked else -1))
        return self._save_popularity(metrics)

    def track_project_share(self, project_id: int) -> ProjectPopularityMetrics:
        metrics = self.get_popularity(project_id)
        metrics.share_count += 1
        return self._save_popularity(metrics)

    def track_click_through(self, project_id: int) -> ProjectPopularityMetrics:
        """GitHub 저장소로 이동한 클릭을 기록한다."""
        metrics = self.get_popularity(project_id)
        clicks_key = f"{CLICKS_PREFIX}{project_id}"
        clicks = read_counter(self.store, clicks_key) + 1
        self.store.set(clicks_key, clicks)
        metrics.click_through_rate = (
            min(clicks / metrics.view_count * 100, 100.0) if metrics.view_count > 0 else 0.0
        )
        return self._save_popularity(metrics)

    def top_projects(self, project_ids: list[int], limit: int = 10) -> list[int]:
        """인기도 점수 순으로 프로젝트 ID를 정렬한다."""
        ranked = sorted(
            project_ids,
            key=lambda pid: self.get_popularity(pid).popularity_score,
            reverse=True,
        )
        return ranked[:limit]

    # 기여 영향력

    def get_contribution_impact(self, user_id: str) -> ContributionImpactMetrics:
        return read_model(
            self.store,
            f"{IMPACT_PREFIX}{user_id}",
            ContributionImpactMetrics,
            lambda: ContributionImpactMetrics(user_id=user_id),
        )

    def track_contribution(
        self,
        user_id: str,
        project_id: int,
        size: ContributionSize = "medium",
        now: datetime | None = None,
    ) -> ContributionImpactMetrics:
        """기여를 기록하고 영향력 점수를 다시 계산한다."""
        now = now or utcnow()
        metrics = self.get_contribution_impact(user_id)
        metrics.total_contributions += 1
        if metrics.first_contribution_at is None:
            metrics.first_contribution_at = now

        projects_key = f"{IMPACT_PROJECTS_PREFIX}{user_id}"
        raw = self.store.get(projects_key)
        projects = [int(p) for p in raw] if isinstance(raw, list) else []
        if project_id not in projects:
            projects.append(project_id)
            metrics.projects_contributed += 1
            self.store.set(projects_key, projects)

        months = max(days_since(metrics.first_contribution_at, now) / 30, 1)
        metrics.contribution_frequency = metrics.total_contributions / months
        metrics.average_contribution_size = size
        metrics.impact_score = impact_score(metrics)
        metrics.contribution_quality = contribution_quality(metrics.impact_score)

        write_model(self.store, f"{IMPACT_PREFIX}{user_id}", metrics)
        return metrics


# 커뮤니티 건강도


def _activity_points(project: Project, now: datetime) -> int:
    days = days_since(project.updated_at, now)
    if days < 7:
        return 100
    if days < 30:
        return 80
    if days < 90:
        return 60
    if days < 180:
        return 40
    return 20


def _project_activity_level(points: int) -> ProjectActivityLevel:
    if points >= 90:
        return "very_active"
    if points >= 70:
        return "active"
    if points >= 50:
        return "moderate"
    if points >= 30:
        return "low"
    return "dormant"


def _responsiveness(project: Project, now: datetime) -> int:
    score = 50
    if days_since(project.updated_at, now) < 7:
        score += 30
    if project.open_issues / max(project.stars / 100, 1) < 0.5:
        score += 20
    return min(score, 100)


def _diversity(project: Project) -> int:
    return round(min(project.forks / max(project.stars, 1) * 200, 100))


def _newcomer_friendliness(project: Project) -> int:
    score = 50
    if any(t.lower() in BEGINNER_TOPICS for t in project.topics):
        score += 30
    if project.open_issues > 5:
        score += 10
    if project.open_issues < 50:
        score += 10
    return min(score, 100)


def _documentation(project: Project) -> int:
    score = 50
    if len(project.description) > 50:
        score += 20
    if len(project.topics) > 3:
        score += 15
    if project.license:
        score += 15
    return min(score, 100)


def _growth(project: Project, now: datetime) -> int:
    age = max(project_age_days(project, now), 1)
    return round(min(project.stars / age * 10, 100))


def community_health(project: Project, now: datetime | None = None) -> CommunityHealthMetrics:
    """프로젝트 메타데이터로 커뮤니티 건강도를 추정한다."""
    now = now or utcnow()
    activity = _activity_points(project, now)
    responsiveness = _responsiveness(project, now)
    diversity = _diversity(project)
    documentation = _documentation(project)
    newcomer = _newcomer_friendliness(project)
    growth = _growth(project, now)

    health = (
        activity * 0.25
        + responsiveness * 0.20
        + diversity * 0.15
        + documentation * 0.15
        + newcomer * 0.15
        + growth * 0.10
    )
    return CommunityHealthMetrics(
        project_id=project.id,
        health_score=round(health),
        activity_level=_project_activity_level(activity),
        maintainer_responsiveness=responsiveness,
        contributor_diversity=diversity,
        new_contributor_friendliness=newcomer,
        documentation_quality=documentation,
        growth_score=growth,
    )


def community_health_summary(
    projects: list[Project],
    now: datetime | None = None,
) -> CommunityHealthSummary:
    """여러 프로젝트의 건강도를 요약한다."""
    now = now or utcnow()
    metrics = [community_health(p, now) for p in projects]
    if not metrics:
        return CommunityHealthSummary(
            healthy_projects=0, active_projects=0, needs_attention=0, average_health_score=0
        )
    return CommunityHealthSummary(
        healthy_projects=sum(1 for m in metrics if m.health_score >= 70),
        active_projects=sum(1 for m in metrics if m.activity_level in ("active", "very_active")),
        needs_attention=sum(1 for m in metrics if m.health_score < 50),
        average_health_score=round(sum(m.health_score for m in metrics) / len(metrics)),
    )


def recommended_skill_level(health: CommunityHealthMetrics) -> SkillLevel:
    """건강도 지표로 어느 수준의 기여자에게 맞는 프로젝트인지 판단한다."""
    if health.new_contributor_friendliness >= 80:
        return SkillLevel.beginner
    if health.maintainer_responsiveness >= 70:
        return SkillLevel.intermediate
    return SkillLevel.advanced


# 메인테이너 대시보드


def _audience_growth(project: Project, total_views: int, now: datetime) -> list[GrowthData]:
    # 최근 7주, 조회 수는 누적 조회 수를 주차 가중치(1..7)로 나눈 값
    points = []
    for weeks_ago in range(6, -1, -1):
        factor = 0.8 + weeks_ago * 0.03
        weight = 7 - weeks_ago
        points.append(
            GrowthData(
                date=now - timedelta(weeks=weeks_ago),
                views=total_views * weight // 28,
                stars=math.floor(project.stars * factor),
                forks=math.floor(project.forks * factor),
                contributors=math.floor(project.forks / 10 * factor),
            )
        )
    return points


def _top_contributors(contributors: list[Contributor]) -> list[TopContributor]:
    ranked = sorted(contributors, key=lambda c: c.contributions, reverse=True)[:3]
    if not ranked:
        return []
    most = max(ranked[0].contributions, 1)
    return [
        TopContributor(
            username=c.login,
            contributions=c.contributions,
            impact=round(c.contributions / most * 100),
        )
        for c in ranked
    ]


def maintainer_analytics(
    project: Project,
    maintainer_id: str,
    popularity: ProjectPopularityMetrics,
    contributors: list[Contributor] | None = None,
    now: datetime | None = None,
) -> MaintainerAnalytics:
    """메인테이너 대시보드 지표를 만든다.

    이력 데이터가 없는 항목은 현재 스냅샷(포크, 이슈 수)에서 추정한다.
    """
    now = now or utcnow()

    conversion = 0.0
    if popularity.unique_viewers > 0:
        conversion = min(max(project.forks / 10, 1) / popularity.unique_viewers * 100, 100.0)

    retention = min(round(project.forks / max(project.stars / 10, 1) * 100), 100)

    open_issues = project.open_issues
    issue_metrics = IssueMetrics(
        total_issues=open_issues * 2,
        open_issues=open_issues,
        closed_issues=open_issues,
        average_time_to_close=7,
        issues_with_responses=math.floor(open_issues * 0.7),
        average_response_time=24,
    )

    total_contributors = max(project.forks // 10, 1)
    contributor_metrics = ContributorMetrics(
        total_contributors=total_contributors,
        new_contributors_this_month=math.floor(total_contributors * 0.1),
        active_contributors=max(math.floor(total_contributors * 0.3), 1),
        contributor_retention_rate=65,
        top_contributors=_top_contributors(contributors or []),
    )

    engagement = EngagementMetrics(
        average_session_duration=popularity.average_time_on_page / 60,
        bounce_rate=35,
        return_visitor_rate=45,
        social_shares=popularity.share_count,
    )

    return MaintainerAnalytics(
        project_id=project.id,
        maintainer_id=maintainer_id,
        total_views=popularity.view_count,
        unique_visitors=popularity.unique_viewers,
        conversion_rate=conversion,
        audience_growth=_audience_growth(project, popularity.view_count, now),
        contributor_retention=retention,
        issue_metrics=issue_metrics,
        contributor_metrics=contributor_metrics,
        engagement_metrics=engagement,
        community_health=community_health(project, now),
    )


def performance_score(analytics: MaintainerAnalytics) -> int:
    """메인테이너 성과 점수 (0~100)."""
    views = min(analytics.total_views / 1000, 1) * 100
    conversion = min(analytics.conversion_rate / 10, 1) * 100
    engagement = min(analytics.engagement_metrics.average_session_duration / 10, 1) * 100
    responsiveness = max(0, 1 - analytics.issue_metrics.average_response_time / 168) * 100
    score = (
        views * 0.20
        + conversion * 0.25
        + engagement * 0.20
        + responsiveness * 0.20
        + analytics.contributor_retention * 0.15
    )
    return round(score)


def maintainer_summary(analytics: MaintainerAnalytics) -> MaintainerSummary:
    """성과 점수와 인사이트, 개선 제안을 만든다."""
    insights: list[str] = []
    recommendations: list[str] = []

    if analytics.total_views > 1000:
        insights.append("High visibility - your project is getting great exposure")
    elif analytics.total_views < 100:
        insights.append("Low visibility - consider improving project discoverability")
        recommendations.append("Add more descriptive tags and improve README")

    if analytics.conversion_rate > 5:
        insights.append("Excellent conversion rate - visitors are becoming contributors")
    elif analytics.conversion_rate < 1:
        insights.append("Low conversion rate - visitors aren't contributing")
        recommendations.append("Add clear contribution guidelines and good first issues")

    if analytics.engagement_metrics.average_session_duration > 5:
        insights.append("High engagement - users are spending time on your project")
    else:
        recommendations.append("Improve project documentation to increase engagement")

    if analytics.issue_metrics.average_response_time < 48:
        insights.append("Great responsiveness - issues are being addressed quickly")
    else:
        recommendations.append("Try to respond to issues more quickly")

    return MaintainerSummary(
        performance_score=performance_score(analytics),
        insights=insights,
        recommendations=recommendations,
    )
