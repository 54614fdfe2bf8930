"""트렌딩 점수 계산 모듈.

GitHub API는 시점별 스타 기록을 주지 않으므로 성장률은 한 번의 스냅샷에서
``스타 수 / 프로젝트 나이`` 로 추정한다.
"""

from collections import Counter, defaultdict
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from oss_finder.models import Project, Timeframe, utcnow
from oss_finder.scoring.utils import clamp, days_since, project_age_days

WEIGHTS = {
    "stars_growth": 0.30,
    "forks_growth": 0.20,
    "recent_activity": 0.25,
    "community_engagement": 0.15,
    "freshness": 0.10,
}
TIMEFRAME_DAYS = {
    Timeframe.daily: 1,
    Timeframe.weekly: 7,
    Timeframe.monthly: 30,
}
MIN_TRENDING_SCORE = 0.3
RAPID_GROWTH_RATE = 5
RELEASE_WINDOW_DAYS = 90
BEGINNER_TOPICS = {
    "good-first-issue",
    "beginner-friendly",
    "help-wanted",
    "hacktoberfest",
    "first-timers-only",
}


class TrendingReasonType(str, Enum):
    """트렌딩 사유 종류."""

    rapid_growth = "rapid_growth"
    consistent_activity = "consistent_activity"
    community_buzz = "community_buzz"
    recent_release = "recent_release"
    seasonal_trend = "seasonal_trend"


class TrendingReason(BaseModel):
    """프로젝트가 트렌딩인 주된 이유."""

    type: TrendingReasonType
    explanation: str
    confidence: float = Field(ge=0, le=1)


class GrowthMetrics(BaseModel):
    """스냅샷에서 추정한 성장 지표."""

    stars_growth_rate: float = Field(description="하루 평균 스타 증가 (추정)")
    forks_growth_rate: float = Field(description="하루 평균 포크 증가 (추정)")
    issues_activity: float
    recent_activity: bool
    community_engagement: float


class TrendingProject(BaseModel):
    """트렌딩 점수가 붙은 프로젝트."""

    project: Project
    trending_score: float = Field(ge=0, le=1)
    trending_reason: TrendingReason
    growth_metrics: GrowthMetrics


class TrendingCategory(BaseModel):
    """기간별 트렌딩 카테고리."""

    id: str
    name: str
    description: str
    timeframe: Timeframe
    projects: list[TrendingProject] = Field(default_factory=list)


class LanguageTrend(BaseModel):
    """언어별 트렌딩 통계."""

    language: str
    count: int
    growth: float


class TopicTrend(BaseModel):
    """토픽별 트렌딩 통계."""

    topic: str
    count: int


class TrendingSummary(BaseModel):
    """대시보드용 트렌딩 요약."""

    hot_projects: list[TrendingProject]
    rising_stars: list[TrendingProject]
    top_languages: list[LanguageTrend]
    top_topics: list[TopicTrend]


def community_engagement(project: Project) -> float:
    """스타, 포크, 이슈 규모와 포크 비율로 커뮤니티 참여도를 계산한다."""
    stars, forks = project.stars, project.forks
    fork_ratio = min(forks / stars, 0.5) if stars > 0 else 0.0
    return (
        min(stars / 1000, 1) * 0.4
        + min(forks / 200, 1) * 0.3
        + min(project.open_issues / 50, 1) * 0.2
        + fork_ratio * 0.1
    )


def estimate_growth(
    project: Project,
    timeframe: Timeframe = Timeframe.weekly,
    now: datetime | None = None,
) -> GrowthMetrics:
    """성장 지표를 추정한다. 나이는 최소 1일로 본다."""
    now = now or utcnow()
    age = max(project_age_days(project, now), 1)
    return GrowthMetrics(
        stars_growth_rate=project.stars / age,
        forks_growth_rate=project.forks / age,
        issues_activity=min(project.open_issues / 100, 1),
        recent_activity=days_since(project.updated_at, now) < TIMEFRAME_DAYS[timeframe],
        community_engagement=community_engagement(project),
    )


def _timeframe_multiplier(timeframe: Timeframe, metrics: GrowthMetrics) -> float:
    if timeframe == Timeframe.daily:
        return 1.2 if metrics.recent_activity else 0.5
    if timeframe == Timeframe.monthly:
        return 1.1 if metrics.community_engagement > 0.5 else 0.8
    return 1.0


def _dominant_reason(project: Project, metrics: GrowthMetrics, age: float) -> TrendingReason:
    # rapid_growth는 출시 구간(90일)이 지난 프로젝트에만 적용한다
    if metrics.stars_growth_rate > RAPID_GROWTH_RATE and age >= RELEASE_WINDOW_DAYS:
        return TrendingReason(
            type=TrendingReasonType.rapid_growth,
            explanation=f"Gaining {round(metrics.stars_growth_rate)} stars per day",
            confidence=0.9,
        )
    if metrics.recent_activity and metrics.community_engagement > 0.7:
        return TrendingReason(
            type=TrendingReasonType.community_buzz,
            explanation="High community engagement and recent activity",
            confidence=0.8,
        )
    if age < RELEASE_WINDOW_DAYS and project.stars > 100:
        return TrendingReason(
            type=TrendingReasonType.recent_release,
            explanation="New project gaining traction quickly",
            confidence=0.7,
        )
    if metrics.recent_activity:
        return TrendingReason(
            type=TrendingReasonType.consistent_activity,
            explanation="Consistently maintained with regular updates",
            confidence=0.6,
        )
    return TrendingReason(
        type=TrendingReasonType.seasonal_trend,
        explanation="Showing renewed interest",
        confidence=0.5,
    )


def score_trending(
    project: Project,
    timeframe: Timeframe = Timeframe.weekly,
    now: datetime | None = None,
) -> TrendingProject:
    """프로젝트의 트렌딩 점수를 계산한다."""
    now = now or utcnow()
    metrics = estimate_growth(project, timeframe, now)
    age = project_age_days(project, now)

    score = (
        min(metrics.stars_growth_rate * 10, 1) * WEIGHTS["stars_growth"]
        + min(metrics.forks_growth_rate * 20, 1) * WEIGHTS["forks_growth"]
        + (1.0 if metrics.recent_activity else 0.3) * WEIGHTS["recent_activity"]
        + metrics.community_engagement * WEIGHTS["community_engagement"]
        + max(0.0, (365 - age) / 365) * WEIGHTS["freshness"]
    )
    score *= _timeframe_multiplier(timeframe, metrics)

    return TrendingProject(
        project=project,
        trending_score=clamp(score),
        trending_reason=_dominant_reason(project, metrics, age),
        growth_metrics=metrics,
    )


def _rank(
    projects: list[Project],
    timeframe: Timeframe,
    limit: int,
    now: datetime | None,
    threshold: float | None = None,
) -> list[TrendingProject]:
    now = now or utcnow()
    scored = [score_trending(p, timeframe, now) for p in projects]
    if threshold is not None:
        scored = [s for s in scored if s.trending_score > threshold]
    scored.sort(key=lambda s: s.trending_score, reverse=True)
    return scored[:limit]


def trending_projects(
    projects: list[Project],
    timeframe: Timeframe = Timeframe.weekly,
    limit: int = 50,
    now: datetime | None = None,
) -> list[TrendingProject]:
    """점수가 0.3을 넘는 트렌딩 프로젝트를 내림차순으로 반환한다."""
    return _rank(projects, timeframe, limit, now, threshold=MIN_TRENDING_SCORE)


def trending_by_category(
    projects: list[Project],
    now: datetime | None = None,
) -> list[TrendingCategory]:
    """hot(일간), rising(주간), established(월간) 카테고리를 만든다."""
    definitions = [
        ("hot", "Hot Right Now", "Projects with rapid recent growth", Timeframe.daily),
        ("rising", "Rising Stars", "Consistently growing projects", Timeframe.weekly),
        (
            "established",
            "Trending Established",
            "Popular projects with renewed interest",
            Timeframe.monthly,
        ),
    ]
    return [
        TrendingCategory(
            id=category_id,
            name=name,
            description=description,
            timeframe=timeframe,
            projects=trending_projects(projects, timeframe, 15, now),
        )
        for category_id, name, description, timeframe in definitions
    ]


def trending_by_language(
    projects: list[Project],
    language: str,
    limit: int = 10,
    now: datetime | None = None,
) -> list[TrendingProject]:
    """특정 언어 프로젝트의 주간 트렌딩."""
    matched = [p for p in projects if (p.language or "").lower() == language.lower()]
    return _rank(matched, Timeframe.weekly, limit, now)


def trending_by_topic(
    projects: list[Project],
    topic: str,
    limit: int = 10,
    now: datetime | None = None,
) -> list[TrendingProject]:
    """토픽 이름에 topic이 포함된 프로젝트의 주간 트렌딩."""
    needle = topic.lower()
    matched = [p for p in projects if any(needle in t.lower() for t in p.topics)]
    return _rank(matched, Timeframe.weekly, limit, now)


def trending_for_beginners(
    projects: list[Project],
    limit: int = 15,
    now: datetime | None = None,
) -> list[TrendingProject]:
    """입문자용 토픽이 있거나 규모가 적당하고 이슈가 있는 프로젝트."""

    def is_beginner_friendly(project: Project) -> bool:
        if any(t.lower() in BEGINNER_TOPICS for t in project.topics):
            return True
        return project.stars < 10000 and project.open_issues > 5

    matched = [p for p in projects if is_beginner_friendly(p)]
    return _rank(matched, Timeframe.weekly, limit, now)


def seasonal_topics(month: int) -> list[str]:
    """월(1~12)에 맞는 계절 토픽."""
    if 9 <= month <= 11:
        return ["education", "learning", "tutorial", "hacktoberfest"]
    if month == 12 or month <= 2:
        return ["planning", "productivity", "year-in-review", "goals"]
    if 3 <= month <= 5:
        return ["startup", "new", "fresh", "innovation"]
    return ["game", "fun", "experiment", "creative"]


def seasonal_trending(
    projects: list[Project],
    now: datetime | None = None,
) -> list[TrendingProject]:
    """현재 계절 토픽과 맞는 프로젝트의 월간 트렌딩 (최대 20개)."""
    now = now or utcnow()
    topics = seasonal_topics(now.month)

    def matches(project: Project) -> bool:
        project_topics = {t.lower() for t in project.topics}
        description = project.description.lower()
        return any(t in project_topics or t in description for t in topics)

    return _rank([p for p in projects if matches(p)], Timeframe.monthly, 20, now)


def trending_summary(
    projects: list[Project],
    now: datetime | None = None,
) -> TrendingSummary:
    """대시보드용 트렌딩 요약을 만든다."""
    now = now or utcnow()
    trending = trending_projects(projects, Timeframe.weekly, 100, now)

    rising = [
        t
        for t in trending
        if project_age_days(t.project, now) < 365 and t.trending_score > 0.5
    ]

    language_scores: dict[str, list[float]] = defaultdict(list)
    for t in trending:
        if t.project.language:
            language_scores[t.project.language].append(t.trending_score)
    top_languages = sorted(
        (
            LanguageTrend(language=lang, count=len(scores), growth=sum(scores) / len(scores))
            for lang, scores in language_scores.items()
        ),
        key=lambda s: s.growth,
        reverse=True,
    )[:10]

    topic_counts = Counter(topic for t in trending for topic in t.project.topics)
    top_topics = [
        TopicTrend(topic=topic, count=count) for topic, count in topic_counts.most_common(15)
    ]

    return TrendingSummary(
        hot_projects=trending[:5],
        rising_stars=rising[:5],
        top_languages=top_languages,
        top_topics=top_topics,
    )
