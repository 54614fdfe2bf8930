"""개인화 추천 점수 계산 모듈."""

from enum import Enum

from pydantic import BaseModel, Field

from oss_finder.models import FeedbackData, FeedbackType, Project, SkillLevel, UserPreferences
from oss_finder.scoring.utils import clamp

WEIGHTS = {
    "language_match": 0.30,
    "topic_interest": 0.25,
    "difficulty_level": 0.20,
    "community_activity": 0.15,
    "similar_projects": 0.10,
}
TRENDING_CONFIDENCE = 0.7
EXPLAIN_THRESHOLD = 0.3


class RecommendationReasonType(str, Enum):
    """추천 근거 종류."""

    language_match = "language_match"
    topic_interest = "topic_interest"
    difficulty_level = "difficulty_level"
    community_activity = "community_activity"
    similar_projects = "similar_projects"
    trending = "trending"


class RecommendationReason(BaseModel):
    """추천 근거 하나."""

    type: RecommendationReasonType
    confidence: float = Field(ge=0, le=1)
    explanation: str


class RecommendedProject(BaseModel):
    """추천 점수가 붙은 프로젝트."""

    project: Project
    recommendation_score: float = Field(ge=0, le=1)
    reasons: list[RecommendationReason] = Field(default_factory=list)


def estimate_difficulty(project: Project) -> SkillLevel:
    """스타, 포크, 이슈 수로 프로젝트 난이도를 추정한다."""
    if project.stars < 1000 and project.open_issues < 50:
        return SkillLevel.beginner
    if project.stars > 10000 or project.forks > 5000:
        return SkillLevel.advanced
    return SkillLevel.intermediate


def community_activity(project: Project) -> float:
    """커뮤니티 활동 지표 (0~1)."""
    return min((project.stars / 10000 + project.forks / 1000 + project.open_issues / 100) / 3, 1.0)


def _language_reason(project: Project, prefs: UserPreferences) -> RecommendationReason | None:
    preferred = {lang.lower() for lang in prefs.preferred_languages}
    if (project.language or "").lower() not in preferred:
        return None
    return RecommendationReason(
        type=RecommendationReasonType.language_match,
        confidence=0.9,
        explanation=f"Written in {project.language}, one of your preferred languages",
    )


def _topic_reason(project: Project, prefs: UserPreferences) -> RecommendationReason | None:
    interests = [i.lower() for i in prefs.interests]
    if not interests:
        return None
    matching = [
        topic
        for topic in (t.lower() for t in project.topics)
        if any(interest in topic for interest in interests)
    ]
    if not matching:
        return None
    return RecommendationReason(
        type=RecommendationReasonType.topic_interest,
        confidence=min(len(matching) / len(interests), 1.0),
        explanation=f"Matches your interests: {', '.join(matching[:2])}",
    )


def _difficulty_reason(project: Project, prefs: UserPreferences) -> RecommendationReason:
    estimated = estimate_difficulty(project)
    if estimated == prefs.skill_level:
        return RecommendationReason(
            type=RecommendationReasonType.difficulty_level,
            confidence=0.8,
            explanation=f"Suitable for {prefs.skill_level.value} developers",
        )
    return RecommendationReason(
        type=RecommendationReasonType.difficulty_level,
        confidence=0.4,
        explanation=f"{estimated.value} level project",
    )


def _activity_reason(project: Project) -> RecommendationReason | None:
    activity = community_activity(project)
    if activity <= 0:
        return None
    return RecommendationReason(
        type=RecommendationReasonType.community_activity,
        confidence=activity,
        explanation=(
            "Active community with regular contributions" if activity > 0.5 else "Growing community"
        ),
    )


def _history_reason(prefs: UserPreferences) -> RecommendationReason | None:
    if not (prefs.bookmarked_projects or prefs.contributed_projects):
        return None
    return RecommendationReason(
        type=RecommendationReasonType.similar_projects,
        confidence=0.6,
        explanation="Similar to projects you've shown interest in",
    )


def score_project(project: Project, prefs: UserPreferences) -> RecommendedProject:
    """한 프로젝트의 추천 점수를 계산한다."""
    reasons = [
        reason
        for reason in (
            _language_reason(project, prefs),
            _topic_reason(project, prefs),
            _difficulty_reason(project, prefs),
            _activity_reason(project),
            _history_reason(prefs),
        )
        if reason is not None
    ]
    total = sum(r.confidence * WEIGHTS[r.type.value] for r in reasons)
    return RecommendedProject(
        project=project,
        recommendation_score=clamp(total),
        reasons=sorted(reasons, key=lambda r: r.confidence, reverse=True),
    )


def generate_recommendations(
    projects: list[Project],
    preferences: UserPreferences,
    limit: int = 10,
) -> list[RecommendedProject]:
    """사용자 선호도에 맞춰 프로젝트를 추천한다.

    이미 본 프로젝트는 북마크한 경우에만 다시 추천한다.
    """
    viewed = set(preferences.viewed_projects)
    bookmarked = set(preferences.bookmarked_projects)

    scored = [
        score_project(project, preferences)
        for project in projects
        if project.id not in viewed or project.id in bookmarked
    ]
    scored.sort(key=lambda r: r.recommendation_score, reverse=True)
    return scored[:limit]


def trending_recommendations(projects: list[Project], limit: int = 10) -> list[RecommendedProject]:
    """선호 정보가 없는 사용자를 위한 인기 프로젝트 추천."""
    ranked = sorted(projects, key=lambda p: p.stars + p.forks * 2, reverse=True)
    return [
        RecommendedProject(
            project=project,
            recommendation_score=TRENDING_CONFIDENCE,
            reasons=[
                RecommendationReason(
                    type=RecommendationReasonType.trending,
                    confidence=TRENDING_CONFIDENCE,
                    explanation="Trending in the open source community",
                )
            ],
        )
        for project in ranked[:limit]
    ]


def explain_recommendation(recommended: RecommendedProject) -> list[RecommendationReason]:
    """신뢰도가 0.3을 넘는 근거만 반환한다."""
    return [r for r in recommended.reasons if r.confidence > EXPLAIN_THRESHOLD]


def apply_feedback(
    preferences: UserPreferences,
    feedback: FeedbackData,
    project: Project,
) -> UserPreferences:
    """피드백을 반영한 새 선호도를 반환한다.

    피드백을 준 프로젝트는 본 것으로 기록하고, interested 피드백이면
    프로젝트의 언어와 토픽을 선호 목록에 추가한다.
    """
    updated = preferences.model_copy(deep=True)

    if feedback.project_id not in updated.viewed_projects:
        updated.viewed_projects.append(feedback.project_id)

    if feedback.feedback_type == FeedbackType.interested:
        if project.language and project.language not in updated.preferred_languages:
            updated.preferred_languages.append(project.language)
        for topic in project.topics:
            if topic not in updated.interests:
                updated.interests.append(topic)

    return updated
