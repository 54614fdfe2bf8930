"""프로젝트 유사도 계산 모듈.

언어, 토픽, 규모, 활동성, 설명 다섯 가지 지표의 가중합으로
두 프로젝트가 얼마나 비슷한지 계산한다.
"""

import math
import re
from collections import Counter
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from oss_finder.models import Project, utcnow
from oss_finder.scoring.utils import clamp, days_since, jaccard

WEIGHTS = {
    "language": 0.25,
    "topics": 0.35,
    "size": 0.15,
    "activity": 0.15,
    "description": 0.10,
}
MIN_SIMILARITY = 0.2
MIN_CLUSTER_SIZE = 3

RELATED_LANGUAGES: dict[str, set[str]] = {
    "javascript": {"typescript", "coffeescript"},
    "typescript": {"javascript"},
    "python": {"cython"},
    "c++": {"c", "c#"},
    "c": {"c++", "c#"},
    "java": {"kotlin", "scala"},
    "kotlin": {"java"},
    "swift": {"objective-c"},
    "rust": {"c++", "c"},
    "go": {"c", "rust"},
}

STOPWORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "is", "are", "was", "were", "be", "been", "being", "have",
    "has", "had", "do", "does", "did", "will", "would", "could", "should",
}  # fmt: skip

_NON_WORD = re.compile(r"[^\w\s]")


class SimilarityReasonType(str, Enum):
    """유사도 근거 종류."""

    language = "language"
    topics = "topics"
    size = "size"
    activity = "activity"
    description = "description"


class SimilarityReason(BaseModel):
    """유사도 근거 하나."""

    type: SimilarityReasonType
    weight: float = Field(ge=0, le=1)
    explanation: str


class SimilarityScore(BaseModel):
    """후보 프로젝트의 유사도 점수."""

    project_id: int
    score: float = Field(ge=0, le=1)
    reasons: list[SimilarityReason] = Field(default_factory=list)


class ProjectCluster(BaseModel):
    """대표 토픽으로 묶은 프로젝트 그룹."""

    id: str
    name: str
    description: str
    projects: list[Project]
    common_topics: list[str]
    average_stars: int
    primary_language: str


def _language_reason(a: Project, b: Project) -> SimilarityReason | None:
    lang_a = (a.language or "").lower()
    lang_b = (b.language or "").lower()
    if not lang_a or not lang_b:
        return None
    if lang_a == lang_b:
        return SimilarityReason(
            type=SimilarityReasonType.language,
            weight=1.0,
            explanation=f"Both written in {a.language}",
        )
    if lang_b in RELATED_LANGUAGES.get(lang_a, set()) or lang_a in RELATED_LANGUAGES.get(
        lang_b, set()
    ):
        return SimilarityReason(
            type=SimilarityReasonType.language,
            weight=0.6,
            explanation=f"Related languages: {a.language} and {b.language}",
        )
    return None


def topic_similarity(a: Project, b: Project) -> float:
    """두 프로젝트 토픽의 Jaccard 유사도."""
    return jaccard(a.topics, b.topics)


def _topic_reason(a: Project, b: Project) -> SimilarityReason | None:
    similarity = topic_similarity(a, b)
    if similarity <= 0:
        return None
    shared = [t for t in a.topics if t in set(b.topics)][:3]
    return SimilarityReason(
        type=SimilarityReasonType.topics,
        weight=similarity,
        explanation=f"Share topics: {', '.join(shared)}",
    )


def size_category(stars: int) -> str:
    """스타 수로 프로젝트 규모를 분류한다."""
    if stars < 100:
        return "small"
    if stars < 1000:
        return "medium"
    if stars < 10000:
        return "large"
    return "very large"


def _normalized_size(project: Project) -> float:
    return math.log10(max(project.stars + project.forks * 2, 1))


def _size_reason(a: Project, b: Project) -> SimilarityReason | None:
    size_a, size_b = _normalized_size(a), _normalized_size(b)
    largest = max(size_a, size_b)
    if largest == 0:
        return None
    similarity = min(size_a, size_b) / largest
    if similarity <= 0.5:
        return None
    category = size_category(max(a.stars, b.stars))
    return SimilarityReason(
        type=SimilarityReasonType.size,
        weight=similarity,
        explanation=f"Similar project size ({category})",
    )


def _activity_reason(a: Project, b: Project, now: datetime) -> SimilarityReason | None:
    days_a = days_since(a.updated_at, now)
    days_b = days_since(b.updated_at, now)

    if days_a < 30 and days_b < 30:
        return SimilarityReason(
            type=SimilarityReasonType.activity,
            weight=0.8,
            explanation="Both actively maintained",
        )
    if days_a < 90 and days_b < 90:
        return SimilarityReason(
            type=SimilarityReasonType.activity,
            weight=0.6,
            explanation="Both regularly updated",
        )

    most_issues = max(a.open_issues, b.open_issues)
    ratio = min(a.open_issues, b.open_issues) / max(most_issues, 1)
    if ratio > 0.5 and most_issues > 10:
        return SimilarityReason(
            type=SimilarityReasonType.activity,
            weight=0.4,
            explanation="Similar community engagement",
        )
    return None


def description_keywords(text: str) -> list[str]:
    """설명에서 불용어를 뺀 앞쪽 키워드 10개를 추출한다."""
    words = _NON_WORD.sub(" ", text.lower()).split()
    return [w for w in words if len(w) > 2 and w not in STOPWORDS][:10]


def _description_reason(a: Project, b: Project) -> SimilarityReason | None:
    keywords_a = description_keywords(a.description)
    keywords_b = description_keywords(b.description)
    if not keywords_a or not keywords_b:
        return None

    similarity = jaccard(keywords_a, keywords_b)
    if similarity <= 0.2:
        return None
    shared = list(dict.fromkeys(k for k in keywords_a if k in set(keywords_b)))[:2]
    return SimilarityReason(
        type=SimilarityReasonType.description,
        weight=similarity,
        explanation=f"Similar purpose: {', '.join(shared)}",
    )


def calculate_similarity(
    target: Project,
    candidate: Project,
    now: datetime | None = None,
) -> SimilarityScore:
    """두 프로젝트의 유사도를 계산한다."""
    now = now or utcnow()
    reasons = [
        reason
        for reason in (
            _language_reason(target, candidate),
            _topic_reason(target, candidate),
            _size_reason(target, candidate),
            _activity_reason(target, candidate, now),
            _description_reason(target, candidate),
        )
        if reason is not None
    ]

    total = sum(reason.weight * WEIGHTS[reason.type.value] for reason in reasons)
    return SimilarityScore(
        project_id=candidate.id,
        score=clamp(total),
        reasons=sorted(reasons, key=lambda r: r.weight, reverse=True),
    )


def find_similar_projects(
    target: Project,
    candidates: list[Project],
    limit: int = 10,
    now: datetime | None = None,
) -> list[SimilarityScore]:
    """target과 비슷한 프로젝트를 점수 내림차순으로 반환한다.

    target 자신(같은 id)은 비교하지 않으며 점수가 0.2 이하인 후보는 제외한다.
    """
    now = now or utcnow()
    scores = [
        calculate_similarity(target, candidate, now)
        for candidate in candidates
        if candidate.id != target.id
    ]
    scores = [s for s in scores if s.score > MIN_SIMILARITY]
    scores.sort(key=lambda s: s.score, reverse=True)
    return scores[:limit]


def _format_topic_name(topic: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in topic.split("-"))


def _common_topics(projects: list[Project]) -> list[str]:
    counts = Counter(topic for project in projects for topic in project.topics)
    threshold = math.ceil(len(projects) * 0.5)
    return [topic for topic, count in counts.most_common() if count >= threshold][:5]


def _primary_language(projects: list[Project]) -> str:
    counts = Counter(p.language for p in projects if p.language)
    if not counts:
        return "Mixed"
    return counts.most_common(1)[0][0]


def create_topic_clusters(projects: list[Project]) -> list[ProjectCluster]:
    """첫 번째 토픽을 기준으로 프로젝트를 묶는다.

    3개 이상 모인 그룹만 클러스터가 되며 평균 스타 수 내림차순으로 정렬한다.
    """
    groups: dict[str, list[Project]] = {}
    for project in projects:
        if project.topics:
            groups.setdefault(project.topics[0], []).append(project)

    clusters: list[ProjectCluster] = []
    for topic, members in groups.items():
        if len(members) < MIN_CLUSTER_SIZE:
            continue
        average_stars = sum(p.stars for p in members) / len(members)
        clusters.append(
            ProjectCluster(
                id=f"cluster-{len(clusters)}",
                name=_format_topic_name(topic),
                description=f"Projects focused on {topic}",
                projects=sorted(members, key=lambda p: p.stars, reverse=True),
                common_topics=_common_topics(members),
                average_stars=round(average_stars),
                primary_language=_primary_language(members),
            )
        )

    return sorted(clusters, key=lambda c: c.average_stars, reverse=True)

