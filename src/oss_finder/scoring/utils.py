"""점수 계산 공용 함수."""

from collections.abc import Iterable
from datetime import datetime

from oss_finder.models import Project, utcnow

SECONDS_PER_DAY = 60 * 60 * 24


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """값을 [low, high] 범위로 자른다."""
    return max(low, min(value, high))


def days_since(moment: datetime, now: datetime | None = None) -> float:
    """moment 이후 지난 일수 (소수 포함)."""
    now = now or utcnow()
    return (now - moment).total_seconds() / SECONDS_PER_DAY


def project_age_days(project: Project, now: datetime | None = None) -> float:
    """프로젝트 생성 후 지난 일수. 생성 시각이 없으면 업데이트 시각을 쓴다."""
    return days_since(project.created_at or project.updated_at, now)


def jaccard(a: Iterable[str], b: Iterable[str]) -> float:
    """두 집합의 Jaccard 유사도. 둘 다 비어 있으면 0."""
    set_a, set_b = set(a), set(b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)
