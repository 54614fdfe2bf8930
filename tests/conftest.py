"""공용 테스트 픽스처."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from oss_finder.models import Project
from oss_finder.storage import MemoryStore

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=UTC)

ProjectFactory = Callable[..., Project]


@pytest.fixture
def now() -> datetime:
    """테스트 기준 시각."""
    return NOW


@pytest.fixture
def store() -> MemoryStore:
    """빈 인메모리 저장소를 반환한다."""
    return MemoryStore()


@pytest.fixture
def make_project() -> ProjectFactory:
    """Project 팩토리. 날짜는 일수로 받는다 (기준 시각에서 며칠 전)."""
    counter = iter(range(1000, 100000))

    def factory(
        name: str = "project",
        *,
        id: int | None = None,
        owner: str = "octo",
        description: str = "",
        language: str | None = "Python",
        topics: list[str] | None = None,
        stars: int = 0,
        forks: int = 0,
        open_issues: int = 0,
        updated_days_ago: float = 1,
        created_days_ago: float | None = 400,
        license: str | None = "MIT License",
        license_spdx: str | None = "MIT",
    ) -> Project:
        return Project(
            id=id if id is not None else next(counter),
            name=name,
            full_name=f"{owner}/{name}",
            description=description,
            language=language,
            topics=topics or [],
            stars=stars,
            forks=forks,
            open_issues=open_issues,
            updated_at=NOW - timedelta(days=updated_days_ago),
            created_at=(
                NOW - timedelta(days=created_days_ago) if created_days_ago is not None else None
            ),
            license=license,
            license_spdx=license_spdx,
            html_url=f"https://github.com/{owner}/{name}",
        )

    return factory
