"""소스 프로토콜 정의."""

from typing import Any, Protocol

from oss_finder.models import Contributor, Issue, Project


class ProjectSource(Protocol):
    """프로젝트 데이터 소스 프로토콜."""

    async def search_repositories(
        self,
        query: str,
        page: int = 1,
        per_page: int = 20,
        sort: str = "stars",
    ) -> list[Project]:
        """저장소를 검색한다."""
        ...

    async def get_repository_data(self, full_name: str) -> dict[str, Any]:
        """저장소 원본 응답을 가져온다."""
        ...

    async def get_repository_by_id(self, repo_id: int) -> Project:
        """숫자 ID로 저장소를 가져온다."""
        ...

    async def list_issues(
        self,
        full_name: str,
        labels: list[str] | None = None,
        state: str = "open",
        per_page: int = 30,
    ) -> list[Issue]:
        """저장소의 이슈 목록을 가져온다."""
        ...

    async def list_good_first_issues(self, full_name: str, limit: int = 10) -> list[Issue]:
        """good first issue 목록을 가져온다."""
        ...

    async def list_contributors(self, full_name: str, per_page: int = 30) -> list[Contributor]:
        """기여자 목록을 가져온다."""
        ...

    async def get_readme_html(self, full_name: str) -> str | None:
        """README HTML을 가져온다."""
        ...
