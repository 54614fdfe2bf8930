"""프로젝트 카탈로그 테스트."""

from typing import Any

import httpx
import pytest

from oss_finder.exceptions import GitHubAPIError, NotFoundError
from oss_finder.models import Contributor, Issue, Project
from oss_finder.sources import FALLBACK_PROJECTS, ProjectCatalog


class FakeSource:
    """호출을 기록하고 미리 정한 결과를 돌려주는 소스."""

    def __init__(
        self,
        projects: list[Project] | None = None,
        error: Exception | None = None,
        readme: str | None = "<h2>Contributing</h2><p>Hello</p>",
    ) -> None:
        self.projects = projects or []
        self.error = error
        self.readme = readme
        self.queries: list[str] = []

    def _maybe_fail(self) -> None:
        if self.error is not None:
            raise self.error

    async def search_repositories(
        self, query: str, page: int = 1, per_page: int = 20, sort: str = "stars"
    ) -> list[Project]:
        self.queries.append(query)
        self._maybe_fail()
        return self.projects[:per_page]

    async def get_repository_data(self, full_name: str) -> dict[str, Any]:
        self._maybe_fail()
        return {}

    async def get_repository_by_id(self, repo_id: int) -> Project:
        self._maybe_fail()
        for project in self.projects:
            if project.id == repo_id:
                return project
        raise NotFoundError(f"GitHub resource not found: /repositories/{repo_id}")

    async def list_issues(
        self,
        full_name: str,
        labels: list[str] | None = None,
        state: str = "open",
        per_page: int = 30,
    ) -> list[Issue]:
        return [Issue(id=1, number=1, title="Bug")]

    async def list_good_first_issues(self, full_name: str, limit: int = 10) -> list[Issue]:
        raise GitHubAPIError("boom", status_code=500)

    async def list_contributors(self, full_name: str, per_page: int = 30) -> list[Contributor]:
        return [Contributor(id=1, login="octocat", contributions=3)]

    async def get_readme_html(self, full_name: str) -> str | None:
        return self.readme


class TestListProjects:
    """list_projects 테스트."""

    @pytest.mark.asyncio
    async def test_uses_source(self, make_project) -> None:
        source = FakeSource([make_project("ripgrep", language="Rust")])
        catalog = ProjectCatalog(source)

        projects = await catalog.list_projects(language="Rust", query="grep")

        assert [p.name for p in projects] == ["ripgrep"]
        assert source.queries == ["grep language:Rust stars:>100 is:public"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [GitHubAPIError("rate limited", status_code=403), httpx.ConnectError("offline")],
    )
    async def test_falls_back_on_failure(self, error: Exception) -> None:
        catalog = ProjectCatalog(FakeSource(error=error))

        projects = await catalog.list_projects(per_page=3)

        assert projects == FALLBACK_PROJECTS[:3]

    @pytest.mark.asyncio
    async def test_fallback_filters_and_pages(self) -> None:
        catalog = ProjectCatalog(FakeSource(error=httpx.ConnectError("offline")))

        python = await catalog.list_projects(language="python")
        second_page = await catalog.list_projects(page=2, per_page=1, language="Python")

        assert python and all(p.language == "Python" for p in python)
        assert second_page == [python[1]]

    @pytest.mark.asyncio
    async def test_fallback_query(self) -> None:
        catalog = ProjectCatalog(FakeSource(error=httpx.ConnectError("offline")))
        projects = await catalog.list_projects(query="kubernetes")
        assert [p.full_name for p in projects] == ["kubernetes/kubernetes"]


class TestGetProject:
    """get_project 테스트."""

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        with pytest.raises(NotFoundError):
            await ProjectCatalog(FakeSource()).get_project(1)

    @pytest.mark.asyncio
    async def test_known_fallback_project(self) -> None:
        react = FALLBACK_PROJECTS[0]
        catalog = ProjectCatalog(FakeSource(error=httpx.ConnectError("offline")))
        assert await catalog.get_project(react.id) == react

    @pytest.mark.asyncio
    async def test_unknown_project_with_failing_source(self) -> None:
        catalog = ProjectCatalog(FakeSource(error=httpx.ConnectError("offline")))
        with pytest.raises(GitHubAPIError):
            await catalog.get_project(1)


class TestGetDetail:
    """get_detail 테스트."""

    @pytest.mark.asyncio
    async def test_partial_failure_leaves_section_empty(self, make_project) -> None:
        project = make_project("tool", id=5)
        catalog = ProjectCatalog(FakeSource([project]))

        detail = await catalog.get_detail(5)

        assert detail.project == project
        assert [i.title for i in detail.issues] == ["Bug"]
        assert detail.good_first_issues == []
        assert detail.contributors[0].login == "octocat"
        assert detail.readme is not None
        assert detail.readme.has_contributing_section
        assert detail.is_open_source is True

    @pytest.mark.asyncio
    async def test_missing_readme(self, make_project) -> None:
        project = make_project("tool", id=5)
        detail = await ProjectCatalog(FakeSource([project], readme=None)).get_detail(5)
        assert detail.readme is None

    @pytest.mark.asyncio
    async def test_unlicensed_project_is_not_open_source(self, make_project) -> None:
        project = make_project("tool", id=5, license=None, license_spdx=None)
        detail = await ProjectCatalog(FakeSource([project])).get_detail(5)
        assert detail.is_open_source is False
