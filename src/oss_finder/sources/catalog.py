"""프로젝트 카탈로그 모듈.

GitHub 소스를 감싸서 목록 조회가 실패하면 데모 데이터로 대체하고,
프로젝트 상세 화면에 필요한 호출을 병렬로 묶는다.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

import httpx
from pydantic import BaseModel, Field

from oss_finder.enrichers.readme import ReadmeEnricher, ReadmeInfo, is_open_source
from oss_finder.exceptions import GitHubAPIError, NotFoundError
from oss_finder.models import Contributor, Issue, Project
from oss_finder.sources.base import ProjectSource
from oss_finder.sources.fallback import FALLBACK_PROJECTS
from oss_finder.sources.github import build_search_query

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProjectDetail(BaseModel):
    """프로젝트 상세 화면 데이터."""

    project: Project
    issues: list[Issue] = Field(default_factory=list)
    good_first_issues: list[Issue] = Field(default_factory=list)
    contributors: list[Contributor] = Field(default_factory=list)
    readme: ReadmeInfo | None = None
    is_open_source: bool = False


def _matches(project: Project, language: str | None, query: str | None) -> bool:
    if language and language.lower() != "all":
        if (project.language or "").lower() != language.lower():
            return False
    if query:
        q = query.lower()
        haystack = " ".join(
            [project.full_name, project.description, *project.topics]
        ).lower()
        if q not in haystack:
            return False
    return True


class ProjectCatalog:
    """프로젝트 목록과 상세 정보를 제공한다."""

    def __init__(
        self,
        source: ProjectSource,
        fallback: list[Project] | None = None,
    ) -> None:
        """
        Args:
            source: 프로젝트 데이터 소스 (보통 GitHubClient)
            fallback: 소스 호출이 실패했을 때 쓸 프로젝트 목록
        """
        self.source = source
        self.fallback = FALLBACK_PROJECTS if fallback is None else fallback
        self.readme_enricher = ReadmeEnricher(source)

    def fallback_projects(
        self,
        page: int = 1,
        per_page: int = 20,
        language: str | None = None,
        query: str | None = None,
    ) -> list[Project]:
        """데모 데이터에서 조건에 맞는 페이지를 잘라 반환한다."""
        matched = [p for p in self.fallback if _matches(p, language, query)]
        start = (page - 1) * per_page
        return matched[start : start + per_page]

    async def list_projects(
        self,
        page: int = 1,
        per_page: int = 20,
        language: str | None = None,
        query: str | None = None,
        min_stars: int | None = 100,
    ) -> list[Project]:
        """프로젝트 목록을 가져온다. GitHub 호출이 실패하면 데모 데이터를 반환한다."""
        search = build_search_query(query, language, min_stars)
        try:
            return await self.source.search_repositories(search, page=page, per_page=per_page)
        except (httpx.HTTPError, GitHubAPIError) as e:
            logger.warning(f"Project search failed, using fallback dataset: {e}")
            return self.fallback_projects(page, per_page, language, query)

    async def get_project(self, project_id: int) -> Project:
        """ID로 프로젝트를 가져온다.

        Raises:
            NotFoundError: GitHub와 데모 데이터 어디에도 없을 때
            GitHubAPIError: GitHub 호출이 실패했고 데모 데이터에도 없을 때
        """
        local = next((p for p in self.fallback if p.id == project_id), None)
        try:
            return await self.source.get_repository_by_id(project_id)
        except NotFoundError:
            if local is not None:
                return local
            raise
        except (httpx.HTTPError, GitHubAPIError) as e:
            if local is not None:
                logger.warning(f"Lookup of project {project_id} failed, using fallback: {e}")
                return local
            raise _as_api_error(e) from e

    async def list_issues(self, project: Project, per_page: int = 30) -> list[Issue]:
        """프로젝트의 열린 이슈."""
        try:
            return await self.source.list_issues(project.full_name, per_page=per_page)
        except httpx.HTTPError as e:
            raise _as_api_error(e) from e

    async def list_good_first_issues(self, project: Project, limit: int = 10) -> list[Issue]:
        """프로젝트의 good first issue."""
        try:
            return await self.source.list_good_first_issues(project.full_name, limit=limit)
        except httpx.HTTPError as e:
            raise _as_api_error(e) from e

    async def list_contributors(self, project: Project, per_page: int = 30) -> list[Contributor]:
        """프로젝트 기여자."""
        try:
            return await self.source.list_contributors(project.full_name, per_page=per_page)
        except httpx.HTTPError as e:
            raise _as_api_error(e) from e

    async def get_readme(self, project: Project) -> ReadmeInfo | None:
        """프로젝트 README 요약."""
        try:
            return await self.readme_enricher.fetch(project.full_name)
        except httpx.HTTPError as e:
            raise _as_api_error(e) from e

    async def _optional(self, label: str, project: Project, call: Awaitable[T], default: T) -> T:
        try:
            return await call
        except (GitHubAPIError, NotFoundError) as e:
            logger.warning(f"Failed to load {label} for {project.full_name}: {e}")
            return default

    async def get_detail(self, project_id: int) -> ProjectDetail:
        """프로젝트와 이슈, 기여자, README를 함께 가져온다.

        하위 호출 하나가 실패하면 해당 항목만 비워 둔다.
        """
        project = await self.get_project(project_id)

        issues, good_first, contributors, readme = await asyncio.gather(
            self._optional("issues", project, self.list_issues(project), []),
            self._optional("good first issues", project, self.list_good_first_issues(project), []),
            self._optional("contributors", project, self.list_contributors(project), []),
            self._optional("readme", project, self.get_readme(project), None),
        )
        return ProjectDetail(
            project=project,
            issues=issues,
            good_first_issues=good_first,
            contributors=contributors,
            readme=readme,
            is_open_source=is_open_source(project.license_spdx),
        )


def _as_api_error(error: Exception) -> GitHubAPIError:
    if isinstance(error, GitHubAPIError):
        return error
    return GitHubAPIError(f"GitHub request failed: {error}")
