"""GitHub REST API 클라이언트."""

import logging
from typing import Any

import httpx

from oss_finder.config import settings
from oss_finder.exceptions import GitHubAPIError, NotFoundError
from oss_finder.models import Contributor, Issue, Project, utcnow

logger = logging.getLogger(__name__)

JSON_ACCEPT = "application/vnd.github+json"
HTML_ACCEPT = "application/vnd.github.html+json"
DEFAULT_QUERY = "stars:>100 is:public"
GOOD_FIRST_ISSUE_LABEL = "good first issue"


def project_from_api(item: dict[str, Any]) -> Project:
    """저장소 API 응답을 Project로 변환한다. 없는 필드는 기본값으로 채운다."""
    license_info = item.get("license") or {}
    return Project(
        id=item["id"],
        name=item.get("name") or item["full_name"].split("/")[-1],
        full_name=item["full_name"],
        description=item.get("description"),
        language=item.get("language"),
        topics=item.get("topics") or [],
        stars=item.get("stargazers_count") or 0,
        forks=item.get("forks_count") or 0,
        open_issues=item.get("open_issues_count") or 0,
        updated_at=(
            item.get("updated_at") or item.get("pushed_at") or item.get("created_at") or utcnow()
        ),
        created_at=item.get("created_at"),
        license=license_info.get("name"),
        license_spdx=license_info.get("spdx_id"),
        html_url=item.get("html_url") or f"https://github.com/{item['full_name']}",
    )


def issue_from_api(item: dict[str, Any]) -> Issue:
    """이슈 API 응답을 Issue로 변환한다."""
    return Issue(
        id=item["id"],
        number=item["number"],
        title=item.get("title", ""),
        html_url=item.get("html_url", ""),
        created_at=item.get("created_at"),
        updated_at=item.get("updated_at"),
        labels=[
            {"name": label.get("name", ""), "color": label.get("color") or ""}
            for label in item.get("labels") or []
            if isinstance(label, dict)
        ],
        comments=item.get("comments") or 0,
        body=item.get("body"),
    )


def contributor_from_api(item: dict[str, Any]) -> Contributor:
    """기여자 API 응답을 Contributor로 변환한다."""
    return Contributor(
        id=item["id"],
        login=item["login"],
        avatar_url=item.get("avatar_url", ""),
        html_url=item.get("html_url", ""),
        contributions=item.get("contributions") or 0,
    )


def build_search_query(
    text: str | None = None,
    language: str | None = None,
    min_stars: int | None = 100,
    topics: list[str] | None = None,
) -> str:
    """저장소 검색 쿼리 문자열을 만든다.

    예: ``build_search_query("parser", "rust")`` ->
    ``"parser language:rust stars:>100 is:public"``
    """
    parts: list[str] = []
    if text:
        parts.append(text.strip())
    if language and language.lower() != "all":
        parts.append(f"language:{language}")
    for topic in topics or []:
        parts.append(f"topic:{topic}")
    if min_stars is not None:
        parts.append(f"stars:>{min_stars}")
    parts.append("is:public")
    return " ".join(parts)


class GitHubClient:
    """GitHub REST API에서 저장소, 이슈, 기여자, README를 가져온다."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            token: GitHub API 토큰. None이면 설정값 사용 (없으면 비인증 호출).
            base_url: API 베이스 URL. None이면 설정값 사용.
            timeout: HTTP 요청 타임아웃 (초). None이면 설정값 사용.
            transport: 테스트용 httpx transport
        """
        self.token = token if token is not None else settings.github_token
        self.base_url = base_url or settings.github_api_url
        self.timeout = timeout or settings.request_timeout
        self.transport = transport

    def _headers(self, accept: str = JSON_ACCEPT) -> dict[str, str]:
        headers = {
            "Accept": accept,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True,
        )

    async def _request(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        accept: str = JSON_ACCEPT,
    ) -> httpx.Response:
        async with self._client() as client:
            response = await client.get(path, params=params, headers=self._headers(accept))

        if response.status_code == 404:
            raise NotFoundError(f"GitHub resource not found: {path}")
        if response.status_code >= 400:
            logger.error(f"GitHub API error {response.status_code} for {path}")
            raise GitHubAPIError(
                f"GitHub API returned {response.status_code} for {path}",
                status_code=response.status_code,
            )
        return response

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._request(path, params=params)
        return response.json()

    async def search_repositories(
        self,
        query: str = DEFAULT_QUERY,
        page: int = 1,
        per_page: int = 20,
        sort: str = "stars",
    ) -> list[Project]:
        """저장소를 검색한다."""
        data = await self._get_json(
            "/search/repositories",
            params={
                "q": query,
                "sort": sort,
                "order": "desc",
                "page": page,
                "per_page": per_page,
            },
        )
        items = data.get("items") or []
        logger.info(f"Fetched {len(items)} repositories for query {query!r}")
        return [project_from_api(item) for item in items]

    async def get_repository_data(self, full_name: str) -> dict[str, Any]:
        """저장소 원본 응답을 가져온다 (pushed_at, archived 등 검증용 필드 포함)."""
        data: dict[str, Any] = await self._get_json(f"/repos/{full_name}")
        return data

    async def get_repository(self, full_name: str) -> Project:
        """owner/repo 이름으로 저장소를 가져온다."""
        return project_from_api(await self.get_repository_data(full_name))

    async def get_repository_by_id(self, repo_id: int) -> Project:
        """숫자 ID로 저장소를 가져온다."""
        return project_from_api(await self._get_json(f"/repositories/{repo_id}"))

    async def list_issues(
        self,
        full_name: str,
        labels: list[str] | None = None,
        state: str = "open",
        per_page: int = 30,
    ) -> list[Issue]:
        """저장소의 이슈 목록을 가져온다. Pull Request는 제외한다."""
        params: dict[str, Any] = {"state": state, "per_page": per_page}
        if labels:
            params["labels"] = ",".join(labels)

        data = await self._get_json(f"/repos/{full_name}/issues", params=params)
        return [issue_from_api(item) for item in data if "pull_request" not in item]

    async def list_good_first_issues(self, full_name: str, limit: int = 10) -> list[Issue]:
        """good first issue 라벨이 붙은 열린 이슈를 가져온다."""
        return await self.list_issues(
            full_name,
            labels=[GOOD_FIRST_ISSUE_LABEL],
            per_page=limit,
        )

    async def list_contributors(self, full_name: str, per_page: int = 30) -> list[Contributor]:
        """저장소 기여자 목록을 가져온다."""
        data = await self._get_json(
            f"/repos/{full_name}/contributors",
            params={"per_page": per_page},
        )
        return [contributor_from_api(item) for item in data or []]

    async def get_readme_html(self, full_name: str) -> str | None:
        """README를 GitHub가 렌더링한 HTML로 가져온다. 없으면 None."""
        try:
            response = await self._request(f"/repos/{full_name}/readme", accept=HTML_ACCEPT)
        except NotFoundError:
            return None
        return response.text
