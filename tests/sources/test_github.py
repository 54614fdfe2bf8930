"""GitHub 클라이언트 테스트."""

import json
from datetime import UTC, datetime
from typing import Any

import httpx
import pytest

from oss_finder.exceptions import GitHubAPIError, NotFoundError
from oss_finder.sources.github import (
    GitHubClient,
    build_search_query,
    project_from_api,
)

REPO: dict[str, Any] = {
    "id": 42,
    "name": "ripgrep",
    "full_name": "BurntSushi/ripgrep",
    "description": None,
    "language": "Rust",
    "topics": ["cli", "search", "cli"],
    "stargazers_count": 45000,
    "forks_count": 1900,
    "open_issues_count": 80,
    "created_at": "2016-03-11T00:00:00Z",
    "updated_at": "2025-06-01T00:00:00Z",
    "license": {"name": "The Unlicense", "spdx_id": "Unlicense"},
    "html_url": "https://github.com/BurntSushi/ripgrep",
}


def make_client(handler, token: str | None = "test-token") -> GitHubClient:
    """MockTransport로 요청을 가로채는 GitHubClient를 만든다."""
    return GitHubClient(
        token=token,
        base_url="https://api.github.test",
        transport=httpx.MockTransport(handler),
    )


class TestBuildSearchQuery:
    """build_search_query 테스트."""

    def test_default(self) -> None:
        assert build_search_query() == "stars:>100 is:public"

    def test_all_parts(self) -> None:
        query = build_search_query(" parser ", "rust", min_stars=10, topics=["cli"])
        assert query == "parser language:rust topic:cli stars:>10 is:public"

    def test_language_all_is_ignored(self) -> None:
        assert build_search_query(language="All", min_stars=None) == "is:public"


class TestProjectFromApi:
    """project_from_api 테스트."""

    def test_maps_fields(self) -> None:
        project = project_from_api(REPO)

        assert project.stars == 45000
        assert project.description == ""
        assert project.topics == ["cli", "search"]
        assert project.license_spdx == "Unlicense"
        assert project.owner == "BurntSushi"

    def test_missing_optional_fields(self) -> None:
        project = project_from_api(
            {"id": 1, "full_name": "a/b", "pushed_at": "2025-01-01T00:00:00Z", "license": None}
        )
        assert project.name == "b"
        assert project.license is None
        assert project.html_url == "https://github.com/a/b"

    def test_updated_at_falls_back_to_created_at(self) -> None:
        project = project_from_api(
            {
                "id": 1,
                "full_name": "a/b",
                "updated_at": None,
                "pushed_at": None,
                "created_at": "2024-03-01T00:00:00Z",
            }
        )
        assert project.updated_at == datetime(2024, 3, 1, tzinfo=UTC)
        assert project.created_at == project.updated_at

    def test_updated_at_without_any_timestamp(self) -> None:
        project = project_from_api({"id": 1, "full_name": "a/b"})
        assert project.updated_at.tzinfo is not None


class TestGitHubClient:
    """GitHubClient 테스트."""

    @pytest.mark.asyncio
    async def test_search_repositories(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"items": [REPO]})

        projects = await make_client(handler).search_repositories("rust", per_page=5)

        assert [p.full_name for p in projects] == ["BurntSushi/ripgrep"]
        request = seen[0]
        assert request.url.path == "/search/repositories"
        assert request.url.params["q"] == "rust"
        assert request.url.params["per_page"] == "5"
        assert request.headers["Authorization"] == "Bearer test-token"

    @pytest.mark.asyncio
    async def test_no_token_no_auth_header(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"items": []})

        await make_client(handler, token="").search_repositories()

        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        client = make_client(lambda request: httpx.Response(404, json={}))
        with pytest.raises(NotFoundError):
            await client.get_repository("nobody/nothing")

    @pytest.mark.asyncio
    async def test_api_error(self) -> None:
        client = make_client(lambda request: httpx.Response(403, json={"message": "rate limited"}))

        with pytest.raises(GitHubAPIError) as exc_info:
            await client.get_repository_by_id(42)

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_list_issues_skips_pull_requests(self) -> None:
        seen: list[httpx.Request] = []
        issues = [
            {
                "id": 1,
                "number": 10,
                "title": "Fix typo",
                "labels": [{"name": "good first issue", "color": "7057ff"}],
                "body": None,
            },
            {"id": 2, "number": 11, "title": "PR", "pull_request": {}},
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=json.dumps(issues))

        result = await make_client(handler).list_good_first_issues("a/b", limit=5)

        assert [i.number for i in result] == [10]
        assert result[0].is_good_first_issue
        assert seen[0].url.params["labels"] == "good first issue"
        assert seen[0].url.params["per_page"] == "5"

    @pytest.mark.asyncio
    async def test_list_contributors(self) -> None:
        client = make_client(
            lambda request: httpx.Response(
                200, json=[{"id": 7, "login": "octocat", "contributions": 12}]
            )
        )

        [contributor] = await client.list_contributors("a/b")

        assert contributor.login == "octocat"
        assert contributor.contributions == 12

    @pytest.mark.asyncio
    async def test_readme_html(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="<h1>Title</h1>")

        html = await make_client(handler).get_readme_html("a/b")

        assert html == "<h1>Title</h1>"
        assert seen[0].headers["Accept"] == "application/vnd.github.html+json"

    @pytest.mark.asyncio
    async def test_missing_readme(self) -> None:
        client = make_client(lambda request: httpx.Response(404))
        assert await client.get_readme_html("a/b") is None
