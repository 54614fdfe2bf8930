"""CLI 테스트."""

import pytest
from rich.console import Console
from typer.testing import CliRunner

from oss_finder import main
from oss_finder.models import Project

runner = CliRunner()


@pytest.fixture
def pool(make_project, monkeypatch: pytest.MonkeyPatch) -> list[Project]:
    """GitHub 대신 고정된 프로젝트 목록을 쓰도록 _load_pool을 바꾼다."""
    projects = [
        make_project("ripgrep", language="Rust", topics=["cli", "search"], stars=45000),
        make_project("widgets", language="JavaScript", topics=["ui"], stars=300),
    ]

    async def fake_load_pool(language: str | None = None, query: str | None = None) -> list[Project]:
        return projects

    monkeypatch.setattr(main, "_load_pool", fake_load_pool)
    monkeypatch.setattr(main, "console", Console(width=200))
    return projects


class TestCli:
    """CLI 명령 테스트."""

    def test_search(self, pool: list[Project]) -> None:
        result = runner.invoke(main.app, ["search", "frontend"])

        assert result.exit_code == 0
        assert "octo/widgets" in result.output

    def test_search_without_results(self, pool: list[Project]) -> None:
        result = runner.invoke(main.app, ["search", "zzzzzz", "--limit", "0"])

        assert result.exit_code == 0
        assert "검색 결과가 없습니다" in result.output

    def test_recommend(self, pool: list[Project]) -> None:
        result = runner.invoke(main.app, ["recommend", "--lang", "Rust", "--interest", "cli"])

        assert result.exit_code == 0
        assert "octo/ripgrep" in result.output

    def test_load_failure_exits_with_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        async def failing_load_pool(language: str | None = None, query: str | None = None) -> list[Project]:
            raise RuntimeError("boom")

        monkeypatch.setattr(main, "_load_pool", failing_load_pool)
        monkeypatch.setattr(main, "console", Console(width=200))

        result = runner.invoke(main.app, ["trending"])

        assert result.exit_code == 1
        assert "boom" in result.output
