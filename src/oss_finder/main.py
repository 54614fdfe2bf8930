"""CLI 엔트리포인트."""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Annotated, Any, TypeVar

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from oss_finder.api import create_app
from oss_finder.config import settings
from oss_finder.models import Project, SkillLevel, Timeframe, UserPreferences
from oss_finder.scoring import (
    find_similar_projects,
    generate_recommendations,
    search_projects,
    trending_projects,
    trending_recommendations,
)
from oss_finder.sources import GitHubClient, ProjectCatalog

console = Console()
T = TypeVar("T")

POOL_SIZE = 50

app = typer.Typer(
    name="oss-finder",
    help="입문자에게 맞는 오픈소스 프로젝트를 찾습니다.",
    no_args_is_help=True,
)


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """코루틴을 실행한다. Ctrl-C는 0, 그 외 오류는 1로 종료한다."""
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        console.print("\n[dim]중단됨[/dim]")
        raise typer.Exit(0) from None
    except Exception as e:
        console.print(f"[red]오류 발생: {e}[/red]")
        raise typer.Exit(1) from e


async def _load_pool(language: str | None = None, query: str | None = None) -> list[Project]:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("GitHub 프로젝트 수집 중...", total=None)
        catalog = ProjectCatalog(GitHubClient())
        projects = await catalog.list_projects(per_page=POOL_SIZE, language=language, query=query)
        progress.update(
            task,
            description=f"[green]✓[/green] 수집 완료: {len(projects)}개 프로젝트",
        )
        progress.remove_task(task)
    return projects


def _project_table(title: str, score_label: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan", expand=True)
    table.add_column("#", style="dim", width=3)
    table.add_column("프로젝트", style="bold")
    table.add_column("언어", width=12)
    table.add_column("⭐ Stars", justify="right", width=10)
    table.add_column(score_label, justify="center", width=8)
    table.add_column("근거")
    return table


def _score_text(score: float) -> str:
    color = "green" if score >= 0.7 else "yellow" if score >= 0.4 else "dim"
    return f"[{color}]{score:.2f}[/]"


def _project_cell(project: Project) -> str:
    return f"[link={project.html_url}]{project.full_name}[/link]"


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="바인드 주소")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="포트")] = 8000,
) -> None:
    """HTTP API 서버를 실행합니다."""
    _configure_logging()
    uvicorn.run(create_app(), host=host, port=port, log_level=settings.log_level.lower())


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="검색어 (예: frontend, rust parser)")],
    language: Annotated[
        str | None,
        typer.Option("--lang", "-l", help="프로그래밍 언어 필터"),
    ] = None,
    limit: Annotated[int, typer.Option("--limit", "-n")] = 10,
) -> None:
    """동의어와 토픽 클러스터로 확장한 시맨틱 검색."""
    _configure_logging()
    projects = _run(_load_pool(language))
    results = search_projects(projects, query)[:limit]

    if not results:
        console.print("\n[yellow]검색 결과가 없습니다.[/yellow]")
        return

    table = _project_table(f"🔎 '{query}' 검색 결과", "관련도")
    for i, result in enumerate(results, 1):
        project = result.project
        terms = ", ".join(result.matched_terms[:3] + result.semantic_matches[:3])
        table.add_row(
            str(i),
            _project_cell(project),
            project.language or "-",
            f"{project.stars:,}",
            _score_text(result.relevance_score),
            terms,
        )
    console.print(table)


@app.command()
def trending(
    timeframe: Annotated[
        Timeframe,
        typer.Option("--timeframe", "-t", help="기간"),
    ] = Timeframe.weekly,
    language: Annotated[
        str | None,
        typer.Option("--lang", "-l", help="프로그래밍 언어 필터"),
    ] = None,
    limit: Annotated[int, typer.Option("--limit", "-n")] = 10,
) -> None:
    """트렌딩 프로젝트를 보여줍니다."""
    _configure_logging()
    projects = _run(_load_pool(language))
    results = trending_projects(projects, timeframe, limit)

    if not results:
        console.print("\n[yellow]트렌딩 프로젝트가 없습니다.[/yellow]")
        return

    table = _project_table(f"🔥 트렌딩 ({timeframe.value})", "점수")
    for i, item in enumerate(results, 1):
        project = item.project
        table.add_row(
            str(i),
            _project_cell(project),
            project.language or "-",
            f"{project.stars:,}",
            _score_text(item.trending_score),
            item.trending_reason.explanation,
        )
    console.print(table)


@app.command()
def similar(
    full_name: Annotated[str, typer.Argument(help="기준 저장소 (owner/repo)")],
    limit: Annotated[int, typer.Option("--limit", "-n")] = 10,
) -> None:
    """비슷한 프로젝트를 찾습니다."""
    _configure_logging()

    async def load() -> tuple[Project, list[Project]]:
        target = await GitHubClient().get_repository(full_name)
        return target, await _load_pool(target.language)

    target, projects = _run(load())
    by_id = {p.id: p for p in projects}
    results = find_similar_projects(target, projects, limit)

    console.print(
        Panel(
            f"{target.description}\n\n[dim]🔗 {target.html_url}[/dim]",
            title=f"[bold]{target.full_name}[/bold]",
            border_style="blue",
        )
    )
    if not results:
        console.print("[yellow]비슷한 프로젝트가 없습니다.[/yellow]")
        return

    table = _project_table("🧭 비슷한 프로젝트", "유사도")
    for i, score in enumerate(results, 1):
        project = by_id[score.project_id]
        table.add_row(
            str(i),
            _project_cell(project),
            project.language or "-",
            f"{project.stars:,}",
            _score_text(score.score),
            "; ".join(r.explanation for r in score.reasons[:2]),
        )
    console.print(table)


@app.command()
def recommend(
    languages: Annotated[
        list[str] | None,
        typer.Option("--lang", "-l", help="선호 언어 (여러 번 지정 가능)"),
    ] = None,
    interests: Annotated[
        list[str] | None,
        typer.Option("--interest", "-i", help="관심 토픽 (여러 번 지정 가능)"),
    ] = None,
    skill: Annotated[
        SkillLevel,
        typer.Option("--skill", "-s", help="숙련도"),
    ] = SkillLevel.intermediate,
    limit: Annotated[int, typer.Option("--limit", "-n")] = 10,
) -> None:
    """선호도에 맞는 프로젝트를 추천합니다."""
    _configure_logging()
    preferences = UserPreferences(
        preferred_languages=languages or [],
        interests=interests or [],
        skill_level=skill,
    )
    projects = _run(_load_pool())

    if preferences.is_empty:
        results = trending_recommendations(projects, limit)
    else:
        results = generate_recommendations(projects, preferences, limit)

    table = _project_table("✨ 추천 프로젝트", "점수")
    for i, item in enumerate(results, 1):
        project = item.project
        table.add_row(
            str(i),
            _project_cell(project),
            project.language or "-",
            f"{project.stars:,}",
            _score_text(item.recommendation_score),
            "; ".join(r.explanation for r in item.reasons[:2]),
        )
    console.print(table)


if __name__ == "__main__":
    app()
