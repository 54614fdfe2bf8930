"""프로젝트 조회 라우터."""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from oss_finder.api.dependencies import CatalogDep, PoolDep
from oss_finder.enrichers import ReadmeInfo
from oss_finder.exceptions import NotFoundError
from oss_finder.models import Contributor, Issue
from oss_finder.scoring import ProjectCluster, create_topic_clusters, find_similar_projects
from oss_finder.sources import ProjectDetail
from oss_finder.validation import validate_pagination, validate_search_query

router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("")
async def list_projects(
    catalog: CatalogDep,
    page: int = 1,
    per_page: int = 20,
    language: str | None = None,
    query: str | None = None,
) -> dict[str, Any]:
    """프로젝트 목록. GitHub 호출이 실패하면 데모 데이터를 돌려준다."""
    page, per_page = validate_pagination(page, per_page)
    if query:
        query = validate_search_query(query)
    projects = await catalog.list_projects(page, per_page, language, query)
    return {"projects": projects, "page": page, "per_page": per_page}


@router.get("/clusters")
async def clusters(pool: PoolDep) -> list[ProjectCluster]:
    return create_topic_clusters(pool)


@router.get("/{project_id}")
async def get_project(project_id: int, catalog: CatalogDep) -> ProjectDetail:
    """프로젝트와 이슈, 기여자, README."""
    return await catalog.get_detail(project_id)


@router.get("/{project_id}/issues")
async def list_issues(project_id: int, catalog: CatalogDep) -> list[Issue]:
    project = await catalog.get_project(project_id)
    return await catalog.list_issues(project)


@router.get("/{project_id}/good-first-issues")
async def list_good_first_issues(
    project_id: int,
    catalog: CatalogDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[Issue]:
    project = await catalog.get_project(project_id)
    return await catalog.list_good_first_issues(project, limit=limit)


@router.get("/{project_id}/contributors")
async def list_contributors(project_id: int, catalog: CatalogDep) -> list[Contributor]:
    project = await catalog.get_project(project_id)
    return await catalog.list_contributors(project)


@router.get("/{project_id}/readme")
async def get_readme(project_id: int, catalog: CatalogDep) -> ReadmeInfo:
    project = await catalog.get_project(project_id)
    readme = await catalog.get_readme(project)
    if readme is None:
        raise NotFoundError(f"README not found for {project.full_name}")
    return readme


@router.get("/{project_id}/similar")
async def similar_projects(
    project_id: int,
    catalog: CatalogDep,
    pool: PoolDep,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> dict[str, Any]:
    """비슷한 프로젝트. 후보는 현재 목록에서 고른다."""
    target = await catalog.get_project(project_id)
    by_id = {p.id: p for p in pool}
    scores = find_similar_projects(target, pool, limit)
    return {
        "target": target,
        "results": [
            {"project": by_id[s.project_id], "similarity": s} for s in scores
        ],
        "total": len(scores),
    }
