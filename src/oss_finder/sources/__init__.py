"""데이터 소스 모듈."""

from oss_finder.sources.base import ProjectSource
from oss_finder.sources.catalog import ProjectCatalog, ProjectDetail
from oss_finder.sources.fallback import FALLBACK_PROJECTS
from oss_finder.sources.github import GitHubClient, build_search_query

__all__ = [
    "FALLBACK_PROJECTS",
    "GitHubClient",
    "ProjectCatalog",
    "ProjectDetail",
    "ProjectSource",
    "build_search_query",
]
