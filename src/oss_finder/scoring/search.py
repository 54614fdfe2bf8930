"""시맨틱 검색 모듈.

질의어를 동의어 사전과 토픽 클러스터로 확장한 뒤, 프로젝트 메타데이터에서
어느 필드와 일치하는지에 따라 가중치를 더해 관련도를 계산한다.
"""

import re
from datetime import datetime

from pydantic import BaseModel, Field

from oss_finder.models import Project, utcnow
from oss_finder.scoring.utils import clamp, days_since

SYNONYMS: dict[str, list[str]] = {
    "frontend": ["front-end", "ui", "user-interface", "client-side", "web-ui"],
    "backend": ["back-end", "server-side", "api", "server", "service"],
    "fullstack": ["full-stack", "end-to-end", "complete"],
    "mobile": ["android", "ios", "react-native", "flutter", "app"],
    "web": ["website", "webapp", "web-app", "browser", "html"],
    "api": ["rest", "graphql", "endpoint", "service", "microservice"],
    "database": ["db", "sql", "nosql", "storage", "data"],
    "ai": ["artificial-intelligence", "machine-learning", "ml", "deep-learning"],
    "devops": ["deployment", "ci-cd", "docker", "kubernetes", "infrastructure"],
    "beginner": ["starter", "newbie", "entry-level", "basic", "simple"],
    "intermediate": ["medium", "moderate", "standard"],
    "advanced": ["expert", "complex", "sophisticated", "professional"],
    "library": ["framework", "package", "module", "component"],
    "tool": ["utility", "cli", "command-line", "helper"],
    "tutorial": ["guide", "example", "demo", "learning", "educational"],
    "game": ["gaming", "entertainment", "fun"],
}

TOPIC_CLUSTERS: dict[str, list[str]] = {
    "web-development": [
        "react", "vue", "angular", "svelte", "nextjs", "nuxt", "gatsby",
        "html", "css", "javascript", "typescript", "sass", "tailwind",
    ],
    "mobile-development": [
        "react-native", "flutter", "ionic", "cordova", "xamarin",
        "android", "ios", "swift", "kotlin", "java",
    ],
    "backend-development": [
        "nodejs", "express", "fastify", "nestjs", "django", "flask", "spring",
        "rails", "laravel", "php", "python", "java", "go", "rust",
    ],
    "data-science": [
        "python", "jupyter", "pandas", "numpy", "scikit-learn", "tensorflow",
        "pytorch", "keras", "data-analysis", "visualization", "matplotlib",
    ],
    "devops": [
        "docker", "kubernetes", "terraform", "ansible", "jenkins", "ci-cd",
        "aws", "azure", "gcp", "monitoring", "logging",
    ],
    "machine-learning": [
        "tensorflow", "pytorch", "scikit-learn", "keras", "opencv", "nlp",
        "computer-vision", "deep-learning", "neural-networks",
    ],
    "game-development": [
        "unity", "unreal", "godot", "phaser", "three.js", "webgl",
        "c#", "c++", "lua", "game-engine",
    ],
    "blockchain": [
        "ethereum", "bitcoin", "solidity", "web3", "defi", "nft",
        "smart-contracts", "cryptocurrency", "blockchain",
    ],
}  # fmt: skip

# 동의어 그룹이 가리키는 토픽 클러스터
SYNONYM_CLUSTERS: dict[str, str] = {
    "frontend": "web-development",
    "web": "web-development",
    "mobile": "mobile-development",
    "backend": "backend-development",
    "ai": "machine-learning",
    "devops": "devops",
    "game": "game-development",
}

GOOD_FIRST_ISSUE_TOPICS = {"good-first-issue", "beginner-friendly", "help-wanted"}
MIN_RELEVANCE = 0.1
MAX_SUGGESTIONS = 10

_QUERY_PUNCTUATION = re.compile(r"[^\w\s-]")


class SearchFilters(BaseModel):
    """검색 필터. 조건에 맞지 않는 프로젝트는 제외하지 않고 점수를 깎는다."""

    languages: list[str] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)
    min_stars: int | None = None
    max_stars: int | None = None
    has_good_first_issues: bool = False


class SearchQuery(BaseModel):
    """검색 질의."""

    text: str
    filters: SearchFilters | None = None


class SearchResult(BaseModel):
    """검색 결과 하나."""

    project: Project
    relevance_score: float = Field(ge=0, le=1)
    matched_terms: list[str] = Field(default_factory=list)
    semantic_matches: list[str] = Field(default_factory=list)


def extract_terms(text: str) -> list[str]:
    """질의를 소문자 토큰으로 나눈다. 2자 이하 토큰은 버린다."""
    words = _QUERY_PUNCTUATION.sub(" ", text.lower()).split()
    return [w for w in words if len(w) > 2]


def expand_terms(terms: list[str]) -> list[str]:
    """동의어와 토픽 클러스터로 검색어를 확장한다. 원래 순서를 유지한다."""
    expanded: dict[str, None] = dict.fromkeys(terms)

    for term in terms:
        for key, synonyms in SYNONYMS.items():
            if term == key or term in synonyms:
                expanded[key] = None
                expanded.update(dict.fromkeys(synonyms))
                cluster = SYNONYM_CLUSTERS.get(key)
                if cluster:
                    expanded.update(dict.fromkeys(TOPIC_CLUSTERS[cluster]))

        for members in TOPIC_CLUSTERS.values():
            if term in members:
                expanded.update(dict.fromkeys(members))

    return list(expanded)


def _searchable_text(project: Project) -> str:
    return " ".join(
        [
            project.name,
            project.full_name,
            project.description,
            project.language or "",
            *project.topics,
        ]
    ).lower()


def term_weight(term: str, project: Project) -> float:
    """term이 일치한 필드에 따른 가중치."""
    name = project.name.lower()
    if name == term or f"/{term}" in project.full_name.lower():
        return 0.8
    if term in name:
        return 0.6
    if (project.language or "").lower() == term:
        return 0.5
    if term in (t.lower() for t in project.topics):
        return 0.4
    if term in project.description.lower():
        return 0.3
    return 0.1


def is_direct_match(term: str, project: Project) -> bool:
    """term이 이름, 언어, 토픽 중 하나의 토큰과 정확히 같은지 여부."""
    tokens = " ".join(
        [project.name, project.full_name, project.language or "", *project.topics]
    ).lower()
    return term in tokens.split()


def filter_multiplier(project: Project, filters: SearchFilters) -> float:
    """필터 조건에 따른 점수 배수."""
    multiplier = 1.0

    if filters.languages:
        language = (project.language or "").lower()
        if not any(lang.lower() == language for lang in filters.languages):
            multiplier *= 0.1

    if filters.topics and not any(t in project.topics for t in filters.topics):
        multiplier *= 0.3

    if filters.min_stars and project.stars < filters.min_stars:
        multiplier *= 0.2
    if filters.max_stars and project.stars > filters.max_stars:
        multiplier *= 0.5

    if filters.has_good_first_issues and not GOOD_FIRST_ISSUE_TOPICS & set(project.topics):
        multiplier *= 0.3

    return multiplier


def score_project(
    project: Project,
    terms: list[str],
    filters: SearchFilters | None = None,
    now: datetime | None = None,
) -> SearchResult:
    """확장된 검색어로 프로젝트 관련도를 계산한다."""
    text = _searchable_text(project)
    score = 0.0
    matched: list[str] = []
    semantic: list[str] = []

    for term in terms:
        if term not in text:
            continue
        score += term_weight(term, project)
        if is_direct_match(term, project):
            matched.append(term)
        else:
            semantic.append(term)

    if filters is not None:
        score *= filter_multiplier(project, filters)

    score += min(project.stars / 10000, 0.2)
    score += max(0.0, (365 - days_since(project.updated_at, now)) / 365 * 0.1)

    return SearchResult(
        project=project,
        relevance_score=clamp(score),
        matched_terms=matched,
        semantic_matches=semantic,
    )


def search_projects(
    projects: list[Project],
    query: SearchQuery | str,
    now: datetime | None = None,
) -> list[SearchResult]:
    """프로젝트를 시맨틱 검색한다.

    관련도가 0.1 이하인 결과는 버리고 내림차순으로 정렬한다.

    Examples:
        ``search_projects(projects, "frontend")`` 는 ``ui`` 나 ``react`` 토픽만
        가진 프로젝트도 찾는다.
    """
    if isinstance(query, str):
        query = SearchQuery(text=query)
    now = now or utcnow()
    terms = expand_terms(extract_terms(query.text))

    results = [score_project(p, terms, query.filters, now) for p in projects]
    results = [r for r in results if r.relevance_score > MIN_RELEVANCE]
    results.sort(key=lambda r: r.relevance_score, reverse=True)
    return results


def search_suggestions(partial: str, projects: list[Project]) -> list[str]:
    """부분 입력에 맞는 검색어 후보 (최대 10개)."""
    needle = partial.lower()
    suggestions: dict[str, None] = {}

    for project in projects:
        if needle in project.name.lower():
            suggestions[project.name] = None
        if needle in project.full_name.lower():
            suggestions[project.full_name] = None

    languages = dict.fromkeys(p.language for p in projects if p.language)
    for language in languages:
        if needle in language.lower():
            suggestions[language] = None

    topics = dict.fromkeys(t for p in projects for t in p.topics)
    for topic in topics:
        if needle in topic.lower():
            suggestions[topic] = None

    for key, synonyms in SYNONYMS.items():
        for word in (key, *synonyms):
            if needle in word:
                suggestions[word] = None

    return list(suggestions)[:MAX_SUGGESTIONS]


def topic_cluster_for(topic: str) -> str | None:
    """토픽이 속한 클러스터 이름."""
    normalized = topic.lower()
    for cluster, members in TOPIC_CLUSTERS.items():
        if normalized in members:
            return cluster
    return None


def related_topics(topic: str) -> list[str]:
    """같은 클러스터의 다른 토픽."""
    cluster = topic_cluster_for(topic)
    if cluster is None:
        return []
    normalized = topic.lower()
    return [t for t in TOPIC_CLUSTERS[cluster] if t != normalized]
