"""프로젝트 점수 계산 모듈."""

from oss_finder.scoring.recommendation import (
    RecommendationReason,
    RecommendedProject,
    apply_feedback,
    explain_recommendation,
    generate_recommendations,
    trending_recommendations,
)
from oss_finder.scoring.search import (
    SearchFilters,
    SearchQuery,
    SearchResult,
    related_topics,
    search_projects,
    search_suggestions,
    topic_cluster_for,
)
from oss_finder.scoring.similarity import (
    ProjectCluster,
    SimilarityScore,
    create_topic_clusters,
    find_similar_projects,
    topic_similarity,
)
from oss_finder.scoring.trending import (
    TrendingCategory,
    TrendingProject,
    TrendingSummary,
    score_trending,
    seasonal_trending,
    trending_by_category,
    trending_by_language,
    trending_by_topic,
    trending_for_beginners,
    trending_projects,
    trending_summary,
)

__all__ = [
    "ProjectCluster",
    "RecommendationReason",
    "RecommendedProject",
    "SearchFilters",
    "SearchQuery",
    "SearchResult",
    "SimilarityScore",
    "TrendingCategory",
    "TrendingProject",
    "TrendingSummary",
    "apply_feedback",
    "create_topic_clusters",
    "explain_recommendation",
    "find_similar_projects",
    "generate_recommendations",
    "related_topics",
    "score_trending",
    "search_projects",
    "search_suggestions",
    "seasonal_trending",
    "topic_cluster_for",
    "topic_similarity",
    "trending_by_category",
    "trending_by_language",
    "trending_by_topic",
    "trending_for_beginners",
    "trending_projects",
    "trending_recommendations",
    "trending_summary",
]
