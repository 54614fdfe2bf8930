"""프로젝트 유사도 테스트."""

from datetime import datetime

import pytest

from oss_finder.models import Project
from oss_finder.scoring.similarity import (
    SimilarityReasonType,
    calculate_similarity,
    create_topic_clusters,
    description_keywords,
    find_similar_projects,
    size_category,
    topic_similarity,
)


@pytest.fixture
def web_ui(make_project) -> Project:
    return make_project(
        "web-ui", language="JavaScript", topics=["web", "ui"], stars=1000, forks=100
    )


@pytest.fixture
def web_api(make_project) -> Project:
    return make_project(
        "web-api", language="JavaScript", topics=["web", "api"], stars=1200, forks=90
    )


class TestCalculateSimilarity:
    """calculate_similarity 테스트."""

    def test_javascript_web_projects_are_similar(
        self, web_ui: Project, web_api: Project, now: datetime
    ) -> None:
        """같은 언어, 겹치는 토픽, 비슷한 규모의 두 프로젝트는 0.2를 넘는다."""
        result = calculate_similarity(web_ui, web_api, now)

        assert result.score > 0.2
        assert result.reasons[0].type == SimilarityReasonType.language

    def test_reasons_sorted_by_weight(
        self, web_ui: Project, web_api: Project, now: datetime
    ) -> None:
        """근거는 가중치 내림차순이다."""
        weights = [r.weight for r in calculate_similarity(web_ui, web_api, now).reasons]
        assert weights == sorted(weights, reverse=True)

    def test_related_languages(self, make_project, now: datetime) -> None:
        """관련 언어는 0.6 가중치를 받는다."""
        a = make_project("a", language="JavaScript", updated_days_ago=400)
        b = make_project("b", language="TypeScript", updated_days_ago=400)

        result = calculate_similarity(a, b, now)
        language = next(r for r in result.reasons if r.type == SimilarityReasonType.language)
        assert language.weight == pytest.approx(0.6)

    def test_unrelated_projects_have_no_reasons(self, make_project, now: datetime) -> None:
        a = make_project("a", language="Go", stars=5, updated_days_ago=500)
        b = make_project("b", language="Haskell", stars=50000, updated_days_ago=10)

        result = calculate_similarity(a, b, now)
        assert result.reasons == []
        assert result.score == 0

    def test_score_is_clamped(self, make_project, now: datetime) -> None:
        """모든 지표가 최대여도 점수는 1을 넘지 않는다."""
        a = make_project("a", description="fast web server framework", topics=["web"], stars=500)
        b = make_project("b", description="fast web server framework", topics=["web"], stars=500)

        assert 0 <= calculate_similarity(a, b, now).score <= 1


class TestFindSimilarProjects:
    """find_similar_projects 테스트."""

    def test_never_compares_project_to_itself(
        self, web_ui: Project, web_api: Project, now: datetime
    ) -> None:
        results = find_similar_projects(web_ui, [web_ui, web_api], now=now)

        assert [r.project_id for r in results] == [web_api.id]

    def test_drops_low_scores_and_respects_limit(self, make_project, now: datetime) -> None:
        target = make_project("target", language="Rust", topics=["cli"], stars=300)
        close = [
            make_project(f"close-{i}", language="Rust", topics=["cli"], stars=300)
            for i in range(5)
        ]
        far = make_project("far", language="PHP", stars=1, updated_days_ago=900)

        results = find_similar_projects(target, [*close, far], limit=3, now=now)

        assert len(results) == 3
        assert far.id not in {r.project_id for r in results}
        assert all(r.score > 0.2 for r in results)

    def test_sorted_descending(self, web_ui: Project, make_project, now: datetime) -> None:
        candidates = [
            make_project("same", language="JavaScript", topics=["web", "ui"], stars=1000, forks=100),
            make_project("half", language="JavaScript", topics=["web"], stars=50),
        ]
        scores = [r.score for r in find_similar_projects(web_ui, candidates, now=now)]
        assert scores == sorted(scores, reverse=True)


class TestTopicSimilarity:
    """topic_similarity 테스트."""

    def test_symmetric(self, web_ui: Project, web_api: Project) -> None:
        assert topic_similarity(web_ui, web_api) == topic_similarity(web_api, web_ui)
        assert topic_similarity(web_ui, web_api) == pytest.approx(1 / 3)

    def test_empty_topics(self, make_project) -> None:
        assert topic_similarity(make_project("a"), make_project("b")) == 0


class TestHelpers:
    """보조 함수 테스트."""

    @pytest.mark.parametrize(
        ("stars", "expected"),
        [(0, "small"), (99, "small"), (100, "medium"), (9999, "large"), (10000, "very large")],
    )
    def test_size_category(self, stars: int, expected: str) -> None:
        assert size_category(stars) == expected

    def test_description_keywords_drops_stopwords_and_short_tokens(self) -> None:
        keywords = description_keywords("The fast, tiny web-server for an API in Go!")
        assert keywords == ["fast", "tiny", "web", "server", "api"]


class TestClusters:
    """create_topic_clusters 테스트."""

    def test_clusters_need_three_projects(self, make_project) -> None:
        projects = [
            make_project("ml-1", topics=["machine-learning", "python"], stars=300),
            make_project("ml-2", topics=["machine-learning"], stars=100),
            make_project("ml-3", topics=["machine-learning", "python"], stars=200),
            make_project("web-1", topics=["web"], stars=5000),
            make_project("web-2", topics=["web"], stars=5000),
        ]

        clusters = create_topic_clusters(projects)

        assert len(clusters) == 1
        cluster = clusters[0]
        assert cluster.name == "Machine Learning"
        assert cluster.average_stars == 200
        assert cluster.common_topics == ["machine-learning", "python"]
        assert [p.name for p in cluster.projects] == ["ml-1", "ml-3", "ml-2"]
