"""프로젝트 정보 enrichment 모듈."""

from oss_finder.enrichers.readme import (
    OPEN_SOURCE_LICENSES,
    ReadmeEnricher,
    ReadmeInfo,
    is_open_source,
    parse_readme,
)

__all__ = [
    "OPEN_SOURCE_LICENSES",
    "ReadmeEnricher",
    "ReadmeInfo",
    "is_open_source",
    "parse_readme",
]
