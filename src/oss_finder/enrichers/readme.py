"""README 기반 프로젝트 정보 enrichment 모듈."""

import logging
import re
from typing import Protocol

from pydantic import BaseModel, Field
from selectolax.parser import HTMLParser

logger = logging.getLogger(__name__)

# 오픈소스 라이선스 목록
OPEN_SOURCE_LICENSES = {
    "mit",
    "apache-2.0",
    "gpl-2.0",
    "gpl-3.0",
    "lgpl-2.1",
    "lgpl-3.0",
    "bsd-2-clause",
    "bsd-3-clause",
    "mpl-2.0",
    "unlicense",
    "isc",
    "agpl-3.0",
    "cc0-1.0",
    "wtfpl",
    "zlib",
}

CONTRIBUTING_PATTERN = re.compile(r"contribut", re.IGNORECASE)
INSTALLATION_PATTERN = re.compile(r"install|getting started|quick ?start|setup", re.IGNORECASE)
EXCERPT_LENGTH = 500


class ReadmeInfo(BaseModel):
    """README에서 뽑아낸 요약 정보."""

    excerpt: str = Field(default="", description="본문 앞부분 평문 요약")
    headings: list[str] = Field(default_factory=list, description="섹션 제목 목록")
    has_contributing_section: bool = False
    has_installation_section: bool = False
    word_count: int = 0
    html: str = Field(default="", description="GitHub가 렌더링한 README HTML")


def is_open_source(license_id: str | None) -> bool:
    """라이선스가 오픈소스인지 확인한다."""
    if not license_id:
        return False
    return license_id.lower() in OPEN_SOURCE_LICENSES


def parse_readme(html: str) -> ReadmeInfo:
    """렌더링된 README HTML에서 요약 정보를 추출한다."""
    parser = HTMLParser(html)

    headings = [
        node.text(strip=True)
        for node in parser.css("h1, h2, h3")
        if node.text(strip=True)
    ]

    paragraphs = [node.text(strip=True) for node in parser.css("p")]
    paragraphs = [p for p in paragraphs if p]
    excerpt = " ".join(paragraphs)
    if len(excerpt) > EXCERPT_LENGTH:
        excerpt = excerpt[:EXCERPT_LENGTH].rsplit(" ", 1)[0] + "..."

    body = parser.body.text(separator=" ") if parser.body else ""

    return ReadmeInfo(
        excerpt=excerpt,
        headings=headings,
        has_contributing_section=any(CONTRIBUTING_PATTERN.search(h) for h in headings),
        has_installation_section=any(INSTALLATION_PATTERN.search(h) for h in headings),
        word_count=len(body.split()),
        html=html,
    )


class ReadmeSource(Protocol):
    """README HTML을 제공하는 소스."""

    async def get_readme_html(self, full_name: str) -> str | None: ...


class ReadmeEnricher:
    """README를 가져와 요약 정보로 변환한다."""

    def __init__(self, source: ReadmeSource) -> None:
        """
        Args:
            source: README HTML을 제공하는 소스 (보통 GitHubClient)
        """
        self.source = source

    async def fetch(self, full_name: str) -> ReadmeInfo | None:
        """저장소 README를 가져온다. README가 없으면 None."""
        html = await self.source.get_readme_html(full_name)
        if html is None:
            logger.info(f"No README for {full_name}")
            return None
        return parse_readme(html)
