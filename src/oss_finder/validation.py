"""사용자 입력 검증 모듈.

검증에 실패하면 ``ValidationError`` 를 발생시키고, 통과하면 정리된 값을 반환한다.
"""

import re

from oss_finder.exceptions import ValidationError

GITHUB_URL_PATTERN = re.compile(
    r"^https://github\.com/([A-Za-z0-9_-]+)/([A-Za-z0-9_.-]+)(?:/.*)?$"
)
EMAIL_PATTERN = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*$"
)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

MAX_OWNER_LENGTH = 39
MAX_REPO_LENGTH = 100
MAX_TAGS = 20
MAX_TAG_LENGTH = 50
MAX_QUERY_LENGTH = 200


def sanitize_string(value: str | None, max_length: int = 1000) -> str:
    """제어 문자를 지우고 앞뒤 공백을 정리한 뒤 길이를 자른다."""
    if not value:
        return ""
    return _CONTROL_CHARS.sub("", value).strip()[:max_length]


def parse_github_url(url: str | None) -> tuple[str, str]:
    """GitHub 저장소 URL에서 (owner, repo)를 꺼낸다.

    ``https://github.com/<owner>/<repo>[/...]`` 형식만 허용하며
    repo 끝의 ``.git`` 은 제거한다.

    Raises:
        ValidationError: 형식이 틀리거나 이름이 너무 길 때
    """
    sanitized = sanitize_string(url, 500)
    if not sanitized:
        raise ValidationError("URL is required")

    match = GITHUB_URL_PATTERN.match(sanitized)
    if match is None:
        raise ValidationError("Invalid GitHub repository URL")

    owner, repo = match.groups()
    if len(owner) > MAX_OWNER_LENGTH or len(repo) > MAX_REPO_LENGTH:
        raise ValidationError("Repository name too long")

    return owner, re.sub(r"\.git$", "", repo)


def validate_email(email: str | None) -> str:
    """이메일을 소문자로 정리해 반환한다."""
    sanitized = sanitize_string((email or "").lower(), 254)
    if not sanitized:
        raise ValidationError("Email is required")
    if EMAIL_PATTERN.match(sanitized) is None:
        raise ValidationError("Invalid email format")
    return sanitized


def validate_description(
    description: str | None,
    min_length: int = 10,
    max_length: int = 5000,
) -> str:
    sanitized = sanitize_string(description, max_length)
    if not sanitized:
        raise ValidationError("Description is required")
    if len(sanitized) < min_length:
        raise ValidationError(f"Description must be at least {min_length} characters")
    return sanitized


def validate_search_query(query: str | None) -> str:
    sanitized = sanitize_string(query, MAX_QUERY_LENGTH)
    if not sanitized:
        raise ValidationError("Search query is required")
    return sanitized


def validate_tags(tags: list[str]) -> list[str]:
    """태그 목록을 정리한다. 빈 태그는 버린다."""
    if len(tags) > MAX_TAGS:
        raise ValidationError(f"Too many tags (max {MAX_TAGS})")
    cleaned = (sanitize_string(tag, MAX_TAG_LENGTH) for tag in tags)
    return [tag for tag in cleaned if tag]


def validate_pagination(page: int, per_page: int) -> tuple[int, int]:
    if page < 1:
        raise ValidationError("Invalid page number")
    if not 1 <= per_page <= 100:
        raise ValidationError("Invalid limit (must be between 1 and 100)")
    return page, per_page
