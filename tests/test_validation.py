"""입력 검증 테스트."""

import pytest

from oss_finder.exceptions import ValidationError
from oss_finder.validation import (
    parse_github_url,
    sanitize_string,
    validate_description,
    validate_email,
    validate_pagination,
    validate_search_query,
    validate_tags,
)


class TestParseGithubUrl:
    """parse_github_url 테스트."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://github.com/psf/requests", ("psf", "requests")),
            ("https://github.com/psf/requests.git", ("psf", "requests")),
            ("https://github.com/vercel/next.js/tree/canary", ("vercel", "next.js")),
            ("  https://github.com/a_b/c-d  ", ("a_b", "c-d")),
        ],
    )
    def test_valid(self, url: str, expected: tuple[str, str]) -> None:
        assert parse_github_url(url) == expected

    @pytest.mark.parametrize(
        ("url", "message"),
        [
            ("", "URL is required"),
            (None, "URL is required"),
            ("http://github.com/psf/requests", "Invalid GitHub repository URL"),
            ("https://gitlab.com/psf/requests", "Invalid GitHub repository URL"),
            ("https://github.com/psf", "Invalid GitHub repository URL"),
            (f"https://github.com/{'a' * 40}/repo", "Repository name too long"),
            (f"https://github.com/owner/{'r' * 101}", "Repository name too long"),
        ],
    )
    def test_invalid(self, url: str | None, message: str) -> None:
        with pytest.raises(ValidationError, match=message):
            parse_github_url(url)


class TestOtherValidators:
    """나머지 검증 함수 테스트."""

    def test_sanitize_string(self) -> None:
        assert sanitize_string("  hi\x00 there\x1f ") == "hi there"
        assert sanitize_string(None) == ""
        assert sanitize_string("abcdef", max_length=3) == "abc"

    def test_email(self) -> None:
        assert validate_email("Dev@Example.COM") == "dev@example.com"
        with pytest.raises(ValidationError, match="Invalid email format"):
            validate_email("not-an-email")
        with pytest.raises(ValidationError, match="Email is required"):
            validate_email(None)

    def test_description(self) -> None:
        assert validate_description("  A useful library  ") == "A useful library"
        with pytest.raises(ValidationError, match="at least 10"):
            validate_description("short")

    def test_search_query(self) -> None:
        assert validate_search_query("x" * 300) == "x" * 200
        with pytest.raises(ValidationError):
            validate_search_query("   ")

    def test_tags(self) -> None:
        assert validate_tags([" cli ", "", "web"]) == ["cli", "web"]
        with pytest.raises(ValidationError, match="Too many tags"):
            validate_tags(["t"] * 21)

    @pytest.mark.parametrize(("page", "per_page"), [(0, 10), (1, 0), (1, 101)])
    def test_pagination_invalid(self, page: int, per_page: int) -> None:
        with pytest.raises(ValidationError):
            validate_pagination(page, per_page)

    def test_pagination_valid(self) -> None:
        assert validate_pagination(2, 100) == (2, 100)
