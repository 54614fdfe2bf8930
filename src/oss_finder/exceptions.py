"""도메인 예외 정의."""


class OSSFinderError(Exception):
    """OSS Finder 공통 예외."""


class GitHubAPIError(OSSFinderError):
    """GitHub API 호출이 실패했을 때 발생한다."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(OSSFinderError):
    """요청한 리소스를 찾을 수 없을 때 발생한다."""


class ValidationError(OSSFinderError):
    """입력값 검증에 실패했을 때 발생한다."""


class StaleWriteError(OSSFinderError):
    """기대한 리비전과 저장된 리비전이 다를 때 발생한다."""

    def __init__(self, key: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Stale write for {key!r}: expected revision {expected}, found {actual}"
        )
        self.key = key
        self.expected = expected
        self.actual = actual
