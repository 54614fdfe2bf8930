"""데이터 모델 정의."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, computed_field, field_validator

GOOD_FIRST_ISSUE_LABELS = {
    "good first issue",
    "good-first-issue",
    "first-timers-only",
    "beginner",
    "beginner-friendly",
    "easy",
}
HELP_WANTED_LABELS = {"help wanted", "help-wanted"}
ADVANCED_LABELS = {"hard", "complex", "advanced", "expert", "difficulty: hard"}


def utcnow() -> datetime:
    """현재 UTC 시각을 반환한다."""
    return datetime.now(UTC)


class SkillLevel(str, Enum):
    """사용자 숙련도."""

    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class Timeframe(str, Enum):
    """트렌딩 기간 옵션."""

    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class Project(BaseModel):
    """GitHub 저장소 스냅샷."""

    id: int = Field(description="GitHub 저장소 ID")
    name: str = Field(description="저장소 이름")
    full_name: str = Field(description="저장소 전체 이름 (owner/repo)")
    description: str = Field(default="", description="저장소 설명")
    language: str | None = Field(default=None, description="주 프로그래밍 언어")
    topics: list[str] = Field(default_factory=list, description="토픽 목록")
    stars: int = Field(default=0, ge=0, description="스타 수")
    forks: int = Field(default=0, ge=0, description="포크 수")
    open_issues: int = Field(default=0, ge=0, description="열린 이슈 수")
    updated_at: datetime = Field(default_factory=utcnow, description="마지막 업데이트 시각")
    created_at: datetime | None = Field(default=None, description="생성 시각")
    license: str | None = Field(default=None, description="라이선스 이름")
    license_spdx: str | None = Field(default=None, description="라이선스 SPDX ID")
    html_url: str = Field(default="", description="저장소 URL")

    @field_validator("description", mode="before")
    @classmethod
    def _default_description(cls, value: str | None) -> str:
        return value or ""

    @field_validator("topics", mode="before")
    @classmethod
    def _unique_topics(cls, value: list[str] | None) -> list[str]:
        # 순서를 유지하며 중복 제거
        return list(dict.fromkeys(value or []))

    @property
    def owner(self) -> str:
        """저장소 소유자 로그인."""
        return self.full_name.split("/", 1)[0]

    @property
    def repo(self) -> str:
        """저장소 이름 (owner 제외)."""
        return self.full_name.split("/", 1)[-1]


class IssueLabel(BaseModel):
    """이슈 라벨."""

    name: str
    color: str = ""


class Issue(BaseModel):
    """GitHub 이슈."""

    id: int
    number: int
    title: str
    html_url: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    labels: list[IssueLabel] = Field(default_factory=list)
    comments: int = 0
    body: str = ""

    @field_validator("body", mode="before")
    @classmethod
    def _default_body(cls, value: str | None) -> str:
        return value or ""

    def _label_names(self) -> set[str]:
        return {label.name.lower() for label in self.labels}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_good_first_issue(self) -> bool:
        """good first issue 계열 라벨이 붙어 있는지 여부."""
        return bool(self._label_names() & GOOD_FIRST_ISSUE_LABELS)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_help_wanted(self) -> bool:
        """help wanted 라벨이 붙어 있는지 여부."""
        return bool(self._label_names() & HELP_WANTED_LABELS)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def difficulty(self) -> SkillLevel:
        """라벨로 추정한 난이도."""
        names = self._label_names()
        if names & GOOD_FIRST_ISSUE_LABELS:
            return SkillLevel.beginner
        if names & ADVANCED_LABELS:
            return SkillLevel.advanced
        return SkillLevel.intermediate


class Contributor(BaseModel):
    """저장소 기여자."""

    id: int
    login: str
    avatar_url: str = ""
    html_url: str = ""
    contributions: int = 0


class UserPreferences(BaseModel):
    """사용자 선호도와 활동 기록."""

    preferred_languages: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    skill_level: SkillLevel = SkillLevel.intermediate
    viewed_projects: list[int] = Field(default_factory=list)
    bookmarked_projects: list[int] = Field(default_factory=list)
    contributed_projects: list[int] = Field(default_factory=list)
    updated_at: datetime | None = None

    @property
    def is_empty(self) -> bool:
        """추천에 쓸 선호 정보가 하나도 없는지 여부."""
        return not (
            self.preferred_languages
            or self.interests
            or self.bookmarked_projects
            or self.contributed_projects
        )


class FeedbackType(str, Enum):
    """추천 피드백 종류."""

    interested = "interested"
    not_interested = "not_interested"
    dismissed = "dismissed"


class FeedbackData(BaseModel):
    """추천 결과에 대한 사용자 피드백."""

    project_id: int
    user_id: str
    feedback_type: FeedbackType
    timestamp: datetime = Field(default_factory=utcnow)


class SubmissionStatus(str, Enum):
    """프로젝트 제출 상태."""

    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class ProjectSubmission(BaseModel):
    """프로젝트 등록 요청."""

    repo_url: str
    description: str
    reason: str
    tags: dict[str, bool] = Field(default_factory=dict)
    rich_description: str | None = None
    screenshots: list[str] = Field(default_factory=list)
    submitter_email: str | None = None

    @property
    def selected_tags(self) -> list[str]:
        """선택된 태그 이름 목록."""
        return [tag for tag, selected in self.tags.items() if selected]


class SubmissionRecord(ProjectSubmission):
    """저장된 프로젝트 제출."""

    id: str
    full_name: str
    status: SubmissionStatus
    submitted_at: datetime = Field(default_factory=utcnow)
    verification_score: int = Field(ge=0, le=100)
    repo_data: dict[str, Any] | None = None


class SubmissionResult(BaseModel):
    """프로젝트 등록 응답."""

    success: bool = True
    submission_id: str
    status: SubmissionStatus
    verification_score: int
    message: str
