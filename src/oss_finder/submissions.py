"""프로젝트 등록 요청 처리 모듈."""

import logging
import uuid
from datetime import datetime
from typing import Any, Protocol

from oss_finder.exceptions import NotFoundError, ValidationError
from oss_finder.models import (
    ProjectSubmission,
    SubmissionRecord,
    SubmissionResult,
    SubmissionStatus,
    utcnow,
)
from oss_finder.notifiers.slack import SlackNotifier
from oss_finder.scoring.utils import days_since
from oss_finder.storage import KeyValueStore, read_model_list, write_model
from oss_finder.validation import (
    parse_github_url,
    sanitize_string,
    validate_description,
    validate_email,
    validate_tags,
)

logger = logging.getLogger(__name__)

SUBMISSIONS_KEY = "project_submissions"
APPROVAL_THRESHOLD = 60

APPROVED_MESSAGE = "Project approved and added to the platform!"
PENDING_MESSAGE = "Project submitted for review. Our team will review it shortly."


class RepositoryLookup(Protocol):
    async def get_repository_data(self, full_name: str) -> dict[str, Any]: ...


def verification_score(repo: dict[str, Any], now: datetime | None = None) -> int:
    """저장소 상태로 검증 점수 (0~100)를 계산한다."""
    score = 0

    if len(repo.get("description") or "") > 10:
        score += 15
    if repo.get("license"):
        score += 15

    stars = repo.get("stargazers_count") or 0
    if stars > 0:
        score += 10
    if stars > 10:
        score += 10
    if stars > 100:
        score += 10

    pushed_at = repo.get("pushed_at")
    if pushed_at:
        days = days_since(datetime.fromisoformat(pushed_at.replace("Z", "+00:00")), now)
        if days < 30:
            score += 15
        elif days < 90:
            score += 10
        elif days < 365:
            score += 5

    if repo.get("has_issues"):
        score += 5
    if repo.get("has_wiki"):
        score += 5
    if repo.get("topics"):
        score += 5

    if repo.get("archived"):
        score -= 20
    if repo.get("disabled"):
        score -= 30
    if repo.get("private"):
        score -= 50

    return max(0, min(100, score))


class SubmissionService:
    """프로젝트 등록 요청을 검증하고 저장한다."""

    def __init__(
        self,
        store: KeyValueStore,
        source: RepositoryLookup,
        notifier: SlackNotifier | None = None,
    ) -> None:
        self.store = store
        self.source = source
        self.notifier = notifier

    def list_all(self) -> list[SubmissionRecord]:
        return read_model_list(self.store, SUBMISSIONS_KEY, SubmissionRecord)

    def get(self, submission_id: str) -> SubmissionRecord:
        for submission in self.list_all():
            if submission.id == submission_id:
                return submission
        raise NotFoundError("Submission not found")

    async def submit(
        self,
        submission: ProjectSubmission,
        now: datetime | None = None,
    ) -> SubmissionResult:
        """등록 요청을 처리한다.

        검증 점수가 60 이상이면 바로 승인하고, 아니면 검토 대기 상태로 저장한 뒤
        Slack으로 알린다.

        Raises:
            ValidationError: 필수 필드가 없거나 설명이 너무 짧거나 URL 형식이 틀렸을 때
            NotFoundError: 저장소를 찾을 수 없을 때
        """
        description = sanitize_string(submission.description, 5000)
        reason = sanitize_string(submission.reason, 2000)
        if not submission.repo_url or not description or not reason:
            raise ValidationError("Missing required fields")

        owner, repo = parse_github_url(submission.repo_url)
        description = validate_description(description)
        tags = validate_tags(submission.selected_tags)
        full_name = f"{owner}/{repo}"
        email = validate_email(submission.submitter_email) if submission.submitter_email else None

        try:
            repo_data = await self.source.get_repository_data(full_name)
        except NotFoundError as e:
            logger.warning(f"Submitted repository {full_name} not found")
            raise NotFoundError("Repository not found or not accessible") from e

        score = verification_score(repo_data, now)
        status = (
            SubmissionStatus.approved if score >= APPROVAL_THRESHOLD else SubmissionStatus.pending
        )

        record = SubmissionRecord(
            **submission.model_dump(exclude={"description", "reason", "submitter_email", "tags"}),
            description=description,
            tags=dict.fromkeys(tags, True),
            reason=reason,
            submitter_email=email,
            id=uuid.uuid4().hex[:9],
            full_name=full_name,
            status=status,
            submitted_at=now or utcnow(),
            verification_score=score,
            repo_data=repo_data,
        )

        submissions = self.list_all()
        submissions.append(record)
        write_model(self.store, SUBMISSIONS_KEY, submissions)
        logger.info(f"Submission {record.id} for {full_name}: {status.value} ({score}/100)")

        if status == SubmissionStatus.pending and self.notifier and self.notifier.is_configured:
            await self.notifier.send([record])

        return SubmissionResult(
            submission_id=record.id,
            status=status,
            verification_score=score,
            message=APPROVED_MESSAGE if status == SubmissionStatus.approved else PENDING_MESSAGE,
        )
