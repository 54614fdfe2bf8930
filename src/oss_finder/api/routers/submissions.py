"""프로젝트 등록 라우터."""

from typing import Any

from fastapi import APIRouter

from oss_finder.api.dependencies import SubmissionsDep
from oss_finder.models import ProjectSubmission, SubmissionRecord, SubmissionResult

router = APIRouter(prefix="/api/projects", tags=["submissions"])


@router.post("/submit")
async def submit_project(
    submission: ProjectSubmission,
    service: SubmissionsDep,
) -> SubmissionResult:
    """프로젝트 등록을 요청한다."""
    return await service.submit(submission)


@router.get("/submit", response_model=None)
async def get_submissions(
    service: SubmissionsDep,
    id: str | None = None,
) -> SubmissionRecord | dict[str, Any]:
    """id가 있으면 해당 제출, 없으면 전체 목록."""
    if id:
        return service.get(id)
    submissions = service.list_all()
    return {"submissions": submissions, "total": len(submissions)}
