"""헬스 체크 라우터."""

from typing import Any

from fastapi import APIRouter

from oss_finder.config import settings
from oss_finder.models import utcnow

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health() -> dict[str, Any]:
    """서비스 상태."""
    return {
        "status": "healthy",
        "timestamp": utcnow().isoformat(),
        "storage_backend": settings.storage_backend,
        "github_token_configured": settings.github_token is not None,
    }
