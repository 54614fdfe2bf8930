"""FastAPI 애플리케이션."""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from oss_finder.api.routers import (
    analytics,
    health,
    projects,
    recommendations,
    search,
    submissions,
    trending,
    users,
)
from oss_finder.config import settings
from oss_finder.exceptions import (
    GitHubAPIError,
    NotFoundError,
    OSSFinderError,
    StaleWriteError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _error(detail: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "status_code": status_code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """도메인 예외를 JSON 오류 응답으로 바꾼다."""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path}: {exc.detail}")
        return _error(str(exc.detail), exc.status_code)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(str(exc), 400)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error(str(exc), 404)

    @app.exception_handler(StaleWriteError)
    async def stale_write_handler(request: Request, exc: StaleWriteError) -> JSONResponse:
        return _error(str(exc), 409)

    @app.exception_handler(GitHubAPIError)
    async def github_error_handler(request: Request, exc: GitHubAPIError) -> JSONResponse:
        logger.error(f"Upstream failure on {request.url.path}: {exc}")
        return _error("GitHub API request failed", 502)

    @app.exception_handler(OSSFinderError)
    async def domain_error_handler(request: Request, exc: OSSFinderError) -> JSONResponse:
        logger.error(f"Unhandled domain error on {request.url.path}: {exc}")
        return _error(str(exc), 500)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unexpected error on {request.method} {request.url.path}")
        return _error("Internal server error", 500)


def create_app() -> FastAPI:
    """라우터와 예외 핸들러를 등록한 앱을 만든다."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(title="OSS Finder", version="0.1.0")
    register_exception_handlers(app)

    app.include_router(health.router)
    # /api/projects/submit 은 /api/projects/{project_id} 보다 먼저 등록한다
    app.include_router(submissions.router)
    app.include_router(projects.router)
    app.include_router(search.router)
    app.include_router(trending.router)
    app.include_router(recommendations.router)
    app.include_router(users.router)
    app.include_router(analytics.router)

    return app
