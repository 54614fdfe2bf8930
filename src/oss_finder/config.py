"""설정 관리 모듈."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # GitHub
    github_token: str | None = Field(default=None, description="GitHub API 토큰")
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub REST API 베이스 URL",
    )
    request_timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP 요청 타임아웃 (초)",
    )

    # 저장소
    storage_backend: Literal["local", "memory", "supabase"] = Field(
        default="local",
        description="사용자 상태 저장 백엔드",
    )
    storage_dir: Path = Field(
        default=Path(".oss-finder"),
        description="local 백엔드가 JSON 파일을 저장할 디렉터리",
    )

    # Supabase
    supabase_url: str | None = Field(default=None, description="Supabase URL")
    supabase_key: str | None = Field(default=None, description="Supabase anon key")
    supabase_table: str = Field(
        default="kv_store",
        description="키-값 레코드를 저장할 Supabase 테이블",
    )

    # Slack
    slack_webhook_url: str | None = Field(default=None, description="Slack Webhook URL")

    # 기록 보존 한도
    history_limit: int = Field(
        default=100,
        ge=1,
        description="조회/북마크/기여 프로젝트 기록 최대 개수",
    )
    feedback_limit: int = Field(
        default=200,
        ge=1,
        description="추천 피드백 기록 최대 개수",
    )
    search_history_limit: int = Field(
        default=10,
        ge=1,
        description="검색 기록 최대 개수",
    )

    log_level: str = Field(default="INFO", description="로그 레벨")


settings = Settings()
