"""HTTP API 모듈."""

from oss_finder.api.app import create_app

__all__ = ["create_app"]
