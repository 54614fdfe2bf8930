"""OSS Finder: 입문자를 위한 오픈소스 프로젝트 탐색."""

__version__ = "0.1.0"
