"""알림 모듈."""

from oss_finder.notifiers.slack import SlackNotifier

__all__ = ["SlackNotifier"]
