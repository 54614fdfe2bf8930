"""Slack 알림 테스트."""

import json

import httpx
import pytest

from oss_finder.models import SubmissionRecord, SubmissionStatus
from oss_finder.notifiers.slack import SlackNotifier


@pytest.fixture
def notifier() -> SlackNotifier:
    """SlackNotifier 인스턴스를 반환한다."""
    return SlackNotifier(webhook_url=None)


@pytest.fixture
def sample_submissions() -> list[SubmissionRecord]:
    """테스트용 제출 목록을 반환한다."""
    return [
        SubmissionRecord(
            id="abc123def",
            repo_url="https://github.com/octo/tiny",
            full_name="octo/tiny",
            description="A tiny command line tool",
            reason="Good first project for newcomers",
            status=SubmissionStatus.pending,
            verification_score=40,
            repo_data={"stargazers_count": 12},
        ),
        SubmissionRecord(
            id="zzz999yyy",
            repo_url="https://github.com/octo/empty",
            full_name="octo/empty",
            description="Nothing here yet",
            reason="Testing",
            status=SubmissionStatus.pending,
            verification_score=0,
        ),
    ]


class TestSlackNotifier:
    """SlackNotifier 테스트."""

    def test_is_configured_false_without_url(self, notifier: SlackNotifier) -> None:
        """webhook_url 없이는 is_configured가 False다."""
        assert notifier.is_configured is False

    def test_format_message(
        self, notifier: SlackNotifier, sample_submissions: list[SubmissionRecord]
    ) -> None:
        """메시지 포맷이 올바르게 생성된다."""
        message = notifier._format_message(sample_submissions)
        assert "검토 대기 중인 프로젝트 제출" in message
        assert "(2건)" in message
        assert "<https://github.com/octo/tiny|octo/tiny>" in message
        assert ":star: 12" in message
        assert "검증 점수 0/100" in message
        assert "Good first project for newcomers" in message

    @pytest.mark.asyncio
    async def test_send_without_url(
        self, notifier: SlackNotifier, sample_submissions: list[SubmissionRecord]
    ) -> None:
        """설정이 없으면 전송하지 않는다."""
        assert await notifier.send(sample_submissions) is False

    @pytest.mark.asyncio
    async def test_send(self, sample_submissions: list[SubmissionRecord]) -> None:
        """웹훅으로 text 페이로드를 POST한다."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="ok")

        notifier = SlackNotifier(
            webhook_url="https://hooks.slack.test/services/x",
            transport=httpx.MockTransport(handler),
        )

        assert await notifier.send(sample_submissions) is True
        assert seen[0].method == "POST"
        assert "octo/tiny" in json.loads(seen[0].content)["text"]

    @pytest.mark.asyncio
    async def test_send_failure(self, sample_submissions: list[SubmissionRecord]) -> None:
        """웹훅이 오류를 반환하면 False."""
        notifier = SlackNotifier(
            webhook_url="https://hooks.slack.test/services/x",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )
        assert await notifier.send(sample_submissions) is False
