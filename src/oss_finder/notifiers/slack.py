"""Slack 알림 모듈."""

import logging

import httpx

from oss_finder.models import SubmissionRecord

logger = logging.getLogger(__name__)


class SlackNotifier:
    """검토가 필요한 프로젝트 제출을 Slack으로 알린다."""

    def __init__(
        self,
        webhook_url: str | None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            webhook_url: Slack Incoming Webhook URL
            transport: 테스트용 httpx transport
        """
        self.webhook_url = webhook_url
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        """Slack이 설정되었는지 확인한다."""
        return self.webhook_url is not None

    def _format_message(self, submissions: list[SubmissionRecord]) -> str:
        """알림 메시지를 포맷한다."""
        lines = [f":inbox_tray: *검토 대기 중인 프로젝트 제출* ({len(submissions)}건)\n"]

        for submission in submissions[:5]:  # 최대 5개
            repo = submission.repo_data or {}
            stars = repo.get("stargazers_count", 0)
            lines.append(
                f"• <{submission.repo_url}|{submission.full_name}> "
                f"(:star: {stars}, 검증 점수 {submission.verification_score}/100)"
            )
            lines.append(f"    {submission.reason}")

        return "\n".join(lines)

    async def send(self, submissions: list[SubmissionRecord]) -> bool:
        """제출 알림을 전송한다."""
        if not self.webhook_url or not submissions:
            return False

        message = self._format_message(submissions)

        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.post(
                    self.webhook_url,
                    json={"text": message},
                )
                if response.status_code == 200:
                    logger.info(f"Slack notification sent: {len(submissions)} submissions")
                    return True
                else:
                    logger.error(f"Slack API error: {response.status_code}")
            except httpx.RequestError as e:
                logger.error(f"Slack request failed: {e}")

        return False
