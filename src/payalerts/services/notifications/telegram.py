from __future__ import annotations

import logging
import re

import requests

from payalerts.core.errors import NotifierError

logger = logging.getLogger(__name__)

_MARKDOWN_SPECIAL = re.compile(r"([_*`\[])")
_MARKDOWN_V2_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")


def escape_markdown(text: object) -> str:
    """Telegram legacy Markdown용 escape (특수문자는 _ * ` [ 뿐)."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", str(text))


def escape_markdown_v2(text: object) -> str:
    """Telegram MarkdownV2 특수문자 escape (값에만 적용, 굵게 표시용 *는 템플릿에서 직접)."""
    return _MARKDOWN_V2_SPECIAL.sub(r"\\\1", str(text))


class TelegramNotifier:
    def __init__(
        self,
        bot_token: str | None,
        chat_id: str | None,
        *,
        api_base: str = "https://api.telegram.org",
        timeout: float = 10,
        session: requests.Session | None = None,
    ) -> None:
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def _send(self, text: str, parse_mode: str) -> None:
        url = f"{self.api_base}/bot{self.bot_token}/sendMessage"
        try:
            resp = self.session.post(
                url,
                json={"chat_id": self.chat_id, "text": text, "parse_mode": parse_mode},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NotifierError(f"Telegram request failed: {type(e).__name__}") from e

        if resp.status_code >= 400:
            raise NotifierError(f"Telegram sendMessage failed: {resp.status_code} {resp.text[:200]}")

    def notify(self, text: str, *, parse_mode: str = "Markdown") -> bool:
        if not self.configured:
            return False  # 설정 없으면 조용히 스킵

        try:
            self._send(text, parse_mode)
        except NotifierError as e:
            # 알림 실패가 webhook 응답을 깨면 안 됨
            logger.warning("⚠️ Telegram send failed: %s", e)
            return False
        return True
