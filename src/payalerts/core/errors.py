from __future__ import annotations

from typing import Any


class PayAlertsError(Exception):
    """Base class for errors raised by payalerts services."""


class ValidationError(PayAlertsError):
    """요청에 필수 필드가 없을 때. HTTP 400으로 변환된다."""


class GatewayError(PayAlertsError):
    """
    결제 게이트웨이 응답에 쓸 수 있는 id/checkout 링크가 없을 때.
    - checkout 흐름: 400
    - webhook fetch 실패: 500 (게이트웨이가 재시도하도록)
    """

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.details = details


class NotifierError(PayAlertsError):
    """알림 전송 실패. notifier 내부에서만 쓰이고 밖으로 나가지 않는다."""
