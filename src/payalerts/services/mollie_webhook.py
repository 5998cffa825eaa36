"""
Mollie webhook orchestration

RECEIVED -> DEDUP_CHECKED -> PAYMENT_FETCHED -> CLASSIFIED
  -> (FOLLOWUP_SCHEDULED) -> NOTIFIED -> RESPONDED

- 중복/미분류/알림 완료 모두 200. 게이트웨이가 재시도하지 않게.
- payload에 id 없음: 400, fetch 실패/예상 못한 에러: 500 (재시도 허용)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping
from zoneinfo import ZoneInfo

from fastapi.concurrency import run_in_threadpool

from payalerts.core import notification_categories as cat
from payalerts.core.errors import GatewayError
from payalerts.integrations.mollie.client import MollieClient
from payalerts.models.notification import NotificationMessage
from payalerts.models.payment_event import PaymentEvent, format_amount
from payalerts.services import classifier
from payalerts.services.dedup import DuplicateSuppressor
from payalerts.services.followups import FollowupScheduler
from payalerts.services.notifications import templates
from payalerts.services.notifications.telegram import TelegramNotifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WebhookOutcome:
    status_code: int
    body: str
    categories: tuple[str, ...] = field(default_factory=tuple)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def extract_payment_id(body: Mapping[str, Any]) -> str | None:
    payment_id = body.get("id") or body.get("paymentId")
    if isinstance(payment_id, str) and payment_id.strip():
        return payment_id.strip()
    return None


class MollieWebhookHandler:
    def __init__(
        self,
        *,
        mollie: MollieClient,
        notifier: TelegramNotifier,
        suppressor: DuplicateSuppressor,
        scheduler: FollowupScheduler,
        subscription_delay_sec: float = 8.0,
        subscription_currency: str = "EUR",
        subscription_interval: str = "1 month",
        display_timezone: str = "Europe/Berlin",
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.mollie = mollie
        self.notifier = notifier
        self.suppressor = suppressor
        self.scheduler = scheduler
        self.subscription_delay_sec = subscription_delay_sec
        self.subscription_currency = subscription_currency
        self.subscription_interval = subscription_interval
        self.tz = ZoneInfo(display_timezone)
        self._now = now

    def time_text(self) -> str:
        return self._now().astimezone(self.tz).strftime("%d/%m/%Y, %H:%M:%S")

    async def _notify(self, message: NotificationMessage) -> None:
        await run_in_threadpool(self.notifier.notify, message.text, parse_mode="Markdown")

    async def handle(self, body: Mapping[str, Any]) -> WebhookOutcome:
        payment_id = extract_payment_id(body)
        if payment_id is None:
            logger.error("❌ Invalid Mollie webhook payload: %s", dict(body))
            return WebhookOutcome(400, "Bad request")

        # 1) 중복 체크: 어떤 side effect보다 먼저
        if not self.suppressor.should_process(payment_id):
            logger.warning("⚠️ Duplicate webhook ignored for %s", payment_id)
            return WebhookOutcome(200, "Duplicate ignored")

        logger.info("📬 Mollie webhook received: %s", payment_id)

        try:
            return await self._process(payment_id, body)
        except GatewayError as e:
            self.suppressor.release(payment_id)
            logger.error("❌ Mollie payment fetch failed for %s: %s", payment_id, e)
            return WebhookOutcome(500, "Internal error")
        except Exception:
            self.suppressor.release(payment_id)
            logger.exception("❌ Mollie webhook error for %s", payment_id)
            return WebhookOutcome(500, "Internal error")

    async def _process(self, payment_id: str, body: Mapping[str, Any]) -> WebhookOutcome:
        # 2) fetch + 경계에서 한 번만 파싱
        payment = await run_in_threadpool(self.mollie.fetch_payment, payment_id)
        event = PaymentEvent.from_payload(payment, body)
        logger.debug("Payment %s fetched: status=%s sequence=%s", event.id, event.status, event.sequence_type)

        # 3) classify
        result = classifier.classify(event)
        time_text = self.time_text()
        messages: list[NotificationMessage] = []

        if result.early_failure:
            messages.append(templates.early_failure_text(event, time_text))

        message = self._render(event, result, time_text)
        if message is not None:
            messages.append(message)
        elif not result.early_failure:
            logger.info("ℹ️ Payment status: %s, sequence: %s", event.status, event.sequence_type)

        # 4) notify (실패해도 응답에는 영향 없음)
        for m in messages:
            await self._notify(m)

        # 5) follow-up: 첫 결제 성공 + 정기 금액 > 0 이면 구독 생성 예약
        if result.category == cat.INITIAL_PAYMENT_SUCCESS and event.metadata.is_recurring:
            self.scheduler.schedule(
                event.id,
                self.subscription_delay_sec,
                lambda: self.start_subscription(event),
            )

        return WebhookOutcome(200, "OK", tuple(m.category for m in messages))

    def _render(
        self, event: PaymentEvent, result: classifier.Classification, time_text: str
    ) -> NotificationMessage | None:
        category = result.category
        if category == cat.INITIAL_PAYMENT_SUCCESS:
            return templates.initial_payment_success_text(event, time_text)
        if category == cat.RENEWAL_SUCCESS:
            return templates.renewal_success_text(event, time_text)
        if category == cat.RENEWAL_FAILED:
            return templates.renewal_failed_text(event, time_text)
        if category == cat.INITIAL_PAYMENT_FAILED:
            label = result.failure_label or classifier.UNSPECIFIED_FAILED_LABEL
            return templates.initial_payment_failed_text(event, label, time_text)
        if category == cat.PAYMENT_PENDING:
            return templates.payment_pending_text(event, time_text)
        if category == cat.PAYMENT_EXPIRED:
            return templates.payment_expired_text(event, time_text)
        if category == cat.SUBSCRIPTION_CANCELLED:
            return templates.subscription_cancelled_text(event, time_text)
        return None

    async def start_subscription(self, event: PaymentEvent) -> NotificationMessage:
        m = event.metadata
        subscription_id: str | None = None

        if event.customer_id:
            subscription_id = await run_in_threadpool(
                lambda: self.mollie.create_subscription(
                    event.customer_id,
                    amount=format_amount(m.recurring_amount),
                    currency=self.subscription_currency,
                    interval=self.subscription_interval,
                    description=f"{m.plan_type} Subscription",
                    metadata={"email": m.email, "name": m.name, "planType": m.plan_type},
                )
            )
        else:
            logger.warning("Payment %s has no customerId, cannot create subscription", event.id)

        time_text = self.time_text()
        if subscription_id:
            logger.info("🧾 Subscription %s created for customer %s", subscription_id, event.customer_id)
            message = templates.subscription_started_text(event, subscription_id, time_text)
        else:
            message = templates.subscription_failed_text(event, time_text)

        await self._notify(message)
        return message
