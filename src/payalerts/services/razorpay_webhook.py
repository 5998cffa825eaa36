from __future__ import annotations

import logging
from typing import Any, Mapping

from fastapi.concurrency import run_in_threadpool

from payalerts.models.notification import NotificationMessage
from payalerts.models.payment_event import as_mapping
from payalerts.models.subscription_event import RazorpayPayment, SubscriptionEvent
from payalerts.services.dedup import DuplicateSuppressor
from payalerts.services.mollie_webhook import WebhookOutcome
from payalerts.services.notifications import templates
from payalerts.services.notifications.telegram import TelegramNotifier

logger = logging.getLogger(__name__)

EVENT_PAYMENT_CAPTURED = "payment.captured"
EVENT_PAYMENT_FAILED = "payment.failed"
EVENT_SUBSCRIPTION_CHARGED = "subscription.charged"
EVENT_SUBSCRIPTION_CANCELLED = "subscription.cancelled"


def _entity(body: Mapping[str, Any], kind: str) -> Mapping[str, Any] | None:
    payload = as_mapping(body.get("payload"))
    wrapper = as_mapping(payload.get(kind))
    entity = wrapper.get("entity")
    return entity if isinstance(entity, Mapping) and entity else None


def build_message(body: Mapping[str, Any]) -> NotificationMessage | None:
    """Razorpay event 이름 + entity 존재 여부로 메시지를 고른다. 모르는 이벤트면 None."""
    event = body.get("event")
    payment = _entity(body, "payment")
    subscription = _entity(body, "subscription")

    if event == EVENT_PAYMENT_CAPTURED and payment:
        return templates.razorpay_payment_captured_text(RazorpayPayment.from_entity(payment))
    if event == EVENT_SUBSCRIPTION_CHARGED and subscription:
        return templates.razorpay_renewal_text(SubscriptionEvent.from_entity(subscription))
    if event == EVENT_PAYMENT_FAILED and payment:
        return templates.razorpay_payment_failed_text(RazorpayPayment.from_entity(payment))
    if event == EVENT_SUBSCRIPTION_CANCELLED and subscription:
        return templates.razorpay_cancelled_text(
            SubscriptionEvent.from_entity(subscription, default_plan="Razorpay Plan")
        )
    return None


class RazorpayWebhookHandler:
    def __init__(self, *, notifier: TelegramNotifier, suppressor: DuplicateSuppressor) -> None:
        self.notifier = notifier
        self.suppressor = suppressor

    async def handle(self, body: Mapping[str, Any], *, event_id: str | None = None) -> WebhookOutcome:
        event = body.get("event")
        logger.info("📬 Received Razorpay Event: %s", event)

        # Razorpay는 재전송 시 같은 X-Razorpay-Event-Id를 보낸다
        if event_id and not self.suppressor.should_process(event_id):
            logger.warning("⚠️ Duplicate Razorpay event ignored: %s", event_id)
            return WebhookOutcome(200, "Duplicate ignored")

        try:
            message = build_message(body)
            if message is None:
                logger.info("ℹ️ Razorpay event not handled: %s", event)
                return WebhookOutcome(200, "ok")

            await run_in_threadpool(self.notifier.notify, message.text, parse_mode="MarkdownV2")
            logger.info("✅ [%s] notification sent", message.category)
            return WebhookOutcome(200, "ok", (message.category,))
        except Exception as e:
            if event_id:
                self.suppressor.release(event_id)
            logger.exception("❌ [Webhook Error]")
            return WebhookOutcome(500, str(e))
