import asyncio

from payalerts.core import notification_categories as cat
from payalerts.models.subscription_event import SubscriptionEvent, extract_email, extract_phone
from payalerts.services.razorpay_webhook import RazorpayWebhookHandler, build_message


def _payment_body(event, **entity):
    base = {"id": "pay_1", "amount": 69900, "currency": "INR", "email": "ravi@example.com", "contact": "+919800000000"}
    base.update(entity)
    return {"event": event, "payload": {"payment": {"entity": base}}}


def _subscription_body(event, **entity):
    base = {"id": "sub_1", "plan_id": "plan_1", "notes": {"product": "HindiPro", "email": "ravi@example.com"}}
    base.update(entity)
    return {"event": event, "payload": {"subscription": {"entity": base}}}


def test_payment_captured():
    message = build_message(_payment_body("payment.captured", notes={"plan_name": "HindiPro"}))
    assert message.category == cat.PAYMENT_CAPTURED
    assert "INR 699\\.00" in message.text
    assert "HindiPro" in message.text
    assert "pay\\_1" in message.text


def test_payment_failed_reason():
    message = build_message(_payment_body("payment.failed", error_description="Card declined."))
    assert message.category == cat.PAYMENT_FAILED
    assert "Card declined\\." in message.text


def test_subscription_charged_is_renewal():
    message = build_message(_subscription_body("subscription.charged", total_count=12))
    assert message.category == cat.RENEWAL_SUCCESS
    assert "Cycle Count:* 12" in message.text


def test_subscription_cancelled_vs_rebill_failure():
    plain = build_message(_subscription_body("subscription.cancelled", cancel_reason="Cancelled by customer"))
    rebill = build_message(
        _subscription_body("subscription.cancelled", cancel_reason="Cancelled after multiple failed rebill attempts")
    )
    assert plain.category == cat.SUBSCRIPTION_CANCELLED
    assert rebill.category == cat.SUBSCRIPTION_REBILL_FAILED
    assert "Multiple Rebill Attempts" in rebill.text


def test_unknown_or_entityless_events_are_ignored():
    assert build_message({"event": "order.paid", "payload": {}}) is None
    assert build_message({"event": "payment.captured", "payload": {}}) is None
    assert build_message({}) is None


def test_contact_field_fallbacks():
    entity = {"customer_details": {"email": "cd@example.com"}, "notes": {"phone": "+91123"}}
    assert extract_email(entity) == "cd@example.com"
    assert extract_phone(entity) == "+91123"
    assert extract_email({}) == "N/A"


def test_subscription_plan_fallback():
    sub = SubscriptionEvent.from_entity({"id": "sub_9"}, default_plan="Razorpay Plan")
    assert sub.plan == "Razorpay Plan"
    assert sub.total_count == "∞"
    assert sub.failed_rebill is False


def test_handler_sends_markdown_v2_and_dedups_by_event_id(notifier, clock):
    from payalerts.services.dedup import DuplicateSuppressor

    handler = RazorpayWebhookHandler(notifier=notifier, suppressor=DuplicateSuppressor(60, clock=clock))
    body = _payment_body("payment.captured")

    first = asyncio.run(handler.handle(body, event_id="evt_1"))
    second = asyncio.run(handler.handle(body, event_id="evt_1"))

    assert first.status_code == 200
    assert first.categories == (cat.PAYMENT_CAPTURED,)
    assert second.body == "Duplicate ignored"
    assert len(notifier.sent) == 1
    assert notifier.sent[0][1] == "MarkdownV2"


def test_non_object_payload_is_ignored_not_an_error(notifier, clock):
    from payalerts.services.dedup import DuplicateSuppressor

    assert build_message({"event": "payment.captured", "payload": ["payment"]}) is None
    assert build_message({"event": "payment.captured", "payload": {"payment": "pay_1"}}) is None
    assert build_message({"event": "subscription.cancelled", "payload": "subscription"}) is None

    handler = RazorpayWebhookHandler(notifier=notifier, suppressor=DuplicateSuppressor(60, clock=clock))
    outcome = asyncio.run(handler.handle({"event": "payment.captured", "payload": ["payment"]}))

    assert outcome.status_code == 200
    assert notifier.sent == []


def test_non_object_notes_use_fallbacks():
    sub = SubscriptionEvent.from_entity({"id": "sub_1", "notes": ["x"], "plan_id": "plan_9"})
    assert sub.plan == "plan_9"
