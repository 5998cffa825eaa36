from decimal import Decimal

import pytest

from conftest import mollie_payment
from payalerts.core import notification_categories as cat
from payalerts.models.payment_event import PaymentEvent
from payalerts.services.classifier import (
    INITIAL_FAILED_LABEL,
    UNSPECIFIED_FAILED_LABEL,
    classify,
)


def _event(payload, inbound=None):
    return PaymentEvent.from_payload({"id": "tr_1", **payload}, inbound)


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"status": "paid", "sequenceType": "first"}, cat.INITIAL_PAYMENT_SUCCESS),
        ({"status": "paid", "sequenceType": "recurring"}, cat.RENEWAL_SUCCESS),
        ({"status": "failed", "sequenceType": "recurring"}, cat.RENEWAL_FAILED),
        ({"status": "failed", "sequenceType": "first"}, cat.INITIAL_PAYMENT_FAILED),
        ({"status": "failed"}, cat.INITIAL_PAYMENT_FAILED),
        ({"status": "open"}, cat.PAYMENT_PENDING),
        ({"status": "expired"}, cat.PAYMENT_EXPIRED),
        ({"resource": "subscription", "status": "canceled"}, cat.SUBSCRIPTION_CANCELLED),
    ],
)
def test_classification_table(payload, expected):
    assert classify(_event(payload)).category == expected


def test_failed_label_depends_on_first_sequence():
    assert classify(_event({"status": "failed", "sequenceType": "first"})).failure_label == INITIAL_FAILED_LABEL
    assert classify(_event({"status": "failed", "sequenceType": "oneoff"})).failure_label == UNSPECIFIED_FAILED_LABEL


def test_unmatched_combination_is_not_an_error():
    result = classify(_event({"status": "paid", "sequenceType": "oneoff"}))
    assert result.category is None
    assert result.early_failure is False

    assert classify(_event({"status": "authorized"})).category is None
    # 결제 리소스의 canceled는 구독 해지가 아님
    assert classify(_event({"status": "canceled"})).category is None


def test_inbound_resource_marks_subscription_cancellation():
    event = _event({"status": "canceled"}, inbound={"resource": "subscription"})
    assert classify(event).category == cat.SUBSCRIPTION_CANCELLED


@pytest.mark.parametrize("status", ["open", "failed"])
def test_early_failure_flag_with_reason(status):
    event = _event({"status": status, "details": {"failureReason": "insufficient_funds"}})
    result = classify(event)
    assert result.early_failure is True
    # 조기 실패 플래그와 상관없이 일반 분류도 그대로
    assert result.category in {cat.PAYMENT_PENDING, cat.INITIAL_PAYMENT_FAILED}


def test_failure_reason_ignored_for_paid():
    result = classify(_event({"status": "paid", "sequenceType": "first", "failureReason": "x"}))
    assert result.early_failure is False


def test_from_payload_defaults_when_fields_missing():
    event = PaymentEvent.from_payload({"id": "tr_9"})
    assert event.status == "unknown"
    assert event.sequence_type == "unknown"
    assert event.amount.value == Decimal("0.00")
    assert event.amount.currency == "EUR"
    assert event.metadata.name == "Unknown"
    assert event.metadata.email == "N/A"
    assert event.metadata.plan_type == "DID Main Subscription"
    assert event.metadata.is_recurring is False
    assert event.failure_reason is None
    assert event.resource == "payment"


def test_from_payload_reads_metadata_and_email_fallback():
    payload = mollie_payment(recurring_amount="19.99", customerEmail="fallback@example.com")
    payload["metadata"].pop("email")
    event = PaymentEvent.from_payload(payload)

    assert event.metadata.email == "fallback@example.com"
    assert event.metadata.recurring_amount == Decimal("19.99")
    assert event.metadata.is_recurring is True
    assert str(event.amount) == "EUR 49.00"
    assert str(event.recurring_amount) == "EUR 19.99"


def test_unparsable_recurring_amount_is_zero():
    event = PaymentEvent.from_payload(mollie_payment(recurring_amount="n/a"))
    assert event.metadata.is_recurring is False


def test_status_reason_object_is_rendered():
    event = PaymentEvent.from_payload(
        {"id": "tr_1", "status": "failed", "statusReason": {"code": "card_declined", "message": "Card declined"}}
    )
    assert event.failure_reason == "Card declined"


@pytest.mark.parametrize(
    "overrides",
    [
        {"metadata": "order-42"},
        {"metadata": ["a", "b"]},
        {"metadata": None, "details": "insufficient_funds"},
    ],
)
def test_non_object_fields_fall_back_to_defaults(overrides):
    event = PaymentEvent.from_payload(mollie_payment("tr_1", status="paid", sequence_type="recurring", **overrides))

    assert event.metadata.name == "Unknown"
    assert event.metadata.email == "N/A"
    assert event.metadata.is_recurring is False
    assert classify(event).category == cat.RENEWAL_SUCCESS


def test_non_object_amount_is_zero_in_default_currency():
    payload = mollie_payment("tr_1")
    payload["amount"] = "49.00"
    event = PaymentEvent.from_payload(payload)
    assert str(event.amount) == "EUR 0.00"


def test_unhashable_status_is_unknown():
    event = PaymentEvent.from_payload({"id": "tr_1", "status": {"value": "paid"}, "sequenceType": ["first"]})
    assert event.status == "unknown"
    assert event.sequence_type == "unknown"
    assert classify(event).category is None
