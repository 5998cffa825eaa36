from __future__ import annotations

from dataclasses import dataclass

from payalerts.core import notification_categories as cat
from payalerts.core.mollie_values import EARLY_FAILURE_STATUSES, RESOURCE_SUBSCRIPTION
from payalerts.models.payment_event import PaymentEvent

INITIAL_FAILED_LABEL = "INITIAL PAYMENT FAILED"
UNSPECIFIED_FAILED_LABEL = "PAYMENT FAILED (UNSPECIFIED)"


@dataclass(frozen=True)
class Classification:
    category: str | None
    early_failure: bool = False
    failure_label: str | None = None


def classify(event: PaymentEvent) -> Classification:
    """
    위에서부터 첫 매치. 필드 추출은 PaymentEvent.from_payload에서 이미 끝났다.
    early_failure는 별도 플래그라서 아래 분기와 함께 성립할 수 있다.
    """
    status = event.status
    sequence = event.sequence_type

    early_failure = bool(event.failure_reason) and status in EARLY_FAILURE_STATUSES

    if status == "paid" and sequence == "first":
        return Classification(cat.INITIAL_PAYMENT_SUCCESS, early_failure)
    if status == "paid" and sequence == "recurring":
        return Classification(cat.RENEWAL_SUCCESS, early_failure)
    if status == "failed" and sequence == "recurring":
        return Classification(cat.RENEWAL_FAILED, early_failure)
    if status == "failed":
        # sequenceType이 없거나 oneoff여도 여기로 온다
        label = INITIAL_FAILED_LABEL if sequence == "first" else UNSPECIFIED_FAILED_LABEL
        return Classification(cat.INITIAL_PAYMENT_FAILED, early_failure, label)
    if status == "open":
        return Classification(cat.PAYMENT_PENDING, early_failure)
    if status == "expired":
        return Classification(cat.PAYMENT_EXPIRED, early_failure)
    if event.resource == RESOURCE_SUBSCRIPTION and status == "canceled":
        return Classification(cat.SUBSCRIPTION_CANCELLED, early_failure)

    return Classification(None, early_failure)
