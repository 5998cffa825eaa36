"""
Mollie payment payload -> PaymentEvent

- webhook 경계에서 한 번만 파싱한다. 이후 코드는 dict를 직접 뒤지지 않는다.
- 없는 값은 기본값(sentinel)으로 채운다. 분류 전에 모든 필드를 먼저 뽑아둔다.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from payalerts.core.mollie_values import (
    DEFAULT_CURRENCY,
    DEFAULT_EMAIL,
    DEFAULT_NAME,
    DEFAULT_PLAN_TYPE,
    DEFAULT_RECURRING_AMOUNT,
    PAYMENT_STATUSES,
    RESOURCE_PAYMENT,
    SEQUENCE_TYPES,
    PaymentStatus,
    SequenceType,
)


def as_mapping(value: Any) -> Mapping[str, Any]:
    # metadata/notes는 아무 JSON 값이나 올 수 있다 (문자열 등)
    return value if isinstance(value, Mapping) else {}


def parse_decimal(value: Any, default: str = "0.00") -> Decimal:
    if value is None or value == "":
        return Decimal(default)
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal(default)


def format_amount(value: Decimal) -> str:
    # Mollie는 "29.00"처럼 소수 둘째 자리 문자열을 요구
    return f"{value:.2f}"


@dataclass(frozen=True)
class Money:
    value: Decimal
    currency: str = DEFAULT_CURRENCY

    def __str__(self) -> str:
        return f"{self.currency} {format_amount(self.value)}"


@dataclass(frozen=True)
class PaymentMetadata:
    name: str = DEFAULT_NAME
    email: str = DEFAULT_EMAIL
    plan_type: str = DEFAULT_PLAN_TYPE
    recurring_amount: Decimal = Decimal(DEFAULT_RECURRING_AMOUNT)

    @property
    def is_recurring(self) -> bool:
        return self.recurring_amount > 0


@dataclass(frozen=True)
class PaymentEvent:
    id: str
    status: PaymentStatus
    sequence_type: SequenceType
    amount: Money
    customer_id: str | None
    metadata: PaymentMetadata
    resource: str = RESOURCE_PAYMENT
    failure_reason: str | None = None

    @property
    def recurring_amount(self) -> Money:
        return Money(self.metadata.recurring_amount, self.amount.currency)

    @classmethod
    def from_payload(
        cls,
        payment: Mapping[str, Any],
        inbound: Mapping[str, Any] | None = None,
    ) -> "PaymentEvent":
        inbound = as_mapping(inbound)
        meta = as_mapping(payment.get("metadata"))
        amount = as_mapping(payment.get("amount"))

        raw_status = payment.get("status") or inbound.get("status")
        raw_sequence = payment.get("sequenceType")

        return cls(
            id=str(payment["id"]),
            status=raw_status if isinstance(raw_status, str) and raw_status in PAYMENT_STATUSES else "unknown",
            sequence_type=raw_sequence if isinstance(raw_sequence, str) and raw_sequence in SEQUENCE_TYPES else "unknown",
            amount=Money(
                value=parse_decimal(amount.get("value")),
                currency=amount.get("currency") or DEFAULT_CURRENCY,
            ),
            customer_id=payment.get("customerId"),
            metadata=PaymentMetadata(
                name=meta.get("name") or DEFAULT_NAME,
                email=meta.get("email") or payment.get("customerEmail") or DEFAULT_EMAIL,
                plan_type=meta.get("planType") or DEFAULT_PLAN_TYPE,
                recurring_amount=parse_decimal(meta.get("recurringAmount"), DEFAULT_RECURRING_AMOUNT),
            ),
            # 원래 webhook body의 resource가 우선
            resource=inbound.get("resource") or payment.get("resource") or RESOURCE_PAYMENT,
            failure_reason=extract_failure_reason(payment),
        )


def extract_failure_reason(payment: Mapping[str, Any]) -> str | None:
    details = as_mapping(payment.get("details"))
    reason = details.get("failureReason") or payment.get("failureReason") or payment.get("statusReason")
    if not reason:
        return None
    if isinstance(reason, Mapping):
        # statusReason은 {"code": ..., "message": ...} 형태
        return str(reason.get("message") or reason.get("code") or reason)
    return str(reason)
