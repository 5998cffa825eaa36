"""
Checkout initiators (front end -> 여기 -> 게이트웨이)

- Mollie: 매번 새 customer + 첫 결제(sequenceType=first)로 새 mandate 생성
- Razorpay: plan 기반 subscription 생성
여기서 만든 payment id가 나중에 webhook으로 돌아온다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from payalerts.core.config import Settings
from payalerts.core.errors import ValidationError
from payalerts.integrations.mollie.client import MollieClient
from payalerts.integrations.razorpay.client import RazorpayClient
from payalerts.models.payment_event import format_amount, parse_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InitialPaymentResult:
    checkout_url: str
    customer_id: str
    payment_id: str


@dataclass(frozen=True)
class RazorpaySubscriptionResult:
    subscription_id: str
    plan_id: str
    key_id: str | None


def _amount_or_none(value: Any) -> str | None:
    if value is None or str(value).strip() == "":
        return None
    return format_amount(parse_decimal(value))


def _compact(meta: dict[str, Any]) -> dict[str, Any]:
    # None 값은 Mollie로 보내지 않는다
    return {k: v for k, v in meta.items() if v is not None}


def create_initial_payment(
    mollie: MollieClient,
    settings: Settings,
    *,
    name: str | None,
    email: str | None,
    initial_amount: Any,
    recurring_amount: Any = None,
    plan_type: str | None = None,
) -> InitialPaymentResult:
    amount = _amount_or_none(initial_amount)
    if not name or not email or amount is None:
        logger.error("❌ Missing fields: name=%r email=%r initialAmount=%r", name, email, initial_amount)
        raise ValidationError("Missing required fields")

    # 1) 항상 새 customer
    customer_id = mollie.create_customer(name, email)
    logger.info("✅ New Mollie customer created: %s", customer_id)

    # 2) 첫 결제 (매번 새 mandate)
    payment = mollie.create_payment(
        amount=amount,
        currency=settings.default_currency,
        description=f"{plan_type or settings.initial_payment_brand} Initial Payment",
        customer_id=customer_id,
        sequence_type="first",
        redirect_url=settings.checkout_redirect_url,
        webhook_url=settings.mollie_webhook_url,
        metadata=_compact(
            {
                "name": name,
                "email": email,
                "planType": plan_type,
                "recurringAmount": _amount_or_none(recurring_amount),
                "type": "initialPayment",
            }
        ),
    )
    logger.info("✅ Mollie Payment Created: %s", payment.id)

    return InitialPaymentResult(
        checkout_url=payment.checkout_url,
        customer_id=customer_id,
        payment_id=payment.id,
    )


def create_subscription_checkout(
    mollie: MollieClient,
    settings: Settings,
    *,
    name: str | None,
    email: str | None,
) -> str:
    """고정 월 멤버십 가격으로 mandate용 첫 결제를 만들고 checkout URL을 돌려준다."""
    if not name or not email:
        raise ValidationError("Missing name or email")

    customer_id = mollie.create_customer(name, email)
    payment = mollie.create_payment(
        amount=settings.membership_amount,
        currency=settings.default_currency,
        description=settings.membership_description,
        customer_id=customer_id,
        sequence_type="first",
        redirect_url=settings.checkout_redirect_url,
        webhook_url=settings.mollie_webhook_url,
        metadata={"name": name, "email": email, "planType": settings.default_plan_type},
    )
    logger.info("✅ Mollie membership checkout created: %s", payment.id)
    return payment.checkout_url


def create_razorpay_subscription(
    razorpay: RazorpayClient,
    settings: Settings,
    *,
    name: str | None,
    email: str | None,
    phone: str | None,
) -> RazorpaySubscriptionResult:
    subscription = razorpay.create_subscription(
        plan_id=settings.razorpay_plan_id,
        total_count=settings.razorpay_total_count,
        notes={
            "name": name,
            "email": email,
            "phone": phone,
            "product": settings.razorpay_product_label,
        },
    )
    logger.info("✅ Razorpay subscription created: %s", subscription["id"])
    return RazorpaySubscriptionResult(
        subscription_id=str(subscription["id"]),
        plan_id=settings.razorpay_plan_id,
        key_id=settings.razorpay_key_id,
    )
