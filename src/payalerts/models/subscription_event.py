"""Razorpay webhook entity -> typed record"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

from payalerts.models.payment_event import as_mapping, format_amount, parse_decimal

DEFAULT_CONTACT = "N/A"

_EMAIL_KEYS = ("email", "customer_email", "customer_details.email", "notes.email", "contact_email", "customer_notify_email")
_PHONE_KEYS = ("contact", "customer_contact", "customer_details.contact", "notes.phone", "phone")


def _dig(obj: Mapping[str, Any], dotted: str) -> Any:
    cur: Any = obj
    for part in dotted.split("."):
        if not isinstance(cur, Mapping):
            return None
        cur = cur.get(part)
    return cur


def _first_present(obj: Mapping[str, Any], keys: tuple[str, ...], default: str = DEFAULT_CONTACT) -> str:
    for key in keys:
        v = _dig(obj, key)
        if v:
            return str(v)
    return default


def extract_email(entity: Mapping[str, Any]) -> str:
    return _first_present(entity, _EMAIL_KEYS)


def extract_phone(entity: Mapping[str, Any]) -> str:
    return _first_present(entity, _PHONE_KEYS)


@dataclass(frozen=True)
class RazorpayPayment:
    id: str
    amount: Decimal
    currency: str
    product: str
    email: str
    phone: str
    error_description: str

    @property
    def display_amount(self) -> str:
        return f"{self.currency} {format_amount(self.amount)}"

    @classmethod
    def from_entity(cls, entity: Mapping[str, Any]) -> "RazorpayPayment":
        notes = as_mapping(entity.get("notes"))
        return cls(
            id=str(entity.get("id") or "N/A"),
            # Razorpay amount는 paise 단위
            amount=parse_decimal(entity.get("amount"), "0") / 100,
            currency=entity.get("currency") or "INR",
            product=(
                notes.get("product")
                or notes.get("plan_name")
                or notes.get("subscription_name")
                or "Subscription (via Razorpay Button)"
            ),
            email=extract_email(entity),
            phone=extract_phone(entity),
            error_description=entity.get("error_description") or "Unknown reason",
        )


@dataclass(frozen=True)
class SubscriptionEvent:
    id: str
    plan: str
    email: str
    phone: str
    cancel_reason: str | None = None
    total_count: str = "∞"

    @property
    def failed_rebill(self) -> bool:
        reason = self.cancel_reason or ""
        return "multiple failed rebill" in reason or "failed payment" in reason

    @classmethod
    def from_entity(cls, entity: Mapping[str, Any], *, default_plan: str = "Razorpay Subscription Plan") -> "SubscriptionEvent":
        notes = as_mapping(entity.get("notes"))
        return cls(
            id=str(entity.get("id") or "N/A"),
            plan=notes.get("product") or entity.get("plan_id") or default_plan,
            email=extract_email(entity),
            phone=extract_phone(entity),
            cancel_reason=entity.get("cancel_reason"),
            total_count=str(entity.get("total_count") or "∞"),
        )
