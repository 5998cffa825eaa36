from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # front end는 camelCase 키를 주고받는다
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InitialPaymentIn(CamelModel):
    # 필수 여부는 서비스에서 검사 (누락 시 422가 아니라 400)
    name: str | None = None
    email: str | None = None
    initial_amount: str | float | None = None
    recurring_amount: str | float | None = None
    plan_type: str | None = None


class InitialPaymentOut(CamelModel):
    checkout_url: str
    customer_id: str
    payment_id: str


class SubscriptionCheckoutIn(CamelModel):
    name: str | None = None
    email: str | None = None


class SubscriptionCheckoutOut(CamelModel):
    checkout_url: str


class RazorpaySubscriptionIn(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None


class RazorpaySubscriptionOut(BaseModel):
    success: bool = True
    subscription_id: str
    plan_id: str
    key_id: str | None = None
    message: str = "Subscription created successfully"
