from __future__ import annotations

from typing import Any

import pytest

from payalerts.api.deps import Services
from payalerts.core.config import Settings
from payalerts.core.errors import GatewayError
from payalerts.integrations.mollie.client import CreatedPayment
from payalerts.services.dedup import DuplicateSuppressor
from payalerts.services.followups import FollowupScheduler
from payalerts.services.mollie_webhook import MollieWebhookHandler


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeNotifier:
    configured = True

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def notify(self, text: str, *, parse_mode: str = "Markdown") -> bool:
        self.sent.append((text, parse_mode))
        return True

    @property
    def texts(self) -> list[str]:
        return [t for t, _ in self.sent]


class FakeMollie:
    def __init__(self) -> None:
        self.payments: dict[str, dict] = {}
        self.fetch_calls: list[str] = []
        self.subscription_calls: list[dict[str, Any]] = []
        self.subscription_id: str | None = "sub_test_1"
        self.customer_calls: list[tuple[str, str]] = []
        self.payment_calls: list[dict[str, Any]] = []
        self.customer_id: str | None = "cst_test_1"
        self.checkout_ok = True

    def fetch_payment(self, payment_id: str) -> dict:
        self.fetch_calls.append(payment_id)
        payment = self.payments.get(payment_id)
        if not payment or not payment.get("id"):
            raise GatewayError(f"Payment {payment_id} could not be resolved", details=payment)
        return payment

    def create_subscription(self, customer_id: str, **kwargs: Any) -> str | None:
        self.subscription_calls.append({"customer_id": customer_id, **kwargs})
        return self.subscription_id

    def create_customer(self, name: str, email: str) -> str:
        self.customer_calls.append((name, email))
        if not self.customer_id:
            raise GatewayError("Customer creation failed", details={"status": 422})
        return self.customer_id

    def create_payment(self, **kwargs: Any) -> CreatedPayment:
        self.payment_calls.append(kwargs)
        if not self.checkout_ok:
            raise GatewayError("Failed to create payment", details={"title": "Unprocessable Entity"})
        return CreatedPayment(id="tr_created_1", checkout_url="https://www.mollie.com/checkout/test")


class FakeRazorpay:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.error: dict | None = None

    def create_subscription(self, **kwargs: Any) -> dict:
        self.calls.append(kwargs)
        if self.error:
            raise GatewayError("Razorpay subscription creation failed", details=self.error)
        return {"id": "sub_rzp_1", "status": "created"}


def mollie_payment(
    payment_id: str = "tr_abc123",
    *,
    status: str = "paid",
    sequence_type: str | None = "first",
    amount: str = "49.00",
    recurring_amount: str | None = None,
    **extra: Any,
) -> dict:
    metadata = {"name": "Asha Rao", "email": "asha@example.com", "planType": "Gold Plan"}
    if recurring_amount is not None:
        metadata["recurringAmount"] = recurring_amount
    payment = {
        "resource": "payment",
        "id": payment_id,
        "status": status,
        "amount": {"value": amount, "currency": "EUR"},
        "customerId": "cst_test_1",
        "metadata": metadata,
    }
    if sequence_type is not None:
        payment["sequenceType"] = sequence_type
    payment.update(extra)
    return payment


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        telegram_bot_token="123:abc",
        telegram_chat_id="42",
        razorpay_key_id="rzp_test_key",
        subscription_delay_sec=0,
        public_base_url="https://checkout.example.com",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def mollie() -> FakeMollie:
    return FakeMollie()


@pytest.fixture
def razorpay() -> FakeRazorpay:
    return FakeRazorpay()


@pytest.fixture
def suppressor(clock) -> DuplicateSuppressor:
    return DuplicateSuppressor(60, clock=clock)


@pytest.fixture
def scheduler() -> FollowupScheduler:
    return FollowupScheduler()


@pytest.fixture
def mollie_handler(mollie, notifier, suppressor, scheduler) -> MollieWebhookHandler:
    return MollieWebhookHandler(
        mollie=mollie,
        notifier=notifier,
        suppressor=suppressor,
        scheduler=scheduler,
        subscription_delay_sec=0,
    )


@pytest.fixture
def services(test_settings, mollie, razorpay, notifier, suppressor, clock, scheduler) -> Services:
    return Services(
        settings=test_settings,
        mollie=mollie,
        razorpay=razorpay,
        notifier=notifier,
        mollie_dedup=suppressor,
        razorpay_dedup=DuplicateSuppressor(60, clock=clock),
        followups=scheduler,
    )
