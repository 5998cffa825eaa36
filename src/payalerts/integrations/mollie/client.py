from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from payalerts.core.errors import GatewayError
from payalerts.integrations.http import request_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreatedPayment:
    id: str
    checkout_url: str


class MollieClient:
    """
    Mollie REST API (v2) thin client.
    모든 호출은 Bearer 키 + JSON. timeout은 GatewayError로 취급.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://api.mollie.com/v2",
        timeout: float = 10,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_key or ''}",
                "Content-Type": "application/json",
            }
        )

    def _call(self, method: str, path: str, **kwargs: Any) -> tuple[int, dict]:
        return request_json(
            self.session,
            method,
            f"{self.base_url}{path}",
            timeout=self.timeout,
            gateway="Mollie",
            **kwargs,
        )

    def create_customer(self, name: str, email: str) -> str:
        _, customer = self._call("POST", "/customers", json={"name": name, "email": email})
        if not customer.get("id"):
            raise GatewayError("Customer creation failed", details=customer)
        return str(customer["id"])

    def create_payment(
        self,
        *,
        amount: str,
        currency: str,
        description: str,
        customer_id: str,
        sequence_type: str,
        redirect_url: str,
        webhook_url: str,
        metadata: dict[str, Any],
    ) -> CreatedPayment:
        status_code, payment = self._call(
            "POST",
            "/payments",
            json={
                "amount": {"value": amount, "currency": currency},
                "description": description,
                "redirectUrl": redirect_url,
                "webhookUrl": webhook_url,
                "customerId": customer_id,
                "sequenceType": sequence_type,
                "metadata": metadata,
            },
        )

        checkout_url = ((payment.get("_links") or {}).get("checkout") or {}).get("href")
        if status_code != 201 or not checkout_url or not payment.get("id"):
            raise GatewayError("Failed to create payment", details=payment)

        return CreatedPayment(id=str(payment["id"]), checkout_url=str(checkout_url))

    def fetch_payment(self, payment_id: str) -> dict:
        _, payment = self._call("GET", f"/payments/{payment_id}")
        if not payment.get("id"):
            raise GatewayError(f"Payment {payment_id} could not be resolved", details=payment)
        return payment

    def create_subscription(
        self,
        customer_id: str,
        *,
        amount: str,
        currency: str,
        interval: str,
        description: str,
        metadata: dict[str, Any],
    ) -> str | None:
        # 실패해도 예외를 던지지 않는다. 결과는 알림으로만 보고된다.
        try:
            _, subscription = self._call(
                "POST",
                f"/customers/{customer_id}/subscriptions",
                json={
                    "amount": {"value": amount, "currency": currency},
                    "interval": interval,
                    "description": description,
                    "metadata": metadata,
                },
            )
        except GatewayError as e:
            logger.warning("Mollie subscription call failed for customer %s: %s", customer_id, e)
            return None

        sub_id = subscription.get("id")
        if not sub_id:
            logger.warning("Mollie subscription creation returned no id: %s", subscription)
            return None
        return str(sub_id)
