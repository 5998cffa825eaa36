from __future__ import annotations

from typing import Any

import requests

from payalerts.core.errors import GatewayError
from payalerts.integrations.http import request_json


class RazorpayClient:
    """Razorpay REST API (v1). key_id:key_secret basic auth."""

    def __init__(
        self,
        key_id: str | None,
        key_secret: str | None,
        *,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10,
        session: requests.Session | None = None,
    ) -> None:
        self.key_id = key_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (key_id or "", key_secret or "")

    def create_subscription(
        self,
        *,
        plan_id: str,
        total_count: int,
        notes: dict[str, Any],
        customer_notify: bool = True,
    ) -> dict:
        _, subscription = request_json(
            self.session,
            "POST",
            f"{self.base_url}/subscriptions",
            timeout=self.timeout,
            gateway="Razorpay",
            json={
                "plan_id": plan_id,
                "total_count": total_count,
                "customer_notify": 1 if customer_notify else 0,
                "notes": notes,
            },
        )

        if subscription.get("error"):
            raise GatewayError("Razorpay subscription creation failed", details=subscription["error"])
        if not subscription.get("id"):
            raise GatewayError("Razorpay subscription creation failed", details=subscription)
        return subscription
