from __future__ import annotations

from typing import Any

import requests

from payalerts.core.errors import GatewayError


def request_json(
    session: requests.Session,
    method: str,
    url: str,
    *,
    timeout: float,
    gateway: str,
    **kwargs: Any,
) -> tuple[int, dict]:
    """
    게이트웨이 호출 공통부.
    timeout / 연결 실패 / JSON 아님 -> GatewayError
    HTTP status 판단은 호출하는 쪽에서 한다.
    """
    try:
        resp = session.request(method, url, timeout=timeout, **kwargs)
    except requests.Timeout as e:
        raise GatewayError(f"{gateway} request timed out: {method} {url}") from e
    except requests.RequestException as e:
        raise GatewayError(f"{gateway} request failed: {e}") from e

    try:
        body = resp.json()
    except ValueError as e:
        raise GatewayError(
            f"{gateway} returned non-JSON response ({resp.status_code})",
            details=(resp.text or "")[:500],
        ) from e

    if not isinstance(body, dict):
        raise GatewayError(f"{gateway} returned unexpected payload", details=body)

    return resp.status_code, body
