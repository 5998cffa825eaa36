from __future__ import annotations

import json
from urllib.parse import parse_qs

from fastapi import Request


class MalformedBody(ValueError):
    pass


async def read_webhook_body(request: Request) -> dict:
    """
    JSON 또는 form-encoded body를 dict로.
    Mollie는 실제로 `id=tr_xxx` form으로 보낸다.
    """
    raw = await request.body()
    if not raw:
        return {}

    content_type = request.headers.get("content-type", "")
    if "application/x-www-form-urlencoded" in content_type:
        try:
            parsed = parse_qs(raw.decode("utf-8"), keep_blank_values=True)
        except UnicodeDecodeError as e:
            raise MalformedBody("body is not valid UTF-8") from e
        return {k: v[-1] for k, v in parsed.items()}

    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedBody(f"invalid JSON: {e}") from e

    if not isinstance(body, dict):
        raise MalformedBody("JSON body must be an object")
    return body
