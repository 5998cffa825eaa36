from __future__ import annotations

import argparse
import logging
from datetime import datetime, timezone

from payalerts.api.deps import build_services
from payalerts.core.config import settings
from payalerts.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Send a test message through the configured Telegram notifier")
    parser.add_argument(
        "--text",
        default=None,
        help="Message body (defaults to a timestamped ping)",
    )
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    notifier = build_services(settings).notifier

    if not notifier.configured:
        logger.error("TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID are not set")
        return 2

    text = args.text or f"✅ *PayAlerts test* {datetime.now(timezone.utc).isoformat(timespec='seconds')}"
    if not notifier.notify(text):
        logger.error("Test notification was not delivered")
        return 1

    logger.info("Test notification sent")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
