from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Request

from payalerts.core.config import Settings
from payalerts.integrations.mollie.client import MollieClient
from payalerts.integrations.razorpay.client import RazorpayClient
from payalerts.services.dedup import DuplicateSuppressor
from payalerts.services.followups import FollowupScheduler
from payalerts.services.mollie_webhook import MollieWebhookHandler
from payalerts.services.notifications.telegram import TelegramNotifier
from payalerts.services.razorpay_webhook import RazorpayWebhookHandler


@dataclass
class Services:
    """app.state에 올라가는 프로세스 단위 컴포넌트 묶음 (테스트에서 통째로 교체)."""

    settings: Settings
    mollie: MollieClient
    razorpay: RazorpayClient
    notifier: TelegramNotifier
    mollie_dedup: DuplicateSuppressor
    razorpay_dedup: DuplicateSuppressor
    followups: FollowupScheduler


def _secret(value) -> str | None:
    return value.get_secret_value() if value else None


def build_services(settings: Settings) -> Services:
    timeout = settings.http_timeout_sec
    return Services(
        settings=settings,
        mollie=MollieClient(
            _secret(settings.mollie_api_key),
            base_url=settings.mollie_api_base,
            timeout=timeout,
        ),
        razorpay=RazorpayClient(
            settings.razorpay_key_id,
            _secret(settings.razorpay_key_secret),
            base_url=settings.razorpay_api_base,
            timeout=timeout,
        ),
        notifier=TelegramNotifier(
            _secret(settings.telegram_bot_token),
            settings.telegram_chat_id,
            api_base=settings.telegram_api_base,
            timeout=timeout,
        ),
        mollie_dedup=DuplicateSuppressor(settings.dedup_clear_interval_sec),
        razorpay_dedup=DuplicateSuppressor(settings.dedup_clear_interval_sec),
        followups=FollowupScheduler(),
    )


def get_services(request: Request) -> Services:
    """FastAPI dependency: app-scoped services"""
    return request.app.state.services


def get_settings(services: Services = Depends(get_services)) -> Settings:
    return services.settings


def mollie_webhook_handler(services: Services = Depends(get_services)) -> MollieWebhookHandler:
    s = services.settings
    return MollieWebhookHandler(
        mollie=services.mollie,
        notifier=services.notifier,
        suppressor=services.mollie_dedup,
        scheduler=services.followups,
        subscription_delay_sec=s.subscription_delay_sec,
        subscription_currency=s.default_currency,
        subscription_interval=s.subscription_interval,
        display_timezone=s.display_timezone,
    )


def razorpay_webhook_handler(services: Services = Depends(get_services)) -> RazorpayWebhookHandler:
    return RazorpayWebhookHandler(notifier=services.notifier, suppressor=services.razorpay_dedup)
