from __future__ import annotations

from payalerts.core import notification_categories as cat
from payalerts.models.notification import NotificationMessage
from payalerts.models.payment_event import PaymentEvent
from payalerts.models.subscription_event import RazorpayPayment, SubscriptionEvent
from payalerts.services.notifications.telegram import escape_markdown as md
from payalerts.services.notifications.telegram import escape_markdown_v2 as esc

DIVIDER = "━━━━━━━━━━━━━━━"


def _header(title: str, time_text: str, *, source: bool = True) -> list[str]:
    lines = [title, DIVIDER, f"🕒 *Time:* {md(time_text)} (CET)"]
    if source:
        lines.append("🏦 *Source:* Mollie")
    return lines


def _msg(category: str, lines: list[str]) -> NotificationMessage:
    return NotificationMessage(category=category, text="\n".join(lines))


# -----------------------------
# Mollie (parse_mode=Markdown, 값은 escape)
# -----------------------------
def early_failure_text(event: PaymentEvent, time_text: str) -> NotificationMessage:
    m = event.metadata
    return _msg(
        cat.PAYMENT_FAILED_EARLY,
        _header("⚠️ *PAYMENT FAILED (EARLY DETECTED)*", time_text)
        + [
            f"📧 *Email:* {md(m.email)}",
            f"👤 *Name:* {md(m.name)}",
            f"📦 *Plan:* {md(m.plan_type)}",
            f"💬 *Reason:* {md(event.failure_reason)}",
            f"💵 *Amount:* {md(event.amount)}",
            f"🆔 *Payment ID:* {md(event.id)}",
        ],
    )


def initial_payment_success_text(event: PaymentEvent, time_text: str) -> NotificationMessage:
    m = event.metadata
    lines = _header("💰 *INITIAL PAYMENT SUCCESSFUL*", time_text) + [
        f"📧 *Email:* {md(m.email)}",
        f"👤 *Name:* {md(m.name)}",
        f"📦 *Plan:* {md(m.plan_type)}",
        f"💵 *Initial:* {md(event.amount)}",
        f"🔁 *Recurring:* {md(event.recurring_amount)}",
        f"🆔 *Payment ID:* {md(event.id)}",
        f"🧾 *Customer ID:* {md(event.customer_id)}",
    ]
    if m.is_recurring:
        lines.append("⏳ Waiting before creating subscription…")
    else:
        lines.append("✅ One-time purchase, no subscription.")
    return _msg(cat.INITIAL_PAYMENT_SUCCESS, lines)


def subscription_started_text(event: PaymentEvent, subscription_id: str, time_text: str) -> NotificationMessage:
    m = event.metadata
    return _msg(
        cat.SUBSCRIPTION_STARTED,
        _header("🧾 *SUBSCRIPTION STARTED*", time_text)
        + [
            f"📧 *Email:* {md(m.email)}",
            f"👤 *Name:* {md(m.name)}",
            f"📦 *Plan:* {md(m.plan_type)}",
            f"💳 *Recurring:* {md(event.recurring_amount)}",
            f"🧾 *Subscription ID:* {md(subscription_id)}",
            f"🆔 *Customer ID:* {md(event.customer_id)}",
        ],
    )


def subscription_failed_text(event: PaymentEvent, time_text: str) -> NotificationMessage:
    m = event.metadata
    return _msg(
        cat.SUBSCRIPTION_FAILED,
        _header("🚫 *SUBSCRIPTION CREATION FAILED*", time_text, source=False)
        + [
            f"📧 *Email:* {md(m.email)}",
            f"👤 *Name:* {md(m.name)}",
            f"🧾 *Customer ID:* {md(event.customer_id)}",
        ],
    )


def _status_lines(event: PaymentEvent) -> list[str]:
    return [
        f"📧 *Email:* {md(event.metadata.email)}",
        f"📦 *Plan:* {md(event.metadata.plan_type)}",
        f"💵 *Amount:* {md(event.amount)}",
    ]


def renewal_success_text(event: PaymentEvent, time_text: str) -> NotificationMessage:
    return _msg(
        cat.RENEWAL_SUCCESS,
        _header("🔁 *RENEWAL CHARGED*", time_text, source=False)
        + _status_lines(event)
        + [f"🧾 *Customer ID:* {md(event.customer_id)}"],
    )


def renewal_failed_text(event: PaymentEvent, time_text: str) -> NotificationMessage:
    return _msg(
        cat.RENEWAL_FAILED,
        _header("⚠️ *RENEWAL FAILED*", time_text, source=False)
        + _status_lines(event)
        + [f"🧾 *Customer ID:* {md(event.customer_id)}"],
    )


def initial_payment_failed_text(event: PaymentEvent, label: str, time_text: str) -> NotificationMessage:
    return _msg(
        cat.INITIAL_PAYMENT_FAILED,
        _header(f"❌ *{label}*", time_text, source=False)
        + _status_lines(event)
        + [f"🧾 *Customer ID:* {md(event.customer_id)}"],
    )


def payment_pending_text(event: PaymentEvent, time_text: str) -> NotificationMessage:
    return _msg(
        cat.PAYMENT_PENDING,
        _header("🕓 *PAYMENT PENDING / OPEN*", time_text, source=False)
        + _status_lines(event)
        + ["💬 *Status:* Awaiting user completion"],
    )


def payment_expired_text(event: PaymentEvent, time_text: str) -> NotificationMessage:
    return _msg(
        cat.PAYMENT_EXPIRED,
        _header("⌛ *PAYMENT EXPIRED*", time_text, source=False)
        + _status_lines(event)
        + ["💬 *Status:* User didn’t complete checkout"],
    )


def subscription_cancelled_text(event: PaymentEvent, time_text: str) -> NotificationMessage:
    return _msg(
        cat.SUBSCRIPTION_CANCELLED,
        _header("🚫 *SUBSCRIPTION CANCELLED*", time_text, source=False)
        + [
            f"📧 *Email:* {md(event.metadata.email)}",
            f"📦 *Plan:* {md(event.metadata.plan_type)}",
            f"🧾 *Customer ID:* {md(event.customer_id)}",
        ],
    )


# -----------------------------
# Razorpay (parse_mode=MarkdownV2, 값은 escape)
# -----------------------------
def razorpay_payment_captured_text(payment: RazorpayPayment) -> NotificationMessage:
    return _msg(
        cat.PAYMENT_CAPTURED,
        [
            "🏦 *Source:* Razorpay",
            "💰 *New Payment Captured*",
            f"📦 *Product:* {esc(payment.product)}",
            f"📧 *Email:* {esc(payment.email)}",
            f"📱 *Phone:* {esc(payment.phone)}",
            f"💵 *Amount:* {esc(payment.display_amount)}",
            f"🆔 *Payment ID:* {esc(payment.id)}",
        ],
    )


def razorpay_payment_failed_text(payment: RazorpayPayment) -> NotificationMessage:
    return _msg(
        cat.PAYMENT_FAILED,
        [
            "🏦 *Source:* Razorpay",
            "⚠️ *Payment Failed*",
            f"📧 *Email:* {esc(payment.email)}",
            f"📱 *Phone:* {esc(payment.phone)}",
            f"💵 *Amount:* {esc(payment.display_amount)}",
            f"❌ *Reason:* {esc(payment.error_description)}",
            f"🆔 *Payment ID:* {esc(payment.id)}",
        ],
    )


def razorpay_renewal_text(sub: SubscriptionEvent) -> NotificationMessage:
    return _msg(
        cat.RENEWAL_SUCCESS,
        [
            "🏦 *Source:* Razorpay",
            "🔁 *Subscription Renewal Charged*",
            f"📦 *Product:* {esc(sub.plan)}",
            f"📧 *Email:* {esc(sub.email)}",
            f"📱 *Phone:* {esc(sub.phone)}",
            f"🧾 *Subscription ID:* {esc(sub.id)}",
            f"💳 *Cycle Count:* {esc(sub.total_count)}",
        ],
    )


def razorpay_cancelled_text(sub: SubscriptionEvent) -> NotificationMessage:
    if sub.failed_rebill:
        category, title = cat.SUBSCRIPTION_REBILL_FAILED, "🚨 *Subscription Failed After Multiple Rebill Attempts\\!*"
    else:
        category, title = cat.SUBSCRIPTION_CANCELLED, "🚫 *Subscription Cancelled*"

    return _msg(
        category,
        [
            "🏦 *Source:* Razorpay",
            title,
            f"📦 *Product:* {esc(sub.plan)}",
            f"📧 *Email:* {esc(sub.email)}",
            f"📱 *Phone:* {esc(sub.phone)}",
            f"🧾 *Subscription ID:* {esc(sub.id)}",
            f"❌ *Reason:* {esc(sub.cancel_reason or 'Cancelled manually or after failed rebills')}",
        ],
    )
