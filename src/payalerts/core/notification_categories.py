from typing import Final

# Mollie webhook
INITIAL_PAYMENT_SUCCESS: Final[str] = "initial-payment-success"
INITIAL_PAYMENT_FAILED: Final[str] = "initial-payment-failed"
RENEWAL_SUCCESS: Final[str] = "renewal-success"
RENEWAL_FAILED: Final[str] = "renewal-failed"
PAYMENT_PENDING: Final[str] = "payment-pending"
PAYMENT_EXPIRED: Final[str] = "payment-expired"
PAYMENT_FAILED_EARLY: Final[str] = "payment-failed-early"
SUBSCRIPTION_STARTED: Final[str] = "subscription-started"
SUBSCRIPTION_FAILED: Final[str] = "subscription-failed"
SUBSCRIPTION_CANCELLED: Final[str] = "subscription-cancelled"

# Razorpay webhook
PAYMENT_CAPTURED: Final[str] = "payment-captured"
PAYMENT_FAILED: Final[str] = "payment-failed"
SUBSCRIPTION_REBILL_FAILED: Final[str] = "subscription-rebill-failed"

NOTIFICATION_CATEGORIES: Final[set[str]] = {
    INITIAL_PAYMENT_SUCCESS,
    INITIAL_PAYMENT_FAILED,
    RENEWAL_SUCCESS,
    RENEWAL_FAILED,
    PAYMENT_PENDING,
    PAYMENT_EXPIRED,
    PAYMENT_FAILED_EARLY,
    SUBSCRIPTION_STARTED,
    SUBSCRIPTION_FAILED,
    SUBSCRIPTION_CANCELLED,
    PAYMENT_CAPTURED,
    PAYMENT_FAILED,
    SUBSCRIPTION_REBILL_FAILED,
}
