from typing import Final, Literal

# Mollie payment status / sequenceType 중 우리가 구분하는 값들.
# 목록에 없는 값은 전부 "unknown"으로 접는다.
PaymentStatus = Literal["paid", "failed", "open", "expired", "canceled", "unknown"]
SequenceType = Literal["first", "recurring", "unknown"]

PAYMENT_STATUSES: Final[set[str]] = {"paid", "failed", "open", "expired", "canceled"}
SEQUENCE_TYPES: Final[set[str]] = {"first", "recurring"}

# 실패 사유가 있을 때 "조기 실패"로 보는 상태
EARLY_FAILURE_STATUSES: Final[set[str]] = {"open", "failed"}

RESOURCE_PAYMENT: Final[str] = "payment"
RESOURCE_SUBSCRIPTION: Final[str] = "subscription"

DEFAULT_NAME: Final[str] = "Unknown"
DEFAULT_EMAIL: Final[str] = "N/A"
DEFAULT_PLAN_TYPE: Final[str] = "DID Main Subscription"
DEFAULT_RECURRING_AMOUNT: Final[str] = "0.00"
DEFAULT_CURRENCY: Final[str] = "EUR"
