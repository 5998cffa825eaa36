from dataclasses import dataclass


@dataclass(frozen=True)
class NotificationMessage:
    category: str
    text: str
