from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: str = "local"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Mollie
    mollie_api_key: SecretStr | None = None
    mollie_api_base: str = "https://api.mollie.com/v2"

    # Razorpay
    razorpay_key_id: str | None = None
    razorpay_key_secret: SecretStr | None = None
    razorpay_plan_id: str = "plan_RaTP2x2MeJxdco"
    razorpay_api_base: str = "https://api.razorpay.com/v1"
    razorpay_total_count: int = 400  # 큰 값 = 사실상 무기한 구독
    razorpay_product_label: str = "HindiPro Monthly Subscription (₹699)"

    # Telegram (알림 채널)
    telegram_bot_token: SecretStr | None = None
    telegram_chat_id: str | None = None
    telegram_api_base: str = "https://api.telegram.org"

    # Checkout
    public_base_url: str = "https://checkout.realcoachdeepak.com"
    checkout_redirect_path: str = "/success.html"
    default_currency: str = "EUR"
    default_plan_type: str = "DID Main Subscription"
    subscription_interval: str = "1 month"
    membership_amount: str = "29.00"
    membership_description: str = "Deepak Academy Monthly Membership"
    initial_payment_brand: str = "Deepak Academy"

    # Runtime
    http_timeout_sec: int = 10
    dedup_clear_interval_sec: float = 60.0
    subscription_delay_sec: float = 8.0
    display_timezone: str = "Europe/Berlin"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def checkout_redirect_url(self) -> str:
        return f"{self.public_base_url.rstrip('/')}{self.checkout_redirect_path}"

    @property
    def mollie_webhook_url(self) -> str:
        return f"{self.public_base_url.rstrip('/')}/api/v1/mollie/webhook"

    @property
    def telegram_configured(self) -> bool:
        return bool(self.telegram_bot_token and self.telegram_chat_id)


settings = Settings()
