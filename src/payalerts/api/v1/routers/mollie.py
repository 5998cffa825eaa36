import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from payalerts.api.deps import Services, get_services, mollie_webhook_handler
from payalerts.api.v1.routers._body import MalformedBody, read_webhook_body
from payalerts.api.v1.schemas.checkout import (
    InitialPaymentIn,
    InitialPaymentOut,
    SubscriptionCheckoutIn,
    SubscriptionCheckoutOut,
)
from payalerts.core.errors import PayAlertsError
from payalerts.services import checkout
from payalerts.services.mollie_webhook import MollieWebhookHandler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mollie", tags=["mollie"])


@router.post("/webhook", response_class=PlainTextResponse)
async def mollie_webhook(
    request: Request,
    handler: MollieWebhookHandler = Depends(mollie_webhook_handler),
):
    try:
        body = await read_webhook_body(request)
    except MalformedBody as e:
        logger.error("❌ Malformed Mollie webhook body: %s", e)
        return PlainTextResponse("Bad request", status_code=400)

    outcome = await handler.handle(body)
    return PlainTextResponse(outcome.body, status_code=outcome.status_code)


@router.post("/create-initial-payment", response_model=InitialPaymentOut)
def create_initial_payment(payload: InitialPaymentIn, services: Services = Depends(get_services)):
    try:
        result = checkout.create_initial_payment(
            services.mollie,
            services.settings,
            name=payload.name,
            email=payload.email,
            initial_amount=payload.initial_amount,
            recurring_amount=payload.recurring_amount,
            plan_type=payload.plan_type,
        )
    except PayAlertsError:
        raise  # main.py exception handler가 400으로 변환
    except Exception:
        logger.exception("❌ create-initial-payment error")
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    return InitialPaymentOut(
        checkout_url=result.checkout_url,
        customer_id=result.customer_id,
        payment_id=result.payment_id,
    )


@router.post("/create-subscription", response_model=SubscriptionCheckoutOut)
def create_subscription(payload: SubscriptionCheckoutIn, services: Services = Depends(get_services)):
    try:
        checkout_url = checkout.create_subscription_checkout(
            services.mollie,
            services.settings,
            name=payload.name,
            email=payload.email,
        )
    except PayAlertsError:
        raise
    except Exception:
        logger.exception("❌ create-subscription error")
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    return SubscriptionCheckoutOut(checkout_url=checkout_url)
