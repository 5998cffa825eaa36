import logging

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from payalerts.api.deps import Services, get_services, razorpay_webhook_handler
from payalerts.api.v1.routers._body import MalformedBody, read_webhook_body
from payalerts.api.v1.schemas.checkout import RazorpaySubscriptionIn, RazorpaySubscriptionOut
from payalerts.core.errors import PayAlertsError
from payalerts.services import checkout
from payalerts.services.razorpay_webhook import RazorpayWebhookHandler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/razorpay", tags=["razorpay"])


@router.post("/webhook")
async def razorpay_webhook(
    request: Request,
    handler: RazorpayWebhookHandler = Depends(razorpay_webhook_handler),
    razorpay_event_id: str | None = Header(default=None, alias="X-Razorpay-Event-Id"),
):
    try:
        body = await read_webhook_body(request)
    except MalformedBody as e:
        return JSONResponse({"status": "error", "error": str(e)}, status_code=400)

    outcome = await handler.handle(body, event_id=razorpay_event_id)
    if outcome.status_code >= 500:
        return JSONResponse({"status": "error", "error": outcome.body}, status_code=outcome.status_code)
    if outcome.body == "Duplicate ignored":
        return {"status": "ok", "duplicate": True}
    return {"status": "ok"}


@router.post("/create-subscription", response_model=RazorpaySubscriptionOut)
def create_subscription(payload: RazorpaySubscriptionIn, services: Services = Depends(get_services)):
    try:
        result = checkout.create_razorpay_subscription(
            services.razorpay,
            services.settings,
            name=payload.name,
            email=payload.email,
            phone=payload.phone,
        )
    except PayAlertsError:
        raise
    except Exception as e:
        logger.exception("Error creating subscription")
        return JSONResponse({"error": str(e)}, status_code=500)

    return RazorpaySubscriptionOut(
        subscription_id=result.subscription_id,
        plan_id=result.plan_id,
        key_id=result.key_id,
    )
