from fastapi import APIRouter, Depends

from payalerts.api.deps import Services, get_services

router = APIRouter(tags=["health"])


@router.get("/health")
def health(services: Services = Depends(get_services)):
    return {
        "status": "ok",
        "telegram_configured": services.notifier.configured,
        "pending_followups": len(services.followups.pending()),
    }
