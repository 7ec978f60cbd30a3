from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ordering.api.dependencies import AppServices, get_services

router = APIRouter()


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(response: Response, services: AppServices = Depends(get_services)) -> dict[str, object]:
    persistence = services.order_persistence
    if persistence.ping():
        return {"status": "ok", "backend": persistence.backend.value}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "unavailable",
        "backend": persistence.backend.value,
    }
