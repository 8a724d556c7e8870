from fastapi import APIRouter, Query

from hotel_offers.dependencies import NotificationServiceDep, OfferServiceDep
from hotel_offers.schemas.notifications import ActivityLog, Notification
from hotel_offers.schemas.offers import OfferStatus
from hotel_offers.schemas.responses import AdminOfferRow

router = APIRouter(tags=["admin"])


@router.get("/admin/offers", response_model=list[AdminOfferRow])
async def list_all_offers(
    service: OfferServiceDep,
    status: OfferStatus | None = None,
) -> list[AdminOfferRow]:
    return await service.list_admin_rows(status=status)


@router.get("/admin/activity", response_model=list[ActivityLog])
async def list_activity(
    notifications: NotificationServiceDep,
    limit: int = Query(default=100, ge=1, le=1000),
) -> list[ActivityLog]:
    return await notifications.list_activity(limit=limit)


@router.get("/notifications", response_model=list[Notification])
async def list_notifications(to: str, notifications: NotificationServiceDep) -> list[Notification]:
    return await notifications.list_for(to)
