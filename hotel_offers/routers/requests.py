from fastapi import APIRouter

from hotel_offers.dependencies import RequestServiceDep
from hotel_offers.schemas.requests import CreateStayRequest, RestartStayRequest, StayRequest

router = APIRouter(tags=["requests"])


@router.post("/requests", response_model=StayRequest, status_code=201)
async def create_request(
    payload: CreateStayRequest,
    service: RequestServiceDep,
) -> StayRequest:
    return await service.create_request(payload)


@router.get("/requests/open", response_model=list[StayRequest])
async def list_open_requests(service: RequestServiceDep) -> list[StayRequest]:
    return await service.list_open_requests()


@router.get("/requests", response_model=list[StayRequest])
async def list_guest_requests(guest_id: str, service: RequestServiceDep) -> list[StayRequest]:
    return await service.list_guest_requests(guest_id)


@router.get("/requests/{request_id}", response_model=StayRequest)
async def get_request(request_id: str, service: RequestServiceDep) -> StayRequest:
    return await service.get_request(request_id)


@router.delete("/requests/{request_id}", response_model=StayRequest)
async def delete_request(
    request_id: str,
    guest_id: str,
    service: RequestServiceDep,
) -> StayRequest:
    return await service.delete_request(request_id, guest_id)


@router.post("/requests/{request_id}/restart", response_model=StayRequest)
async def restart_request(
    request_id: str,
    payload: RestartStayRequest,
    service: RequestServiceDep,
) -> StayRequest:
    return await service.restart_request(
        request_id, payload.guest_id, check_in=payload.check_in, check_out=payload.check_out
    )
