import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import (
    DocumentNotFoundError,
    DuplicateOfferError,
    OfferStateError,
    OfferValidationError,
    PermissionDeniedError,
    RequestExpiredError,
)

logger = logging.getLogger(__name__)


async def not_found_error_handler(_request: Request, exc: DocumentNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"detail": exc.message},
    )


async def validation_error_handler(_request: Request, exc: OfferValidationError) -> JSONResponse:
    logger.info("Rejected invalid input (field=%s): %s", exc.field, exc.message)
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "field": exc.field},
    )


async def state_error_handler(_request: Request, exc: OfferStateError) -> JSONResponse:
    logger.info("Illegal offer transition (offer=%s): %s", exc.offer_id, exc.message)
    return JSONResponse(
        status_code=409,
        content={"detail": exc.message},
    )


async def permission_error_handler(_request: Request, exc: PermissionDeniedError) -> JSONResponse:
    logger.warning("Permission denied for %s: %s", exc.actor_id, exc.message)
    return JSONResponse(
        status_code=403,
        content={"detail": exc.message},
    )


async def duplicate_offer_error_handler(_request: Request, exc: DuplicateOfferError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"detail": exc.message, "existing_offer_id": exc.existing_offer_id},
    )


async def request_expired_error_handler(_request: Request, exc: RequestExpiredError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"detail": exc.message},
    )
