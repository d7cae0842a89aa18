from fastapi import HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class MarketplaceError(HTTPException):
    """Base for domain errors: an HTTPException carrying a stable machine-readable kind."""

    kind = "error"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(status_code=self.http_status, detail=detail)


class ValidationError(MarketplaceError):
    kind = "validation_error"
    http_status = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(MarketplaceError):
    kind = "unauthorized"
    http_status = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(MarketplaceError):
    kind = "forbidden"
    http_status = status.HTTP_403_FORBIDDEN


class QuotaExceededError(MarketplaceError):
    kind = "quota_exceeded"
    http_status = status.HTTP_403_FORBIDDEN


class NotFoundError(MarketplaceError):
    kind = "not_found"
    http_status = status.HTTP_404_NOT_FOUND


class CapacityError(MarketplaceError):
    kind = "capacity_exceeded"
    http_status = status.HTTP_400_BAD_REQUEST


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"kind": exc.kind, "detail": exc.detail},
        headers=exc.headers,
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"kind": ValidationError.kind, "detail": jsonable_encoder(exc.errors())},
    )
