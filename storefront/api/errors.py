# storefront/api/errors.py
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.domain.errors import InternalError, ShopError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


async def shop_error_handler(request: Request, exc: ShopError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "kind": "ValidationError",
            "message": "Request body or parameters are invalid",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    #np. 404 dla nieznanej sciezki, 405 dla zlej metody
    return JSONResponse(
        status_code=exc.status_code,
        content={"kind": "HttpError", "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def persistence_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} persistence failure: {exc}")
    err = InternalError()
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} unexpected {type(exc).__name__}: {exc}", exc_info=exc)
    err = InternalError()
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShopError, shop_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, persistence_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
