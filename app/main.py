from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DataError, IntegrityError

from app.api.routes_orders import router as orders_router
from app.core.config import get_settings
from app.core.logging import configure_logging
from app.demo import seed_orders
from app.domain.orders.errors import (
    InvalidStatusTransitionError,
    OrderCannotBeDeletedError,
    OrderError,
    OrderItemNotFoundError,
    OrderNotFoundError,
    OrderValidationError,
)
from app.persistence.pg import init_db, session_scope

configure_logging()
logger = logging.getLogger(__name__)
settings = get_settings()

app = FastAPI(title=settings.app_name)

ERROR_STATUS_CODES: dict[type[OrderError], int] = {
    OrderNotFoundError: 404,
    OrderItemNotFoundError: 404,
    InvalidStatusTransitionError: 422,
    OrderCannotBeDeletedError: 422,
    OrderValidationError: 422,
}


@app.on_event("startup")
def on_startup() -> None:
    init_db()
    if settings.bootstrap_demo_on_startup:
        with session_scope() as session:
            result = seed_orders(session, seed=settings.demo_seed)
        logger.info(
            "demo orders ready: created=%s seeded_now=%s",
            result.get("created"),
            result.get("seeded_now"),
        )


@app.exception_handler(OrderError)
async def order_error_handler(_: Request, exc: OrderError):
    status_code = ERROR_STATUS_CODES.get(type(exc), 422)
    content: dict = {"message": exc.message}
    if isinstance(exc, OrderValidationError) and exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError):
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        # Drop the leading "body"/"query"/"path" segment.
        loc = [str(part) for part in error.get("loc", ())][1:]
        errors.setdefault(".".join(loc) or "__root__", []).append(error.get("msg", "invalid value"))
    return JSONResponse(
        status_code=422,
        content={"message": "The given data was invalid.", "errors": errors},
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(_: Request, exc: IntegrityError):
    logger.warning("constraint violation rolled back: %s", exc.orig)
    return JSONResponse(
        status_code=409,
        content={"message": "The request conflicts with existing data and was rolled back."},
    )


@app.exception_handler(DataError)
async def data_error_handler(_: Request, exc: DataError):
    logger.warning("value rejected by the database and rolled back: %s", exc.orig)
    return JSONResponse(
        status_code=422,
        content={"message": "A value is out of range for storage and the request was rolled back."},
    )


@app.get("/healthz")
def healthz() -> dict:
    return {"status": "ok"}


app.include_router(orders_router)
