"""Mapping of domain errors to HTTP responses."""
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import OrderingError, PartialOrderError

logger = logging.getLogger(__name__)


async def ordering_error_handler(request: Request, exc: OrderingError) -> JSONResponse:
    """Render a domain error as ``{"detail": ..., "redirect": ...}``."""
    content = {"detail": exc.message}
    if exc.redirect:
        content["redirect"] = exc.redirect
    if isinstance(exc, PartialOrderError):
        content["order_id"] = exc.order_id

    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        f"[ERROR] {request.method} {request.url.path} -> {exc.status_code} "
        f"{type(exc).__name__}: {exc.message}"
    )
    return JSONResponse(status_code=exc.status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain error handler on the app."""
    app.add_exception_handler(OrderingError, ordering_error_handler)
