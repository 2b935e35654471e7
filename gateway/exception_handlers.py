"""
Exception handlers mapping gateway errors to REST responses.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from errors import GatewayError, UpstreamError

logger = logging.getLogger(__name__)


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    if isinstance(exc, UpstreamError):
        logger.error(f"{request.method} {request.url.path} upstream failure: {exc} - {exc.body}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)
