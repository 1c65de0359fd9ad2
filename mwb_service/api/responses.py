import logging
from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..core.result import Result
from .models import HtmlPayload

logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def missing_html_response(payload: Optional[HtmlPayload]) -> Optional[JSONResponse]:
    """400 response when the request carries no HTML, else None."""
    if payload is None or not payload.html:
        return error_response("HTML content is required", status.HTTP_400_BAD_REQUEST)
    return None


def result_response(result: Result[Any], wrap: Optional[str] = None) -> JSONResponse:
    """Map ``Ok`` to 200 with the camelCase value and ``Err`` to 500 with its message."""
    if not result.ok:
        logger.warning(f"Request failed with {result.kind} error: {result.message}")
        return error_response(result.message)
    content = jsonable_encoder(result.value, by_alias=True)
    return JSONResponse(content={wrap: content} if wrap else content)
