"""Response Envelope — {success, data?, message?, error?} builders for HTTP routes."""

from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse


def success_response(
    data: Any = None,
    message: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    content: dict[str, Any] = {"success": True, "data": data}
    if message is not None:
        content["message"] = message
    return JSONResponse(status_code=status_code, content=content)


def error_response(
    error: str,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    **extra: Any,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error, **extra},
    )
