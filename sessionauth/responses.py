"""JSON envelope shared by every non-redirect response."""

from typing import Literal

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class Envelope(BaseModel):
    """Response body: ``{"status": "OK" | "ERR", "data": <message>}``."""
    status: Literal["OK", "ERR"]
    data: str


class ApiError(HTTPException):
    """HTTPException rendered as an ``ERR`` envelope."""

    def __init__(self, status_code: int, data: str):
        super().__init__(status_code=status_code, detail=data)
        self.data = data


def ok(data: str, status_code: int = 200) -> JSONResponse:
    """Build an ``OK`` envelope response."""
    return JSONResponse(
        status_code=status_code,
        content=Envelope(status="OK", data=data).model_dump(),
    )


def err(data: str, status_code: int) -> JSONResponse:
    """Build an ``ERR`` envelope response."""
    return JSONResponse(
        status_code=status_code,
        content=Envelope(status="ERR", data=data).model_dump(),
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError raised by a dependency or handler."""
    return err(exc.data, exc.status_code)
