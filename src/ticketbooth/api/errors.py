"""Map booking errors to HTTP responses"""
import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ticketbooth.services import BookingError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.SEATING_MODE_MISMATCH: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INSUFFICIENT_INVENTORY: 409,
    ErrorCode.SEAT_ALREADY_TAKEN: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}


def error_body(code: str, message: str) -> dict:
    return {"error": code, "message": message}


async def booking_error_handler(request: Request, exc: BookingError):
    """Each error kind gets a distinct status and machine-readable code"""
    status_code = STATUS_BY_CODE.get(exc.code, 500)
    if status_code == 500:
        # Storage details stay in the logs
        message = "Failed to create booking"
    else:
        message = exc.message
    return JSONResponse(status_code=status_code, content=error_body(exc.code.value, message))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.info(f"Rejected request to {request.url.path}: {len(errors)} validation errors")
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(status_code=400, content=error_body(ErrorCode.BAD_REQUEST.value, message))
