from fastapi import Request, status
from fastapi.responses import JSONResponse
from guestbook.core import exceptions
from guestbook.core.notify import send_ntfy_notification
import logging

logger = logging.getLogger(__name__)

async def guestbook_exception_handler(request: Request, exc: exceptions.GuestbookError):
    status_code = status.HTTP_400_BAD_REQUEST
    headers = None

    if isinstance(exc, exceptions.EntityNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND

    elif isinstance(exc, exceptions.EntityAlreadyExistsError):
        status_code = status.HTTP_409_CONFLICT

    elif isinstance(exc, exceptions.AuthError):
        status_code = status.HTTP_401_UNAUTHORIZED
        headers = {"WWW-Authenticate": "Bearer"}

    elif isinstance(exc, exceptions.StoreFailureError):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        await send_ntfy_notification(
            message=f"Store failure: {exc.message}\nPath: {request.url.path}",
            title="🚨 Guestbook Store Error",
            priority="high"
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": "Failed"},
        )

    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message},
        headers=headers,
    )

async def general_exception_handler(request: Request, exc: Exception):
    error_msg = f"Unhandled Exception: {str(exc)}\nPath: {request.url.path}"
    logger.error(f"❌ {error_msg}", exc_info=True)

    await send_ntfy_notification(
        message=error_msg,
        title="🔥 500 Internal Server Error",
        priority="max"
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error. Admin has been notified."},
    )
