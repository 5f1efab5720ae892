"""
Service errors and their HTTP mapping.

Route handlers raise the typed errors below; the handlers registered by
``register_exception_handlers`` turn them into JSON responses of the form
``{"status": "error", "message": ...}``. Database failures that are not
translated by a route end up as a generic 500 and are logged with their
traceback. Socket level failures the driver raises unwrapped count as the
database being unavailable; anything else left over is a generic 500.
"""
import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred. Check server logs."


class ServiceError(Exception):
    status_code = 500

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class AuthenticationError(ServiceError):
    status_code = 401


class DatabaseUnavailableError(ServiceError):
    status_code = 503

    def __init__(self, message: str = "Database unavailable"):
        super().__init__(message)


def is_connection_error(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def error_body(message: str) -> dict:
    return {"status": "error", "message": message}


async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    if is_connection_error(exc):
        unavailable = DatabaseUnavailableError()
        return JSONResponse(status_code=unavailable.status_code, content=error_body(unavailable.message))
    return JSONResponse(status_code=500, content=error_body(GENERIC_ERROR_MESSAGE))


async def connection_error_handler(request: Request, exc: Exception):
    logger.exception("Database unreachable on %s %s", request.method, request.url.path, exc_info=exc)
    unavailable = DatabaseUnavailableError()
    return JSONResponse(status_code=unavailable.status_code, content=error_body(unavailable.message))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=error_body(GENERIC_ERROR_MESSAGE))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    # asyncpg lets refused or timed out connects through as plain OSError
    app.add_exception_handler(OSError, connection_error_handler)
    app.add_exception_handler(asyncio.TimeoutError, connection_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
