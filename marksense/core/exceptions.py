"""
Errores de dominio y handlers globales para respuestas de error consistentes.

Toda respuesta de error tiene la forma `{"success": false, "message": "..."}`
(más `request_id` cuando existe). Nunca se exponen trazas ni detalles internos.
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException


class AppError(Exception):
    """Base de los errores tipados de la aplicación."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation error"

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Toma el primer error de pydantic y lo convierte en mensaje legible."""
        errors = exc.errors()
        if not errors:
            return cls()
        err = errors[0]
        ctx_error = (err.get("ctx") or {}).get("error")
        if isinstance(ctx_error, ValueError):
            return cls(str(ctx_error))
        field = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg") or "Invalid value"
        return cls(f"{field}: {msg}" if field else msg)


class Unauthorized(AppError):
    status_code = 401
    default_message = "Not authorized"


class InvalidCredentials(Unauthorized):
    # Los clientes existentes esperan 400 en login fallido
    status_code = 400
    default_message = "Invalid email or password"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 400
    default_message = "Resource already exists"


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _error_body(request: Request, message: str) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message}
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    err = errors[0]
    if err.get("type") == "json_invalid":
        return "Invalid JSON body"
    loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
    msg = err.get("msg") or "Invalid value"
    return f"{loc}: {msg}" if loc else msg


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("marksense.errors")

    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        log.info(
            "%s status=%s path=%s message=%s",
            type(exc).__name__, exc.status_code, request.url.path, exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=_error_body(request, exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, str(exc.detail or "HTTP error")),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=_error_body(request, _first_validation_message(exc)))

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        log.exception("Unhandled error request_id=%s", _req_id(request))
        return JSONResponse(status_code=500, content=_error_body(request, "Internal server error"))
