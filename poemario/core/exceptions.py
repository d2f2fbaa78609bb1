"""
Иерархия ошибок API.

Каждая ошибка несет HTTP-код, который совпадает с полем ``error.code``
в теле ответа. Обработчики, зарегистрированные в :func:`register_exception_handlers`,
превращают любые исключения в единый конверт ошибки.
"""
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from poemario.logs import api_logger, debug_logger


class ApiError(Exception):
    """Base class for errors rendered as the error envelope"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Error interno del servidor"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Datos inválidos"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Recurso no encontrado"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflicto con el estado actual del recurso"


class MethodNotAllowedError(ApiError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    default_message = "Método no permitido"


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _validation_details(exc: RequestValidationError) -> Dict[str, Any]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({
            "field": ".".join(location) or None,
            "message": error.get("msg"),
            "type": error.get("type"),
        })
    return {"errors": errors}


def register_exception_handlers(app: FastAPI) -> None:
    """Подключение обработчиков, формирующих конверт ошибки"""
    # Импорт здесь, чтобы избежать циклического импорта с конвертом ответа
    from poemario.query.envelope import error_response

    version = getattr(app.state, "api_version", "v1")

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        if exc.status_code >= 500:
            debug_logger.error(f"{request.method} {request.url.path}: {exc.message} {exc.details}")
        return error_response(exc.message, exc.status_code, exc.details, version=version)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            error = MethodNotAllowedError(
                "Método no permitido. Solo se permiten solicitudes GET."
                if request.url.path.startswith("/api/")
                else None
            )
        elif exc.status_code == status.HTTP_404_NOT_FOUND:
            error = NotFoundError("Ruta no encontrada")
        else:
            error = ApiError(str(exc.detail))
            error.status_code = exc.status_code
        return error_response(error.message, error.status_code, error.details, version=version)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        details = _validation_details(exc)
        if any(item["type"] == "json_invalid" for item in details["errors"]):
            message = "Datos JSON inválidos"
        else:
            message = "Datos inválidos: " + ", ".join(
                str(item["message"]) for item in details["errors"]
            )
        return error_response(message, status.HTTP_400_BAD_REQUEST, details, version=version)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        debug_logger.log_exception(f"Необработанная ошибка {request.method} {request.url.path}")
        api_logger.error(f"Unhandled error {request.method} {request.url}: {exc}")
        return error_response(
            "Error interno del servidor",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"message": str(exc)},
            version=version,
        )
