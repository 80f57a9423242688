from typing import Any, Optional
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from household_ledger.shared.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class ServiceError(HTTPException):
    """Error de negocio que se traduce en una respuesta {success: false, error}"""

    def __init__(self, status_code: int, detail: str, details: Optional[Any] = None):
        super().__init__(status_code=status_code, detail=detail)
        self.details = details


class ExpenseValidationError(ServiceError):
    def __init__(self, detail: str = "Datos de entrada inválidos", details: Optional[Any] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, detail, details)


class NotFoundError(ServiceError):
    def __init__(self, detail: str = "Recurso no encontrado"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)


class PersistenceError(ServiceError):
    def __init__(self, detail: str = "Error de base de datos", details: Optional[Any] = None):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail, details)


def _error_response(status_code: int, error: str, details: Optional[Any] = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body, exclude_none=True)
    )


def _describe_validation_errors(exc: RequestValidationError) -> str:
    fields = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        if loc:
            fields.append(".".join(loc))
    if not fields:
        return "Cuerpo de la petición inválido"
    return "Campos requeridos ausentes o inválidos: " + ", ".join(dict.fromkeys(fields))


def setup_exception_handlers(app: FastAPI):
    """Registrar handlers que renderizan todos los errores con el mismo formato"""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return _error_response(exc.status_code, exc.detail, exc.details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Petición rechazada {request.method} {request.url.path}: {exc.errors()}")
        return _error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_errors(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Error no controlado en {request.method} {request.url.path}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor")
