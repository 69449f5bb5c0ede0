from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from src.api.schemas import ErrorResponse
from src.core.errors import GenerationError, InputValidationError

INTERNAL_ERROR_KIND = "internal"
INTERNAL_ERROR_MESSAGE = "Something went wrong while generating content. Please try again."


def _error_body(kind: str, message: str, details: Optional[str], *, production: bool) -> Dict[str, Any]:
    body = ErrorResponse(
        error=kind,
        message=message,
        details=None if production else details,
    )
    return body.model_dump(exclude_none=True)


def _error_to_response(error: GenerationError, *, production: bool) -> JSONResponse:
    """Render a classified failure; provider detail is only exposed outside production."""

    if isinstance(error, InputValidationError):
        message = error.message
    else:
        message = error.public_message
    return JSONResponse(
        status_code=error.status_code,
        content=_error_body(error.kind, message, error.message, production=production),
    )


def _unexpected_error_response(exc: Exception, *, production: bool) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=_error_body(INTERNAL_ERROR_KIND, INTERNAL_ERROR_MESSAGE, str(exc), production=production),
    )
