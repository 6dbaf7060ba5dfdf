"""
Standardized response utilities
"""

from typing import Any, Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.core.errors import DomainError, ErrorCode
from app.schemas.common import ErrorResponse

ERROR_STATUS = {
    ErrorCode.CONFIGURATION_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.NORMALIZATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.UNIQUENESS_VIOLATION: status.HTTP_409_CONFLICT,
    ErrorCode.REFERENCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INFRASTRUCTURE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}

def error_response(
    message: str,
    error_code: Optional[str] = None,
    details: Any = None,
    status_code: int = 400
) -> JSONResponse:
    """Create standardized error response"""
    response = ErrorResponse(
        message=message,
        error_code=error_code,
        details=details
    )
    return JSONResponse(
        content=response.model_dump(),
        status_code=status_code
    )

async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render a domain error as a standardized error response"""
    return error_response(
        message=exc.message,
        error_code=exc.code.value,
        details=exc.details,
        status_code=ERROR_STATUS.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    )
