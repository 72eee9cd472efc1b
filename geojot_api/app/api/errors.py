"""Translation of service exceptions into HTTP errors."""

from fastapi import HTTPException

from geojot_api.app.services.errors import ServiceError, ValidationFailed


def to_http_exception(exc: ServiceError) -> HTTPException:
    """Build the ``HTTPException`` matching a service error.

    Validation errors that name individual rules keep them in the body
    as ``failedRules`` next to the message.
    """
    if isinstance(exc, ValidationFailed) and exc.failed_rules:
        detail = {"error": str(exc), "failedRules": exc.failed_rules}
        return HTTPException(status_code=exc.status_code, detail=detail)
    return HTTPException(status_code=exc.status_code, detail=str(exc))
