"""Exceptions raised by the services layer.

Each class carries the HTTP status the endpoints answer with, so the
API layer can translate any of them uniformly.
"""

from typing import List, Optional


class ServiceError(Exception):
    status_code = 400


class ValidationFailed(ServiceError, ValueError):
    """Input rejected by a business rule.

    ``failed_rules`` names the individual rules that did not pass, for
    checks (like the password policy) that evaluate several at once.
    """

    def __init__(self, message: str, failed_rules: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.failed_rules = failed_rules or []


class NotFound(ServiceError, LookupError):
    status_code = 404


class Forbidden(ServiceError, PermissionError):
    status_code = 403


class NotConfigured(ServiceError):
    status_code = 503


class UpstreamError(ServiceError):
    status_code = 502
