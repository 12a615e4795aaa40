# Core infrastructure
from portal.core.context import (
    clear_context,
    get_context,
    get_request_id,
    get_student_id,
    set_request_id,
    set_student_id,
)
from portal.core.exceptions import (
    InvariantViolationError,
    PortalError,
    StoreUnavailableError,
)
from portal.core.logging import configure_structlog, get_logger
from portal.core.middleware import RequestContextMiddleware


__all__ = [
    "InvariantViolationError",
    "PortalError",
    "RequestContextMiddleware",
    "StoreUnavailableError",
    "clear_context",
    "configure_structlog",
    "get_context",
    "get_logger",
    "get_request_id",
    "get_student_id",
    "set_request_id",
    "set_student_id",
]
