from .common import ErrorCode, ErrorDetail, ErrorResponse
from .health import DependencyStatus, HealthReport, HealthStatus

__all__ = [
    # common
    "ErrorDetail",
    "ErrorCode",
    "ErrorResponse",
    # health
    "DependencyStatus",
    "HealthStatus",
    "HealthReport",
]
