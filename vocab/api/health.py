"""Readiness endpoint shared by every vocabulary service.

Returns HTTP 200 when every dependency is connected and 503 otherwise, so
orchestrator readiness probes can take an instance out of rotation while its
document store or cache is unreachable.
"""

import logging

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from vocab.database import DATASTORE_NAMES
from vocab.schemas.health import DependencyStatus, HealthReport
from vocab.services.health import HealthAggregator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


def get_health_aggregator(request: Request) -> HealthAggregator | None:
    """Return the aggregator built by the application lifespan, if it has run."""
    return getattr(request.app.state, "health_aggregator", None)


def unavailable_report(app: FastAPI) -> HealthReport:
    """Unhealthy report for an app whose lifespan never built an aggregator."""
    return HealthReport(
        service=app.title,
        version=app.version,
        dependencies=dict.fromkeys(DATASTORE_NAMES, DependencyStatus.DISCONNECTED),
    )


@router.get(
    "/health",
    response_model=HealthReport,
    responses={
        status.HTTP_503_SERVICE_UNAVAILABLE: {
            "model": HealthReport,
            "description": "At least one dependency is disconnected",
        }
    },
)
async def health(
    request: Request,
    aggregator: HealthAggregator | None = Depends(get_health_aggregator),  # noqa: B008
) -> JSONResponse:
    """Report dependency connectivity for this service instance.

    Failures while building the report are never raised to the caller: the
    response degrades to an ``unhealthy`` report with every dependency marked
    ``disconnected``.
    """
    if aggregator is None:
        logger.error("No health aggregator on %s; was the lifespan run?", request.app.title)
        report = unavailable_report(request.app)
    else:
        try:
            report = await aggregator.aggregate()
        except Exception:
            logger.exception("Health aggregation failed for %s", aggregator.service)
            report = aggregator.fallback_report()

    status_code = (
        status.HTTP_200_OK if report.is_healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(status_code=status_code, content=report.model_dump(mode="json"))
