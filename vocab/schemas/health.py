from collections.abc import Iterable
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_serializer,
    model_validator,
)


class DependencyStatus(StrEnum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class HealthStatus(StrEnum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


def overall_status(states: Iterable[str]) -> HealthStatus:
    if all(state == DependencyStatus.CONNECTED for state in states):
        return HealthStatus.HEALTHY
    return HealthStatus.UNHEALTHY


class HealthReport(BaseModel):
    """Point-in-time snapshot of a service's dependency connectivity.

    ``status`` is computed from ``dependencies``: the report is healthy only
    when every dependency is connected.  A serialised report may be parsed back
    as long as its ``status`` agrees with its ``dependencies``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2026-01-01T12:00:00.000Z",
                "service": "dictionary-service",
                "version": "1.0.0",
                "dependencies": {"mongodb": "connected", "redis": "connected"},
            }
        },
    )

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    service: str
    version: str
    dependencies: dict[str, DependencyStatus]

    @model_validator(mode="before")
    @classmethod
    def check_reported_status(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "status" not in data:
            return data
        data = dict(data)
        reported = data.pop("status")
        dependencies = data.get("dependencies")
        if isinstance(dependencies, dict):
            derived = overall_status(dependencies.values())
            if reported != derived:
                raise ValueError(
                    f"status {reported!r} does not match dependencies (expected {derived.value!r})"
                )
        return data

    @field_serializer("timestamp", when_used="json")
    def serialize_timestamp(self, value: datetime) -> str:
        return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> HealthStatus:
        return overall_status(self.dependencies.values())

    @property
    def is_healthy(self) -> bool:
        return self.status is HealthStatus.HEALTHY
