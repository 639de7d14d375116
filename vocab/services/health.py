"""Dependency probes and the health aggregator.

Every service answers "can I usefully serve traffic?" the same way: one
:class:`DependencyProbe` per external dependency, combined by a
:class:`HealthAggregator` into a :class:`~vocab.schemas.health.HealthReport`.

Probes only read the shared client handles they are given; they never open,
close, or reconfigure them.  A probe that cannot determine its state (error or
timeout) reports ``disconnected`` rather than raising.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping

from pymongo import AsyncMongoClient
from redis.asyncio import Redis

from vocab.schemas.health import DependencyStatus, HealthReport

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT_SECONDS = 2.0


class DependencyProbe(ABC):
    """Reports the connectivity of one external dependency.

    Subclasses implement :meth:`is_ready`; :meth:`check_status` bounds it with
    ``timeout`` seconds and maps every failure to ``disconnected``.
    """

    def __init__(self, *, timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS) -> None:
        if timeout <= 0:
            raise ValueError("probe timeout must be positive")
        self.timeout = timeout

    @abstractmethod
    async def is_ready(self) -> bool:
        """Return ``True`` when the dependency can serve requests."""

    async def check_status(self) -> DependencyStatus:
        try:
            async with asyncio.timeout(self.timeout):
                ready = await self.is_ready()
        except TimeoutError:
            logger.warning("%s timed out after %.2fs", type(self).__name__, self.timeout)
            return DependencyStatus.DISCONNECTED
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s failed: %s: %s", type(self).__name__, type(exc).__name__, exc)
            return DependencyStatus.DISCONNECTED
        return DependencyStatus.CONNECTED if ready else DependencyStatus.DISCONNECTED


class MongoProbe(DependencyProbe):
    """Ready when the server answers an ``admin`` ``ping`` command."""

    def __init__(
        self, client: AsyncMongoClient, *, timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS
    ) -> None:
        super().__init__(timeout=timeout)
        self._client = client

    async def is_ready(self) -> bool:
        reply = await self._client.admin.command("ping")
        return bool(reply.get("ok"))


class RedisProbe(DependencyProbe):
    """Ready when the server answers ``PING``."""

    def __init__(self, client: Redis, *, timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS) -> None:
        super().__init__(timeout=timeout)
        self._client = client

    async def is_ready(self) -> bool:
        return bool(await self._client.ping())


class HealthAggregator:
    """Combine a named set of probes into a :class:`HealthReport`.

    ``service`` and ``version`` are fixed at construction for the lifetime of
    the process.  The probe mapping is open-ended; one or more named
    dependencies may be registered.
    """

    def __init__(
        self,
        probes: Mapping[str, DependencyProbe],
        *,
        service: str,
        version: str,
    ) -> None:
        if not probes:
            raise ValueError("HealthAggregator needs at least one probe")
        self._probes = dict(probes)
        self.service = service
        self.version = version

    @property
    def dependency_names(self) -> list[str]:
        return list(self._probes)

    async def aggregate(self) -> HealthReport:
        """Evaluate every probe concurrently and return a fresh report.

        A probe that raises despite its contract is mapped to ``disconnected``
        for its own entry only; the remaining probes are still reported.
        """
        names = list(self._probes)
        statuses = await asyncio.gather(*(self._evaluate(name) for name in names))
        return HealthReport(
            service=self.service,
            version=self.version,
            dependencies=dict(zip(names, statuses, strict=True)),
        )

    def fallback_report(self) -> HealthReport:
        """Return an ``unhealthy`` report with every dependency ``disconnected``."""
        return HealthReport(
            service=self.service,
            version=self.version,
            dependencies={name: DependencyStatus.DISCONNECTED for name in self._probes},
        )

    async def _evaluate(self, name: str) -> DependencyStatus:
        try:
            return DependencyStatus(await self._probes[name].check_status())
        except Exception:  # noqa: BLE001
            logger.exception("Health probe %r raised; reporting it as disconnected", name)
            return DependencyStatus.DISCONNECTED
