"""Test doubles for dependency probes and datastore clients."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

from vocab.schemas.health import DependencyStatus
from vocab.services.health import DependencyProbe


class StaticProbe(DependencyProbe):
    """Probe whose readiness is fixed, optionally after a delay or an error."""

    def __init__(
        self,
        ready: bool = True,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
        timeout: float = 1.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self.ready = ready
        self.error = error
        self.delay = delay
        self.calls = 0

    async def is_ready(self) -> bool:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.ready


class ContractBreakingProbe(DependencyProbe):
    """Probe whose ``check_status`` itself raises, bypassing the fail-safe."""

    async def is_ready(self) -> bool:  # pragma: no cover - never reached
        return True

    async def check_status(self) -> DependencyStatus:
        raise RuntimeError("probe exploded")


def make_mongo_client(*, ping_ok: bool = True, error: Exception | None = None) -> MagicMock:
    """MagicMock shaped like ``AsyncMongoClient`` for ``admin.command`` and ``close``."""
    client = MagicMock()
    if error is not None:
        client.admin.command = AsyncMock(side_effect=error)
    else:
        client.admin.command = AsyncMock(return_value={"ok": 1.0 if ping_ok else 0.0})
    client.close = AsyncMock()
    return client


def make_redis_client(*, ping_ok: bool = True, error: Exception | None = None) -> MagicMock:
    """MagicMock shaped like ``redis.asyncio.Redis`` for ``ping`` and ``aclose``."""
    client = MagicMock()
    if error is not None:
        client.ping = AsyncMock(side_effect=error)
    else:
        client.ping = AsyncMock(return_value=ping_ok)
    client.aclose = AsyncMock()
    return client
