"""Document-store and cache client factories.

Each service process owns exactly one MongoDB client and one Redis client.
Both are created by the application lifespan in :mod:`vocab.main`, shared
read-only by every request, and closed at shutdown.  Nothing here keeps a
module-level connection.
"""

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from redis.asyncio import Redis

from vocab.config import Settings

# Names under which each service reports its datastores on /health.
DATASTORE_NAMES = ("mongodb", "redis")


def create_mongo_client(settings: Settings) -> AsyncMongoClient:
    """Return a lazily-connecting ``AsyncMongoClient`` for ``settings.mongodb_uri``.

    ``serverSelectionTimeoutMS`` is tied to the health probe timeout so a dead
    server surfaces as an error instead of the driver's 30 second default wait.
    """
    timeout_ms = int(settings.health_probe_timeout_seconds * 1000)
    return AsyncMongoClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=timeout_ms,
        tz_aware=True,
    )


def get_database(client: AsyncMongoClient, settings: Settings) -> AsyncDatabase:
    """Return the database named in the URI, or the configured default."""
    return client.get_default_database(settings.mongodb_default_database)


def create_redis_client(settings: Settings) -> Redis:
    return Redis.from_url(
        settings.redis_url,
        socket_connect_timeout=settings.health_probe_timeout_seconds,
        decode_responses=True,
    )


async def verify_connections(mongo: AsyncMongoClient, redis: Redis) -> None:
    """Ping both stores once; any failure propagates to the caller."""
    await mongo.admin.command("ping")
    await redis.ping()


async def close_connections(mongo: AsyncMongoClient, redis: Redis) -> None:
    try:
        await redis.aclose()
    finally:
        await mongo.close()
