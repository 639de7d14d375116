from vocab.services.health import (
    DependencyProbe,
    HealthAggregator,
    MongoProbe,
    RedisProbe,
)

__all__ = [
    # health
    "DependencyProbe",
    "HealthAggregator",
    "MongoProbe",
    "RedisProbe",
]
