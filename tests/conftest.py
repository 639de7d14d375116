"""Shared pytest fixtures for the vocabulary services test suite.

No test talks to a real MongoDB or Redis: the client factories used by the
application lifespan are patched to return mocks from :mod:`fakes`.

Fixture scopes
--------------
* ``settings``      (function): explicit ``Settings`` with no ``.env`` lookup.
* ``mongo_client``  (function): healthy ``AsyncMongoClient`` double.
* ``redis_client``  (function): healthy ``redis.asyncio.Redis`` double.
* ``app``           (function): ``create_app(settings)`` with both factories patched.
* ``client``        (function): ``TestClient`` with the lifespan running.
"""

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest
from fakes import make_mongo_client, make_redis_client
from fastapi import FastAPI
from fastapi.testclient import TestClient

from vocab.config import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        service_name="test-service",
        version="9.9.9",
        health_probe_timeout_seconds=0.5,
    )


@pytest.fixture
def mongo_client() -> MagicMock:
    return make_mongo_client()


@pytest.fixture
def redis_client() -> MagicMock:
    return make_redis_client()


@pytest.fixture
def app(settings: Settings, mongo_client: MagicMock, redis_client: MagicMock) -> Generator[FastAPI]:
    """Full application with the datastore client factories patched."""
    from vocab.main import create_app

    with (
        patch("vocab.main.create_mongo_client", return_value=mongo_client),
        patch("vocab.main.create_redis_client", return_value=redis_client),
    ):
        yield create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient]:
    """``TestClient`` used as a context manager so startup and shutdown run."""
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
