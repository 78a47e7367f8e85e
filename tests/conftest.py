import random

import pytest
from fastapi.testclient import TestClient

from elktest.config import Settings
from elktest.handler import RequestHandler
from main import create_app

SEED = 1234
FIXED_NOW = 1_700_000_000_000


async def instant_sleep(seconds):
    return None


@pytest.fixture
def handler():
    return RequestHandler(rng=random.Random(SEED), sleep=instant_sleep, clock=lambda: FIXED_NOW)


@pytest.fixture
def app(handler):
    return create_app(Settings(), handler=handler)


@pytest.fixture
def client(app):
    # simulate-error must come back as a 500 response rather than re-raise
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
