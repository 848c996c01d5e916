import pytest
from fastapi.testclient import TestClient

from app import app
from routes.catalog import get_output_cache, get_product_provider
from services.cache import cache
from services.catalog import StaticCatalog
from services.output_cache import OutputCache


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingProvider(StaticCatalog):
    def __init__(self):
        super().__init__()
        self.calls = 0

    def list_products(self):
        self.calls += 1
        return super().list_products()


@pytest.fixture(autouse=True)
def _reset_state():
    cache.clear()
    yield
    app.dependency_overrides.clear()
    cache.clear()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    return CountingProvider()


@pytest.fixture
def output_cache(clock):
    return OutputCache(expire_seconds=60, clock=clock)


@pytest.fixture
def client(provider, output_cache):
    app.dependency_overrides[get_product_provider] = lambda: provider
    app.dependency_overrides[get_output_cache] = lambda: output_cache
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
