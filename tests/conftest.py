import pytest
from giveaway.settings import settings


@pytest.fixture(autouse=True)
def metrics_off():
    # Counters go to Redis; unit tests never need a live server
    original = settings.METRICS_ENABLED
    settings.METRICS_ENABLED = False
    yield
    settings.METRICS_ENABLED = original
