import pytest

from tests.fakes import FakeAthenaClient


@pytest.fixture
def make_client():
    return FakeAthenaClient


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(seconds):
        sleeps.append(seconds)

    return _sleep


@pytest.fixture
def fake_sync_sleep(sleeps):
    return sleeps.append
