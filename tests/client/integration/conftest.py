import pytest


@pytest.fixture(autouse=True)
def _ctx(both_domains):
    yield
