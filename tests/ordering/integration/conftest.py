import pytest


@pytest.fixture(autouse=True)
def _ctx(both_domains):
    """Requests cross both contexts: tokens resolve in identity, orders live in ordering."""
    yield
