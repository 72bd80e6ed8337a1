from unittest.mock import MagicMock

import pytest
from client.api import StorefrontAPI
from client.storage import LocalStore


@pytest.fixture()
def store(tmp_path):
    return LocalStore(tmp_path / "storage.json")


@pytest.fixture()
def api():
    mock = MagicMock(spec=StorefrontAPI)
    mock.token = None
    mock.login.return_value = {
        "token": "tok-123",
        "user": {"id": "user-1", "name": "Jane Doe", "email": "jane@example.com", "role": "customer"},
    }
    mock.get_cart.return_value = {"items": [], "item_count": 0, "subtotal": 0.0}
    return mock
