"""Device-local key/value storage, persisted as a JSON file.

Holds what a browser would keep in ``localStorage``: the anonymous cart
(``guest_cart``) and the signed-in identity (``auth``).
"""

import json
import os
from pathlib import Path

from shared.logging import get_logger

logger = get_logger(__name__)

GUEST_CART_KEY = "guest_cart"
AUTH_KEY = "auth"


def default_storage_path() -> Path:
    home = os.environ.get("STOREFRONT_HOME") or Path.home() / ".storefront"
    return Path(home) / "storage.json"


class LocalStore:
    def __init__(self, path=None):
        self.path = Path(path) if path else default_storage_path()

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning("local_store_corrupt", path=str(self.path))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp.replace(self.path)

    def get(self, key, default=None):
        return self._read().get(key, default)

    def set(self, key, value) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def __contains__(self, key):
        return key in self._read()
