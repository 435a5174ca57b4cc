from typing import Any, Dict, Optional

import flet as ft

from sales_portal.config import SESSION_STORAGE_KEY
from sales_portal.core.exceptions import SessionDataError



class MemorySessionStorage:
    """Keeps the session record in process memory. Used for tests and headless runs."""
    def __init__(self, initial: Optional[Any] = None):
        self._data = initial

    def save(self, data: Dict[str, Any]):
        self._data = dict(data)

    def load(self) -> Optional[Any]:
        return self._data

    def clear(self):
        self._data = None


class ClientSessionStorage:
    """
    Persists the session record in Flet's client storage so it survives an
    application restart. Flet serializes the mapping to JSON itself.
    """
    def __init__(self, page: ft.Page, key: str = SESSION_STORAGE_KEY):
        self.page = page
        self.key = key

    def save(self, data: Dict[str, Any]):
        self.page.client_storage.set(self.key, data)

    def load(self) -> Optional[Any]:
        """
        Raises:
            SessionDataError: If a stored value exists but cannot be decoded.
        """
        try:
            return self.page.client_storage.get(self.key)
        except ValueError as e:
            raise SessionDataError(f"Stored session under '{self.key}' could not be decoded: {e}")

    def clear(self):
        if self.page.client_storage.contains_key(self.key):
            self.page.client_storage.remove(self.key)
