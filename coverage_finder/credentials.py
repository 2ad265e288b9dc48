"""
Scraping API key persistence.

The key lives in a key/value storage backend (the browser's localStorage
in the app, a dict in tests). The Firecrawl client handle is built on
first use and dropped when the key is cleared.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from config import CREDENTIAL_STORAGE_KEY
from coverage_finder.errors import CredentialError
from coverage_finder.scrape_client import FirecrawlClient

logger = logging.getLogger(__name__)


class MemoryStorage:
    """Dict-backed key/value storage with the browser storage interface."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class CredentialStore:
    """Stores the API key and owns the lazily created client handle."""

    def __init__(
        self,
        storage,
        client_factory: Callable[[str], FirecrawlClient] = FirecrawlClient,
        storage_key: str = CREDENTIAL_STORAGE_KEY,
    ):
        """
        Args:
            storage: Object with get_item/set_item/remove_item. May be replaced
                between page runs.
            client_factory: Builds a scrape client from an API key.
            storage_key: Key the API key is stored under.
        """
        self.storage = storage
        self._client_factory = client_factory
        self._storage_key = storage_key
        self._client: Optional[FirecrawlClient] = None
        self._client_key: Optional[str] = None

    def save(self, api_key: str) -> None:
        api_key = api_key.strip()
        if not api_key:
            raise CredentialError("API key is empty")
        self.storage.set_item(self._storage_key, api_key)
        self._client = self._client_factory(api_key)
        self._client_key = api_key
        logger.info("API key saved")

    def get(self) -> Optional[str]:
        """Stored API key, or None. Has no side effects."""
        return self.storage.get_item(self._storage_key) or None

    def clear(self) -> None:
        self.storage.remove_item(self._storage_key)
        self._client = None
        self._client_key = None
        logger.info("API key cleared")

    def client(self) -> FirecrawlClient:
        """
        Client for the stored key, created on first use and rebuilt when
        the stored key changes.

        Raises:
            CredentialError: If no key is stored.
        """
        api_key = self.get()
        if not api_key:
            raise CredentialError("API key not found")
        if self._client is None or self._client_key != api_key:
            self._client = self._client_factory(api_key)
            self._client_key = api_key
        return self._client

    def new_client(self, api_key: str) -> FirecrawlClient:
        """Temporary client for a key that is not stored."""
        return self._client_factory(api_key)
