from __future__ import annotations

import logging
import os
from typing import Protocol

from ..core.exceptions import NotFoundError, RenderingOrStorageError

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store bytes and return the locator recorded on the invoice."""

        raise NotImplementedError

    def get(self, locator: str) -> bytes:
        raise NotImplementedError


class LocalBlobStore:
    """Keeps documents under <root_dir>/invoices; locators are <base_url>/invoices/<file>."""

    def __init__(self, root_dir: str, base_url: str = "/files"):
        self._root_dir = os.path.abspath(root_dir)
        self._base_url = base_url.rstrip("/")

    def _path_for(self, key: str) -> str:
        name = os.path.basename(key)
        if not name or name != key:
            raise RenderingOrStorageError(f"Invalid storage key: {key!r}")
        return os.path.join(self._root_dir, "invoices", name)

    def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path_for(key)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "wb") as f:
                f.write(data)
        except OSError as exc:
            raise RenderingOrStorageError(f"Could not store {key}: {exc}") from exc

        logger.info("Stored %s (%s, %d bytes)", key, content_type, len(data))
        return f"{self._base_url}/invoices/{key}"

    def get(self, locator: str) -> bytes:
        key = locator.rsplit("/", 1)[-1]
        path = self._path_for(key)
        if not os.path.exists(path):
            raise NotFoundError(f"Document {key} not found")
        with open(path, "rb") as f:
            return f.read()
