"""
Record store

File-backed collections. Each collection is one JSON file inside the
data directory and is always rewritten as a whole:

- products    -> products.json  (array of products)
- site-config -> site.json      (single object)
- orders      -> orders.json    (array of orders)

Writes go to a temporary file in the same directory which is then
renamed over the live file, so readers only ever see a complete file.
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from fastapi.concurrency import run_in_threadpool

from errors import StorageError

logger = logging.getLogger(__name__)

PRODUCTS = "products"
SITE_CONFIG = "site-config"
ORDERS = "orders"

COLLECTION_FILES: Dict[str, str] = {
    PRODUCTS: "products.json",
    SITE_CONFIG: "site.json",
    ORDERS: "orders.json",
}

COLLECTION_TYPES: Dict[str, type] = {
    PRODUCTS: list,
    SITE_CONFIG: dict,
    ORDERS: list,
}


class RecordStore:
    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self._locks: Dict[str, asyncio.Lock] = {}

    def path_for(self, name: str) -> Path:
        try:
            return self.data_dir / COLLECTION_FILES[name]
        except KeyError:
            raise StorageError(f"Unknown collection: {name}")

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def lock(self, name: str) -> asyncio.Lock:
        """Lock serializing read-modify-write cycles on one collection."""
        self.path_for(name)
        if name not in self._locks:
            self._locks[name] = asyncio.Lock()
        return self._locks[name]

    async def load(self, name: str) -> Any:
        """Read the current on-disk content of a collection. Never cached."""
        path = self.path_for(name)
        return await run_in_threadpool(self._read, name, path)

    async def save(self, name: str, records: Any) -> None:
        """Replace the whole collection file with `records`."""
        path = self.path_for(name)
        await run_in_threadpool(self._write, name, path, records)

    async def ensure(self, name: str, default: Any) -> bool:
        """Create the collection with `default` if its file is missing."""
        if self.exists(name):
            return False
        await self.save(name, default)
        logger.info("Created collection %s at %s", name, self.path_for(name))
        return True

    def _read(self, name: str, path: Path) -> Any:
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            raise StorageError(f"Collection {name} is missing ({path})")
        except (OSError, ValueError) as exc:
            raise StorageError(f"Collection {name} is unreadable: {exc}")
        if not isinstance(data, COLLECTION_TYPES[name]):
            raise StorageError(f"Collection {name} has an unexpected shape")
        return data

    def _write(self, name: str, path: Path, records: Any) -> None:
        if not isinstance(records, COLLECTION_TYPES[name]):
            raise StorageError(f"Collection {name} has an unexpected shape")
        try:
            payload = json.dumps(records, ensure_ascii=False, indent=2, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Collection {name} is not serializable: {exc}")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
            )
        except OSError as exc:
            raise StorageError(f"Collection {name} could not be written: {exc}")

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except OSError as exc:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StorageError(f"Collection {name} could not be written: {exc}")
