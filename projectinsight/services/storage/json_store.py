# projectinsight/services/storage/json_store.py
"""
JSON document store: one ``<key>.json`` file per document.

The store is a faithful key-value layer.  It performs no schema
validation and never patches a document in place; ``put`` always
replaces the whole file.  Blocking file I/O runs in a worker thread so
the event loop keeps serving requests while a document is written.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from projectinsight.errors import NotFoundError, StorageError
from projectinsight.utils.logger import get_logger


logger = get_logger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def is_valid_key(key: object) -> bool:
    return isinstance(key, str) and bool(_KEY_RE.match(key))


class JsonDocumentStore:
    """Persist and load JSON documents as files under ``base_dir``."""

    def __init__(self, base_dir: Path | str) -> None:
        self.base_dir = Path(base_dir)

    def _path_for(self, key: str) -> Path:
        if not is_valid_key(key):
            raise StorageError(f"Invalid document key: {key!r}")
        return self.base_dir / f"{key}.json"

    # ---------------- sync internals (run in a thread) ----------------
    def _write(self, path: Path, document: Any) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        # temp file + replace: readers never observe a half-written document
        fd, tmp = tempfile.mkstemp(dir=self.base_dir, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(document, handle, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp)
            raise

    def _read(self, path: Path) -> Any:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def _list(self) -> List[str]:
        if not self.base_dir.exists():
            return []
        return sorted(
            p.stem
            for p in self.base_dir.glob("*.json")
            if not p.name.startswith(".") and _KEY_RE.match(p.stem)
        )

    # ---------------- public async API ----------------
    async def put(self, key: str, document: Any) -> None:
        """Create or overwrite the document at ``key``."""
        path = self._path_for(key)
        try:
            await asyncio.to_thread(self._write, path, document)
        except (OSError, TypeError, ValueError) as e:
            logger.error("[store] write failed | key=%s | err=%s", key, e)
            raise StorageError(f"Failed to save document {key}: {e}") from e

    async def get(self, key: str) -> Any:
        """Return the document at ``key``; ``NotFoundError`` when absent."""
        if not is_valid_key(key):
            raise NotFoundError(f"Document not found: {key}")
        path = self._path_for(key)
        try:
            return await asyncio.to_thread(self._read, path)
        except FileNotFoundError:
            raise NotFoundError(f"Document not found: {key}") from None
        except (OSError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.error("[store] read failed | key=%s | err=%s", key, e)
            raise StorageError(f"Failed to read document {key}: {e}") from e

    async def list_keys(self) -> List[str]:
        try:
            return await asyncio.to_thread(self._list)
        except OSError as e:
            logger.error("[store] listing failed | dir=%s | err=%s", self.base_dir, e)
            raise StorageError(f"Failed to list documents: {e}") from e

    def describe(self) -> Dict[str, Any]:
        return {"backend": "json-files", "base_dir": str(self.base_dir)}
