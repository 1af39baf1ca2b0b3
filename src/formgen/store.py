from __future__ import annotations

import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

import orjson
from filelock import FileLock

from formgen.errors import StorageError
from formgen.utils import dumps_json, loads_json

logger = logging.getLogger(__name__)

ResponseRecord = Mapping[str, Any]


class ResponseStore:
    """Append-only log of responses kept as a single JSON array on disk.

    The in-memory list mirrors the file as of the last load or append. Every
    append re-reads the file under the lock, writes the whole array to a
    temporary file and renames it over the output path, so readers only ever
    see a complete document.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._records: list[ResponseRecord] = []
        self._mutex = threading.Lock()
        self._file_lock = FileLock(f"{self._path}.lock")

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        with self._mutex:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with self._file_lock:
                    yield
            except OSError as exc:
                raise StorageError(f"cannot lock {self._path}: {exc}") from exc

    def load(self) -> None:
        with self._mutex:
            self._records = self._read()
        logger.info("Loaded %d responses from %s", len(self._records), self._path)

    def _read(self) -> list[ResponseRecord]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"cannot read {self._path}: {exc}") from exc

        if not raw.strip():
            return []
        try:
            data = loads_json(raw)
        except orjson.JSONDecodeError as exc:
            raise StorageError(f"{self._path} is not valid JSON: {exc}") from exc
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise StorageError(f"{self._path} must contain a JSON array of objects")
        return [MappingProxyType(item) for item in data]

    def append(self, record: Mapping[str, Any]) -> None:
        """Persist ``record``; returns only once the file has been replaced.

        The file is read again under the lock so records written by another
        store on the same path are kept.
        """
        frozen = MappingProxyType(dict(record))
        with self._exclusive():
            records = [*self._read(), frozen]
            self._write(records)
            self._records = records

    def _write(self, records: list[ResponseRecord]) -> None:
        payload = dumps_json([dict(item) for item in records], pretty=True)
        directory = self._path.parent
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise StorageError(f"cannot write {self._path}: {exc}") from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_name)

    def records(self) -> list[dict[str, Any]]:
        with self._mutex:
            return [dict(item) for item in self._records]

    def __len__(self) -> int:
        with self._mutex:
            return len(self._records)
