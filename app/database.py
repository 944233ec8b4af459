import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from pydantic import TypeAdapter, ValidationError

from app.config import get_settings
from app.models.product import Product

logger = logging.getLogger(__name__)

_products_adapter = TypeAdapter(List[Product])

# One writer lock per data file, shared by every store instance in the process
_writer_locks: dict[str, threading.Lock] = {}
_writer_locks_guard = threading.Lock()


class StorageError(Exception):
    """Exception raised when the products document cannot be used."""
    pass


class StorageReadError(StorageError):
    """Exception raised when the products document is unreadable or malformed."""
    pass


class StorageWriteError(StorageError):
    """Exception raised when the products document cannot be written."""
    pass


def _writer_lock(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _writer_locks_guard:
        return _writer_locks.setdefault(key, threading.Lock())


class JsonRecordStore:
    """
    Record store keeping the whole product collection in one JSON document.

    The document is a JSON array of product objects. Every save rewrites it
    completely through a temporary file that is atomically moved into place,
    so readers see either the previous or the new document, never a partial
    one.

    The last issued product id is kept in a small sidecar document next to
    the data file so ids are not reused after the highest one is deleted.
    """

    def __init__(self, path: Path, sequence_path: Optional[Path] = None):
        self.path = Path(path)
        if sequence_path is None:
            sequence_path = self.path.with_name(f"{self.path.stem}.seq.json")
        self.sequence_path = Path(sequence_path)
        self._lock = _writer_lock(self.path)

    def initialize(self) -> None:
        """
        Create the data directory and an empty products document if missing.

        Raises:
            StorageWriteError: If the document cannot be created
        """
        if self.path.exists():
            return
        try:
            self._write_json(self.path, [])
        except OSError as e:
            logger.error(f"Error creating products file {self.path}: {e}")
            raise StorageWriteError(f"Could not create {self.path}: {e}") from e
        logger.info(f"Created new products file at {self.path}")

    def load(self) -> list[Product]:
        """
        Read the full product collection.

        A missing document yields an empty collection and is created lazily.

        Returns:
            Products in stored order

        Raises:
            StorageReadError: If the document cannot be read or is malformed
        """
        if not self.path.exists():
            try:
                self.initialize()
            except StorageWriteError as e:
                logger.warning(f"Serving empty collection, products file not created: {e}")
            return []

        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading products file {self.path}: {e}")
            raise StorageReadError(f"Could not read {self.path}: {e}") from e

        if not raw.strip():
            return []

        try:
            return _products_adapter.validate_json(raw)
        except ValidationError as e:
            logger.error(f"Malformed products file {self.path}: {e.error_count()} error(s)")
            raise StorageReadError(f"Malformed products document {self.path}") from e

    def save(self, products: Iterable[Product]) -> None:
        """
        Overwrite the products document with the given collection.

        Raises:
            StorageWriteError: If the document cannot be written
        """
        payload = _products_adapter.dump_python(list(products), mode="json", by_alias=True)
        try:
            self._write_json(self.path, payload)
        except OSError as e:
            logger.error(f"Error writing products file {self.path}: {e}")
            raise StorageWriteError(f"Could not write {self.path}: {e}") from e

    def read_sequence(self) -> int:
        """Return the last issued product id, 0 when none was recorded."""
        try:
            data = json.loads(self.sequence_path.read_text(encoding="utf-8"))
            return int(data.get("lastId", 0))
        except FileNotFoundError:
            return 0
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable id sequence {self.sequence_path}: {e}")
            return 0

    def write_sequence(self, last_id: int) -> None:
        """
        Record the last issued product id.

        Raises:
            StorageWriteError: If the sequence document cannot be written
        """
        try:
            self._write_json(self.sequence_path, {"lastId": last_id})
        except OSError as e:
            logger.error(f"Error writing id sequence {self.sequence_path}: {e}")
            raise StorageWriteError(f"Could not write {self.sequence_path}: {e}") from e

    @contextmanager
    def transaction(self) -> Iterator["JsonRecordStore"]:
        """
        Hold the writer lock for a load, mutate and save cycle.

        Writers using the same data file run one at a time within the process.
        """
        with self._lock:
            yield self

    def _write_json(self, path: Path, payload) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


def get_store() -> JsonRecordStore:
    """
    Dependency to get the record store for the configured data file.
    """
    settings = get_settings()
    return JsonRecordStore(settings.data_path, settings.sequence_path)
