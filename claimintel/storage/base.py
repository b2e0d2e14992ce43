# claimintel/storage/base.py
"""Document store interface backed by JSON collections on disk."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional, List, Dict, Any, Iterable
from pathlib import Path
import json
import os
import tempfile
from datetime import datetime, date

from claimintel.core.exceptions import PersistenceError
from claimintel.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for datetime and date objects."""

    def default(self, obj):
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, date):
            return obj.isoformat()
        return super().default(obj)


def to_timestamp(value: Any) -> Any:
    """Convert a stored ISO-8601 string into a datetime."""
    if isinstance(value, str):
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    return value


def to_iso(value: Any) -> Any:
    """Convert a datetime into the stored ISO-8601 form."""
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class BaseStore(ABC, Generic[T]):
    """
    One collection of documents keyed by id.

    The whole collection is kept in a JSON file and cached in memory after
    the first read. Timestamp fields are stored as ISO-8601 strings and
    handed back as datetimes.

    A file that cannot be parsed raises PersistenceError rather than being
    treated as empty. Records that fail to deserialize are kept verbatim and
    written back on every flush. Writes go to a temp file that replaces the
    collection file.
    """

    timestamp_fields: Iterable[str] = ()

    def __init__(self, data_dir: str, collection: str):
        self.collection = collection
        self.data_dir = Path(data_dir)
        self.filepath = self.data_dir / f"{collection}.json"
        self._ensure_directory()
        self._cache: Dict[str, T] = {}
        self._unreadable: Dict[str, Any] = {}
        self._loaded = False

    def _ensure_directory(self):
        """Ensure data directory exists."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _load_data(self) -> Dict[str, Any]:
        """Load data from JSON file."""
        if not self.filepath.exists():
            return {}
        try:
            with open(self.filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load {self.filepath}: {e}")
            raise PersistenceError(self.collection, f"unreadable collection file: {e}")
        if not isinstance(data, dict):
            raise PersistenceError(self.collection, "collection file is not a JSON object")
        return data

    def _save_data(self, data: Dict[str, Any]):
        """Save data to JSON file, replacing the old one in a single step."""
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=f".{self.collection}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, cls=JSONEncoder)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.filepath)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save {self.filepath}: {e}")
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise PersistenceError(self.collection, str(e))

    def _to_document(self, entity: T) -> Dict[str, Any]:
        document = self._serialize(entity)
        for ts_field in self.timestamp_fields:
            if ts_field in document:
                document[ts_field] = to_iso(document[ts_field])
        return document

    def _from_document(self, document: Dict[str, Any]) -> T:
        data = dict(document)
        for ts_field in self.timestamp_fields:
            if ts_field in data:
                data[ts_field] = to_timestamp(data[ts_field])
        return self._deserialize(data)

    @abstractmethod
    def _serialize(self, entity: T) -> Dict[str, Any]:
        """Serialize entity to dict."""
        pass

    @abstractmethod
    def _deserialize(self, data: Dict[str, Any]) -> T:
        """Deserialize dict to entity."""
        pass

    @abstractmethod
    def _get_id(self, entity: T) -> str:
        """Get entity ID."""
        pass

    def _load_all(self) -> Dict[str, T]:
        """Load and deserialize all entities."""
        if not self._loaded:
            data = self._load_data()
            for key, value in data.items():
                try:
                    self._cache[key] = self._from_document(value)
                except (TypeError, ValueError) as e:
                    logger.error(f"Failed to deserialize {key}, keeping it as stored: {e}")
                    self._unreadable[key] = value
            self._loaded = True
        return self._cache

    def _flush(self):
        data = {k: v for k, v in self._unreadable.items() if k not in self._cache}
        data.update((k, self._to_document(v)) for k, v in self._cache.items())
        self._save_data(data)

    def save(self, entity: T) -> T:
        """Insert or overwrite an entity."""
        self._load_all()
        entity_id = self._get_id(entity)
        previous = self._cache.get(entity_id)
        self._cache[entity_id] = entity
        try:
            self._flush()
        except PersistenceError:
            if previous is None:
                self._cache.pop(entity_id, None)
            else:
                self._cache[entity_id] = previous
            raise

        logger.debug(f"Saved entity: {entity_id}", collection=self.collection)
        return entity

    def get(self, entity_id: str) -> Optional[T]:
        """Get entity by ID."""
        self._load_all()
        return self._cache.get(entity_id)

    def get_all(self) -> List[T]:
        """Get all entities."""
        self._load_all()
        return list(self._cache.values())

    def delete_many(self, entity_ids: Iterable[str]) -> int:
        """Delete several entities with a single write."""
        self._load_all()
        removed = 0
        for entity_id in entity_ids:
            if self._cache.pop(entity_id, None) is not None:
                removed += 1
            elif self._unreadable.pop(entity_id, None) is not None:
                removed += 1
        if removed:
            self._flush()
        return removed

    def clear(self):
        """Remove every entity in the collection."""
        self._load_all()
        self._cache.clear()
        self._unreadable.clear()
        self._flush()
        logger.info(f"Cleared collection: {self.collection}")

    def list_ordered(
        self,
        order_by: str,
        descending: bool = True,
        limit: Optional[int] = None
    ) -> List[T]:
        """Return entities ordered by one attribute, ties broken by insertion order."""
        ranked = sorted(
            enumerate(self.get_all()),
            key=lambda pair: (getattr(pair[1], order_by), pair[0]),
            reverse=descending
        )
        results = [entity for _, entity in ranked]
        if limit is not None:
            results = results[:limit]
        return results
