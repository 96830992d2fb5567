"""Repository base class used by all concrete repositories."""
import logging
from typing import Dict, Generic, List, Optional, TypeVar

T = TypeVar('T')


class BaseRepository(Generic[T]):
    """Provides in-memory storage for one entity collection.

    Records live in ``self.data``, an insertion-ordered ``{id: record}``
    dict, so listing returns records in creation order.  Ids come from a
    monotonically increasing counter and are never handed out twice, even
    after the record that held one is deleted.

    Sub-classes add the secondary indexes (e.g. by name) they need and keep
    them in step from :meth:`_on_insert` / :meth:`_on_remove`.
    """

    def __init__(self) -> None:
        self.data: Dict[int, T] = {}
        self._next_id = 1
        self._log = logging.getLogger(f'guild.repository.{type(self).__name__}')

    def next_id(self) -> int:
        """Reserve and return the next unused id."""
        allocated = self._next_id
        self._next_id += 1
        return allocated

    def find(self, record_id: int) -> Optional[T]:
        """Return the record stored under *record_id*, or ``None``."""
        return self.data.get(record_id)

    def all(self) -> List[T]:
        return list(self.data.values())

    def insert(self, record_id: int, record: T) -> None:
        self.data[record_id] = record
        self._on_insert(record)
        self._log.debug("Inserted %r", record)

    def delete(self, record_id: int) -> Optional[T]:
        """Remove and return the record, or ``None`` if it did not exist."""
        record = self.data.pop(record_id, None)
        if record is not None:
            self._on_remove(record)
            self._log.debug("Deleted %r", record)
        return record

    def __len__(self) -> int:
        return len(self.data)

    def _on_insert(self, record: T) -> None:
        pass

    def _on_remove(self, record: T) -> None:
        pass
