"""Repository for group records ({group_id: Group})."""
from typing import Dict, Optional

from ..models import Group
from .base import BaseRepository


class GroupRepository(BaseRepository[Group]):
    """Stores groups in memory with a name index.

    Group names live in their own namespace, independent of player names.
    Membership is held on each :class:`~roster.models.Group` as player ids
    only; this repository never touches player records.
    """

    def __init__(self) -> None:
        super().__init__()
        self._by_name: Dict[str, int] = {}

    def find_by_name(self, name: str) -> Optional[Group]:
        group_id = self._by_name.get(name)
        return self.data.get(group_id) if group_id is not None else None

    def name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        owner = self._by_name.get(name)
        return owner is not None and owner != exclude_id

    def rename(self, group: Group, new_name: str) -> None:
        self._by_name.pop(group.name, None)
        group.name = new_name
        self._by_name[new_name] = group.id

    def _on_insert(self, record: Group) -> None:
        self._by_name[record.name] = record.id

    def _on_remove(self, record: Group) -> None:
        self._by_name.pop(record.name, None)
