"""Repository for player records ({player_id: Player})."""
from typing import Dict, Optional

from ..models import Player
from .base import BaseRepository


class PlayerRepository(BaseRepository[Player]):
    """Stores players in memory with a case-sensitive name index.

    The index maps the exact player name to its id so uniqueness checks do
    not scan the whole collection.  :meth:`rename` must be used to change a
    stored player's name so the index stays consistent.
    """

    def __init__(self) -> None:
        super().__init__()
        self._by_name: Dict[str, int] = {}

    def find_by_name(self, name: str) -> Optional[Player]:
        player_id = self._by_name.get(name)
        return self.data.get(player_id) if player_id is not None else None

    def name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        """Return True if another player (not *exclude_id*) already uses *name*."""
        owner = self._by_name.get(name)
        return owner is not None and owner != exclude_id

    def rename(self, player: Player, new_name: str) -> None:
        self._by_name.pop(player.name, None)
        player.name = new_name
        self._by_name[new_name] = player.id

    def _on_insert(self, record: Player) -> None:
        self._by_name[record.name] = record.id

    def _on_remove(self, record: Player) -> None:
        self._by_name.pop(record.name, None)
