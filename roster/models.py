"""Entity records held by the roster repositories."""
from typing import Dict, Iterable, List, Optional


class Player:
    """A guild member with a unique name and one class from the catalog."""

    def __init__(self, player_id: int, name: str, player_class: str):
        self.id = player_id
        self.name = name
        self.player_class = player_class

    def to_dict(self) -> Dict:
        """Serialise for API responses (``class`` is the wire name)."""
        return {'id': self.id, 'name': self.name, 'class': self.player_class}

    def __repr__(self) -> str:
        return f"Player(id={self.id!r}, name={self.name!r}, class={self.player_class!r})"


class Group:
    """A named group of players with an optional leader.

    Members are stored as player ids only.  ``_members`` is an
    insertion-ordered dict used as an ordered set: membership checks are
    O(1) and iteration keeps the order players joined in.
    """

    def __init__(self, group_id: int, name: str,
                 leader_id: Optional[int] = None,
                 members: Optional[Iterable[int]] = None):
        self.id = group_id
        self.name = name
        self.leader_id = leader_id
        self._members: Dict[int, None] = dict.fromkeys(members or ())

    @property
    def members(self) -> List[int]:
        return list(self._members)

    def has_member(self, player_id: int) -> bool:
        return player_id in self._members

    def add_member(self, player_id: int) -> bool:
        """Append *player_id*.  Returns ``False`` if it was already a member."""
        if player_id in self._members:
            return False
        self._members[player_id] = None
        return True

    def discard_member(self, player_id: int) -> bool:
        """Remove *player_id*, clearing the leader slot if it held it.

        Returns:
            ``True`` if the player was a member.
        """
        removed = player_id in self._members
        if removed:
            del self._members[player_id]
        if self.leader_id == player_id:
            self.leader_id = None
        return removed

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'leaderId': self.leader_id,
            'members': self.members,
        }

    def __repr__(self) -> str:
        return (f"Group(id={self.id!r}, name={self.name!r}, "
                f"leader_id={self.leader_id!r}, members={self.members!r})")


class GroupView:
    """Read-only projection of a group with member and leader ids resolved
    to :class:`Player` records.  Never stored.
    """

    def __init__(self, group: Group, members: List[Player],
                 leader: Optional[Player]):
        self.id = group.id
        self.name = group.name
        self.leader_id = group.leader_id
        self.members = members
        self.leader = leader

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'leaderId': self.leader_id,
            'members': [p.to_dict() for p in self.members],
            'leader': self.leader.to_dict() if self.leader else None,
        }


class PlayerCandidate:
    """A bulk-import row that passed the shape check (both fields present)."""

    def __init__(self, row_number: int, name: str, player_class: str):
        self.row_number = row_number
        self.name = name
        self.player_class = player_class


class ImportReport:
    """Outcome of one bulk import: players added plus per-row error strings."""

    def __init__(self) -> None:
        self.added_players: List[Player] = []
        self.errors: List[str] = []

    @property
    def added_count(self) -> int:
        return len(self.added_players)

    def to_dict(self) -> Dict:
        return {
            'message': f"Successfully processed {self.added_count} players.",
            'added_players': [p.to_dict() for p in self.added_players],
            'errors': list(self.errors),
            'added_count': self.added_count,
        }
