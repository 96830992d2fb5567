"""Cross-collection rules between players and groups."""
import logging
import threading
from typing import List, Optional

from ..models import Group, GroupView
from ..repositories.group_repository import GroupRepository
from ..repositories.player_repository import PlayerRepository


class IntegrityService:
    """Keeps group references to players consistent and builds the
    denormalized group views served to clients.

    Both repositories are shared with the player and group services, and
    the same lock is used by all three, so a sweep triggered by a player
    deletion is never interleaved with another mutation.
    """

    def __init__(self, players: PlayerRepository, groups: GroupRepository,
                 lock: Optional[threading.RLock] = None) -> None:
        self._players = players
        self._groups = groups
        self._lock = lock or threading.RLock()
        self._log = logging.getLogger('guild.integrity')

    def on_player_removed(self, player_id: int) -> int:
        """Drop *player_id* from every group's members and leader slot.

        Returns:
            Number of groups that referenced the player.
        """
        touched = 0
        with self._lock:
            for group in self._groups.all():
                was_leader = group.leader_id == player_id
                if group.discard_member(player_id) or was_leader:
                    touched += 1
        if touched:
            self._log.info("Purged player %d from %d group(s)", player_id, touched)
        return touched

    def resolve_group_view(self, group: Group) -> GroupView:
        """Resolve member and leader ids of *group* to player records.

        Ids that no longer resolve are skipped; an unresolved leader is
        rendered as ``None``.
        """
        with self._lock:
            members = []
            for member_id in group.members:
                player = self._players.find(member_id)
                if player is None:
                    self._log.warning("Group %d references missing player %d",
                                      group.id, member_id)
                    continue
                members.append(player)
            leader = None
            if group.leader_id is not None:
                leader = self._players.find(group.leader_id)
            return GroupView(group, members, leader)

    def list_group_views(self) -> List[GroupView]:
        """Return a resolved view of every group, in creation order."""
        with self._lock:
            return [self.resolve_group_view(g) for g in self._groups.all()]
