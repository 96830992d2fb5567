"""Business logic for groups and their membership."""
import logging
import threading
from typing import List, Optional

from ..errors import (
    AlreadyMemberError, DuplicateNameError, LeaderNotFoundError,
    LeaderNotMemberError, MissingFieldError, NoUpdateProvidedError,
    NotFoundError, NotMemberError,
)
from ..models import Group
from ..repositories.group_repository import GroupRepository
from ..repositories.player_repository import PlayerRepository
from .player_service import clean_text


class _Unset:
    """Marker for "field not supplied", distinct from an explicit ``None``."""

    def __repr__(self) -> str:
        return 'UNSET'


UNSET = _Unset()


class GroupService:
    """Creates and edits groups, delegating storage to
    :class:`~roster.repositories.group_repository.GroupRepository`.

    The player repository is only read, to check that leader and member ids
    resolve.  Groups hold player ids, never player records.

    Leader rules differ on purpose between the two write paths:

    * :meth:`create` accepts any existing player as leader without making
      them a member.
    * :meth:`update` only accepts a leader who is already a member.
    """

    def __init__(self, repository: GroupRepository,
                 players: PlayerRepository,
                 lock: Optional[threading.RLock] = None) -> None:
        self._repo = repository
        self._players = players
        self._lock = lock or threading.RLock()
        self._log = logging.getLogger('guild.groups')

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create(self, name: Optional[str], leader_id: Optional[int] = None) -> Group:
        """Create an empty group, optionally with a leader.

        Raises:
            MissingFieldError: *name* is empty.
            DuplicateNameError: a group named *name* exists.
            LeaderNotFoundError: *leader_id* is not an existing player.
        """
        name = clean_text(name)
        with self._lock:
            if not name:
                raise MissingFieldError('Group name is required')
            if self._repo.name_taken(name):
                raise DuplicateNameError('Group with this name already exists')
            if leader_id is not None:
                leader_id = self._require_leader(leader_id)
            group = Group(self._repo.next_id(), name, leader_id=leader_id)
            self._repo.insert(group.id, group)
        self._log.info("Created group %d '%s' (leader=%s)", group.id, name, leader_id)
        return group

    def update(self, group_id: int, name: Optional[str] = None,
               leader_id=UNSET) -> Group:
        """Rename a group and/or change its leader.

        Pass ``leader_id=None`` to clear the leader; leave it as
        :data:`UNSET` to keep the current one.

        Raises:
            NotFoundError: no group has *group_id*.
            NoUpdateProvidedError: nothing to change was supplied.
            DuplicateNameError: *name* belongs to another group.
            LeaderNotFoundError: *leader_id* is not an existing player.
            LeaderNotMemberError: *leader_id* is not a member of the group.
        """
        name = clean_text(name)
        with self._lock:
            group = self._require(group_id)
            if not name and leader_id is UNSET:
                raise NoUpdateProvidedError('No update data provided')
            if name and self._repo.name_taken(name, exclude_id=group_id):
                raise DuplicateNameError('Group with this name already exists')
            if leader_id is not UNSET and leader_id is not None:
                leader_id = self._require_leader(leader_id)
                if not group.has_member(leader_id):
                    raise LeaderNotMemberError(
                        'Assigned leader must be a member of this group')
            if name:
                self._repo.rename(group, name)
            if leader_id is not UNSET:
                group.leader_id = leader_id
        self._log.info("Updated group %d -> %r", group_id, group)
        return group

    def delete(self, group_id: int) -> Group:
        """Delete a group.  Players are unaffected.

        Raises:
            NotFoundError: no group has *group_id*.
        """
        with self._lock:
            group = self._require(group_id)
            self._repo.delete(group_id)
        self._log.info("Deleted group %d '%s'", group_id, group.name)
        return group

    def add_member(self, group_id: int, player_id: int) -> Group:
        """Append a player to a group's member list.

        Raises:
            NotFoundError: the group or the player does not exist.
            AlreadyMemberError: the player is already in the group.
        """
        with self._lock:
            group = self._require(group_id)
            if self._players.find(player_id) is None:
                raise NotFoundError('Player not found')
            if not group.add_member(player_id):
                raise AlreadyMemberError('Player is already in this group')
        self._log.info("Added player %d to group %d", player_id, group_id)
        return group

    def remove_member(self, group_id: int, player_id: int) -> Group:
        """Remove a player from a group, clearing the leader if it was them.

        Raises:
            NotFoundError: the group does not exist.
            NotMemberError: the player is not in the group.
        """
        with self._lock:
            group = self._require(group_id)
            if not group.has_member(player_id):
                raise NotMemberError('Player not found in this group')
            group.discard_member(player_id)
        self._log.info("Removed player %d from group %d", player_id, group_id)
        return group

    def get(self, group_id: int) -> Optional[Group]:
        with self._lock:
            return self._repo.find(group_id)

    def list_all(self) -> List[Group]:
        with self._lock:
            return self._repo.all()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require(self, group_id: int) -> Group:
        group = self._repo.find(group_id)
        if group is None:
            raise NotFoundError('Group not found')
        return group

    def _require_leader(self, leader_id) -> int:
        """Return *leader_id* as an int if it names an existing player.

        JSON clients may send ids as integral floats or digit strings;
        booleans and anything else never name a player.
        """
        if isinstance(leader_id, float) and leader_id.is_integer():
            leader_id = int(leader_id)
        elif isinstance(leader_id, str) and leader_id.strip().isdigit():
            leader_id = int(leader_id.strip())
        if (isinstance(leader_id, bool) or not isinstance(leader_id, int)
                or self._players.find(leader_id) is None):
            raise LeaderNotFoundError('Leader player not found')
        return leader_id
