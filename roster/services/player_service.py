"""Business logic for player records."""
import logging
import threading
from typing import Callable, Dict, List, Optional

from ..errors import (
    DuplicateNameError, InvalidClassError, MissingFieldError,
    NoUpdateProvidedError, NotFoundError,
)
from ..models import Player
from ..repositories.player_repository import PlayerRepository
from . import class_catalog

RemovalHook = Callable[[int], object]


def clean_text(value) -> str:
    """Normalise a JSON field to stripped text.

    Numbers become their string form; ``None``, booleans and other types
    count as empty.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    return value.strip() if isinstance(value, str) else ''


class PlayerService:
    """Creates, updates, deletes and lists players, delegating storage to
    :class:`~roster.repositories.player_repository.PlayerRepository`.

    Player names are unique (case-sensitive) and every class must be in
    :data:`~roster.services.class_catalog.ALLOWED_CLASSES`.

    Deleting a player first calls the *on_removed* hook with the player's id
    while the shared lock is still held.  ``GuildRoster`` wires that hook to
    :meth:`~roster.services.integrity_service.IntegrityService.on_player_removed`
    so no group is ever left referencing a player that no longer exists.
    """

    def __init__(self, repository: PlayerRepository,
                 lock: Optional[threading.RLock] = None,
                 on_removed: Optional[RemovalHook] = None) -> None:
        self._repo = repository
        self._lock = lock or threading.RLock()
        self._on_removed = on_removed
        self._log = logging.getLogger('guild.players')

    def set_removal_hook(self, hook: Optional[RemovalHook]) -> None:
        self._on_removed = hook

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create(self, name: Optional[str], player_class: Optional[str]) -> Player:
        """Add a new player.

        Raises:
            MissingFieldError: *name* or *player_class* is empty.
            InvalidClassError: *player_class* is not in the catalog.
            DuplicateNameError: another player already has *name*.
        """
        name = clean_text(name)
        player_class = clean_text(player_class)
        with self._lock:
            if not name or not player_class:
                raise MissingFieldError('Player name and class are required')
            self._check_class(player_class)
            if self._repo.name_taken(name):
                raise DuplicateNameError('Player with this name already exists')
            player = Player(self._repo.next_id(), name, player_class)
            self._repo.insert(player.id, player)
        self._log.info("Created player %d '%s' (%s)", player.id, name, player_class)
        return player

    def update(self, player_id: int, name: Optional[str] = None,
               player_class: Optional[str] = None) -> Player:
        """Change the name and/or class of an existing player.

        Fields left as ``None`` (or empty) are not touched.

        Raises:
            NotFoundError: no player has *player_id*.
            NoUpdateProvidedError: neither field was supplied.
            InvalidClassError: *player_class* is not in the catalog.
            DuplicateNameError: *name* belongs to a different player.
        """
        name = clean_text(name)
        player_class = clean_text(player_class)
        with self._lock:
            player = self._require(player_id)
            if not name and not player_class:
                raise NoUpdateProvidedError('No update data provided')
            if player_class:
                self._check_class(player_class)
            if name and self._repo.name_taken(name, exclude_id=player_id):
                raise DuplicateNameError('Player with this name already exists')
            if name:
                self._repo.rename(player, name)
            if player_class:
                player.player_class = player_class
        self._log.info("Updated player %d -> %r", player_id, player)
        return player

    def delete(self, player_id: int) -> Player:
        """Remove a player and purge every group reference to it.

        Returns:
            The removed :class:`Player`.

        Raises:
            NotFoundError: no player has *player_id*.
        """
        with self._lock:
            player = self._require(player_id)
            if self._on_removed is not None:
                self._on_removed(player_id)
            self._repo.delete(player_id)
        self._log.info("Deleted player %d '%s'", player_id, player.name)
        return player

    def get(self, player_id: int) -> Optional[Player]:
        with self._lock:
            return self._repo.find(player_id)

    def list_all(self) -> List[Player]:
        """Return every player in creation order."""
        with self._lock:
            return self._repo.all()

    def name_exists(self, name: str) -> bool:
        with self._lock:
            return self._repo.name_taken(name)

    def class_distribution(self) -> List[Dict]:
        """Return the per-class player count over the whole catalog."""
        with self._lock:
            return class_catalog.distribution(self._repo.all())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require(self, player_id: int) -> Player:
        player = self._repo.find(player_id)
        if player is None:
            raise NotFoundError('Player not found')
        return player

    @staticmethod
    def _check_class(player_class: str) -> None:
        if not class_catalog.is_valid(player_class):
            raise InvalidClassError(
                f"Invalid class. Allowed classes are: {class_catalog.allowed_classes_text()}"
            )
