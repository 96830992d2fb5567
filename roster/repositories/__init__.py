"""Repository package: expose all concrete repositories from one import."""
from .player_repository import PlayerRepository
from .group_repository import GroupRepository

__all__ = [
    'PlayerRepository',
    'GroupRepository',
]
