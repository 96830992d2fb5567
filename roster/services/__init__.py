"""Services package: expose all concrete services from one import."""
from . import class_catalog
from .player_service import PlayerService
from .group_service import GroupService, UNSET
from .integrity_service import IntegrityService
from .import_service import ImportService

__all__ = [
    'class_catalog',
    'PlayerService',
    'GroupService',
    'UNSET',
    'IntegrityService',
    'ImportService',
]
