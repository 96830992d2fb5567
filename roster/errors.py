"""Error taxonomy for roster operations.

Every failure a service can report is a :class:`RosterError` subclass.  Each
carries a stable ``kind`` string and the HTTP status the web layer answers
with, so ``guild_server`` needs a single error handler for all of them.
"""
from typing import Dict


class RosterError(Exception):
    """Base class for caller-input failures raised by the roster services."""

    kind = 'RosterError'
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {'error': self.message, 'kind': self.kind}


class MissingFieldError(RosterError):
    """A required input was absent or empty."""
    kind = 'MissingField'
    status_code = 400


class InvalidClassError(RosterError):
    """A player class is not in the class catalog."""
    kind = 'InvalidClass'
    status_code = 400


class NoUpdateProvidedError(RosterError):
    """An update request carried no field to change."""
    kind = 'NoUpdateProvided'
    status_code = 400


class LeaderNotMemberError(RosterError):
    """The proposed group leader is not a member of the group."""
    kind = 'LeaderNotMember'
    status_code = 400


class NotFoundError(RosterError):
    """A player or group id does not resolve."""
    kind = 'NotFound'
    status_code = 404


class LeaderNotFoundError(RosterError):
    """A leader id does not resolve to an existing player."""
    kind = 'LeaderNotFound'
    status_code = 404


class NotMemberError(RosterError):
    """The player is not in the group it is being removed from."""
    kind = 'NotMember'
    status_code = 404


class DuplicateNameError(RosterError):
    """A player or group name is already taken."""
    kind = 'DuplicateName'
    status_code = 409


class AlreadyMemberError(RosterError):
    """The player already belongs to the group."""
    kind = 'AlreadyMember'
    status_code = 409
