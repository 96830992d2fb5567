"""Bulk import of players from decoded spreadsheet rows."""
import logging
from typing import Any, Iterable, Mapping

from ..errors import (
    DuplicateNameError, InvalidClassError, MissingFieldError, RosterError,
)
from ..models import ImportReport, PlayerCandidate
from . import class_catalog
from .player_service import PlayerService

NAME_COLUMN = 'Player Name'
CLASS_COLUMN = 'Class'

# Data row 1 sits under the header, i.e. on spreadsheet row 2.
HEADER_OFFSET = 2


def _cell_text(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip()


class ImportService:
    """Validates rows one at a time and adds the good ones through
    :class:`~roster.services.player_service.PlayerService`.

    Each row goes through two independent stages:

    1. :meth:`parse_row`: shape check: both columns present and non-empty.
    2. :meth:`validate_candidate`: business rules: known class, unused name.

    A failing row is recorded in the report and skipped; it never stops
    the rest of the batch.
    """

    def __init__(self, player_service: PlayerService) -> None:
        self._players = player_service
        self._log = logging.getLogger('guild.import')

    def parse_row(self, row: Mapping[str, Any], index: int) -> PlayerCandidate:
        """Turn raw row *index* (0-based) into a :class:`PlayerCandidate`.

        Raises:
            MissingFieldError: the row is not a mapping, or the name or
                class cell is blank.
        """
        if not isinstance(row, Mapping):
            raise MissingFieldError('Missing player name or class.')
        name = _cell_text(row.get(NAME_COLUMN))
        player_class = _cell_text(row.get(CLASS_COLUMN))
        if not name or not player_class:
            raise MissingFieldError('Missing player name or class.')
        return PlayerCandidate(index + HEADER_OFFSET, name, player_class)

    def validate_candidate(self, candidate: PlayerCandidate) -> None:
        """Raise if *candidate* breaks a catalog or uniqueness rule."""
        if not class_catalog.is_valid(candidate.player_class):
            raise InvalidClassError(
                f"Invalid class '{candidate.player_class}' "
                f"for player '{candidate.name}'.")
        if self._players.name_exists(candidate.name):
            raise DuplicateNameError(f"Player '{candidate.name}' already exists.")

    def process(self, rows: Iterable[Mapping[str, Any]]) -> ImportReport:
        """Import every row in order and report what happened.

        Players added by earlier rows count as existing for later rows, so a
        name repeated inside one batch is only added once.
        """
        report = ImportReport()
        for index, row in enumerate(rows):
            row_number = index + HEADER_OFFSET
            try:
                candidate = self.parse_row(row, index)
                self.validate_candidate(candidate)
                player = self._players.create(candidate.name, candidate.player_class)
            except RosterError as exc:
                self._log.debug("Row %d rejected: %s", row_number, exc.message)
                if isinstance(exc, DuplicateNameError):
                    # duplicate messages name the player rather than the row
                    report.errors.append(exc.message)
                else:
                    report.errors.append(f"Row {row_number}: {exc.message}")
                continue
            report.added_players.append(player)
        self._log.info("Bulk import: %d added, %d rejected",
                       report.added_count, len(report.errors))
        return report
