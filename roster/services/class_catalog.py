"""The fixed catalog of player classes."""
from typing import Dict, Iterable, List

from ..models import Player

ALLOWED_CLASSES = (
    'Sorcerer', 'Warlock', 'Archbishop', 'Shura', 'Ranger', 'Minstrel',
    'Wanderer', 'Rune Knight', 'Royal Guard', 'Shadow Chaser',
    'Guillotine Cross', 'Mechanic', 'Genetic',
)

_ALLOWED_SET = frozenset(ALLOWED_CLASSES)


def is_valid(name: str) -> bool:
    """Return True if *name* is exactly one of :data:`ALLOWED_CLASSES`."""
    return name in _ALLOWED_SET


def allowed_classes_text() -> str:
    return ', '.join(ALLOWED_CLASSES)


def empty_distribution() -> Dict[str, int]:
    """Return ``{class: 0}`` for every catalog class, in catalog order."""
    return dict.fromkeys(ALLOWED_CLASSES, 0)


def distribution(players: Iterable[Player]) -> List[Dict]:
    """Tally *players* by class.

    Every catalog class appears exactly once, in catalog order, even with a
    count of zero.  Classes outside the catalog are not counted.

    Returns:
        ``[{'class': ..., 'count': ...}, ...]``
    """
    counts = empty_distribution()
    for player in players:
        if player.player_class in counts:
            counts[player.player_class] += 1
    return [{'class': cls, 'count': count} for cls, count in counts.items()]
