"""Normalization transforms writing ``Machine.derived``."""

from .manufacturers import clean_manufacturer
from .names import clean_name, normalize_year
from .players import PLAYER_SUBSTITUTIONS, normalize_players
from .normalizer import normalize_machines

__all__ = [
    "clean_manufacturer",
    "clean_name",
    "normalize_year",
    "PLAYER_SUBSTITUTIONS",
    "normalize_players",
    "normalize_machines",
]
