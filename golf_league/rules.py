"""League gameplay rules used to validate score entry."""

from enum import Enum

from . import config
from .errors import InvalidInputError

BREAKFAST_BALL_HOLE = 1


class Penalty(str, Enum):
    OUT_OF_BOUNDS = "out_of_bounds"
    LOST_BALL = "lost_ball"
    HAZARD = "hazard"
    LATERAL = "lateral"


def _as_penalty(penalty) -> Penalty:
    try:
        return Penalty(penalty)
    except ValueError:
        raise InvalidInputError(f"unknown penalty: {penalty!r}") from None


# ---------------------------------------------------------------------------
# Breakfast ball
# ---------------------------------------------------------------------------

def breakfast_ball_allowed(hole_number: int) -> bool:
    return hole_number == BREAKFAST_BALL_HOLE


def breakfast_ball_score(hole_number: int, first_shot: int, second_shot: int, used: bool) -> int:
    """
    Score to record on a hole where a breakfast ball may have been taken.
    Once taken, the second shot counts, good or bad.
    """
    if not used:
        return first_shot
    if not breakfast_ball_allowed(hole_number):
        raise InvalidInputError(f"breakfast ball only allowed on hole {BREAKFAST_BALL_HOLE}, not {hole_number}")
    return second_shot


# ---------------------------------------------------------------------------
# Penalties and drops
# ---------------------------------------------------------------------------

def penalty_strokes(penalty) -> int:
    # OB / lost ball: drop near the loss point or re-tee hitting 3.
    # hazard / lateral: drop per is_valid_drop.
    _as_penalty(penalty)
    return 1


def is_valid_drop(penalty, closer_to_hole: bool, within_two_club_lengths: bool) -> bool:
    if closer_to_hole:
        return False
    if _as_penalty(penalty) is Penalty.LATERAL:
        return within_two_club_lengths
    # crossing hazard: behind the entry point on line with the flag
    return True


# ---------------------------------------------------------------------------
# Fluff / gimme
# ---------------------------------------------------------------------------

def is_valid_lie_improvement(improvement_inches: float, obstacle_eliminated: bool,
                             max_inches: float = config.FLUFF_MAX_INCHES) -> bool:
    return improvement_inches <= max_inches and not obstacle_eliminated


def is_gimme(distance_feet: float, max_feet: float = config.GIMME_MAX_FEET) -> bool:
    return distance_feet <= max_feet


def must_hole_out(distance_feet: float, max_feet: float = config.GIMME_MAX_FEET) -> bool:
    return not is_gimme(distance_feet, max_feet)
