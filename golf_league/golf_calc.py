"""
Handicap engine: differentials, adjusted gross score (Net Double Bogey),
league handicap index and course/playing handicap.

Everything here is a pure function over plain records. No I/O, no state.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from . import config
from .errors import CourseConfigurationError, InsufficientHistoryError, InvalidInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Differential:
    value: float
    timestamp: date


@dataclass(frozen=True)
class Hole:
    par: int
    stroke_index: int  # 1 = hardest .. 9 = easiest


@dataclass(frozen=True)
class Course:
    par: int
    course_rating: float
    slope_rating: int
    holes: tuple[Hole, ...]


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_hole_scores(scores: Sequence[int], label: str = "hole scores"):
    if len(scores) != config.HOLES_PER_ROUND:
        raise InvalidInputError(
            f"{label}: expected {config.HOLES_PER_ROUND} values, got {len(scores)}"
        )


def validate_holes(holes: Sequence[Hole]):
    if len(holes) != config.HOLES_PER_ROUND:
        raise CourseConfigurationError(
            f"course must have {config.HOLES_PER_ROUND} holes, got {len(holes)}"
        )
    indexes = sorted(h.stroke_index for h in holes)
    if indexes != list(range(1, config.HOLES_PER_ROUND + 1)):
        raise CourseConfigurationError(
            f"stroke indexes must be a permutation of 1..{config.HOLES_PER_ROUND}, got {indexes}"
        )


def validate_course(course: Course):
    if course.slope_rating <= 0:
        raise CourseConfigurationError(f"slope rating must be positive, got {course.slope_rating}")
    validate_holes(course.holes)

    if any(h.par < 1 for h in course.holes):
        raise CourseConfigurationError(f"hole pars must be positive, got {[h.par for h in course.holes]}")
    hole_par = sum(h.par for h in course.holes)
    if course.par != hole_par:
        raise CourseConfigurationError(f"course par {course.par} does not match hole pars (sum {hole_par})")


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round half away from zero (12.25 -> 12.3, 2.5 -> 3, -2.5 -> -3).

    Goes through the shortest repr of the float so that values such as 13.95
    round as written, not as their binary approximation.
    """
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Differential
# ---------------------------------------------------------------------------

def score_differential(adjusted_gross: int, course_rating: float, slope_rating: int) -> float:
    # unrounded: rounding happens at the index stage
    if slope_rating <= 0:
        raise InvalidInputError(f"slope rating must be positive, got {slope_rating}")
    return (adjusted_gross - course_rating) * 113 / slope_rating


# ---------------------------------------------------------------------------
# Adjusted Gross Score
# ---------------------------------------------------------------------------

def strokes_on_hole(playing_handicap: int, stroke_index: int) -> int:
    """Strokes received on one hole of a 9-hole round (repeat allocation)."""
    n = config.HOLES_PER_ROUND
    if playing_handicap <= n:
        return 1 if playing_handicap >= stroke_index else 0
    if playing_handicap <= 2 * n:
        return 2 if playing_handicap - n >= stroke_index else 1
    return 3 if playing_handicap - 2 * n >= stroke_index else 2


def net_double_bogey_hole_scores(gross: Sequence[int], holes: Sequence[Hole], playing_handicap: int) -> list[int]:
    validate_hole_scores(gross)
    validate_holes(holes)

    adjusted = []
    for g, h in zip(gross, holes):
        cap = h.par + 2 + strokes_on_hole(playing_handicap, h.stroke_index)
        adjusted.append(min(g, cap))
    return adjusted


def new_player_hole_scores(gross: Sequence[int], holes: Sequence[Hole]) -> list[int]:
    """League rule for players without an established handicap: par + 5 per hole."""
    validate_hole_scores(gross)
    validate_holes(holes)
    return [min(g, h.par + 5) for g, h in zip(gross, holes)]


def adjusted_hole_scores(gross: Sequence[int], holes: Sequence[Hole], playing_handicap: int,
                         established: bool = True) -> list[int]:
    if established:
        return net_double_bogey_hole_scores(gross, holes, playing_handicap)
    return new_player_hole_scores(gross, holes)


def adjusted_gross_score(gross: Sequence[int], holes: Sequence[Hole], playing_handicap: int,
                         established: bool = True) -> int:
    return sum(adjusted_hole_scores(gross, holes, playing_handicap, established))


# ---------------------------------------------------------------------------
# Handicap index
# ---------------------------------------------------------------------------

def is_established(rounds_played: int) -> bool:
    return rounds_played >= config.ESTABLISHED_ROUNDS


def handicap_index(differentials: Sequence[Differential],
                   num_used: int = config.SCORES_USED,
                   num_considered: int = config.SCORES_CONSIDERED) -> float:
    """
    Average of the lowest `num_used` differentials among the most recent
    `num_considered`, rounded to one decimal.

    Without a full window of `num_considered` rounds there is nothing to drop
    and the straight average of what is available is used instead. The
    fallback threshold is `num_considered`, not `num_used`: with (3, 5),
    three or four rounds are averaged as they are.
    """
    if not differentials:
        raise InsufficientHistoryError("no differentials available")

    if len(differentials) < num_considered:
        logger.debug(
            f"{len(differentials)} differentials (< {num_considered}): straight average, no drops"
        )
        values = [d.value for d in differentials]
        return round_half_up(sum(values) / len(values), 1)

    # stable sort: same-day rounds keep their input order
    recent = sorted(differentials, key=lambda d: d.timestamp, reverse=True)[:num_considered]
    best = sorted(d.value for d in recent)[:num_used]
    return round_half_up(sum(best) / num_used, 1)


def one_round_handicap(provisional: float, diff1: float) -> float:
    return (2 * provisional + diff1) / 3


def two_round_handicap(provisional: float, diff1: float, diff2: float) -> float:
    return (provisional + diff1 + diff2) / 3


def league_handicap(provisional: float, differentials: Sequence[Differential]) -> float:
    """
    League handicap index for a player, by size of their round history:

    - 0 rounds: the committee-assigned provisional handicap
    - 1 round: (2 x provisional + diff1) / 3
    - 2 rounds: (provisional + diff1 + diff2) / 3
    - 3-4 rounds: average of all differentials
    - 5+ rounds: best 3 of the last 5
    """
    n = len(differentials)

    if n == 0:
        value = provisional
    elif n == 1:
        value = one_round_handicap(provisional, differentials[0].value)
    elif n == 2:
        value = two_round_handicap(provisional, differentials[0].value, differentials[1].value)
    elif n < config.SCORES_CONSIDERED:
        value = sum(d.value for d in differentials) / n
    else:
        value = handicap_index(differentials)

    return round_half_up(value, 1)


# ---------------------------------------------------------------------------
# Course / playing handicap
# ---------------------------------------------------------------------------

def course_handicap(index: float, slope_rating: int, course_rating: float, par: int) -> float:
    return index * slope_rating / 113 + (course_rating - par)


def playing_handicap(course_hcp: float, allowance: float = config.HANDICAP_ALLOWANCE) -> int:
    return int(round_half_up(course_hcp * allowance))


def course_and_playing_handicap(index: float, course: Course) -> tuple[float, int]:
    ch = course_handicap(index, course.slope_rating, course.course_rating, course.par)
    return ch, playing_handicap(ch)
