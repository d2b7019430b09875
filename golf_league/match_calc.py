"""
Match play: stroke allocation between two players, 22-point match scoring
and handicap adjustments for absent players.
"""

import logging
from dataclasses import dataclass
from typing import Hashable, Mapping, NamedTuple, Sequence

from . import config
from .golf_calc import Course, Hole, round_half_up, score_differential, validate_hole_scores, validate_holes

logger = logging.getLogger(__name__)

HOLE_POINTS = 2
TOTAL_POINTS = 4
MATCH_POINTS = HOLE_POINTS * config.HOLES_PER_ROUND + TOTAL_POINTS  # 22


class MatchStrokes(NamedTuple):
    a: list[int]
    b: list[int]


@dataclass(frozen=True)
class PlayedRound:
    course_id: Hashable
    adjusted_gross: int


def _holes_hardest_first(holes: Sequence[Hole]) -> list[int]:
    return sorted(range(len(holes)), key=lambda i: holes[i].stroke_index)


# ---------------------------------------------------------------------------
# Strokes
# ---------------------------------------------------------------------------

def assign_strokes(handicap_a: int, handicap_b: int, holes: Sequence[Hole]) -> MatchStrokes:
    """
    Only the higher playing handicap receives strokes, one per hole from the
    hardest hole down, wrapping round for differences above 9.
    """
    validate_holes(holes)

    n = len(holes)
    strokes_a = [0] * n
    strokes_b = [0] * n

    diff = handicap_a - handicap_b
    if diff == 0:
        return MatchStrokes(strokes_a, strokes_b)

    receiver = strokes_a if diff > 0 else strokes_b
    order = _holes_hardest_first(holes)
    for k in range(abs(diff)):
        receiver[order[k % n]] += 1

    return MatchStrokes(strokes_a, strokes_b)


def net_hole_scores(gross: Sequence[int], strokes: Sequence[int]) -> list[int]:
    validate_hole_scores(gross)
    validate_hole_scores(strokes, "match strokes")
    return [g - s for g, s in zip(gross, strokes)]


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------

def match_points(net_a: Sequence[int], net_b: Sequence[int]) -> tuple[int, int]:
    """
    22-point match: 2 per hole to the lower net score (1-1 on a tie) and 4 to
    the lower 9-hole net total (2-2 on a tie).
    """
    validate_hole_scores(net_a, "player A net scores")
    validate_hole_scores(net_b, "player B net scores")

    points_a = points_b = 0
    for a, b in zip(net_a, net_b):
        if a < b:
            points_a += HOLE_POINTS
        elif b < a:
            points_b += HOLE_POINTS
        else:
            points_a += HOLE_POINTS // 2
            points_b += HOLE_POINTS // 2

    total_a, total_b = sum(net_a), sum(net_b)
    if total_a < total_b:
        points_a += TOTAL_POINTS
    elif total_b < total_a:
        points_b += TOTAL_POINTS
    else:
        points_a += TOTAL_POINTS // 2
        points_b += TOTAL_POINTS // 2

    return points_a, points_b


# ---------------------------------------------------------------------------
# Absences
# ---------------------------------------------------------------------------

def absent_handicap(posted: float, recent_rounds: Sequence[PlayedRound],
                    course_lookup: Mapping[Hashable, Course]) -> float:
    """
    Handicap for a player who misses a match:
    max(posted + 2, average of the worst 3 of the last 5), capped at posted + 4.
    """
    adjusted = posted + 2

    differentials = []
    for r in recent_rounds:
        course = course_lookup.get(r.course_id)
        if course is None:
            continue
        differentials.append(score_differential(r.adjusted_gross, course.course_rating, course.slope_rating))

    if len(differentials) >= 3:
        worst_three = sorted(differentials, reverse=True)[:3]
        adjusted = max(adjusted, sum(worst_three) / 3)
    else:
        logger.debug(f"only {len(differentials)} differentials for absent player, using posted + 2")

    return round_half_up(min(adjusted, posted + 4), 1)


def absent_player_hole_scores(playing_handicap: int, holes: Sequence[Hole]) -> list[int]:
    """
    Card posted for an absent player: playing handicap + 3 over par, spread
    evenly over the holes with the leftover strokes on the hardest ones.
    """
    validate_holes(holes)

    base, extra = divmod(playing_handicap + 3, len(holes))
    applied = [base] * len(holes)
    for i in _holes_hardest_first(holes)[:extra]:
        applied[i] += 1

    return [h.par + s for h, s in zip(holes, applied)]
