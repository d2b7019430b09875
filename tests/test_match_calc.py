import random

import pytest

from golf_league import match_calc
from golf_league.errors import InvalidInputError
from golf_league.golf_calc import Course
from golf_league.match_calc import PlayedRound

from conftest import PARS, make_holes


# ---------------------------------------------------------------------------
# Strokes
# ---------------------------------------------------------------------------

def test_equal_handicaps_get_no_strokes(holes):
    strokes = match_calc.assign_strokes(8, 8, holes)
    assert strokes.a == [0] * 9
    assert strokes.b == [0] * 9


def test_strokes_go_to_hardest_holes_first(holes):
    # SI 1, 2, 3 are holes 2, 6 and 4
    strokes = match_calc.assign_strokes(10, 7, holes)
    assert strokes.a == [0, 1, 0, 1, 0, 1, 0, 0, 0]
    assert strokes.b == [0] * 9


def test_strokes_wrap_after_nine(holes):
    strokes = match_calc.assign_strokes(3, 14, holes)
    assert strokes.a == [0] * 9
    assert strokes.b == [1, 2, 1, 1, 1, 2, 1, 1, 1]


def test_strokes_are_not_capped(holes):
    strokes = match_calc.assign_strokes(22, 2, holes)
    assert sum(strokes.a) == 20
    assert max(strokes.a) == 3


def test_assign_strokes_is_antisymmetric(holes):
    for ha in range(0, 25):
        for hb in range(0, 25):
            fwd = match_calc.assign_strokes(ha, hb, holes)
            back = match_calc.assign_strokes(hb, ha, holes)

            assert fwd.a == back.b
            assert fwd.b == back.a
            assert sum(fwd.a) + sum(fwd.b) == abs(ha - hb)
            assert sum(fwd.a) == 0 or sum(fwd.b) == 0


def test_net_hole_scores():
    gross = [5, 5, 4, 6, 5, 5, 4, 6, 5]
    strokes = [1, 1, 0, 1, 0, 1, 0, 1, 0]
    assert match_calc.net_hole_scores(gross, strokes) == [4, 4, 4, 5, 5, 4, 4, 5, 5]


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------

def test_all_halved():
    assert match_calc.match_points([4] * 9, [4] * 9) == (11, 11)


def test_clean_sweep():
    assert match_calc.match_points([3] * 9, [4] * 9) == (22, 0)


def test_total_bonus_goes_to_lower_total():
    net_a = [4, 4, 4, 4, 5, 5, 5, 5, 5]   # 41, wins 4 holes
    net_b = [5, 5, 5, 5, 4, 4, 4, 4, 4]   # 40, wins 5 holes
    assert match_calc.match_points(net_a, net_b) == (8, 14)


def test_fewer_holes_won_but_lower_total():
    net_a = [3, 3, 3, 5, 5, 5, 5, 5, 5]   # 39
    net_b = [6, 6, 6, 4, 4, 4, 4, 4, 4]   # 42
    assert match_calc.match_points(net_a, net_b) == (10, 12)


def test_points_always_total_22():
    rng = random.Random(22)
    for _ in range(500):
        net_a = [rng.randint(2, 9) for _ in range(9)]
        net_b = [rng.randint(2, 9) for _ in range(9)]
        a, b = match_calc.match_points(net_a, net_b)
        assert a + b == match_calc.MATCH_POINTS == 22


@pytest.mark.parametrize("net_a, net_b", [
    ([4] * 8, [4] * 9),
    ([4] * 9, [4] * 10),
    ([], []),
])
def test_match_points_rejects_partial_cards(net_a, net_b):
    with pytest.raises(InvalidInputError):
        match_calc.match_points(net_a, net_b)


# ---------------------------------------------------------------------------
# Absences
# ---------------------------------------------------------------------------

@pytest.fixture
def lookup():
    return {"pv": Course(36, 35.5, 113, make_holes()), "oak": Course(36, 36.0, 113, make_holes())}


def _rounds(course_id, *ags):
    return [PlayedRound(course_id=course_id, adjusted_gross=a) for a in ags]


def test_absent_handicap_uses_posted_plus_two(lookup):
    # worst three: 10.5, 11.5, 12.5 -> 11.5 < 12
    rounds = _rounds("pv", 40, 46, 41, 47, 48)
    assert match_calc.absent_handicap(10.0, rounds, lookup) == 12.0


def test_absent_handicap_uses_worst_three(lookup):
    rounds = _rounds("oak", 48, 40, 49, 50)   # 12, 13, 14 -> 13
    assert match_calc.absent_handicap(10.0, rounds, lookup) == 13.0


def test_absent_handicap_is_capped(lookup):
    rounds = _rounds("pv", 51, 52, 52)   # 15.5, 16.5, 16.5
    assert match_calc.absent_handicap(10.0, rounds, lookup) == 14.0


def test_absent_handicap_rounds_to_one_decimal(lookup):
    rounds = _rounds("oak", 48, 48, 49)   # 12, 12, 13 -> 12.333
    assert match_calc.absent_handicap(10.0, rounds, lookup) == 12.3


def test_absent_handicap_skips_unknown_courses(lookup):
    rounds = _rounds("pv", 52, 52) + _rounds("closed-course", 60, 60)
    assert match_calc.absent_handicap(10.0, rounds, lookup) == 12.0


def test_absent_handicap_without_history(lookup):
    assert match_calc.absent_handicap(7.4, [], lookup) == 9.4


def test_absent_player_card(holes):
    # 10 + 3 over par: one per hole, a second on SI 1-4
    scores = match_calc.absent_player_hole_scores(10, holes)
    assert scores == [5, 6, 4, 7, 5, 6, 4, 7, 5]
    assert sum(scores) == sum(PARS) + 13


def test_absent_player_card_spreads_evenly(holes):
    scores = match_calc.absent_player_hole_scores(6, holes)
    assert scores == [p + 1 for p in PARS]
