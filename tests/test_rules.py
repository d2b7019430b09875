import pytest

from golf_league import rules
from golf_league.errors import InvalidInputError
from golf_league.rules import Penalty


def test_breakfast_ball_second_shot_counts():
    assert rules.breakfast_ball_score(1, first_shot=7, second_shot=5, used=True) == 5
    # taken, then worse: still the second shot
    assert rules.breakfast_ball_score(1, first_shot=5, second_shot=8, used=True) == 8


def test_breakfast_ball_not_used():
    assert rules.breakfast_ball_score(1, first_shot=6, second_shot=4, used=False) == 6
    assert rules.breakfast_ball_score(4, first_shot=6, second_shot=4, used=False) == 6


def test_breakfast_ball_only_on_first_hole():
    assert rules.breakfast_ball_allowed(1)
    assert not rules.breakfast_ball_allowed(2)
    with pytest.raises(InvalidInputError):
        rules.breakfast_ball_score(2, first_shot=7, second_shot=5, used=True)


@pytest.mark.parametrize("penalty", list(Penalty) + ["out_of_bounds", "lost_ball", "hazard", "lateral"])
def test_every_penalty_is_one_stroke(penalty):
    assert rules.penalty_strokes(penalty) == 1


def test_unknown_penalty():
    with pytest.raises(InvalidInputError):
        rules.penalty_strokes("unplayable")


@pytest.mark.parametrize("penalty, closer, within, expected", [
    (Penalty.HAZARD, False, False, True),
    (Penalty.HAZARD, True, True, False),
    (Penalty.LATERAL, False, True, True),
    (Penalty.LATERAL, False, False, False),
    (Penalty.LATERAL, True, True, False),
    ("lateral", False, True, True),
])
def test_is_valid_drop(penalty, closer, within, expected):
    assert rules.is_valid_drop(penalty, closer, within) is expected


@pytest.mark.parametrize("inches, obstacle, expected", [
    (0.0, False, True),
    (3.0, False, True),
    (3.1, False, False),
    (1.0, True, False),
])
def test_lie_improvement(inches, obstacle, expected):
    assert rules.is_valid_lie_improvement(inches, obstacle) is expected


def test_lie_improvement_custom_limit():
    assert rules.is_valid_lie_improvement(5.0, False, max_inches=6.0)


@pytest.mark.parametrize("feet, gimme", [(0.5, True), (2.0, True), (2.01, False), (8.0, False)])
def test_gimme(feet, gimme):
    assert rules.is_gimme(feet) is gimme
    assert rules.must_hole_out(feet) is not gimme


def test_gimme_custom_distance():
    assert rules.is_gimme(2.5, max_feet=3.0)
