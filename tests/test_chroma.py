from __future__ import annotations

import pytest

from contracts.errors import GuessValidationError
from engine.chroma import (
    HSL,
    _round_half_up,
    closeness,
    direction,
    evaluate_color,
    hue_delta,
    proximity_label,
)

EMBER = HSL(16, 85, 55)


def test_hue_delta_takes_the_short_way_round() -> None:
    assert hue_delta(350, 10) == 20
    assert hue_delta(10, 350) == -20
    assert hue_delta(0, 180) == -180
    assert hue_delta(40, 40) == 0


def test_exact_colour_scores_one_hundred() -> None:
    assert closeness(EMBER, EMBER) == 100
    assert evaluate_color(EMBER, EMBER).is_win


def test_opposite_hue_loses_half_the_score() -> None:
    assert closeness(HSL(196, 85, 55), EMBER) == 50


def test_near_miss_still_wins() -> None:
    evaluation = evaluate_color(HSL(18, 86, 55), EMBER)
    assert evaluation.closeness == 99
    assert evaluation.is_win


def test_far_guess_does_not_win() -> None:
    evaluation = evaluate_color(HSL(200, 20, 90), EMBER)
    assert evaluation.closeness < 97
    assert not evaluation.is_win


def test_halves_round_up() -> None:
    assert _round_half_up(2.5) == 3
    assert _round_half_up(-0.5) == 0
    assert _round_half_up(96.4) == 96


def test_channel_hints() -> None:
    evaluation = evaluate_color(HSL(16, 80, 70), EMBER)
    assert evaluation.hue.locked
    assert evaluation.saturation.direction == "up"
    assert evaluation.saturation.delta == 5
    assert evaluation.lightness.direction == "down"
    assert evaluation.lightness.proximity == "Warm"


def test_direction_threshold_is_inclusive() -> None:
    assert direction(5, 5) == "locked"
    assert direction(6, 5) == "up"
    assert direction(-6, 5) == "down"


@pytest.mark.parametrize(
    "delta, label",
    [(5, "Locked"), (10, "Close"), (40, "Warm"), (80, "Far"), (120, "Way off")],
)
def test_proximity_bands(delta: int, label: str) -> None:
    assert proximity_label(delta, 180) == label


def test_rejects_out_of_range_channels() -> None:
    with pytest.raises(GuessValidationError) as info:
        evaluate_color(HSL(361, 50, 101), EMBER)
    assert [issue.path for issue in info.value.issues] == ["$.color.h", "$.color.l"]
