"""Colour-mixing feedback: distance between two HSL colours.

The weights (hue 50 %, saturation 25 %, lightness 25 %) and the win threshold
of 97 are tuning constants of the game and are kept as they were shipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from contracts.errors import GuessValidationError, make_error

HUE_WEIGHT = 0.5
SATURATION_WEIGHT = 0.25
LIGHTNESS_WEIGHT = 0.25
WIN_THRESHOLD = 97

HUE_RANGE = 180
SATURATION_RANGE = 100
LIGHTNESS_RANGE = 100

HUE_LOCK = 5
SATURATION_LOCK = 3
LIGHTNESS_LOCK = 3

_PROXIMITY_BANDS: Tuple[Tuple[float, str], ...] = (
    (0.03, "Locked"),
    (0.10, "Close"),
    (0.25, "Warm"),
    (0.50, "Far"),
)


@dataclass(frozen=True)
class HSL:
    h: int
    s: int
    l: int  # noqa: E741

    def validate(self, path: str = "$.color") -> "HSL":
        issues = []
        if not 0 <= self.h <= 360:
            issues.append(make_error("color.range", f"hue {self.h} outside [0, 360]", f"{path}.h"))
        if not 0 <= self.s <= 100:
            issues.append(make_error("color.range", f"saturation {self.s} outside [0, 100]", f"{path}.s"))
        if not 0 <= self.l <= 100:
            issues.append(make_error("color.range", f"lightness {self.l} outside [0, 100]", f"{path}.l"))
        if issues:
            raise GuessValidationError("Colour rejected", issues)
        return self

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "HSL":
        return cls(h=int(data["h"]), s=int(data["s"]), l=int(data["l"]))

    def css(self) -> str:
        return f"hsl({self.h}, {self.s}%, {self.l}%)"


def _round_half_up(value: float) -> int:
    # Halves round up, never to even.
    return int((value + 0.5) // 1)


def hue_delta(a: int, b: int) -> int:
    """Signed shortest turn from hue ``a`` to hue ``b`` in ``[-180, 180)``."""

    return ((b - a + 540) % 360) - 180


def closeness(guess: HSL, target: HSL) -> int:
    """Overall score in ``[0, 100]``; 100 is an exact match."""

    h_dist = abs(hue_delta(guess.h, target.h)) / HUE_RANGE
    s_dist = abs(guess.s - target.s) / SATURATION_RANGE
    l_dist = abs(guess.l - target.l) / LIGHTNESS_RANGE
    total = h_dist * HUE_WEIGHT + s_dist * SATURATION_WEIGHT + l_dist * LIGHTNESS_WEIGHT
    return _round_half_up((1 - total) * 100)


def proximity_label(delta: int, max_range: int) -> str:
    share = abs(delta) / max_range
    for limit, label in _PROXIMITY_BANDS:
        if share <= limit:
            return label
    return "Way off"


def direction(delta: int, threshold: int) -> str:
    if abs(delta) <= threshold:
        return "locked"
    return "up" if delta > 0 else "down"


@dataclass(frozen=True)
class ChannelFeedback:
    delta: int
    direction: str
    proximity: str

    @property
    def locked(self) -> bool:
        return self.direction == "locked"


@dataclass(frozen=True)
class ColorEvaluation:
    guess: HSL
    hue: ChannelFeedback
    saturation: ChannelFeedback
    lightness: ChannelFeedback
    closeness: int

    @property
    def is_win(self) -> bool:
        return self.closeness >= WIN_THRESHOLD

    def to_dict(self) -> Dict[str, Any]:
        def channel(fb: ChannelFeedback) -> Dict[str, Any]:
            return {"delta": fb.delta, "direction": fb.direction, "proximity": fb.proximity}

        return {
            "guess": {"h": self.guess.h, "s": self.guess.s, "l": self.guess.l},
            "hue": channel(self.hue),
            "saturation": channel(self.saturation),
            "lightness": channel(self.lightness),
            "closeness": self.closeness,
            "is_win": self.is_win,
        }


def channel_feedback(delta: int, lock_threshold: int, max_range: int) -> ChannelFeedback:
    return ChannelFeedback(delta, direction(delta, lock_threshold), proximity_label(delta, max_range))


def evaluate_color(guess: HSL, target: HSL) -> ColorEvaluation:
    """Per-channel hints plus the overall closeness of ``guess``."""

    guess.validate()
    return ColorEvaluation(
        guess=guess,
        hue=channel_feedback(hue_delta(guess.h, target.h), HUE_LOCK, HUE_RANGE),
        saturation=channel_feedback(target.s - guess.s, SATURATION_LOCK, SATURATION_RANGE),
        lightness=channel_feedback(target.l - guess.l, LIGHTNESS_LOCK, LIGHTNESS_RANGE),
        closeness=closeness(guess, target),
    )


__all__ = [
    "ChannelFeedback",
    "ColorEvaluation",
    "HSL",
    "channel_feedback",
    "WIN_THRESHOLD",
    "closeness",
    "direction",
    "evaluate_color",
    "hue_delta",
    "proximity_label",
]
