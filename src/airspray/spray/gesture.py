"""
Gesture interpretation: one landmark set plus the canvas size in, a
``GestureState`` out (pinch distance, hand size, mirrored emission point,
spraying flag).
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from ..detection.hand_detector import HandLandmarks, Landmark, LandmarkIndex


# Pixels, canvas space. Strict less-than.
PINCH_THRESHOLD = 60.0


def screen_distance(a: Landmark, b: Landmark, width: float, height: float) -> float:
    """Euclidean distance with x scaled by width and y by height."""
    return math.hypot((a.x - b.x) * width, (a.y - b.y) * height)


def is_pinching(pinch_distance: float) -> bool:
    return pinch_distance < PINCH_THRESHOLD


@dataclass(frozen=True)
class GestureState:
    """Per-frame reading of the tracked hand, in canvas pixels."""
    pinch_distance: float
    hand_size: float
    emission_point: Tuple[float, float]
    is_spraying: bool


def interpret_landmarks(hand: HandLandmarks, width: float, height: float) -> GestureState:
    """Compute the gesture for one landmark set on a ``width`` x ``height`` canvas."""
    thumb_tip = hand.get(LandmarkIndex.THUMB_TIP)
    index_tip = hand.get(LandmarkIndex.INDEX_TIP)
    wrist = hand.get(LandmarkIndex.WRIST)
    middle_mcp = hand.get(LandmarkIndex.MIDDLE_MCP)

    pinch_distance = screen_distance(thumb_tip, index_tip, width, height)
    hand_size = screen_distance(wrist, middle_mcp, width, height)

    # The preview is shown mirrored, so x is flipped to match it
    x = (1 - (thumb_tip.x + index_tip.x) / 2) * width
    y = ((thumb_tip.y + index_tip.y) / 2) * height

    return GestureState(
        pinch_distance=pinch_distance,
        hand_size=hand_size,
        emission_point=(x, y),
        is_spraying=is_pinching(pinch_distance),
    )


class GestureInterpreter:
    """
    Stateful wrapper around ``interpret_landmarks``.

    When a tick has no landmark set, the last computed state is returned
    unchanged. Before any hand has been seen the state is None.
    """

    def __init__(self):
        self._last: Optional[GestureState] = None

    def interpret(self, hand: Optional[HandLandmarks], width: float, height: float) -> Optional[GestureState]:
        if hand is not None:
            self._last = interpret_landmarks(hand, width, height)
        return self._last

    @property
    def last(self) -> Optional[GestureState]:
        return self._last

    @property
    def has_hand(self) -> bool:
        return self._last is not None

    def reset(self) -> None:
        self._last = None
