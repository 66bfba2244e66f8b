# Input adapters: raw key names, swipe deltas, and on-screen buttons -> Direction.
from __future__ import annotations

try:
    from .game_logic import Direction
except ImportError:
    from game_logic import Direction


MIN_SWIPE = 30  # pixels

KEY_BINDINGS: dict[str, Direction] = {
    "Up": Direction.UP,
    "Down": Direction.DOWN,
    "Left": Direction.LEFT,
    "Right": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}


# On-screen pad: (label, direction, grid row, grid column).
DIRECTION_BUTTONS: tuple[tuple[str, Direction, int, int], ...] = (
    ("\u25b2", Direction.UP, 0, 1),
    ("\u25c0", Direction.LEFT, 1, 0),
    ("\u25b6", Direction.RIGHT, 1, 2),
    ("\u25bc", Direction.DOWN, 2, 1),
)


def direction_for_key(key: str) -> Direction | None:
    """Map a Tk keysym (arrows or WASD, either case) to a direction."""
    if key in KEY_BINDINGS:
        return KEY_BINDINGS[key]
    return KEY_BINDINGS.get(key.lower())


def direction_for_swipe(dx: float, dy: float, min_swipe: float = MIN_SWIPE) -> Direction | None:
    """Dominant axis of a drag, or None while it is still too short."""
    if abs(dx) <= min_swipe and abs(dy) <= min_swipe:
        return None
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP


class SwipeTracker:
    """Turns press/drag pointer events into at most one direction per swipe."""
    def __init__(self, min_swipe: float = MIN_SWIPE) -> None:
        self.min_swipe = min_swipe
        self.origin: tuple[float, float] | None = None

    def press(self, x: float, y: float) -> None:
        self.origin = (x, y)

    def drag(self, x: float, y: float) -> Direction | None:
        if self.origin is None:
            return None
        direction = direction_for_swipe(x - self.origin[0], y - self.origin[1], self.min_swipe)
        if direction is not None:
            self.origin = None  # wait for the next press
        return direction

    def release(self) -> None:
        self.origin = None
