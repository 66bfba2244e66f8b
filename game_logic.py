# Core Spelling Snake board rules: grid, snake body, and buffered input.
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, NamedTuple


# Bounds used when validating settings.
MIN_GRID_SIZE = 8
MAX_GRID_SIZE = 60
MIN_CELL_SIZE = 12
MAX_CELL_SIZE = 48
MIN_SPEED_MS = 80
MAX_SPEED_MS = 150
MIN_INITIAL_LENGTH = 3
MAX_DECOYS = 20

# Gameplay defaults.
GRID_WIDTH = 22
GRID_HEIGHT = 16
INITIAL_LENGTH = 3
INITIAL_SPEED_MS = 150
SPEED_INCREASE = 3
NUM_DECOY_LETTERS = 5
MAX_STRIKES = 3
LETTER_POINTS = 10
WORD_BONUS_PER_LETTER = 10
LIFE_TOKEN_CHANCE = 0.3
HEAD_EXCLUSION_RADIUS = 2
SPAWN_ATTEMPTS = 100
INPUT_BUFFER_SIZE = 2
WORD_COMPLETE_PAUSE_MS = 2500

CHEBYSHEV = "chebyshev"
MANHATTAN = "manhattan"


class WrapMode(Enum):
    """Behavior when the head crosses a board edge."""
    SOLID = "solid"
    WRAP = "wrap"


@dataclass
class SpellingConfig:
    """Runtime settings shared between the simulation and the GUI."""
    grid_width: int = GRID_WIDTH
    grid_height: int = GRID_HEIGHT
    cell_size: int = 28
    initial_length: int = INITIAL_LENGTH
    speed_ms: int = INITIAL_SPEED_MS
    speed_increase: int = SPEED_INCREASE
    min_speed_ms: int = MIN_SPEED_MS
    decoys: int = NUM_DECOY_LETTERS
    max_strikes: int = MAX_STRIKES
    letter_points: int = LETTER_POINTS
    word_bonus_per_letter: int = WORD_BONUS_PER_LETTER
    life_token_chance: float = LIFE_TOKEN_CHANCE
    head_exclusion_radius: int = HEAD_EXCLUSION_RADIUS
    exclusion_metric: str = CHEBYSHEV
    spawn_attempts: int = SPAWN_ATTEMPTS
    input_buffer_size: int = INPUT_BUFFER_SIZE
    word_pause_ms: int = WORD_COMPLETE_PAUSE_MS
    wrap_walls: bool = False
    grow_on_target: bool = False  # growth hook; the classic game never grows
    show_grid: bool = True

    @property
    def wrap_mode(self) -> WrapMode:
        return WrapMode.WRAP if self.wrap_walls else WrapMode.SOLID

    def validate(self) -> None:
        """Raise ValueError with a readable message for any out-of-range setting."""
        _check_range("Grid width", self.grid_width, MIN_GRID_SIZE, MAX_GRID_SIZE)
        _check_range("Grid height", self.grid_height, MIN_GRID_SIZE, MAX_GRID_SIZE)
        _check_range("Cell size", self.cell_size, MIN_CELL_SIZE, MAX_CELL_SIZE)
        _check_range("Speed", self.speed_ms, MIN_SPEED_MS, MAX_SPEED_MS)
        _check_range("Minimum speed", self.min_speed_ms, MIN_SPEED_MS, self.speed_ms)
        _check_range("Initial length", self.initial_length, MIN_INITIAL_LENGTH, self.grid_width // 2)
        _check_range("Decoys", self.decoys, 0, MAX_DECOYS)
        _check_range("Max strikes", self.max_strikes, 1, 9)
        _check_range("Input buffer size", self.input_buffer_size, 1, 8)
        if self.speed_increase < 0:
            raise ValueError("Speed increase must be >= 0.")
        if self.head_exclusion_radius < 0:
            raise ValueError("Head exclusion radius must be >= 0.")
        if self.spawn_attempts <= 0:
            raise ValueError("Spawn attempts must be > 0.")
        if not 0.0 <= self.life_token_chance <= 1.0:
            raise ValueError("Life token chance must be between 0 and 1.")
        if self.exclusion_metric not in (CHEBYSHEV, MANHATTAN):
            raise ValueError(f"Unsupported exclusion metric: {self.exclusion_metric}")


def _check_range(label: str, value: int, low: int, high: int) -> None:
    if not (low <= value <= high):
        raise ValueError(f"{label} must be between {low} and {high}.")


class Cell(NamedTuple):
    """Board coordinate; (0, 0) is the top-left tile."""
    x: int
    y: int


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


@dataclass(frozen=True)
class Grid:
    """Pure coordinate space; owns no game state."""
    width: int
    height: int

    def contains(self, cell: Cell) -> bool:
        return 0 <= cell.x < self.width and 0 <= cell.y < self.height

    def resolve_move(self, head: Cell, direction: Direction, mode: WrapMode) -> Cell | None:
        """Return the cell one step from head, or None when a solid wall is hit."""
        x = head.x + direction.dx
        y = head.y + direction.dy

        # Wrap mode: crossing an edge re-enters from the opposite edge.
        if mode is WrapMode.WRAP:
            return Cell(x % self.width, y % self.height)
        candidate = Cell(x, y)
        if not self.contains(candidate):
            return None
        return candidate

    def distance(self, a: Cell, b: Cell, mode: WrapMode = WrapMode.SOLID, metric: str = CHEBYSHEV) -> int:
        """Tile distance between two cells; wrap mode measures across edges too."""
        dx = abs(a.x - b.x)
        dy = abs(a.y - b.y)
        if mode is WrapMode.WRAP:
            dx = min(dx, self.width - dx)
            dy = min(dy, self.height - dy)
        if metric == MANHATTAN:
            return dx + dy
        return max(dx, dy)

    def neighborhood(
        self,
        center: Cell,
        radius: int,
        mode: WrapMode = WrapMode.SOLID,
        metric: str = CHEBYSHEV,
    ) -> set[Cell]:
        """All in-bounds cells within radius of center (center included)."""
        cells: set[Cell] = set()
        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                if metric == MANHATTAN and abs(dx) + abs(dy) > radius:
                    continue
                x, y = center.x + dx, center.y + dy
                if mode is WrapMode.WRAP:
                    cells.add(Cell(x % self.width, y % self.height))
                elif 0 <= x < self.width and 0 <= y < self.height:
                    cells.add(Cell(x, y))
        return cells

    def random_cell(self, rng) -> Cell:
        return Cell(rng.randrange(self.width), rng.randrange(self.height))


class Snake:
    """Ordered body segments, head at index 0 and tail at the end."""
    def __init__(self, positions: list[Cell]) -> None:
        if not positions:
            raise ValueError("Snake needs at least one segment.")
        self.positions: deque[Cell] = deque(Cell(*p) for p in positions)
        self.body: set[Cell] = set(self.positions)  # O(1) collision lookup
        if len(self.body) != len(self.positions):
            raise ValueError("Snake segments must not overlap.")

    @classmethod
    def spawn(cls, grid: Grid, length: int) -> Snake:
        """Head a quarter of the way across, vertically centered, body extending left."""
        head_x = grid.width // 4
        center_y = grid.height // 2
        # Fallback for tiny boards / long initial snakes.
        if head_x - (length - 1) < 0:
            head_x = length - 1
        return cls([Cell(head_x - i, center_y) for i in range(length)])

    @property
    def head(self) -> Cell:
        return self.positions[0]

    @property
    def tail(self) -> Cell:
        return self.positions[-1]

    def __len__(self) -> int:
        return len(self.positions)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.positions)

    def __contains__(self, cell: object) -> bool:
        return cell in self.body

    def peek_next_head(self, direction: Direction, grid: Grid, mode: WrapMode) -> Cell | None:
        return grid.resolve_move(self.head, direction, mode)

    def collides_with_self(self, candidate: Cell, tail_vacates: bool = True) -> bool:
        """Test candidate against the pre-move body.

        The current tail only counts when it stays put this tick.
        """
        if candidate not in self.body:
            return False
        return not (tail_vacates and candidate == self.tail and len(self.positions) > 1)

    def advance(self, new_head: Cell, grow: bool = False) -> Cell | None:
        """Prepend new_head and pop the tail unless growing. Returns the vacated cell."""
        # Pop first so a head chasing its own tail keeps the body set consistent.
        vacated = None
        if not grow:
            vacated = self.positions.pop()
            self.body.discard(vacated)
        self.positions.appendleft(new_head)
        self.body.add(new_head)
        return vacated


class InputBuffer:
    """Bounded queue of pending turns; drops overflow and 180-degree reversals."""
    def __init__(self, heading: Direction = Direction.RIGHT, capacity: int = INPUT_BUFFER_SIZE) -> None:
        self.capacity = capacity
        self.heading = heading  # direction applied on the most recent tick
        self._pending: deque[Direction] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def pending(self) -> tuple[Direction, ...]:
        return tuple(self._pending)

    def push(self, direction: Direction) -> bool:
        """Queue a turn. Returns False when it was dropped."""
        if len(self._pending) >= self.capacity:
            return False
        latest = self._pending[-1] if self._pending else self.heading
        if direction is latest.opposite:
            return False
        self._pending.append(direction)
        return True

    def pop(self) -> Direction | None:
        """Consume one queued turn (once per tick); None keeps the heading."""
        if not self._pending:
            return None
        self.heading = self._pending.popleft()
        return self.heading

    def reset(self, heading: Direction = Direction.RIGHT) -> None:
        self.heading = heading
        self._pending.clear()
