# Headless helpers: board encoding, text rendering, autopilot, and game statistics.
from __future__ import annotations

import random
from typing import Callable

import numpy as np

try:
    from .animals import make_picker
    from .game_logic import Cell, Direction, SpellingConfig
    from .session import GameOverCause, GameStateMachine, RoundPhase, StepResult, TickEvent
except ImportError:
    from animals import make_picker
    from game_logic import Cell, Direction, SpellingConfig
    from session import GameOverCause, GameStateMachine, RoundPhase, StepResult, TickEvent


EMPTY = 0.0
BODY = -0.5
HEAD = 1.0
LETTER = 0.5
LIFE_TOKEN = 0.25


def encode_board(result: StepResult) -> np.ndarray:
    """
    Board encoding, shape (height, width):
    - 0.0: empty
    - 0.5: letter (target and decoys look the same)
    - 0.25: life token
    - -0.5: snake body
    - 1.0: snake head
    """
    board = np.full((result.height, result.width), EMPTY, dtype=np.float32)

    for letter in result.letters:
        board[letter.cell.y, letter.cell.x] = LIFE_TOKEN if letter.is_life_token else LETTER

    for idx, (x, y) in enumerate(result.snake):
        board[y, x] = HEAD if idx == 0 else BODY

    return board


def render_board(result: StepResult) -> str:
    """
    Text board with (0, 0) at the top left:
    . = empty, H = head, o = body, + = life token, letters as themselves.
    """
    rows = [["." for _ in range(result.width)] for _ in range(result.height)]
    for letter in result.letters:
        rows[letter.cell.y][letter.cell.x] = "+" if letter.is_life_token else letter.char
    for idx, (x, y) in enumerate(result.snake):
        rows[y][x] = "H" if idx == 0 else "o"

    lines = [f"{y:2d} {' '.join(row)}" for y, row in enumerate(rows)]
    lines.append("   " + " ".join(str(x % 10) for x in range(result.width)))
    return "\n".join(lines)


def _is_fatal(machine: GameStateMachine, direction: Direction) -> bool:
    candidate = machine.snake.peek_next_head(direction, machine.grid, machine.wrap_mode)
    if candidate is None:
        return True
    if machine.snake.collides_with_self(candidate):
        return True
    letter = machine.letters.get(candidate)
    # A decoy on the last strike ends the game just as surely.
    return (
        letter is not None
        and letter.is_decoy
        and machine.progress is not None
        and machine.progress.strikes + 1 >= machine.config.max_strikes
    )


def target_cell(machine: GameStateMachine) -> Cell | None:
    for letter in machine.letters.values():
        if letter.is_target:
            return letter.cell
    return None


def greedy_direction(machine: GameStateMachine) -> Direction:
    """Steer toward the target letter, preferring moves that avoid decoys and death."""
    current = machine.direction
    options = [d for d in Direction if d is not current.opposite]
    goal = target_cell(machine)
    grid = machine.grid

    def rank(direction: Direction) -> tuple[int, int, int]:
        candidate = machine.snake.peek_next_head(direction, grid, machine.wrap_mode)
        fatal = int(_is_fatal(machine, direction))
        if candidate is None:
            return fatal, 1, 10**9
        letter = machine.letters.get(candidate)
        decoy = int(letter is not None and letter.is_decoy)
        dist = grid.distance(candidate, goal, machine.wrap_mode) if goal is not None else 0
        return fatal, decoy, dist

    return min(options, key=lambda d: (rank(d), d is not current))


def run_game(
    config: SpellingConfig | None = None,
    rng: random.Random | None = None,
    max_steps: int = 5000,
    policy: Callable[[GameStateMachine], Direction] = greedy_direction,
    on_step: Callable[[StepResult], None] | None = None,
) -> tuple[int, int, int, GameOverCause | None]:
    """Play one game headlessly; the word-complete pause is skipped.

    Returns (score, words_completed, steps, cause); cause is None when
    max_steps ran out first.
    """
    rng = rng or random.Random()
    machine = GameStateMachine(config or SpellingConfig(), make_picker(rng=rng), rng)
    result = machine.start()
    steps = 0

    while machine.is_active and steps < max_steps:
        if machine.phase is RoundPhase.WORD_COMPLETE:
            result = machine.advance_level()
            if result is not None and on_step is not None:
                on_step(result)
            continue
        machine.push_direction(policy(machine))
        result = machine.tick()
        steps += 1
        if on_step is not None:
            on_step(result)
        if result.event is TickEvent.GAME_OVER:
            break

    return result.score, result.words_completed, steps, machine.cause


def score_summary(scores: list[float]) -> dict[str, float]:
    """Mean/median/spread of a batch of game scores."""
    arr = np.asarray(scores, dtype=np.float32)
    if arr.size == 0:
        raise ValueError("scores must not be empty")
    return {
        "mean": float(arr.mean()),
        "median": float(np.median(arr)),
        "min": float(arr.min()),
        "max": float(arr.max()),
        "std": float(arr.std()),
        "p25": float(np.percentile(arr, 25)),
        "p75": float(np.percentile(arr, 75)),
    }
