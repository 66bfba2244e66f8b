# One Spelling Snake session: the per-tick state machine and its snapshots.
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import random

try:
    from .animals import Word, WordPicker, pick_word
    from .game_logic import Cell, Direction, Grid, InputBuffer, Snake, SpellingConfig, WrapMode
    from .progress import ConfigurationError, ProgressEvent, ProgressTracker
    from .spawning import Letter, plan_spawn, should_offer_life_token
except ImportError:
    from animals import Word, WordPicker, pick_word
    from game_logic import Cell, Direction, Grid, InputBuffer, Snake, SpellingConfig, WrapMode
    from progress import ConfigurationError, ProgressEvent, ProgressTracker
    from spawning import Letter, plan_spawn, should_offer_life_token


logger = logging.getLogger(__name__)


class GameState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    TERMINATING = "terminating"


class RoundPhase(Enum):
    RUNNING = "running"
    WORD_COMPLETE = "word_complete"  # board cleared, snake still moving


class TickEvent(Enum):
    ROUND_STARTED = "round_started"
    MOVED = "moved"
    LETTER_ADVANCED = "letter_advanced"
    WORD_COMPLETE = "word_complete"
    DECOY_HIT = "decoy_hit"
    LIFE_RESTORED = "life_restored"
    GAME_OVER = "game_over"


class GameOverCause(Enum):
    WALL = "wall"
    SELF_COLLISION = "self_collision"
    STRIKES = "strikes"
    CONFIGURATION = "configuration"


_PROGRESS_TO_TICK = {
    ProgressEvent.NONE: TickEvent.MOVED,
    ProgressEvent.LETTER_ADVANCED: TickEvent.LETTER_ADVANCED,
    ProgressEvent.WORD_COMPLETE: TickEvent.WORD_COMPLETE,
    ProgressEvent.DECOY_HIT: TickEvent.DECOY_HIT,
    ProgressEvent.LIFE_RESTORED: TickEvent.LIFE_RESTORED,
}


@dataclass(frozen=True)
class StepResult:
    """Immutable view of the session handed to presentation after each step."""
    event: TickEvent
    snake: tuple[Cell, ...]
    letters: tuple[Letter, ...]
    width: int
    height: int
    direction: Direction
    score: int
    level: int
    strikes: int
    max_strikes: int
    speed_ms: int
    word: Word | None
    letter_index: int
    words_completed: int
    phase: RoundPhase
    state: GameState
    cause: GameOverCause | None = None

    @property
    def is_game_over(self) -> bool:
        return self.event is TickEvent.GAME_OVER

    @property
    def head(self) -> Cell | None:
        return self.snake[0] if self.snake else None


class GameStateMachine:
    """Owns the snake, letter board, and progress for one game session.

    A periodic scheduler calls `tick()`; input only ever lands in
    `inputs` through `push_direction()`.
    """
    def __init__(
        self,
        config: SpellingConfig | None = None,
        picker: WordPicker = pick_word,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or SpellingConfig()
        self.picker = picker
        self.rng = rng or random.Random()
        self.state = GameState.IDLE
        self.phase = RoundPhase.RUNNING
        self.cause: GameOverCause | None = None
        self._reset_board()
        self.progress: ProgressTracker | None = None

    @property
    def grid(self) -> Grid:
        return Grid(self.config.grid_width, self.config.grid_height)

    @property
    def wrap_mode(self) -> WrapMode:
        return self.config.wrap_mode

    @property
    def direction(self) -> Direction:
        return self.inputs.heading

    @property
    def speed_ms(self) -> int:
        if self.progress is None:
            return self.config.speed_ms
        return self.progress.speed_ms

    @property
    def is_active(self) -> bool:
        return self.state is GameState.ACTIVE

    def _reset_board(self) -> None:
        self.snake = Snake.spawn(self.grid, self.config.initial_length)
        self.inputs = InputBuffer(Direction.RIGHT, self.config.input_buffer_size)
        self.letters: dict[Cell, Letter] = {}

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------

    def start(self) -> StepResult:
        """Reset everything and begin a new session with a fresh word."""
        self._reset_board()
        self.phase = RoundPhase.RUNNING
        self.cause = None
        try:
            self.progress = ProgressTracker(self.config, self.picker)
        except ConfigurationError as exc:
            logger.warning("Refusing to start: %s", exc)
            self.progress = None
            return self._terminate(GameOverCause.CONFIGURATION)
        self.state = GameState.ACTIVE
        self.respawn_letters()
        return self.snapshot(TickEvent.ROUND_STARTED)

    def restart(self) -> StepResult:
        return self.start()

    def return_to_menu(self) -> None:
        self.state = GameState.IDLE
        self.phase = RoundPhase.RUNNING
        self.cause = None
        self.progress = None
        self._reset_board()

    def set_wrap_mode(self, wrap: bool) -> None:
        """Switch edge policy; applies from the next tick."""
        self.config.wrap_walls = bool(wrap)

    def push_direction(self, direction: Direction) -> bool:
        if not self.is_active:
            return False
        return self.inputs.push(direction)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self) -> StepResult | None:
        """Advance one step. Returns None when the session is not active."""
        if not self.is_active or self.progress is None:
            return None

        self.inputs.pop()
        candidate = self.grid.resolve_move(self.snake.head, self.direction, self.wrap_mode)
        if candidate is None:
            return self._terminate(GameOverCause.WALL)

        letter = self.letters.get(candidate)
        grow = self.config.grow_on_target and letter is not None and letter.is_target

        # Death wins over pickup: test the pre-move body before mutating.
        if self.snake.collides_with_self(candidate, tail_vacates=not grow):
            return self._terminate(GameOverCause.SELF_COLLISION)

        self.snake.advance(candidate, grow=grow)

        outcome = self._collect(letter)
        if outcome is ProgressEvent.EXHAUSTED:
            return self._terminate(GameOverCause.STRIKES)
        if outcome is ProgressEvent.WORD_COMPLETE:
            # Board stays empty until the deferred next-word transition.
            self.letters.clear()
            self.phase = RoundPhase.WORD_COMPLETE
        elif outcome is ProgressEvent.LETTER_ADVANCED:
            self.respawn_letters()
        return self.snapshot(_PROGRESS_TO_TICK[outcome])

    def _collect(self, letter: Letter | None) -> ProgressEvent:
        if letter is None:
            return self.progress.on_move()
        del self.letters[letter.cell]
        if letter.is_target:
            return self.progress.on_target_hit()
        if letter.is_life_token:
            return self.progress.on_life_token_hit()
        return self.progress.on_decoy_hit()

    def advance_level(self) -> StepResult | None:
        """Leave the word-complete pause: next word, faster speed, new board."""
        if not self.is_active or self.phase is not RoundPhase.WORD_COMPLETE:
            return None
        try:
            self.progress.advance_level()
        except ConfigurationError as exc:
            logger.warning("Cannot start next word: %s", exc)
            return self._terminate(GameOverCause.CONFIGURATION)
        self.phase = RoundPhase.RUNNING
        self.respawn_letters()
        return self.snapshot(TickEvent.ROUND_STARTED)

    def respawn_letters(self) -> None:
        """Replace the whole letter board for the current target."""
        progress = self.progress
        self.letters.clear()
        if progress is None or progress.target_char is None:
            return
        spawn = plan_spawn(
            self.snake.body,
            self.snake.head,
            progress.target_char,
            self.config.decoys,
            should_offer_life_token(progress.strikes, self.config.life_token_chance, self.rng),
            self.grid,
            self.config.head_exclusion_radius,
            mode=self.wrap_mode,
            metric=self.config.exclusion_metric,
            rng=self.rng,
            max_attempts=self.config.spawn_attempts,
        )
        self.letters = {letter.cell: letter for letter in spawn.letters}

    def place_letters(self, letters: list[Letter]) -> None:
        """Replace the board with a fixed layout (scripted levels, tests)."""
        self.letters = {letter.cell: letter for letter in letters}

    def _terminate(self, cause: GameOverCause) -> StepResult:
        self.state = GameState.TERMINATING
        self.cause = cause
        self.inputs.reset(self.inputs.heading)
        logger.info("Game over (%s)", cause.value)
        return self.snapshot(TickEvent.GAME_OVER, cause)

    def snapshot(self, event: TickEvent = TickEvent.MOVED, cause: GameOverCause | None = None) -> StepResult:
        progress = self.progress
        return StepResult(
            event=event,
            snake=tuple(self.snake),
            letters=tuple(self.letters.values()),
            width=self.config.grid_width,
            height=self.config.grid_height,
            direction=self.direction,
            score=progress.score if progress else 0,
            level=progress.level if progress else 1,
            strikes=progress.strikes if progress else 0,
            max_strikes=self.config.max_strikes,
            speed_ms=self.speed_ms,
            word=progress.word if progress else None,
            letter_index=progress.letter_index if progress else 0,
            words_completed=progress.words_completed if progress else 0,
            phase=self.phase,
            state=self.state,
            cause=cause,
        )
