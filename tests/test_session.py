"""
Tests for session.py - the per-tick state machine.
"""

import random

import pytest

from animals import Word, make_picker, pick_word
from game_logic import Cell, Direction, Snake, SpellingConfig
from session import GameOverCause, GameState, GameStateMachine, RoundPhase, TickEvent
from spawning import Letter, LetterKind


def target(x, y, char):
    return Letter(Cell(x, y), LetterKind.TARGET, char)


def decoy(x, y, char="Z"):
    return Letter(Cell(x, y), LetterKind.DECOY, char)


def life(x, y):
    return Letter(Cell(x, y), LetterKind.LIFE_TOKEN)


class TestStart:
    """Tests for starting and resetting a session."""

    def test_start_builds_a_fresh_board(self, make_machine):
        machine = make_machine("CAT")
        assert machine.state is GameState.ACTIVE
        assert list(machine.snake) == [Cell(5, 8), Cell(4, 8), Cell(3, 8)]
        assert machine.direction is Direction.RIGHT
        targets = [l for l in machine.letters.values() if l.is_target]
        assert len(targets) == 1 and targets[0].char == "C"
        assert sum(l.is_decoy for l in machine.letters.values()) == 5
        # Full health at start: never a life token.
        assert not any(l.is_life_token for l in machine.letters.values())

    def test_start_snapshot_is_round_started(self, make_machine):
        machine = make_machine("CAT")
        result = machine.snapshot()
        assert result.word.text == "CAT"
        assert machine.restart().event is TickEvent.ROUND_STARTED

    def test_restart_resets_score_and_history(self, make_machine):
        machine = make_machine("CAT")
        machine.progress.score = 120
        machine.progress.strikes = 2
        machine.restart()
        assert machine.progress.score == 0
        assert machine.progress.strikes == 0
        assert machine.progress.level == 1
        assert machine.progress.history == {"CAT"}

    def test_empty_word_ends_session_at_start(self):
        machine = GameStateMachine(SpellingConfig(), lambda excluding, max_length: Word(""), random.Random(0))
        result = machine.start()
        assert result.event is TickEvent.GAME_OVER
        assert result.cause is GameOverCause.CONFIGURATION
        assert machine.state is GameState.TERMINATING
        assert machine.tick() is None

    def test_no_fitting_word_ends_session_at_start(self):
        """A pool with only long words cannot start level 1."""
        picker = make_picker([Word("ELEPHANT")], random.Random(0))
        machine = GameStateMachine(SpellingConfig(), picker, random.Random(0))
        result = machine.start()
        assert result.event is TickEvent.GAME_OVER
        assert result.cause is GameOverCause.CONFIGURATION
        assert machine.state is GameState.TERMINATING

    def test_tick_before_start_does_nothing(self):
        machine = GameStateMachine()
        assert machine.state is GameState.IDLE
        assert machine.tick() is None
        assert machine.push_direction(Direction.UP) is False

    def test_return_to_menu_goes_idle(self, make_machine):
        machine = make_machine("CAT")
        machine.return_to_menu()
        assert machine.state is GameState.IDLE
        assert machine.progress is None
        assert machine.tick() is None


class TestScenarios:
    """Pinned single-tick scenarios on the default 22x16 board."""

    def test_target_pickup_advances_word(self, make_machine):
        """Scenario A: target ahead, one tick later it is collected."""
        machine = make_machine("CAT", wrap_walls=True)
        machine.place_letters([target(6, 8, "C")])
        result = machine.tick()
        assert result.event is TickEvent.LETTER_ADVANCED
        assert result.snake == (Cell(6, 8), Cell(5, 8), Cell(4, 8))
        assert result.letter_index == 1
        assert result.score == 10
        # Fresh board for the next letter.
        targets = [l for l in result.letters if l.is_target]
        assert len(targets) == 1 and targets[0].char == "A"

    def test_decoy_pickup_costs_a_strike(self, make_machine):
        """Scenario B: wrong letter adds a strike and nothing else."""
        machine = make_machine("CAT", wrap_walls=True)
        machine.place_letters([decoy(6, 8, "X"), target(10, 2, "C")])
        result = machine.tick()
        assert result.event is TickEvent.DECOY_HIT
        assert result.strikes == 1
        assert result.score == 0
        assert result.letter_index == 0
        assert len(result.snake) == 3
        # Remaining letters stay where they were.
        assert [l.cell for l in result.letters] == [Cell(10, 2)]

    def test_forced_reversal_is_self_collision(self, make_machine):
        """Scenario C: a reversal that bypasses the buffer still kills the snake."""
        machine = make_machine("CAT")
        machine.inputs.heading = Direction.LEFT
        result = machine.tick()
        assert result.event is TickEvent.GAME_OVER
        assert result.cause is GameOverCause.SELF_COLLISION
        assert machine.state is GameState.TERMINATING
        assert machine.tick() is None

    def test_buffered_reversal_never_reaches_the_tick(self, make_machine):
        machine = make_machine("CAT")
        machine.place_letters([])
        assert machine.push_direction(Direction.LEFT) is False
        result = machine.tick()
        assert result.event is TickEvent.MOVED
        assert result.snake[0] == Cell(6, 8)

    def test_third_strike_ends_game_on_same_tick(self, make_machine):
        """Scenario D: the strike that reaches the maximum is game over at once."""
        machine = make_machine("CAT")
        machine.progress.strikes = 2
        machine.place_letters([decoy(6, 8)])
        result = machine.tick()
        assert result.event is TickEvent.GAME_OVER
        assert result.cause is GameOverCause.STRIKES
        assert result.strikes == 3
        assert machine.tick() is None

    def test_last_letter_completes_word(self, make_machine):
        """Scenario E: completing the word clears the board and pays the bonus."""
        machine = make_machine("CAT", "DOG")
        machine.progress.letter_index = 2
        machine.progress.score = 20
        machine.place_letters([target(6, 8, "T"), decoy(12, 3)])
        result = machine.tick()
        assert result.event is TickEvent.WORD_COMPLETE
        assert result.score == 20 + 10 + 3 * 10
        assert result.letter_index == 3
        assert result.letters == ()
        assert result.phase is RoundPhase.WORD_COMPLETE
        assert result.words_completed == 1

        advanced = machine.advance_level()
        assert advanced.event is TickEvent.ROUND_STARTED
        assert advanced.level == 2
        assert advanced.speed_ms == 150 - 3
        assert advanced.word.text == "DOG"
        assert advanced.letter_index == 0
        assert advanced.phase is RoundPhase.RUNNING
        assert any(l.is_target and l.char == "D" for l in advanced.letters)

    def test_speed_clamps_at_floor_on_advance(self, make_machine):
        machine = make_machine("CAT", "DOG", speed_ms=82)
        machine.progress.letter_index = 2
        machine.place_letters([target(6, 8, "T")])
        machine.tick()
        assert machine.advance_level().speed_ms == 80


class TestRules:
    """Collision ordering, edges, and the word-complete pause."""

    def test_solid_wall_ends_game(self, make_machine):
        machine = make_machine("CAT")
        machine.snake = Snake([Cell(21, 8), Cell(20, 8), Cell(19, 8)])
        result = machine.tick()
        assert result.event is TickEvent.GAME_OVER
        assert result.cause is GameOverCause.WALL
        # Snake is left as it was before the fatal move.
        assert result.snake[0] == Cell(21, 8)

    def test_wrap_mode_crosses_edge(self, make_machine):
        machine = make_machine("CAT", wrap_walls=True)
        machine.snake = Snake([Cell(21, 8), Cell(20, 8), Cell(19, 8)])
        machine.place_letters([])
        result = machine.tick()
        assert result.event is TickEvent.MOVED
        assert result.snake[0] == Cell(0, 8)

    def test_set_wrap_mode_applies_next_tick(self, make_machine):
        machine = make_machine("CAT")
        machine.snake = Snake([Cell(21, 8), Cell(20, 8), Cell(19, 8)])
        machine.place_letters([])
        machine.set_wrap_mode(True)
        assert machine.tick().snake[0] == Cell(0, 8)

    def test_self_collision_beats_pickup(self, make_machine):
        """A letter sitting on the body does not save the snake."""
        machine = make_machine("CAT")
        machine.snake = Snake([Cell(5, 8), Cell(5, 9), Cell(6, 9), Cell(6, 8), Cell(6, 7)])
        machine.place_letters([target(6, 8, "C")])
        result = machine.tick()
        assert result.cause is GameOverCause.SELF_COLLISION
        assert result.score == 0
        assert result.letter_index == 0

    def test_chasing_the_tail_is_allowed(self, make_machine):
        machine = make_machine("CAT")
        machine.snake = Snake([Cell(5, 8), Cell(5, 9), Cell(6, 9), Cell(6, 8)])
        machine.place_letters([])
        result = machine.tick()
        assert result.event is TickEvent.MOVED
        assert result.snake == (Cell(6, 8), Cell(5, 8), Cell(5, 9), Cell(6, 9))

    def test_life_token_restores_strike(self, make_machine):
        machine = make_machine("CAT")
        machine.progress.strikes = 2
        machine.place_letters([life(6, 8)])
        result = machine.tick()
        assert result.event is TickEvent.LIFE_RESTORED
        assert result.strikes == 1
        assert result.score == 0
        assert len(result.snake) == 3

    def test_target_pickup_never_grows_by_default(self, make_machine):
        machine = make_machine("CAT")
        machine.place_letters([target(6, 8, "C")])
        assert len(machine.tick().snake) == 3

    def test_growth_hook_keeps_tail_on_target(self, make_machine):
        machine = make_machine("CAT", grow_on_target=True)
        machine.place_letters([target(6, 8, "C")])
        assert len(machine.tick().snake) == 4

    def test_snake_keeps_moving_during_word_complete_pause(self, make_machine):
        machine = make_machine("CAT")
        machine.progress.letter_index = 2
        machine.place_letters([target(6, 8, "T")])
        machine.tick()
        result = machine.tick()
        assert result.event is TickEvent.MOVED
        assert result.snake[0] == Cell(7, 8)
        assert result.letters == ()
        assert result.phase is RoundPhase.WORD_COMPLETE

    def test_advance_level_outside_pause_is_ignored(self, make_machine):
        machine = make_machine("CAT")
        assert machine.advance_level() is None
        assert machine.progress.level == 1

    def test_bad_next_word_ends_session(self, make_machine):
        machine = make_machine("CAT", "")
        machine.progress.letter_index = 2
        machine.place_letters([target(6, 8, "T")])
        machine.tick()
        result = machine.advance_level()
        assert result.event is TickEvent.GAME_OVER
        assert result.cause is GameOverCause.CONFIGURATION
        assert machine.state is GameState.TERMINATING

    def test_empty_pool_at_next_word_ends_session(self, rng):
        """Running out of fitting words between rounds is game over, not a stuck pause."""

        def picker(excluding, max_length):
            pool = [Word("ELEPHANT")] if excluding else [Word("CAT")]
            return pick_word(excluding, max_length, pool, rng)

        machine = GameStateMachine(SpellingConfig(), picker, rng)
        machine.start()
        machine.progress.letter_index = 2
        machine.place_letters([target(6, 8, "T")])
        assert machine.tick().event is TickEvent.WORD_COMPLETE
        result = machine.advance_level()
        assert result.event is TickEvent.GAME_OVER
        assert result.cause is GameOverCause.CONFIGURATION
        assert machine.progress.level == 1

    def test_buffered_turns_apply_one_per_tick(self, make_machine):
        machine = make_machine("CAT")
        machine.place_letters([])
        machine.push_direction(Direction.UP)
        machine.push_direction(Direction.LEFT)
        assert machine.tick().snake[0] == Cell(5, 7)
        assert machine.tick().snake[0] == Cell(4, 7)
        assert machine.tick().snake[0] == Cell(3, 7)

    def test_snapshot_is_immutable(self, make_machine):
        machine = make_machine("CAT")
        result = machine.snapshot()
        with pytest.raises(AttributeError):
            result.score = 99
