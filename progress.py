# Word progress, scoring, strikes, and level/speed progression.
from __future__ import annotations

from enum import Enum
import logging

try:
    from .animals import Word, WordPicker, pick_word
    from .game_logic import SpellingConfig
except ImportError:
    from animals import Word, WordPicker, pick_word
    from game_logic import SpellingConfig


logger = logging.getLogger(__name__)

# (first level, last level, max word length)
DIFFICULTY = (
    (1, 3, 3),
    (4, 6, 4),
    (7, 10, 5),
    (11, 15, 6),
    (16, 999, 9),
)
MAX_WORD_LENGTH = 9


class ConfigurationError(ValueError):
    """The word supplied for a round cannot be played."""


class ProgressEvent(Enum):
    NONE = "none"
    LETTER_ADVANCED = "letter_advanced"
    WORD_COMPLETE = "word_complete"
    DECOY_HIT = "decoy_hit"
    EXHAUSTED = "exhausted"
    LIFE_RESTORED = "life_restored"


def max_word_length_for_level(level: int) -> int:
    for first, last, max_length in DIFFICULTY:
        if first <= level <= last:
            return max_length
    return MAX_WORD_LENGTH


def check_word(word: Word) -> Word:
    text = word.text
    if not text or not text.isascii() or not text.isalpha() or not text.isupper():
        raise ConfigurationError(f"Word {text!r} must be non-empty uppercase A-Z.")
    return word


class ProgressTracker:
    """Per-session spelling progress; one classified event per tick."""
    def __init__(
        self,
        config: SpellingConfig,
        picker: WordPicker = pick_word,
        word: Word | None = None,
    ) -> None:
        self.config = config
        self.picker = picker
        self.history: set[str] = set()  # words used this session
        self.letter_index = 0
        self.score = 0
        self.level = 1
        self.strikes = 0
        self.speed_ms = config.speed_ms
        self.words_completed = 0
        self.word = self._accept(word if word is not None else self._draw())

    @property
    def max_word_length(self) -> int:
        return max_word_length_for_level(self.level)

    @property
    def target_char(self) -> str | None:
        """Next letter needed, or None once the word is spelled."""
        if self.letter_index >= len(self.word.text):
            return None
        return self.word.text[self.letter_index]

    @property
    def is_word_complete(self) -> bool:
        return self.letter_index >= len(self.word.text)

    @property
    def collected(self) -> str:
        return self.word.text[: self.letter_index]

    def _draw(self, level: int | None = None) -> Word:
        """Ask the picker for a playable word for `level` (default: current)."""
        max_length = max_word_length_for_level(self.level if level is None else level)
        try:
            word = self.picker(set(self.history), max_length)
        except ConfigurationError:
            raise
        except ValueError as exc:
            # An empty word pool ends the session like an unplayable word.
            raise ConfigurationError(str(exc)) from exc
        return check_word(word)

    def _accept(self, word: Word) -> Word:
        check_word(word)
        self.history.add(word.text)
        self.letter_index = 0
        return word

    def on_move(self) -> ProgressEvent:
        return ProgressEvent.NONE

    def on_decoy_hit(self) -> ProgressEvent:
        self.strikes = min(self.config.max_strikes, self.strikes + 1)
        if self.strikes >= self.config.max_strikes:
            return ProgressEvent.EXHAUSTED
        return ProgressEvent.DECOY_HIT

    def on_target_hit(self) -> ProgressEvent:
        self.score += self.config.letter_points
        self.letter_index += 1
        if self.is_word_complete:
            self.score += len(self.word.text) * self.config.word_bonus_per_letter
            self.words_completed += 1
            return ProgressEvent.WORD_COMPLETE
        return ProgressEvent.LETTER_ADVANCED

    def on_life_token_hit(self) -> ProgressEvent:
        self.strikes = max(0, self.strikes - 1)
        return ProgressEvent.LIFE_RESTORED

    def advance_level(self) -> Word:
        """Move to the next word; speeds the game up down to the floor.

        Raises ConfigurationError if the picker hands back an unplayable word,
        in which case level and speed are left untouched.
        """
        level = self.level + 1
        word = self._draw(level)
        self.level = level
        self.speed_ms = max(self.config.min_speed_ms, self.speed_ms - self.config.speed_increase)
        self.word = self._accept(word)
        logger.debug("Level %d: spelling %s at %d ms", self.level, word.text, self.speed_ms)
        return self.word
