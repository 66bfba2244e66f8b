# Built-in animal word list and the "pick a random unused word" helper.
from __future__ import annotations

from dataclasses import dataclass
import random
from typing import Callable, Iterable


@dataclass(frozen=True)
class Word:
    """An uppercase word to spell plus the glyph shown while spelling it."""
    text: str
    glyph: str = ""

    def __len__(self) -> int:
        return len(self.text)


# Ordered shortest first; difficulty filters by max length.
ANIMALS: tuple[Word, ...] = (
    # 3 letters
    Word("CAT", "\U0001F431"),
    Word("DOG", "\U0001F415"),
    Word("PIG", "\U0001F437"),
    Word("COW", "\U0001F404"),
    Word("HEN", "\U0001F414"),
    Word("BAT", "\U0001F987"),
    Word("BEE", "\U0001F41D"),
    Word("ANT", "\U0001F41C"),
    Word("OWL", "\U0001F989"),
    Word("FOX", "\U0001F98A"),
    # 4 letters
    Word("FISH", "\U0001F41F"),
    Word("DUCK", "\U0001F986"),
    Word("FROG", "\U0001F438"),
    Word("BEAR", "\U0001F43B"),
    Word("LION", "\U0001F981"),
    Word("DEER", "\U0001F98C"),
    Word("WOLF", "\U0001F43A"),
    Word("GOAT", "\U0001F410"),
    Word("BIRD", "\U0001F426"),
    Word("CRAB", "\U0001F980"),
    Word("SEAL", "\U0001F9AD"),
    # 5 letters
    Word("HORSE", "\U0001F434"),
    Word("SHEEP", "\U0001F411"),
    Word("MOUSE", "\U0001F42D"),
    Word("SNAKE", "\U0001F40D"),
    Word("WHALE", "\U0001F40B"),
    Word("SHARK", "\U0001F988"),
    Word("ZEBRA", "\U0001F993"),
    Word("TIGER", "\U0001F42F"),
    Word("PANDA", "\U0001F43C"),
    Word("KOALA", "\U0001F428"),
    Word("CAMEL", "\U0001F42A"),
    Word("BUNNY", "\U0001F430"),
    # 6 letters
    Word("MONKEY", "\U0001F435"),
    Word("RABBIT", "\U0001F407"),
    Word("TURTLE", "\U0001F422"),
    Word("PARROT", "\U0001F99C"),
    Word("SPIDER", "\U0001F577"),
    Word("TURKEY", "\U0001F983"),
    Word("WALRUS", "\U0001F9AD"),
    Word("LIZARD", "\U0001F98E"),
    # 7 letters
    Word("DOLPHIN", "\U0001F42C"),
    Word("PENGUIN", "\U0001F427"),
    Word("CHICKEN", "\U0001F414"),
    Word("HAMSTER", "\U0001F439"),
    Word("GIRAFFE", "\U0001F992"),
    Word("GORILLA", "\U0001F98D"),
    Word("ROOSTER", "\U0001F413"),
    # 8-9 letters
    Word("ELEPHANT", "\U0001F418"),
    Word("KANGAROO", "\U0001F998"),
    Word("HEDGEHOG", "\U0001F994"),
    Word("BUTTERFLY", "\U0001F98B"),
    Word("CROCODILE", "\U0001F40A"),
    Word("JELLYFISH", "\U0001FABC"),
    Word("DRAGONFLY", "\U0001FAB0"),
)

WordPicker = Callable[[set[str], int], Word]


def words_up_to(max_length: int, words: Iterable[Word] = ANIMALS) -> list[Word]:
    return [word for word in words if len(word) <= max_length]


def pick_word(
    excluding: set[str],
    max_length: int,
    words: Iterable[Word] = ANIMALS,
    rng: random.Random | None = None,
) -> Word:
    """Pick a random word no longer than max_length, skipping used ones.

    When every fitting word has been used the draw falls back to the full
    fitting list; the caller's exclusion set is never modified.
    """
    rng = rng or random
    fitting = words_up_to(max_length, words)
    if not fitting:
        raise ValueError(f"No words of length <= {max_length} available.")
    available = [word for word in fitting if word.text not in excluding]
    return rng.choice(available or fitting)


def make_picker(words: Iterable[Word] = ANIMALS, rng: random.Random | None = None) -> WordPicker:
    """Bind a word list and random source into a picker the tracker can call."""
    pool = tuple(words)

    def picker(excluding: set[str], max_length: int) -> Word:
        return pick_word(excluding, max_length, pool, rng)

    return picker
