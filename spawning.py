# Letter board placement: target letter, decoys, and the optional life token.
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import random
from typing import Iterable

try:
    from .game_logic import CHEBYSHEV, SPAWN_ATTEMPTS, Cell, Grid, WrapMode
except ImportError:
    from game_logic import CHEBYSHEV, SPAWN_ATTEMPTS, Cell, Grid, WrapMode


logger = logging.getLogger(__name__)

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class LetterKind(Enum):
    TARGET = "target"
    DECOY = "decoy"
    LIFE_TOKEN = "life_token"


@dataclass(frozen=True)
class Letter:
    """One pickup on the board. Life tokens carry no character."""
    cell: Cell
    kind: LetterKind
    char: str | None = None

    @property
    def is_target(self) -> bool:
        return self.kind is LetterKind.TARGET

    @property
    def is_decoy(self) -> bool:
        return self.kind is LetterKind.DECOY

    @property
    def is_life_token(self) -> bool:
        return self.kind is LetterKind.LIFE_TOKEN


@dataclass(frozen=True)
class SpawnResult:
    target: Letter | None
    decoys: tuple[Letter, ...]
    life_token: Letter | None = None
    omitted: int = 0  # items dropped because no free cell was found in time

    @property
    def letters(self) -> tuple[Letter, ...]:
        items: list[Letter] = []
        if self.target is not None:
            items.append(self.target)
        items.extend(self.decoys)
        if self.life_token is not None:
            items.append(self.life_token)
        return tuple(items)


def should_offer_life_token(strikes: int, chance: float, rng: random.Random | None = None) -> bool:
    """Life tokens only appear after a strike, and then only some of the time."""
    if strikes <= 0:
        return False
    rng = rng or random
    return rng.random() < chance


def random_empty_cell(
    grid: Grid,
    blocked: set[Cell],
    rng: random.Random | None = None,
    max_attempts: int = SPAWN_ATTEMPTS,
) -> Cell | None:
    """Rejection-sample a free cell; None once the attempt budget runs out."""
    rng = rng or random
    for _ in range(max_attempts):
        cell = grid.random_cell(rng)
        if cell not in blocked:
            return cell
    return None


def random_decoy_char(target_char: str, rng: random.Random | None = None) -> str:
    rng = rng or random
    return rng.choice([c for c in ALPHABET if c != target_char])


def plan_spawn(
    occupied: Iterable[Cell],
    head: Cell,
    target_char: str,
    decoy_count: int,
    include_life_token: bool,
    grid: Grid,
    head_exclusion_radius: int,
    *,
    mode: WrapMode = WrapMode.SOLID,
    metric: str = CHEBYSHEV,
    rng: random.Random | None = None,
    max_attempts: int = SPAWN_ATTEMPTS,
) -> SpawnResult:
    """Choose cells for a fresh letter board.

    Nothing spawns on `occupied` or within `head_exclusion_radius` of the head,
    and no two pickups share a cell. An item that cannot be placed within
    `max_attempts` draws is left out; later items are still attempted.
    """
    rng = rng or random
    blocked = set(occupied)
    blocked |= grid.neighborhood(head, head_exclusion_radius, mode, metric)
    omitted = 0

    target = None
    cell = random_empty_cell(grid, blocked, rng, max_attempts)
    if cell is not None:
        target = Letter(cell, LetterKind.TARGET, target_char)
        blocked.add(cell)
    else:
        omitted += 1
        logger.debug("No free cell for target letter %s", target_char)

    decoys: list[Letter] = []
    for _ in range(decoy_count):
        cell = random_empty_cell(grid, blocked, rng, max_attempts)
        if cell is None:
            omitted += 1
            continue
        decoys.append(Letter(cell, LetterKind.DECOY, random_decoy_char(target_char, rng)))
        blocked.add(cell)

    life_token = None
    if include_life_token:
        cell = random_empty_cell(grid, blocked, rng, max_attempts)
        if cell is not None:
            life_token = Letter(cell, LetterKind.LIFE_TOKEN)
        else:
            omitted += 1

    if omitted:
        logger.debug("Letter board is %d item(s) short on a crowded grid", omitted)
    return SpawnResult(target=target, decoys=tuple(decoys), life_token=life_token, omitted=omitted)
