from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .rng import BitSource, gen_range_inclusive, make_source
from .roster import Record

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    primary: Record
    backup: Record
    positions: Tuple[int, int]


def sample_positions(source: BitSource, length: int, amount: int = 2) -> List[int]:
    """Floyd's sampling of `amount` distinct positions out of `length`.

    Positions come back in draw order: when a draw collides with an already
    chosen position t, the new position j is inserted just before t, which
    keeps every ordering equally likely without a separate shuffle.
    """
    if amount > length:
        raise ValueError(f"cannot sample {amount} positions out of {length}")
    chosen: List[int] = []
    for j in range(length - amount, length):
        t = gen_range_inclusive(source, j)
        if t in chosen:
            chosen.insert(chosen.index(t), j)
        else:
            chosen.append(t)
    return chosen


def select_pair(
    roster: Sequence[Record],
    seed: Optional[int] = None,
    *,
    source: Optional[BitSource] = None,
) -> Selection:
    """Pick primary and backup from two distinct roster positions.

    Callers must pass a roster of at least two records (load_roster enforces
    this). An explicit `source` takes precedence over `seed`; reusing one
    source across calls continues its stream.
    """
    if source is None:
        source = make_source(seed)
    first, second = sample_positions(source, len(roster), 2)
    log.debug("drew positions %d, %d of %d", first, second, len(roster))
    return Selection(primary=roster[first], backup=roster[second], positions=(first, second))
