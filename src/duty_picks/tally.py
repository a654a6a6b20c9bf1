from __future__ import annotations
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .rng import make_source
from .roster import Record
from .selector import select_pair


def tally_draws(roster: Sequence[Record], draws: int, seed: Optional[int] = None) -> pd.DataFrame:
    """Repeat the draw `draws` times on one bit source and count roles per position.

    With a seed the whole tally is reproducible, since every draw continues
    the same stream.
    """
    if draws < 1:
        raise ValueError(f"draws must be at least 1, got {draws}")
    source = make_source(seed)
    history = np.array(
        [select_pair(roster, source=source).positions for _ in range(draws)],
        dtype=np.int64,
    )
    n = len(roster)
    df = pd.DataFrame({
        "position": np.arange(n),
        "id": [r.id for r in roster],
        "name": [r.name for r in roster],
        "primary": np.bincount(history[:, 0], minlength=n),
        "backup": np.bincount(history[:, 1], minlength=n),
    })
    df["total"] = df["primary"] + df["backup"]
    return df
