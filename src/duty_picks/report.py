from __future__ import annotations
from typing import Tuple

import pandas as pd

from .selector import Selection

ROLE_LABELS = ("正担当", "副担当")


def format_selection(selection: Selection, labels: Tuple[str, str] = ROLE_LABELS) -> str:
    primary_label, backup_label = labels
    p, b = selection.primary, selection.backup
    return (
        f"{primary_label}: {p.id} {p.name}\n"
        f"{backup_label}: {b.id} {b.name}\n"
    )


def format_tally(frame: pd.DataFrame) -> str:
    if frame.empty:
        return "No draws.\n"
    return frame.to_string(index=False) + "\n"
