from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml

from .errors import RosterError
from .report import ROLE_LABELS, format_selection, format_tally
from .rng import MASK64
from .roster import load_roster
from .selector import select_pair
from .tally import tally_draws

DEFAULT_ROSTER = "./students.csv"
DEFAULT_CONFIG = "config.yaml"
CONFIG_SECTIONS = ("roster", "roles")

log = logging.getLogger(__name__)


class ConfigError(Exception):
    pass


def load_config(path: str, required: bool = False) -> dict:
    """Read YAML settings. A missing optional config means no overrides."""
    if not required and not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Error: Could not open config file '{path}': {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Error: Failed to parse config file '{path}': {e}") from e
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"Error: Config file '{path}' must contain a mapping")
    for section in CONFIG_SECTIONS:
        if cfg.get(section) is not None and not isinstance(cfg[section], dict):
            raise ConfigError(f"Error: Config file '{path}': `{section}` must contain a mapping")
    return cfg


def resolve_path(explicit: Optional[str], default: str = DEFAULT_ROSTER) -> str:
    return explicit if explicit is not None else default


def canonical_path(path: str) -> str:
    """Absolute path when the file exists; otherwise the path as given."""
    try:
        return str(Path(path).resolve(strict=True))
    except (OSError, RuntimeError):
        return path


def _seed(value: str) -> int:
    try:
        seed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid seed {value!r}: not an integer")
    if not 0 <= seed <= MASK64:
        raise argparse.ArgumentTypeError(f"invalid seed {value!r}: must fit in an unsigned 64-bit integer")
    return seed


def _draw_count(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid draw count {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError("draw count must be at least 1")
    return n


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _labels(cfg: dict):
    roles = cfg.get("roles") or {}
    return (
        str(roles.get("primary", ROLE_LABELS[0])),
        str(roles.get("backup", ROLE_LABELS[1])),
    )


def main(argv: Sequence[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="duty-picks",
        description="Pick a primary and a backup duty holder at random from a CSV roster.",
    )
    ap.add_argument("input_file", nargs="?", help="roster CSV (id,name header)")
    ap.add_argument("-f", "--file", help="roster CSV, used when no positional path is given")
    ap.add_argument("--seed", type=_seed, help="seed for a reproducible draw")
    ap.add_argument("--config", help=f"YAML settings (default: {DEFAULT_CONFIG} if present)")
    ap.add_argument("--tally", type=_draw_count, metavar="N", help="run N draws and print how often each entry was picked")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        cfg = load_config(args.config or DEFAULT_CONFIG, required=args.config is not None)
        default_file = (cfg.get("roster") or {}).get("default_file", DEFAULT_ROSTER)
        explicit = args.input_file if args.input_file is not None else args.file
        path = canonical_path(resolve_path(explicit, str(default_file)))
        log.debug("roster path: %s", path)

        roster = load_roster(path)
        if args.tally is not None:
            print(format_tally(tally_draws(roster, args.tally, seed=args.seed)), end="")
        else:
            selection = select_pair(roster, args.seed)
            print(format_selection(selection, _labels(cfg)), end="")
    except (RosterError, ConfigError) as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
