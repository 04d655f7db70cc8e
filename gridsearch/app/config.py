# gridsearch/app/config.py
#!/usr/bin/env python3
"""
Viewer settings.

- ENV: GRIDSEARCH_SIZE, GRIDSEARCH_FILL, GRIDSEARCH_SEED, GRIDSEARCH_ALGO, GRIDSEARCH_LOG
- CLI: --size=25 --fill=0.3 --seed=7 --algo=bfs --log=DEBUG  (override ENV)
"""

import os
import sys
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from gridsearch.core.searchers import available_searchers

MIN_GRID_SIZE = 2
MAX_GRID_SIZE = 200
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_ENV_KEYS = {
    "size": "GRIDSEARCH_SIZE",
    "fill": "GRIDSEARCH_FILL",
    "seed": "GRIDSEARCH_SEED",
    "algo": "GRIDSEARCH_ALGO",
    "log": "GRIDSEARCH_LOG",
}


@dataclass
class Settings:
    grid_size: int = 25
    fill_percent: float = 0.3
    seed: Optional[int] = None
    algo: str = "bfs"
    log_level: str = "WARNING"


def _raw_values(argv: List[str], environ: Mapping[str, str]) -> Dict[str, str]:
    raw: Dict[str, str] = {}
    for key, env_name in _ENV_KEYS.items():
        if environ.get(env_name):
            raw[key] = environ[env_name]
    for arg in argv:
        if not arg.startswith("--") or "=" not in arg:
            continue
        key, value = arg[2:].split("=", 1)
        if key in _ENV_KEYS:
            raw[key] = value
    return raw


def _as_int(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{key}: expected an integer, got {value!r}") from None


def resolve_settings(argv: Optional[List[str]] = None,
                     environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment, then --key=value flags."""
    if argv is None:
        argv = sys.argv[1:]
    if environ is None:
        environ = os.environ
    raw = _raw_values(argv, environ)
    settings = Settings()

    if "size" in raw:
        size = _as_int("size", raw["size"])
        if not MIN_GRID_SIZE <= size <= MAX_GRID_SIZE:
            raise ValueError(f"size: must be in [{MIN_GRID_SIZE}, {MAX_GRID_SIZE}], got {size}")
        settings.grid_size = size

    if "fill" in raw:
        try:
            fill = float(raw["fill"])
        except ValueError:
            raise ValueError(f"fill: expected a number, got {raw['fill']!r}") from None
        if not 0.0 <= fill <= 1.0:
            raise ValueError(f"fill: must be in [0, 1], got {fill}")
        settings.fill_percent = fill

    if "seed" in raw:
        settings.seed = _as_int("seed", raw["seed"])

    if "algo" in raw:
        algo = raw["algo"].lower()
        if algo not in available_searchers():
            raise ValueError(f"algo: unknown algorithm {raw['algo']!r}")
        settings.algo = algo

    if "log" in raw:
        level = raw["log"].upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log: unknown level {raw['log']!r}")
        settings.log_level = level

    return settings
