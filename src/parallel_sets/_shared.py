# parallel-sets/src/parallel_sets/_shared.py
from __future__ import annotations

import os
import sys
from typing import Any

import numpy as np
import pandas as pd

# -----------------------------------------------------------------------------
# _shared.py (minimal)
# -----------------------------------------------------------------------------
# Purpose:
#   - Centralize vocabulary that every layer must agree on (methods, order
#     flags, level keys).
#   - If these change, level identity and ribbon colouring change with them.
# -----------------------------------------------------------------------------

METHODS: tuple[str, ...] = ("parset", "angle", "adj.angle", "hammock")

# Methods whose widths are rescaled against the display height.
RATIO_METHODS: frozenset[str] = frozenset({"hammock", "adj.angle"})

LEVEL_SEP = ":"

_ORDER_SYNONYMS: dict[str, int] = {
    "1": 1,
    "+1": 1,
    "decreasing": 1,
    "descending": 1,
    "desc": 1,
    "-1": -1,
    "increasing": -1,
    "ascending": -1,
    "asc": -1,
    "0": 0,
    "unchanged": 0,
    "none": 0,
    "off": 0,
}


def _debug_enabled() -> bool:
    s = str(os.environ.get("PARSETS_DEBUG", "")).strip().lower()
    return s in {"1", "true", "t", "yes", "y", "on"}


def dlog(msg: str) -> None:
    if _debug_enabled():
        print(f"[DEBUG] {msg}", file=sys.stderr)


def warn(msg: str) -> None:
    """Non-fatal diagnostic; always printed to stderr."""
    print(f"[WARN] {msg}", file=sys.stderr)


def is_na_scalar(x: object) -> bool:
    """
    pd.isna is unsafe for list-like; only treat scalars as NA here.
    """
    if x is None:
        return True
    if isinstance(x, (list, tuple, set, dict)):
        return False
    try:
        return bool(pd.isna(x))
    except (TypeError, ValueError):
        return False


def dedup_preserve_order(items: list[str]) -> list[str]:
    """
    Deterministic de-duplication while preserving first occurrence order.
    """
    seen: set[str] = set()
    out: list[str] = []
    for x in items:
        if x not in seen:
            seen.add(x)
            out.append(x)
    return out


def recycle(values: Any, n: int) -> list[Any]:
    """
    Repeat a scalar or a sequence until it has exactly `n` entries.

    A scalar becomes `[v] * n`; a sequence is cycled (and truncated) to `n`.
    An empty sequence is an error because there is nothing to repeat.
    """
    if isinstance(values, (list, tuple)):
        xs = list(values)
        if not xs:
            raise ValueError("cannot recycle an empty sequence")
        return [xs[i % len(xs)] for i in range(n)]
    return [values] * n


def norm_order_flag(x: Any) -> int:
    """
    Canonical level-ordering flag.

      1  -> levels sorted by summed weight, largest first
     -1  -> levels sorted by summed weight, smallest first
      0  -> natural level order kept
    """
    if isinstance(x, bool):
        raise ValueError(f"invalid order flag={x!r} (use -1, 0, 1)")
    if isinstance(x, (int, float)):
        if x > 0:
            return 1
        if x < 0:
            return -1
        return 0
    s = ("" if x is None else str(x)).strip().lower()
    if s in _ORDER_SYNONYMS:
        return _ORDER_SYNONYMS[s]
    raise ValueError(f"invalid order flag={x!r} (use -1, 0, 1)")


def norm_method(x: Any) -> str:
    s = ("" if x is None else str(x)).strip().lower()
    # tolerate the underscore spelling
    if s == "adj_angle":
        s = "adj.angle"
    if s not in METHODS:
        raise ValueError(f"unsupported method={x!r} (allowed: {', '.join(METHODS)})")
    return s


def format_level(level: object) -> str:
    """
    Display text of a level; integral floats drop their ".0" (4.0 -> "4").
    """
    if isinstance(level, (float, np.floating)) and float(level).is_integer():
        return str(int(level))
    return str(level)


def make_level_key(variable: str, level: object) -> str:
    """
    Single source of truth for level keys.

    Contract:
      key := "<variable>:<level>", so equal level text in two variables never
      collides. Rendering and ribbon colouring both use this exact key.
    """
    return f"{variable}{LEVEL_SEP}{format_level(level)}"
