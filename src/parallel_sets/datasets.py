# parallel-sets/src/parallel_sets/datasets.py
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import pandas as pd

_RESOURCES = Path(__file__).resolve().parent / "resources"

# Declared level order of the classic Titanic contingency table.
TITANIC_LEVELS: dict[str, list[str]] = {
    "Class": ["1st", "2nd", "3rd", "Crew"],
    "Sex": ["Male", "Female"],
    "Age": ["Child", "Adult"],
    "Survived": ["No", "Yes"],
}


@lru_cache(maxsize=None)
def _read_resource(name: str) -> pd.DataFrame:
    path = _RESOURCES / name
    if not path.exists():
        raise FileNotFoundError(f"bundled dataset not found: {path}")
    return pd.read_csv(path, sep="\t")


def load_mtcars() -> pd.DataFrame:
    """
    Motor Trend cars (1974), reduced to the categorical columns.

    Columns: model, cyl (4/6/8), gear (3/4/5), am (0 automatic, 1 manual).
    32 rows, one per car.
    """
    return _read_resource("mtcars.tsv").copy()


def load_titanic() -> pd.DataFrame:
    """
    Titanic passengers as a frequency table (2201 people in 32 cells).

    Class, Sex, Age and Survived are Categoricals in their conventional order;
    Freq holds the count per cell and is meant to be used as the weight.
    """
    df = _read_resource("titanic.tsv").copy()
    for col, levels in TITANIC_LEVELS.items():
        df[col] = pd.Categorical(df[col], categories=levels)
    return df
