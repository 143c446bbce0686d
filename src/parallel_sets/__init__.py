# parallel-sets/src/parallel_sets/__init__.py
from __future__ import annotations

from .layout import parallel_sets
from .params import ParallelParams
from .scene import Bar, Line, Ribbon, Scene, Station, Text

__all__ = [
    "__version__",
    "Bar",
    "Line",
    "ParallelParams",
    "Ribbon",
    "Scene",
    "Station",
    "Text",
    "parallel_sets",
]

try:
    from importlib.metadata import PackageNotFoundError, version
    __version__ = version("parallel-sets")
except PackageNotFoundError:
    __version__ = "0+unknown"
