"""
coxsize/grid.py

Cartesian parameter grids. The first parameter varies fastest, so a grid
over (power, theta) lists every power for the first theta before moving on.
"""

from __future__ import annotations
from itertools import product
from typing import Sequence

import pandas as pd


def expand_grid(**params: Sequence[float]) -> pd.DataFrame:
    """
    One row per combination of the supplied value lists, one column per
    parameter (in keyword order). Row count is the product of list lengths.

    Example:
      expand_grid(power=[0.8, 0.9], theta=[1.5, 2.0])
      -> (0.8, 1.5), (0.9, 1.5), (0.8, 2.0), (0.9, 2.0)
    """
    names = list(params)
    # product() varies the last iterable fastest, so feed it reversed
    combos = product(*(params[name] for name in reversed(names)))
    rows = [tuple(reversed(combo)) for combo in combos]
    return pd.DataFrame.from_records(rows, columns=names)
