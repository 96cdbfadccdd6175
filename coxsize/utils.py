"""
coxsize/utils.py

Utility functions used across the repo:
  - Coercing scalar / collection parameters to value lists
  - Domain validation with errors that name the parameter and values
  - JSON-safe records for reports
"""

from __future__ import annotations
import math
from collections.abc import Iterable, Iterator
from typing import Any, Dict, List

import numpy as np
import pandas as pd

from .errors import InvalidDomainValue, MissingRequiredParameter


# -------------------------
# Validation / coercion
# -------------------------

def require(**params: Any) -> None:
    """Raise MissingRequiredParameter for the first parameter given as None."""
    for name, value in params.items():
        if value is None:
            raise MissingRequiredParameter(name)

def as_values(x: Any, name: str) -> List[float]:
    """
    Accept a scalar or a 1D collection and return a list of floats.
    Scalars become one-element lists.
    """
    if x is None:
        raise MissingRequiredParameter(name)
    if isinstance(x, (str, bytes)):
        raise InvalidDomainValue(name, [x], "real-valued")
    if isinstance(x, (Iterator, set, frozenset)) or (isinstance(x, Iterable) and np.ndim(x) != 0):
        items = list(x)
    else:
        items = [x]
    try:
        arr = np.asarray(items, dtype=float)
    except (TypeError, ValueError):
        raise InvalidDomainValue(name, items, "real-valued") from None
    if arr.ndim != 1:
        raise InvalidDomainValue(name, items, "a scalar or a 1D collection")
    if arr.size == 0:
        raise InvalidDomainValue(name, [], "a non-empty collection")
    return arr.tolist()

def interval_label(low: float, high: float,
                   low_closed: bool = False, high_closed: bool = False) -> str:
    left = "[" if low_closed else "("
    right = "]" if high_closed else ")"
    hi = "inf" if math.isinf(high) else f"{high:g}"
    return f"{left}{low:g}, {hi}{right}"

def check_interval(values: List[float], name: str,
                   low: float, high: float,
                   low_closed: bool = False, high_closed: bool = False) -> None:
    """
    Every value must lie in the interval; NaN never does.
    The error lists all offending values, not just the first.
    """
    def inside(v: float) -> bool:
        above = v >= low if low_closed else v > low
        below = v <= high if high_closed else v < high
        return above and below

    bad = [v for v in values if not inside(v)]
    if bad:
        raise InvalidDomainValue(name, bad, "in " + interval_label(low, high, low_closed, high_closed))


# -------------------------
# Reporting / formatting
# -------------------------

def _json_scalar(v: Any) -> Any:
    if isinstance(v, (bool, np.bool_)):
        return bool(v)
    if isinstance(v, (int, np.integer)):
        return int(v)
    if isinstance(v, (float, np.floating)):
        v = float(v)
        return v if math.isfinite(v) else None
    return v

def results_to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Rows as JSON-safe dicts. Non-finite numbers become None (JSON null).
    """
    return [{k: _json_scalar(v) for k, v in row.items()}
            for row in df.to_dict(orient="records")]

