"""
coxsize/power.py

Sample size and power for testing a binary covariate in a Cox model with a
second, possibly correlated, covariate and competing risks
(Latouche, Porcher & Chevret, 2004):

  D  = (z_{1-alpha/2} + z_{power})^2 / (log(theta)^2 * p * (1-p) * (1-rho2))
  N  = D / psi
  n1 = D / psi * p
  n2 = D / psi * (1-p)

psi is the proportion of subjects who experience the event of interest (the
rest are censored or have a competing event); rho2 is the squared correlation
between the two covariates and inflates the variance of log(theta) by
1 / (1 - rho2).

D, N, n1 and n2 are each rounded up from their own continuous value, so
n1 + n2 can exceed N by one.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Dict, Iterable, List, Literal, Union

import numpy as np
import pandas as pd
from scipy import stats

from .errors import DegenerateHazardRatio, InvalidDomainValue, NumericOverflow, NumericOverflowWarning
from .grid import expand_grid
from .utils import as_values, check_interval, require

Values = Union[float, Iterable[float]]
NonFinitePolicy = Literal["flag", "drop"]

INPUT_COLUMNS = ("power", "theta", "p", "psi", "rho2", "alpha")
RESULT_COLUMNS = ("D", "N", "n1", "n2")

# (low, high, low_closed, high_closed)
_DOMAINS = {
    "power": (0.0, 1.0, False, False),
    "theta": (0.0, np.inf, False, False),
    "p": (0.0, 1.0, False, False),
    "psi": (0.0, 1.0, False, False),
    "rho2": (0.0, 1.0, True, False),
    "alpha": (0.0, 1.0, False, False),
    "n": (0.0, np.inf, False, False),
}

# Counts at or above this do not fit an int64 column.
_MAX_COUNT = float(np.iinfo(np.int64).max)


@dataclass(frozen=True)
class SampleSizeResult:
    D: int
    N: int
    n1: int
    n2: int


def z_alpha(alpha) -> np.ndarray:
    """Two-sided critical value z_{1-alpha/2}, element-wise."""
    return stats.norm.ppf(1.0 - np.asarray(alpha, dtype=float) / 2.0)

def z_beta(power) -> np.ndarray:
    return stats.norm.ppf(np.asarray(power, dtype=float))


# -------------------------
# Validation
# -------------------------

def _prepare(allow_degenerate: bool, **params: Values) -> Dict[str, List[float]]:
    """Coerce every parameter to a value list and check its domain."""
    out: Dict[str, List[float]] = {}
    for name, x in params.items():
        values = as_values(x, name)
        check_interval(values, name, *_DOMAINS[name])
        out[name] = values

    # below alpha/2 the z sum turns negative and D stops growing with power
    if "power" in out:
        floor = max(out["alpha"]) / 2.0
        low = [v for v in out["power"] if v <= floor]
        if low:
            raise InvalidDomainValue("power", low, f"greater than alpha/2 ({floor:g})")

    if not allow_degenerate:
        ones = [v for v in out["theta"] if v == 1.0]
        if ones:
            raise DegenerateHazardRatio(ones)
    return out

def _single(**params: Values) -> None:
    for name, x in params.items():
        values = as_values(x, name)
        if len(values) != 1:
            raise InvalidDomainValue(name, values, "a single value")

def _check_policy(nonfinite: str) -> None:
    if nonfinite not in ("flag", "drop"):
        raise ValueError("nonfinite must be 'flag' or 'drop'")


# -------------------------
# Core formula (column-wise)
# -------------------------

def _variance_factor(grid: pd.DataFrame) -> np.ndarray:
    """log(theta)^2 * p(1-p) * (1-rho2): information per event on log(theta)."""
    theta = grid["theta"].to_numpy()
    p = grid["p"].to_numpy()
    rho2 = grid["rho2"].to_numpy()
    return np.log(theta) ** 2 * p * (1.0 - p) * (1.0 - rho2)

def _size_table(grid: pd.DataFrame) -> pd.DataFrame:
    za = z_alpha(grid["alpha"].to_numpy())
    zb = z_beta(grid["power"].to_numpy())
    p = grid["p"].to_numpy()
    psi = grid["psi"].to_numpy()

    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        d_raw = (za + zb) ** 2 / _variance_factor(grid)
        n_raw = d_raw / psi
        raw = {"D": d_raw, "N": n_raw, "n1": n_raw * p, "n2": n_raw * (1.0 - p)}

    out = grid.copy()
    for col in RESULT_COLUMNS:
        out[col] = np.ceil(raw[col])
    return out

def _countable(table: pd.DataFrame) -> np.ndarray:
    """Rows whose D, N, n1, n2 are finite and fit an int64."""
    values = table[list(RESULT_COLUMNS)].to_numpy(dtype=float)
    with np.errstate(invalid="ignore"):
        return (np.isfinite(values) & (values < _MAX_COUNT)).all(axis=1)

def _warn_uncountable(rows: pd.DataFrame, nonfinite: str) -> None:
    records = rows[list(INPUT_COLUMNS)].to_dict(orient="records")
    shown = "; ".join(
        ", ".join(f"{k}={v:g}" for k, v in rec.items()) for rec in records[:5]
    )
    if len(records) > 5:
        shown += f" (and {len(records) - 5} more)"
    action = "omitted" if nonfinite == "drop" else "kept with float (possibly inf) sizes"
    warnings.warn(
        f"{len(records)} scenario(s) gave non-finite or unrepresentable sample sizes "
        f"and were {action}: {shown}",
        NumericOverflowWarning,
        stacklevel=3,
    )


# -------------------------
# Public API
# -------------------------

def calculate_sample_size(
    power: Values = 0.8,
    theta: Values | None = None,
    p: Values = 0.5,
    psi: Values | None = None,
    rho2: Values = 0.0,
    alpha: Values = 0.05,
    *,
    allow_degenerate: bool = False,
    nonfinite: NonFinitePolicy = "flag",
) -> pd.DataFrame:
    """
    Required events and sample sizes over the grid of all parameter values.

    Every argument takes a scalar or a collection; the result has one row per
    combination (power varying fastest) with columns
    power, theta, p, psi, rho2, alpha, D, N, n1, n2.

    theta == 1 is rejected unless allow_degenerate=True, in which case its
    rows come out infinite like any other non-finite row. Non-finite rows
    never abort the grid: with nonfinite="flag" they are kept (and the size
    columns become float), with nonfinite="drop" they are removed. Either way
    a NumericOverflowWarning lists them. Dropped rows keep their grid index.
    """
    _check_policy(nonfinite)
    require(theta=theta, psi=psi)
    params = _prepare(
        allow_degenerate,
        power=power, theta=theta, p=p, psi=psi, rho2=rho2, alpha=alpha,
    )
    table = _size_table(expand_grid(**params))

    ok = _countable(table)
    if not ok.all():
        _warn_uncountable(table.loc[~ok], nonfinite)
        if nonfinite == "flag":
            return table
        table = table.loc[ok].copy()

    cols = list(RESULT_COLUMNS)
    table[cols] = table[cols].astype("int64")
    return table

def required_sample_size(
    theta: float,
    psi: float,
    power: float = 0.8,
    p: float = 0.5,
    rho2: float = 0.0,
    alpha: float = 0.05,
    *,
    allow_degenerate: bool = False,
) -> SampleSizeResult:
    """Single-scenario version of calculate_sample_size."""
    require(theta=theta, psi=psi)
    _single(power=power, theta=theta, p=p, psi=psi, rho2=rho2, alpha=alpha)
    params = _prepare(
        allow_degenerate,
        power=power, theta=theta, p=p, psi=psi, rho2=rho2, alpha=alpha,
    )
    table = _size_table(expand_grid(**params))
    if not _countable(table)[0]:
        raise NumericOverflow(
            f"sample size is not a finite count for theta={params['theta'][0]:g}, "
            f"p={params['p'][0]:g}, psi={params['psi'][0]:g}, rho2={params['rho2'][0]:g}"
        )
    row = table.iloc[0]
    return SampleSizeResult(*(int(row[c]) for c in RESULT_COLUMNS))

def calculate_power(
    n: Values | None = None,
    theta: Values | None = None,
    p: Values = 0.5,
    psi: Values | None = None,
    rho2: Values = 0.0,
    alpha: Values = 0.05,
    *,
    allow_degenerate: bool = False,
) -> pd.DataFrame:
    """
    Power achieved by a total sample size n, over the grid of all values.

    Inverts the sample size formula: with D = n * psi expected events,
      power = Phi( sqrt(D * log(theta)^2 * p(1-p) * (1-rho2)) - z_{1-alpha/2} )
    Columns: n, theta, p, psi, rho2, alpha, D (continuous), power.
    """
    require(n=n, theta=theta, psi=psi)
    params = _prepare(
        allow_degenerate,
        n=n, theta=theta, p=p, psi=psi, rho2=rho2, alpha=alpha,
    )
    out = expand_grid(**params)
    events = out["n"].to_numpy() * out["psi"].to_numpy()
    za = z_alpha(out["alpha"].to_numpy())

    with np.errstate(over="ignore"):
        z = np.sqrt(events * _variance_factor(out)) - za

    out["D"] = events
    out["power"] = stats.norm.cdf(z)
    return out

def power_for_sample_size(
    n: float,
    theta: float,
    psi: float,
    p: float = 0.5,
    rho2: float = 0.0,
    alpha: float = 0.05,
    *,
    allow_degenerate: bool = False,
) -> float:
    require(n=n, theta=theta, psi=psi)
    _single(n=n, theta=theta, p=p, psi=psi, rho2=rho2, alpha=alpha)
    table = calculate_power(
        n, theta, p, psi, rho2, alpha, allow_degenerate=allow_degenerate,
    )
    return float(table["power"].iloc[0])
