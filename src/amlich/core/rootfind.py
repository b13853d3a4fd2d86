# src/amlich/core/rootfind.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
import math

from .errors import ConvergenceError


@dataclass(frozen=True)
class RootResult:
    day: int
    iterations: int


def bisect_first_nonnegative(
    f: Callable[[int], float],
    lo: int,
    hi: int,
    *,
    max_iter: int = 40,
) -> RootResult:
    """
    Integer bisection on a day bracket [lo, hi] where f(lo) < 0 <= f(hi).

    Returns the smallest day x in (lo, hi] with f(x) >= 0.

    Notes
    -----
    - f is assumed monotone inside the bracket (solar longitude over a few weeks).
    - The bracket is checked up front; a missing sign change or running out of
      iterations raises ConvergenceError instead of returning a best effort.
    """
    if max_iter <= 0:
        raise ValueError("max_iter must be positive")
    if lo > hi:
        lo, hi = hi, lo

    flo = f(lo)
    fhi = f(hi)
    if not (math.isfinite(flo) and math.isfinite(fhi)):
        raise ConvergenceError(f"non-finite value at bracket [{lo}, {hi}]", field="bracket", value=(lo, hi))
    if not (flo < 0.0 <= fhi):
        raise ConvergenceError(
            f"root is not bracketed by [{lo}, {hi}] (f={flo:.6f}, {fhi:.6f})",
            field="bracket",
            value=(lo, hi),
        )

    for it in range(1, max_iter + 1):
        if hi - lo <= 1:
            return RootResult(hi, it)
        mid = (lo + hi) // 2
        fm = f(mid)
        if not math.isfinite(fm):
            raise ConvergenceError(f"non-finite value at day {mid}", field="bracket", value=(lo, hi))
        if fm < 0.0:
            lo = mid
        else:
            hi = mid

    raise ConvergenceError(
        f"bisection did not converge in {max_iter} iterations (bracket [{lo}, {hi}])",
        field="max_iter",
        value=max_iter,
    )
