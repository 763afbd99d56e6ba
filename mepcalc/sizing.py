"""
Standard-size selection.

Calculators evaluate every size in a fixed, ascending list and pick the
smallest one that passes their acceptance test.
"""

from typing import Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

import numpy as np

T = TypeVar('T')


def select_smallest(candidates: Iterable[T],
                    evaluate: Callable[[T], Dict],
                    accept: Callable[[Dict], bool]) -> Tuple[Optional[Dict], List[Dict]]:
    """Evaluate all candidates in order and return the first accepted one.

    Args:
        candidates: sizes in ascending order
        evaluate: size → result dict
        accept: result dict → bool

    Returns:
        (selected, evaluations) where selected is None if nothing passes.
    """
    evaluations = [evaluate(c) for c in candidates]
    selected = next((e for e in evaluations if accept(e)), None)
    return selected, evaluations


def smallest_size_for_velocity(flow_m3s: float, diameters_mm: List[float],
                               velocity_limit: float) -> Optional[float]:
    """Smallest inner diameter whose mean velocity is within the limit."""
    if flow_m3s < 0:
        raise ValueError("Flow rate cannot be negative")
    d = np.asarray(diameters_mm, dtype=float)
    v = flow_m3s / (np.pi * (d / 2000) ** 2)
    ok = np.nonzero(v <= velocity_limit)[0]
    if len(ok) == 0:
        return None
    return float(d[ok[0]])
