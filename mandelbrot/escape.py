"""Escape-time classification of a single point."""

from __future__ import annotations

import math
from typing import NamedTuple

from .viewport import ComplexPoint

MAX_ITERATION = 80
ESCAPE_RADIUS = 2.0


class EscapeResult(NamedTuple):
    iteration_count: int
    is_member: bool


def evaluate(c: ComplexPoint, max_iteration: int = MAX_ITERATION) -> EscapeResult:
    """Iterate ``z -> z**2 + c`` from zero until ``|z| > 2`` or the bound is hit.

    A point is reported as a member when it has not escaped after
    ``max_iteration`` steps. Membership is never proven, only the absence of
    escape within the bound.
    """

    if max_iteration < 1:
        raise ValueError(f"max_iteration must be at least 1, got {max_iteration}.")

    x = 0.0
    y = 0.0
    iteration_count = 0
    while True:
        x, y = x * x - y * y + c.real, 2 * x * y + c.imaginary
        modulus = math.sqrt(x * x + y * y)
        iteration_count += 1
        if modulus > ESCAPE_RADIUS or iteration_count >= max_iteration:
            break

    return EscapeResult(iteration_count, modulus <= ESCAPE_RADIUS)
