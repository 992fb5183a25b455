from __future__ import annotations

from typing import Sequence

from ..problem import ProblemData
from .types import Cut, CutType

# rounding digits for coefficients in signatures
COEFF_ROUND_DIGITS: int = 9
# treat smaller coefficients as zero
COEFF_ZERO_TOL: float = 1e-12


def optimality_cut(problem: ProblemData, u: Sequence[float], index: int) -> Cut:
    """Cut from a suboptimal vertex u: t + (A1'u - c1)'x <= b'u."""
    a1u = problem.a1_transpose(u)
    cv = tuple(a - c for a, c in zip(a1u, problem.c1))
    return Cut(name=f"opt_{index}", cut_type=CutType.OPTIMALITY, coeffs=cv, rhs=problem.b_dot(u))


def feasibility_cut(problem: ProblemData, u: Sequence[float], index: int) -> Cut:
    """Cut from an extreme ray u: (A1'u)'x <= b'u."""
    return Cut(
        name=f"feas_{index}",
        cut_type=CutType.FEASIBILITY,
        coeffs=problem.a1_transpose(u),
        rhs=problem.b_dot(u),
    )


def make_cut_signature(cut: Cut) -> tuple:
    """Canonical signature (type, rounded_rhs, ((idx, rounded_coeff), ...)).

    Coefficients with |a| <= COEFF_ZERO_TOL are dropped so that numerically
    identical cuts map to the same key.
    """
    items = tuple(
        (i, round(float(a), COEFF_ROUND_DIGITS))
        for i, a in enumerate(cut.coeffs)
        if abs(float(a)) > COEFF_ZERO_TOL
    )
    return (cut.cut_type.value, round(float(cut.rhs), COEFF_ROUND_DIGITS), items)


__all__ = ["optimality_cut", "feasibility_cut", "make_cut_signature"]
