from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional, Sequence

from ..backends.base import SolveStatus

if TYPE_CHECKING:  # pragma: no cover
    from .master import MasterState


class CutType(str, Enum):
    OPTIMALITY = "OPTIMALITY"
    FEASIBILITY = "FEASIBILITY"


class TerminationStatus(str, Enum):
    CONVERGED = "CONVERGED"
    ITERATION_LIMIT = "ITERATION_LIMIT"


@dataclass(slots=True, frozen=True)
class Cut:
    """Linear cut over the master variables.

    Optimality:  t + sum(coeffs[i] * x[i]) <= rhs
    Feasibility:     sum(coeffs[i] * x[i]) <= rhs
    """

    name: str
    cut_type: CutType
    coeffs: tuple[float, ...]
    rhs: float

    @property
    def includes_t(self) -> bool:
        return self.cut_type is CutType.OPTIMALITY

    def lhs(self, t: float, x: Sequence[float]) -> float:
        val = sum(float(a) * float(xi) for a, xi in zip(self.coeffs, x))
        if self.includes_t:
            val += float(t)
        return float(val)

    def violation(self, t: float, x: Sequence[float]) -> float:
        """Positive when (t, x) lies outside the cut."""
        return self.lhs(t, x) - float(self.rhs)

    def is_satisfied(self, t: float, x: Sequence[float], tol: float = 0.0) -> bool:
        return self.violation(t, x) <= tol


@dataclass(slots=True)
class MasterSolution:
    status: SolveStatus
    objective: Optional[float]
    x: Optional[tuple[float, ...]]
    # True when (objective, x) is the M / upper-bound stand-in for an unbounded master
    placeholder: bool = False


@dataclass(slots=True)
class SubproblemResult:
    status: SolveStatus
    objective: float
    u: Optional[tuple[float, ...]] = None
    v: Optional[tuple[float, ...]] = None

    @property
    def is_ray(self) -> bool:
        return self.status is SolveStatus.INFEASIBLE_OR_UNBOUNDED and self.u is not None


@dataclass(slots=True)
class IterationRecord:
    iteration: int
    master_status: SolveStatus
    subproblem_status: SolveStatus
    fm: float
    fs: float
    x: tuple[float, ...]
    u: Optional[tuple[float, ...]]
    cut: Optional[Cut] = None


@dataclass(slots=True)
class BendersResult:
    status: TerminationStatus
    iterations: int
    objective: Optional[float]
    x: Optional[tuple[float, ...]]
    v: Optional[tuple[float, ...]]
    best_lower_bound: Optional[float]
    best_upper_bound: Optional[float]
    incumbent_x: Optional[tuple[float, ...]] = None
    history: list[IterationRecord] = field(default_factory=list)
    state: Optional["MasterState"] = None

    @property
    def converged(self) -> bool:
        return self.status is TerminationStatus.CONVERGED


__all__ = [
    "CutType",
    "TerminationStatus",
    "Cut",
    "MasterSolution",
    "SubproblemResult",
    "IterationRecord",
    "BendersResult",
]
