from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

from ..backends.base import LinearConstraint, LinearProgram, Sense, Solver, SolveStatus, Variable
from ..problem import ProblemData
from .cuts import make_cut_signature
from .types import Cut, CutType, MasterSolution

log = logging.getLogger(__name__)

T_NAME = "t"


def x_name(i: int) -> str:
    return f"x[{i}]"


@dataclass(slots=True)
class MasterState:
    """Mutable master state: bounds, the current candidate and accumulated cuts.

    Cuts are only ever appended; the master region never grows.
    """

    n: int
    big_m: float = 1000.0
    upper_bound_x: float = 1e6
    optimistic_bound: float = math.nan
    candidate_x: tuple[float, ...] = ()
    optimality_cuts: list[Cut] = field(default_factory=list)
    feasibility_cuts: list[Cut] = field(default_factory=list)
    _signatures: set[tuple] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.n < 1:
            raise ValueError("master needs at least one x variable")
        if self.upper_bound_x < 0:
            raise ValueError("upper_bound_x must be non-negative")
        if math.isnan(self.optimistic_bound):
            self.optimistic_bound = float(self.big_m)
        if not self.candidate_x:
            self.candidate_x = tuple(0.0 for _ in range(self.n))

    @property
    def num_cuts(self) -> int:
        return len(self.optimality_cuts) + len(self.feasibility_cuts)

    @property
    def cuts(self) -> list[Cut]:
        return list(self.feasibility_cuts) + list(self.optimality_cuts)

    def add_cut(self, cut: Cut) -> bool:
        """Append `cut`; return False if an identical cut is already present."""
        if len(cut.coeffs) != self.n:
            raise ValueError(f"cut '{cut.name}' has {len(cut.coeffs)} coefficients, expected {self.n}")
        sig = make_cut_signature(cut)
        if sig in self._signatures:
            return False
        self._signatures.add(sig)
        if cut.cut_type is CutType.OPTIMALITY:
            self.optimality_cuts.append(cut)
        else:
            self.feasibility_cuts.append(cut)
        return True

    def contains(self, t: float, x: Sequence[float], tol: float = 1e-9) -> bool:
        """Whether (t, x) lies in the current master region."""
        if len(x) != self.n or t > self.big_m + tol:
            return False
        for xi in x:
            if xi < -tol or xi > self.upper_bound_x + tol or abs(xi - round(xi)) > tol:
                return False
        return all(c.is_satisfied(t, x, tol) for c in self.cuts)


class MasterProblem:
    """Integer master: maximize t over (t, x) subject to the accumulated cuts."""

    def __init__(self, problem: ProblemData, backend: Solver, state: MasterState):
        if state.n != problem.n:
            raise ValueError(f"master state has n={state.n} but the problem has n={problem.n}")
        self.problem = problem
        self.backend = backend
        self.state = state

    def build(self) -> LinearProgram:
        s = self.state
        variables = [Variable(T_NAME, lower=None, upper=float(s.big_m))]
        variables += [Variable(x_name(i), lower=0.0, upper=float(s.upper_bound_x), integer=True) for i in range(s.n)]
        constraints = []
        for cut in s.cuts:
            coeffs = {x_name(i): float(a) for i, a in enumerate(cut.coeffs)}
            if cut.includes_t:
                coeffs[T_NAME] = 1.0
            constraints.append(LinearConstraint(cut.name, coeffs, "<=", float(cut.rhs)))
        return LinearProgram(
            name="master",
            sense=Sense.MAXIMIZE,
            objective={T_NAME: 1.0},
            variables=variables,
            constraints=constraints,
        )

    def solve(self) -> MasterSolution:
        program = self.build()
        if log.isEnabledFor(logging.DEBUG):
            log.debug("current master problem:\n%s", program.pretty())
        res = self.backend.solve(program)

        if res.status is SolveStatus.INFEASIBLE:
            return MasterSolution(status=res.status, objective=None, x=None)
        if res.status is SolveStatus.INFEASIBLE_OR_UNBOUNDED:
            # Stand-in for an unbounded master: arbitrarily large bound, trivially feasible x
            log.warning("master reported %s; using placeholder fm=M=%.6g", res.status.value, self.state.big_m)
            x = tuple(float(self.state.upper_bound_x) for _ in range(self.state.n))
            return MasterSolution(status=res.status, objective=float(self.state.big_m), x=x, placeholder=True)

        x = tuple(float(res.primal[x_name(i)]) for i in range(self.state.n))
        return MasterSolution(status=res.status, objective=float(res.primal[T_NAME]), x=x)

    def add_cut(self, cut: Cut) -> bool:
        return self.state.add_cut(cut)


__all__ = ["T_NAME", "x_name", "MasterState", "MasterProblem"]
