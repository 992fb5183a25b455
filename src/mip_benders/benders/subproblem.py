from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..backends.base import LinearConstraint, LinearProgram, Sense, Solver, SolveStatus, Variable
from ..problem import ProblemData
from .types import SubproblemResult

log = logging.getLogger(__name__)

RAY_NORM = "ray_norm"


def u_name(i: int) -> str:
    return f"u[{i}]"


def dual_fit_name(j: int) -> str:
    return f"dual_fit[{j}]"


class Subproblem:
    """Dual-form LP evaluated at a fixed master candidate x.

        fs(x) = c1'x + min (b - A1 x)'u   s.t.  A2'u >= c2,  u >= 0

    The duals of the `dual_fit` rows are the continuous part v of the
    original problem.
    """

    def __init__(self, problem: ProblemData, backend: Solver, ray_tolerance: float = 1e-9):
        self.problem = problem
        self.backend = backend
        self.ray_tolerance = float(ray_tolerance)

    def _u_vars(self) -> list[Variable]:
        return [Variable(u_name(i), lower=0.0) for i in range(self.problem.m)]

    def _column_rows(self, rhs: Sequence[float], prefix: str) -> list[LinearConstraint]:
        P = self.problem
        rows = []
        for j in range(P.p):
            coeffs = {u_name(i): float(P.A2[i][j]) for i in range(P.m)}
            rows.append(LinearConstraint(f"{prefix}[{j}]", coeffs, ">=", float(rhs[j])))
        return rows

    def build(self, x: Sequence[float]) -> LinearProgram:
        P = self.problem
        c_sub = P.residual(x)
        return LinearProgram(
            name="subproblem",
            sense=Sense.MINIMIZE,
            objective={u_name(i): c for i, c in enumerate(c_sub)},
            variables=self._u_vars(),
            constraints=self._column_rows(P.c2, "dual_fit"),
            objective_constant=P.objective_x(x),
        )

    def build_ray_program(self, x: Sequence[float]) -> LinearProgram:
        """Normalized ray search: min (b - A1 x)'u  s.t.  A2'u >= 0, sum(u) <= 1, u >= 0.

        A negative optimum is a direction along which the subproblem objective
        decreases without bound (a Farkas certificate that x admits no v).
        """
        P = self.problem
        rows = self._column_rows([0.0] * P.p, "ray_cone")
        rows.append(LinearConstraint(RAY_NORM, {u_name(i): 1.0 for i in range(P.m)}, "<=", 1.0))
        return LinearProgram(
            name="extreme_ray",
            sense=Sense.MINIMIZE,
            objective={u_name(i): c for i, c in enumerate(P.residual(x))},
            variables=self._u_vars(),
            constraints=rows,
        )

    def extreme_ray(self, x: Sequence[float]) -> Optional[tuple[float, ...]]:
        res = self.backend.solve(self.build_ray_program(x))
        if res.status is not SolveStatus.OPTIMAL or res.objective is None:
            log.warning("ray search at x=%s ended with status %s", tuple(x), res.status.value)
            return None
        if res.objective >= -self.ray_tolerance:
            log.warning("no improving ray at x=%s (ray objective %.6g)", tuple(x), res.objective)
            return None
        return tuple(float(res.primal[u_name(i)]) for i in range(self.problem.m))

    def evaluate(self, x: Sequence[float]) -> SubproblemResult:
        program = self.build(x)
        if log.isEnabledFor(logging.DEBUG):
            log.debug("current subproblem:\n%s", program.pretty())
        res = self.backend.solve(program)

        if res.status is SolveStatus.OPTIMAL:
            u = tuple(float(res.primal[u_name(i)]) for i in range(self.problem.m))
            v = tuple(float(res.duals.get(dual_fit_name(j), 0.0)) for j in range(self.problem.p))
            return SubproblemResult(status=res.status, objective=float(res.objective), u=u, v=v)
        if res.status is SolveStatus.INFEASIBLE_OR_UNBOUNDED:
            return SubproblemResult(status=res.status, objective=float("-inf"), u=self.extreme_ray(x))
        # Dual infeasible: the original problem is unbounded or infeasible
        return SubproblemResult(status=res.status, objective=float("inf"))


__all__ = ["RAY_NORM", "u_name", "dual_fit_name", "Subproblem"]
