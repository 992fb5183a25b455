from __future__ import annotations

from typing import Any, Optional, Sequence


class BendersError(RuntimeError):
    """Base class for conditions that stop the Benders loop."""


class MasterInfeasible(BendersError):
    def __init__(self, iteration: int):
        self.iteration = iteration
        super().__init__(
            f"master problem infeasible at iteration {iteration}: the original problem has no feasible solution"
        )


class SubproblemDegenerate(BendersError):
    """The subproblem fell outside the optimal / suboptimal-vertex / extreme-ray cases."""

    def __init__(self, iteration: int, reason: str, x: Optional[Sequence[float]] = None):
        self.iteration = iteration
        self.reason = reason
        self.x = tuple(x) if x is not None else None
        super().__init__(f"subproblem degenerate at iteration {iteration}: {reason} (x={self.x})")


class SolverCallFailure(BendersError):
    def __init__(self, solver: str, program: str, detail: str):
        self.solver = solver
        self.program = program
        self.detail = detail
        super().__init__(f"solver '{solver}' failed on '{program}': {detail}")


class IterationLimitExceeded(BendersError):
    def __init__(self, result: Any):
        self.result = result
        super().__init__(
            f"no convergence after {result.iterations} iterations "
            f"(best_lb={result.best_lower_bound} best_ub={result.best_upper_bound})"
        )


__all__ = [
    "BendersError",
    "MasterInfeasible",
    "SubproblemDegenerate",
    "SolverCallFailure",
    "IterationLimitExceeded",
]
