from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

from ..backends.base import Solver, SolveStatus
from ..config import RunConfig
from ..problem import ProblemData
from .cuts import feasibility_cut, optimality_cut
from .errors import IterationLimitExceeded, MasterInfeasible, SubproblemDegenerate
from .master import MasterProblem, MasterState
from .subproblem import Subproblem
from .types import BendersResult, IterationRecord, MasterSolution, SubproblemResult, TerminationStatus

log = logging.getLogger(__name__)


def _fmt(val: Optional[float]) -> str:
    return f"{val:.6g}" if val is not None else "-"


class BendersSolver:
    """Master/subproblem refinement loop.

    Each iteration solves the master, evaluates the subproblem at the master
    candidate and either stops (converged) or appends exactly one cut to the
    master state. Fatal conditions raise a `BendersError`.
    """

    def __init__(
        self,
        problem: ProblemData,
        master_backend: Solver,
        subproblem_backend: Solver | None = None,
        cfg: RunConfig | None = None,
        state: MasterState | None = None,
    ):
        self.problem = problem
        self.cfg = cfg or RunConfig()
        if self.cfg.tolerance < 0:
            raise ValueError("tolerance must be >= 0")
        if self.cfg.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        self.state = state or MasterState(
            n=problem.n,
            big_m=float(self.cfg.big_m),
            upper_bound_x=float(self.cfg.upper_bound_x),
        )
        self.master = MasterProblem(problem, master_backend, self.state)
        self.subproblem = Subproblem(
            problem,
            subproblem_backend or master_backend,
            ray_tolerance=self.cfg.ray_tolerance,
        )

    def solve_master(self) -> MasterSolution:
        return self.master.solve()

    def solve_subproblem(self, x: Sequence[float]) -> SubproblemResult:
        return self.subproblem.evaluate(x)

    def run(self) -> BendersResult:
        t0 = time.time()
        max_it = self.cfg.max_iterations
        tol = float(self.cfg.tolerance)
        history: list[IterationRecord] = []
        best_lb: Optional[float] = None
        best_ub: Optional[float] = None
        incumbent: Optional[tuple[float, ...]] = None

        for it in range(1, max_it + 1):
            mres = self.solve_master()
            log.info(
                "iter=%d master status=%s fm=%s x=%s cuts=%d",
                it, mres.status.value, _fmt(mres.objective), mres.x, self.state.num_cuts,
            )
            if mres.status is SolveStatus.INFEASIBLE:
                log.error("Master problem infeasible: the original problem is infeasible")
                raise MasterInfeasible(it)

            fm = float(mres.objective)
            x = mres.x
            self.state.optimistic_bound = fm
            self.state.candidate_x = x
            best_ub = fm if best_ub is None else min(best_ub, fm)

            sres = self.solve_subproblem(x)
            log.info("iter=%d subproblem status=%s fs=%s", it, sres.status.value, _fmt(sres.objective))
            record = IterationRecord(
                iteration=it,
                master_status=mres.status,
                subproblem_status=sres.status,
                fm=fm,
                fs=sres.objective,
                x=x,
                u=sres.u,
            )
            history.append(record)

            if sres.status is SolveStatus.OPTIMAL:
                fs = sres.objective
                if best_lb is None or fs > best_lb:
                    best_lb, incumbent = fs, x
                gap = fm - fs
                if abs(gap) <= tol:
                    log.info(
                        "Optimal solution found after %d iterations (%.3fs): t=%s x=%s v=%s",
                        it, time.time() - t0, _fmt(fm), x, sres.v,
                    )
                    return BendersResult(
                        status=TerminationStatus.CONVERGED,
                        iterations=it,
                        objective=fm,
                        x=x,
                        v=sres.v,
                        best_lower_bound=best_lb,
                        best_upper_bound=best_ub,
                        incumbent_x=x,
                        history=history,
                        state=self.state,
                    )
                if gap < 0:
                    raise SubproblemDegenerate(it, f"subproblem value {fs:.6g} exceeds master bound {fm:.6g}", x)
                cut = optimality_cut(self.problem, sres.u, self.state.num_cuts + 1)
                log.info("suboptimal vertex: adding %s  t + %s'x <= %.6g", cut.name, cut.coeffs, cut.rhs)
            elif sres.is_ray:
                cut = feasibility_cut(self.problem, sres.u, self.state.num_cuts + 1)
                log.info("extreme ray: adding %s  %s'x <= %.6g", cut.name, cut.coeffs, cut.rhs)
            elif sres.status is SolveStatus.INFEASIBLE_OR_UNBOUNDED:
                raise SubproblemDegenerate(it, "subproblem unbounded but no extreme ray could be recovered", x)
            else:
                raise SubproblemDegenerate(
                    it, "subproblem infeasible: the original problem is infeasible or unbounded", x
                )

            if not self.master.add_cut(cut):
                raise SubproblemDegenerate(it, f"cut {cut.name} is already in the master; no progress possible", x)
            record.cut = cut

        log.warning("Max iterations reached: %d (best_lb=%s best_ub=%s)", max_it, _fmt(best_lb), _fmt(best_ub))
        result = BendersResult(
            status=TerminationStatus.ITERATION_LIMIT,
            iterations=max_it,
            objective=None,
            x=None,
            v=None,
            best_lower_bound=best_lb,
            best_upper_bound=best_ub,
            incumbent_x=incumbent,
            history=history,
            state=self.state,
        )
        if self.cfg.fail_on_iteration_limit:
            raise IterationLimitExceeded(result)
        return result


__all__ = ["BendersSolver"]
