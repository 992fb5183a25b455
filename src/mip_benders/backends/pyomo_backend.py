from __future__ import annotations

import logging
from typing import Any, Optional

import pyomo.environ as pyo

from ..benders.errors import SolverCallFailure
from ..config import DEFAULT_SOLVER
from .base import LinearProgram, LPResult, Sense, Solver, SolveStatus

log = logging.getLogger(__name__)

_TC = pyo.TerminationCondition
_STATUS_BY_TERMINATION = {
    _TC.optimal: SolveStatus.OPTIMAL,
    _TC.globallyOptimal: SolveStatus.OPTIMAL,
    _TC.locallyOptimal: SolveStatus.OPTIMAL,
    _TC.infeasible: SolveStatus.INFEASIBLE,
    _TC.unbounded: SolveStatus.INFEASIBLE_OR_UNBOUNDED,
    _TC.infeasibleOrUnbounded: SolveStatus.INFEASIBLE_OR_UNBOUNDED,
}


def normalize_termination(term: Any, solver_name: str = "?", program: str = "?") -> SolveStatus:
    """Map a Pyomo termination condition onto the three statuses the driver understands."""
    try:
        return _STATUS_BY_TERMINATION[term]
    except (KeyError, TypeError):
        raise SolverCallFailure(solver_name, program, f"unexpected termination condition {term!r}") from None


def _check_names(program: LinearProgram) -> None:
    seen: set[str] = set()
    for v in program.variables:
        if v.name in seen:
            raise ValueError(f"program '{program.name}': duplicate variable '{v.name}'")
        seen.add(v.name)
    used = set(program.objective)
    for c in program.constraints:
        used.update(c.coeffs)
    unknown = sorted(used - seen)
    if unknown:
        raise ValueError(f"program '{program.name}': unknown variable(s) {unknown}")
    rows = [c.name for c in program.constraints]
    if len(set(rows)) != len(rows):
        raise ValueError(f"program '{program.name}': duplicate constraint names")


def build_model(program: LinearProgram) -> pyo.ConcreteModel:
    """Translate a LinearProgram into a Pyomo model.

    Variables live in `m.v[name]`, constraints in `m.cons[name]`. Constraints
    without variable terms are left out; callers decide them beforehand.
    """
    _check_names(program)
    specs = {v.name: v for v in program.variables}

    m = pyo.ConcreteModel(name=program.name)
    m.V = pyo.Set(initialize=list(specs), ordered=True)
    m.v = pyo.Var(
        m.V,
        domain=lambda m, n: pyo.Integers if specs[n].integer else pyo.Reals,
        bounds=lambda m, n: (specs[n].lower, specs[n].upper),
    )

    rows = {c.name: c for c in program.constraints if not c.is_constant()}
    m.C = pyo.Set(initialize=list(rows), ordered=True)

    def _row(m, name):
        c = rows[name]
        body = sum(float(a) * m.v[n] for n, a in c.coeffs.items() if float(a) != 0.0)
        if c.sense == "<=":
            return body <= float(c.rhs)
        if c.sense == ">=":
            return body >= float(c.rhs)
        return body == float(c.rhs)

    m.cons = pyo.Constraint(m.C, rule=_row)

    expr = sum(float(a) * m.v[n] for n, a in program.objective.items() if float(a) != 0.0)
    sense = pyo.maximize if program.sense is Sense.MAXIMIZE else pyo.minimize
    m.obj = pyo.Objective(expr=expr + float(program.objective_constant), sense=sense)
    return m


class PyomoSolver(Solver):
    """Solve LinearPrograms with any solver reachable through `pyo.SolverFactory`."""

    def __init__(
        self,
        solver_name: str = DEFAULT_SOLVER,
        executable: str | None = None,
        options: dict[str, Any] | None = None,
        tee: bool = False,
    ):
        self.name = str(solver_name)
        self.executable = executable
        self.options = dict(options or {})
        self.tee = bool(tee)
        self._solver: Optional[Any] = None

    def _get_solver(self) -> Any:
        if self._solver is None:
            solver = pyo.SolverFactory(self.name)
            if self.executable:
                if hasattr(solver, "set_executable"):
                    solver.set_executable(self.executable, validate=False)
                else:
                    log.warning("solver '%s' does not take an executable path; ignoring %s", self.name, self.executable)
            for k, v in self.options.items():
                solver.options[k] = v
            self._solver = solver
        return self._solver

    def available(self) -> bool:
        try:
            return bool(self._get_solver().available(exception_flag=False))
        except Exception:  # noqa: BLE001 - availability probe only
            return False

    def solve(self, program: LinearProgram) -> LPResult:
        for c in program.constraints:
            if c.is_constant() and not c.constant_holds():
                log.debug("program '%s': constant constraint '%s' is violated", program.name, c.name)
                return LPResult(status=SolveStatus.INFEASIBLE)

        m = build_model(program)
        if not program.is_mip:
            m.dual = pyo.Suffix(direction=pyo.Suffix.IMPORT)

        solver = self._get_solver()
        try:
            # Solutions are loaded by hand so non-optimal terminations come back as a status
            res = solver.solve(m, tee=self.tee, load_solutions=False)
        except Exception as exc:  # noqa: BLE001 - any backend crash is a solver failure
            raise SolverCallFailure(self.name, program.name, str(exc)) from exc

        term = getattr(res.solver, "termination_condition", None)
        status = normalize_termination(term, self.name, program.name)
        log.debug("program '%s' solved by %s: termination=%s status=%s", program.name, self.name, term, status)
        if status is not SolveStatus.OPTIMAL:
            return LPResult(status=status)
        try:
            m.solutions.load_from(res)
        except Exception as exc:  # noqa: BLE001
            raise SolverCallFailure(self.name, program.name, f"could not load solution: {exc}") from exc

        primal: dict[str, float] = {}
        for v in program.variables:
            val = m.v[v.name].value
            if val is None:
                # Variables outside every row and the objective are not reported back
                val = v.lower if v.lower is not None else 0.0
            val = float(val)
            primal[v.name] = float(round(val)) if v.integer else val

        duals: dict[str, float] = {}
        if hasattr(m, "dual"):
            for name in m.C:
                duals[name] = float(m.dual.get(m.cons[name], 0.0))

        return LPResult(status=status, objective=float(pyo.value(m.obj)), primal=primal, duals=duals)


__all__ = ["DEFAULT_SOLVER", "PyomoSolver", "build_model", "normalize_termination"]
