from __future__ import annotations

from typing import Iterable, Sequence

import pytest

from mip_benders.backends.base import LinearProgram, LPResult, Solver, SolveStatus
from mip_benders.problem import garfinkel_nemhauser

# Solvers tried, in order, for the tests that need a real LP/MIP backend
SOLVER_CANDIDATES = ("appsi_highs", "glpk", "cbc")


class ScriptedSolver(Solver):
    """Replays canned LPResults per program name and records every program it sees."""

    name = "scripted"

    def __init__(self, script: dict[str, Iterable[LPResult | Exception]]):
        self.script = {k: list(v) for k, v in script.items()}
        self.calls: list[LinearProgram] = []

    def solve(self, program: LinearProgram) -> LPResult:
        self.calls.append(program)
        queue = self.script.get(program.name)
        if not queue:
            raise AssertionError(f"unexpected solve of '{program.name}'")
        out = queue.pop(0)
        if isinstance(out, Exception):
            raise out
        return out

    def count(self, name: str) -> int:
        return sum(1 for p in self.calls if p.name == name)

    def programs(self, name: str) -> list[LinearProgram]:
        return [p for p in self.calls if p.name == name]


def master_opt(t: float, x: Sequence[float]) -> LPResult:
    primal = {"t": float(t)}
    primal.update({f"x[{i}]": float(v) for i, v in enumerate(x)})
    return LPResult(status=SolveStatus.OPTIMAL, objective=float(t), primal=primal)


def sub_opt(fs: float, u: Sequence[float], v: Sequence[float] = (0.0, 0.0)) -> LPResult:
    return LPResult(
        status=SolveStatus.OPTIMAL,
        objective=float(fs),
        primal={f"u[{i}]": float(val) for i, val in enumerate(u)},
        duals={f"dual_fit[{j}]": float(val) for j, val in enumerate(v)},
    )


def ray_opt(obj: float, u: Sequence[float]) -> LPResult:
    return LPResult(
        status=SolveStatus.OPTIMAL,
        objective=float(obj),
        primal={f"u[{i}]": float(val) for i, val in enumerate(u)},
    )


def status_only(status: SolveStatus) -> LPResult:
    return LPResult(status=status)


@pytest.fixture
def gn_problem():
    return garfinkel_nemhauser()


@pytest.fixture(scope="session")
def lp_backend():
    pytest.importorskip("pyomo.environ")
    from mip_benders.backends.pyomo_backend import PyomoSolver

    for name in SOLVER_CANDIDATES:
        backend = PyomoSolver(name)
        if backend.available():
            return backend
    pytest.skip("no LP/MIP solver available through Pyomo")
