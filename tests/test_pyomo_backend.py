import pytest

pyo = pytest.importorskip("pyomo.environ")

from mip_benders.backends.base import LinearConstraint, LinearProgram, Sense, SolveStatus, Variable  # noqa: E402
from mip_benders.backends.pyomo_backend import PyomoSolver, build_model, normalize_termination  # noqa: E402
from mip_benders.benders.errors import SolverCallFailure  # noqa: E402


def _lp(constraints, sense=Sense.MINIMIZE, objective=None, variables=None):
    return LinearProgram(
        name="toy",
        sense=sense,
        objective=objective if objective is not None else {"x": 1.0, "y": 1.0},
        variables=variables if variables is not None else [Variable("x", lower=0.0), Variable("y", lower=0.0)],
        constraints=constraints,
    )


@pytest.mark.parametrize(
    "term, expected",
    [
        (pyo.TerminationCondition.optimal, SolveStatus.OPTIMAL),
        (pyo.TerminationCondition.locallyOptimal, SolveStatus.OPTIMAL),
        (pyo.TerminationCondition.infeasible, SolveStatus.INFEASIBLE),
        (pyo.TerminationCondition.unbounded, SolveStatus.INFEASIBLE_OR_UNBOUNDED),
        (pyo.TerminationCondition.infeasibleOrUnbounded, SolveStatus.INFEASIBLE_OR_UNBOUNDED),
    ],
)
def test_termination_mapping(term, expected):
    assert normalize_termination(term) is expected


def test_unexpected_termination_is_a_solver_failure():
    with pytest.raises(SolverCallFailure, match="maxTimeLimit") as info:
        normalize_termination(pyo.TerminationCondition.maxTimeLimit, "glpk", "master")
    assert info.value.solver == "glpk"
    assert info.value.program == "master"


def test_build_model_structure():
    program = _lp(
        [
            LinearConstraint("cover", {"x": 1.0, "y": 1.0}, ">=", 2.0),
            LinearConstraint("trivial", {"x": 0.0}, "<=", 1.0),
        ],
        variables=[Variable("x", lower=0.0, upper=4.0, integer=True), Variable("y", lower=0.0)],
    )
    m = build_model(program)
    assert list(m.V) == ["x", "y"]
    assert list(m.C) == ["cover"]
    assert m.v["x"].is_integer()
    assert m.v["x"].bounds == (0, 4)
    assert m.v["y"].ub is None
    assert m.obj.sense == pyo.minimize


def test_name_errors():
    with pytest.raises(ValueError, match="unknown"):
        build_model(_lp([LinearConstraint("c", {"z": 1.0}, "<=", 1.0)]))
    with pytest.raises(ValueError, match="duplicate variable"):
        build_model(_lp([], variables=[Variable("x"), Variable("x"), Variable("y")]))
    with pytest.raises(ValueError, match="duplicate constraint"):
        build_model(
            _lp([LinearConstraint("c", {"x": 1.0}, "<=", 1.0), LinearConstraint("c", {"y": 1.0}, "<=", 1.0)])
        )
    with pytest.raises(ValueError, match="sense"):
        LinearConstraint("c", {"x": 1.0}, "<", 1.0)


def test_violated_constant_row_short_circuits():
    # The solver name is never resolved: the row alone decides infeasibility
    backend = PyomoSolver("no_such_solver")
    res = backend.solve(_lp([LinearConstraint("empty_cut", {"x": 0.0, "y": 0.0}, "<=", -1.0)]))
    assert res.status is SolveStatus.INFEASIBLE


def test_lp_objective_primal_and_duals(lp_backend):
    res = lp_backend.solve(_lp([LinearConstraint("cover", {"x": 1.0, "y": 1.0}, ">=", 2.0)]))
    assert res.status is SolveStatus.OPTIMAL
    assert res.objective == pytest.approx(2.0)
    assert res.primal["x"] + res.primal["y"] == pytest.approx(2.0)
    assert res.duals["cover"] == pytest.approx(1.0)


def test_objective_constant_is_included(lp_backend):
    program = _lp([LinearConstraint("cover", {"x": 1.0, "y": 1.0}, ">=", 2.0)])
    program.objective_constant = -5.0
    assert lp_backend.solve(program).objective == pytest.approx(-3.0)


def test_mip_rounds_integers(lp_backend):
    program = _lp(
        [LinearConstraint("cap", {"x": 2.0}, "<=", 3.0)],
        sense=Sense.MAXIMIZE,
        objective={"x": 1.0},
        variables=[Variable("x", lower=0.0, upper=10.0, integer=True)],
    )
    res = lp_backend.solve(program)
    assert res.status is SolveStatus.OPTIMAL
    assert res.primal["x"] == 1.0
    assert res.duals == {}


def test_unbounded_lp(lp_backend):
    program = _lp([LinearConstraint("floor", {"x": 1.0}, ">=", 1.0)], sense=Sense.MAXIMIZE)
    assert lp_backend.solve(program).status is SolveStatus.INFEASIBLE_OR_UNBOUNDED


def test_infeasible_lp(lp_backend):
    program = _lp(
        [
            LinearConstraint("lo", {"x": 1.0}, ">=", 2.0),
            LinearConstraint("hi", {"x": 1.0}, "<=", 1.0),
        ]
    )
    status = lp_backend.solve(program).status
    assert status in (SolveStatus.INFEASIBLE, SolveStatus.INFEASIBLE_OR_UNBOUNDED)
