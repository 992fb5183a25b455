from .base import LinearConstraint, LinearProgram, LPResult, Sense, Solver, SolveStatus, Variable
from .pyomo_backend import DEFAULT_SOLVER, PyomoSolver

__all__ = [
    "LinearConstraint",
    "LinearProgram",
    "LPResult",
    "Sense",
    "Solver",
    "SolveStatus",
    "Variable",
    "DEFAULT_SOLVER",
    "PyomoSolver",
]
