from .types import BendersResult, Cut, CutType, IterationRecord, MasterSolution, SubproblemResult, TerminationStatus
from .errors import BendersError, IterationLimitExceeded, MasterInfeasible, SolverCallFailure, SubproblemDegenerate
from .master import MasterProblem, MasterState
from .subproblem import Subproblem
from .solver import BendersSolver

__all__ = [
    "BendersResult",
    "Cut",
    "CutType",
    "IterationRecord",
    "MasterSolution",
    "SubproblemResult",
    "TerminationStatus",
    "BendersError",
    "IterationLimitExceeded",
    "MasterInfeasible",
    "SolverCallFailure",
    "SubproblemDegenerate",
    "MasterProblem",
    "MasterState",
    "Subproblem",
    "BendersSolver",
]
