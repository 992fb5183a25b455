from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional


class Sense(str, Enum):
    MAXIMIZE = "MAXIMIZE"
    MINIMIZE = "MINIMIZE"


class SolveStatus(str, Enum):
    OPTIMAL = "OPTIMAL"
    INFEASIBLE = "INFEASIBLE"
    INFEASIBLE_OR_UNBOUNDED = "INFEASIBLE_OR_UNBOUNDED"


_SENSES = ("<=", ">=", "==")


@dataclass(slots=True, frozen=True)
class Variable:
    name: str
    lower: Optional[float] = None
    upper: Optional[float] = None
    integer: bool = False


@dataclass(slots=True, frozen=True)
class LinearConstraint:
    """Represents: sum(coeffs[var] * var) <sense> rhs."""

    name: str
    coeffs: Mapping[str, float]
    sense: str = "<="
    rhs: float = 0.0

    def __post_init__(self) -> None:
        if self.sense not in _SENSES:
            raise ValueError(f"constraint '{self.name}': unknown sense '{self.sense}'")

    def is_constant(self) -> bool:
        return all(float(v) == 0.0 for v in self.coeffs.values())

    def constant_holds(self) -> bool:
        """Truth value of a constraint without variable terms (0 <sense> rhs)."""
        rhs = float(self.rhs)
        if self.sense == "<=":
            return 0.0 <= rhs
        if self.sense == ">=":
            return 0.0 >= rhs
        return rhs == 0.0


@dataclass(slots=True)
class LinearProgram:
    name: str
    sense: Sense
    objective: Mapping[str, float]
    variables: list[Variable] = field(default_factory=list)
    constraints: list[LinearConstraint] = field(default_factory=list)
    objective_constant: float = 0.0

    @property
    def is_mip(self) -> bool:
        return any(v.integer for v in self.variables)

    def pretty(self) -> str:
        def _expr(coeffs: Mapping[str, float]) -> str:
            terms = [f"{float(c):+.6g} {n}" for n, c in coeffs.items() if float(c) != 0.0]
            return " ".join(terms) if terms else "0"

        head = "max" if self.sense is Sense.MAXIMIZE else "min"
        obj = _expr(self.objective)
        if self.objective_constant:
            obj += f" {float(self.objective_constant):+.6g}"
        lines = [f"{head} {obj}", "s.t."]
        for c in self.constraints:
            lines.append(f"  {c.name}: {_expr(c.coeffs)} {c.sense} {float(c.rhs):.6g}")
        for v in self.variables:
            lo = "-inf" if v.lower is None else f"{v.lower:.6g}"
            hi = "+inf" if v.upper is None else f"{v.upper:.6g}"
            kind = ", Int" if v.integer else ""
            lines.append(f"  {lo} <= {v.name} <= {hi}{kind}")
        return "\n".join(lines)


@dataclass(slots=True)
class LPResult:
    status: SolveStatus
    objective: Optional[float] = None
    primal: Dict[str, float] = field(default_factory=dict)
    duals: Dict[str, float] = field(default_factory=dict)


class Solver(ABC):
    """Abstract LP/MIP solver collaborator.

    Implementations must normalize their native termination codes onto
    `SolveStatus` and report constraint duals by constraint name for
    continuous programs.
    """

    name: str = "solver"

    @abstractmethod
    def solve(self, program: LinearProgram) -> LPResult:
        """Solve `program` and return its status, primal values and duals."""


__all__ = [
    "Sense",
    "SolveStatus",
    "Variable",
    "LinearConstraint",
    "LinearProgram",
    "LPResult",
    "Solver",
]
