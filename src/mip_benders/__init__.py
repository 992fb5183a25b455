"""mip_benders

Classical Benders decomposition for mixed integer linear programs

    maximize c1'x + c2'v  s.t.  A1 x + A2 v <= b,  x >= 0 integer,  v >= 0

The package provides:

- A solver-agnostic LP/MIP collaborator interface with a Pyomo backend
- The master / subproblem loop with optimality and feasibility cuts
- A small CLI and YAML-based configuration
"""

from .runner import run

__all__ = [
    "__version__",
    "run",
]

__version__ = "0.1.0"
