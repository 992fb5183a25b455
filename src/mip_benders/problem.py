"""Problem data for the mixed integer program solved by Benders decomposition.

    maximize    c1'x + c2'v
    subject to  A1 x + A2 v <= b
                x >= 0 integer,  v >= 0

`x` stays in the master problem, `v` is recovered from the subproblem duals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

_KEYS = ("c1", "c2", "A1", "A2", "b")


def _vector(name: str, values: Any) -> tuple[float, ...]:
    if isinstance(values, (int, float)):
        values = [values]
    try:
        return tuple(float(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{name}' must be a list of numbers") from exc


def _matrix(name: str, rows: Any) -> tuple[tuple[float, ...], ...]:
    try:
        out = tuple(tuple(float(v) for v in row) for row in rows)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{name}' must be a list of numeric rows") from exc
    if not out or not out[0]:
        raise ValueError(f"'{name}' must not be empty")
    width = len(out[0])
    if any(len(r) != width for r in out):
        raise ValueError(f"'{name}' rows must all have length {width}")
    return out


def _dot(a: Sequence[float], b: Sequence[float]) -> float:
    return float(sum(float(x) * float(y) for x, y in zip(a, b)))


@dataclass(slots=True, frozen=True)
class ProblemData:
    c1: tuple[float, ...]
    c2: tuple[float, ...]
    A1: tuple[tuple[float, ...], ...]
    A2: tuple[tuple[float, ...], ...]
    b: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "c1", _vector("c1", self.c1))
        object.__setattr__(self, "c2", _vector("c2", self.c2))
        object.__setattr__(self, "b", _vector("b", self.b))
        object.__setattr__(self, "A1", _matrix("A1", self.A1))
        object.__setattr__(self, "A2", _matrix("A2", self.A2))
        m = len(self.b)
        if m == 0:
            raise ValueError("'b' must not be empty")
        if len(self.A1) != m or len(self.A2) != m:
            raise ValueError(f"A1 and A2 must have {m} rows (len(b)), got {len(self.A1)} and {len(self.A2)}")
        if len(self.A1[0]) != len(self.c1):
            raise ValueError(f"A1 has {len(self.A1[0])} columns but len(c1) = {len(self.c1)}")
        if len(self.A2[0]) != len(self.c2):
            raise ValueError(f"A2 has {len(self.A2[0])} columns but len(c2) = {len(self.c2)}")

    @property
    def n(self) -> int:
        return len(self.c1)

    @property
    def p(self) -> int:
        return len(self.c2)

    @property
    def m(self) -> int:
        return len(self.b)

    def residual(self, x: Sequence[float]) -> tuple[float, ...]:
        """b - A1 x"""
        return tuple(bi - _dot(row, x) for bi, row in zip(self.b, self.A1))

    def a1_transpose(self, u: Sequence[float]) -> tuple[float, ...]:
        """A1' u"""
        return tuple(_dot([row[j] for row in self.A1], u) for j in range(self.n))

    def objective_x(self, x: Sequence[float]) -> float:
        return _dot(self.c1, x)

    def b_dot(self, u: Sequence[float]) -> float:
        return _dot(self.b, u)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "ProblemData":
        missing = [k for k in _KEYS if k not in raw]
        if missing:
            raise ValueError(f"problem data is missing key(s): {', '.join(missing)}")
        return cls(**{k: raw[k] for k in _KEYS})

    def as_dict(self) -> dict[str, Any]:
        return {
            "c1": list(self.c1),
            "c2": list(self.c2),
            "A1": [list(r) for r in self.A1],
            "A2": [list(r) for r in self.A2],
            "b": list(self.b),
        }


def garfinkel_nemhauser() -> ProblemData:
    """Instance from Garfinkel & Nemhauser, Integer Programming (1972), p. 139.

    Optimal objective is -4 at x = (0, 1).
    """
    return ProblemData(
        c1=(-1, -4),
        c2=(-2, -3),
        A1=((1, -3), (-1, -3)),
        A2=((1, -2), (-1, -1)),
        b=(-2, -3),
    )


__all__ = ["ProblemData", "garfinkel_nemhauser"]
