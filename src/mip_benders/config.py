from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping
import ast
import operator as _op

import yaml

DEFAULT_SOLVER = "appsi_highs"


@dataclass(slots=True)
class RunConfig:
    max_iterations: int = 100
    # 0.0 keeps exact equality between fs and fm as the convergence test
    tolerance: float = 0.0
    # Stand-in for +inf: upper bound on t and the placeholder bound of an unbounded master
    big_m: float = 1000.0
    upper_bound_x: float = 1e6
    ray_tolerance: float = 1e-9
    fail_on_iteration_limit: bool = False
    log_level: str = "INFO"
    log_dir: str = "Report"


@dataclass(slots=True)
class SolverConfig:
    name: str = DEFAULT_SOLVER
    executable: str | None = None
    options: dict[str, Any] = field(default_factory=dict)
    tee: bool = False


@dataclass(slots=True)
class BendersConfig:
    run: RunConfig = field(default_factory=RunConfig)
    master: SolverConfig = field(default_factory=SolverConfig)
    subproblem: SolverConfig = field(default_factory=SolverConfig)
    problem: dict[str, Any] = field(default_factory=dict)


def _as_dict(m: Mapping[str, Any] | None) -> dict[str, Any]:
    return dict(m) if m else {}


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


_BIN_OPS = {
    ast.Add: _op.add,
    ast.Sub: _op.sub,
    ast.Mult: _op.mul,
    ast.Div: _op.truediv,
    ast.FloorDiv: _op.floordiv,
    ast.Mod: _op.mod,
    ast.Pow: _op.pow,
}
_UNARY_OPS = {ast.UAdd: _op.pos, ast.USub: _op.neg}

# Only these `run:` fields may hold arithmetic; log_dir and log_level stay plain strings
_NUMERIC_RUN_KEYS = ("max_iterations", "tolerance", "big_m", "upper_bound_x", "ray_tolerance")


def _eval_expr(expr: str, names: Mapping[str, Any]) -> float | int:
    """Safely evaluate a simple arithmetic expression with provided names.

    Allowed: int/float literals, numeric names from `names`, the operators
    + - * / // % **, parentheses and unary +/-. Anything else raises ValueError.
    """

    def _eval(n: ast.AST) -> float | int:
        if isinstance(n, ast.Expression):
            return _eval(n.body)
        if isinstance(n, ast.Constant):
            if _is_number(n.value):
                return n.value
            raise ValueError("non-numeric constant in expression")
        if isinstance(n, ast.Name):
            if n.id not in names:
                raise ValueError(f"unknown name '{n.id}' in expression")
            v = names[n.id]
            if _is_number(v):
                return v
            raise ValueError(f"name '{n.id}' is not numeric: {v!r}")
        if isinstance(n, ast.BinOp) and type(n.op) in _BIN_OPS:
            return _BIN_OPS[type(n.op)](_eval(n.left), _eval(n.right))
        if isinstance(n, ast.UnaryOp) and type(n.op) in _UNARY_OPS:
            return _UNARY_OPS[type(n.op)](_eval(n.operand))
        raise ValueError(f"unsupported syntax in expression '{expr}'")

    try:
        tree = ast.parse(expr, mode="eval")
    except SyntaxError as exc:
        raise ValueError(f"invalid expression '{expr}': {exc.msg}") from None
    try:
        return _eval(tree)
    except ZeroDivisionError:
        raise ValueError(f"division by zero in expression '{expr}'") from None


def _resolve_param_expressions(params: dict[str, Any], keys: Iterable[str]) -> dict[str, Any]:
    """Evaluate string values of `keys` that look like arithmetic (contain one of '+-*/()').

    Names may reference other numeric keys of the same dict, e.g.
    `big_m: "10 * upper_bound_x"`. Plain numeric strings such as "1e6" are
    left for the typed conversion in `load_config`.
    """
    if not params:
        return params
    names = {k: v for k, v in params.items() if _is_number(v)}
    out: dict[str, Any] = dict(params)
    for k in keys:
        v = params.get(k)
        if isinstance(v, str) and any(ch in v for ch in "+-*/()"):
            try:
                float(v)
                continue
            except ValueError:
                pass
            out[k] = _eval_expr(v.strip(), names)
    return out


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("Top-level YAML document must be a mapping")
    return data


def _solver_config(raw: Mapping[str, Any] | None) -> SolverConfig:
    d = _as_dict(raw)
    opts = d.get("options") or {}
    if not isinstance(opts, Mapping):
        raise ValueError("solver 'options' must be a mapping")
    exe = d.get("executable")
    return SolverConfig(
        name=str(d.get("solver", d.get("name", DEFAULT_SOLVER))),
        executable=str(exe) if exe else None,
        options=dict(opts),
        tee=bool(d.get("tee", False)),
    )


def load_config(path: str | Path | None) -> BendersConfig:
    """Load configuration from a YAML file or return defaults.

    The schema is small and forgiving; unknown keys are ignored.
    """
    if path is None:
        return BendersConfig()
    p = Path(path)
    if not p.exists():
        return BendersConfig()
    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError(f"Unsupported config format '{p.suffix}'. Please provide a YAML file.")

    raw = _load_yaml(p)
    run = _resolve_param_expressions(_as_dict(raw.get("run")), _NUMERIC_RUN_KEYS)
    d = RunConfig()
    run_cfg = RunConfig(
        max_iterations=int(run.get("max_iterations", d.max_iterations)),
        tolerance=float(run.get("tolerance", d.tolerance) or 0.0),
        big_m=float(run.get("big_m", d.big_m)),
        upper_bound_x=float(run.get("upper_bound_x", d.upper_bound_x)),
        ray_tolerance=float(run.get("ray_tolerance", d.ray_tolerance)),
        fail_on_iteration_limit=bool(run.get("fail_on_iteration_limit", d.fail_on_iteration_limit)),
        log_level=str(run.get("log_level", d.log_level)),
        log_dir=str(run.get("log_dir", d.log_dir)),
    )
    return BendersConfig(
        run=run_cfg,
        master=_solver_config(raw.get("master")),
        subproblem=_solver_config(raw.get("subproblem")),
        problem=_as_dict(raw.get("problem")),
    )


__all__ = ["RunConfig", "SolverConfig", "BendersConfig", "load_config"]
