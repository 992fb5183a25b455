import argparse
import sys
from pathlib import Path

from .benders.errors import BendersError
from .benders.types import BendersResult
from .config import load_config
from .logging_config import setup_logging
from .runner import build_solver, make_backend, problem_from_config


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mip-benders",
        description="Benders decomposition for mixed integer linear programs",
    )
    p.add_argument(
        "--config",
        type=Path,
        default=Path("configs/default.yaml"),
        help="Path to YAML config. Default: configs/default.yaml",
    )
    sub = p.add_subparsers(dest="cmd")
    sub.required = False

    run_p = sub.add_parser("run", help="Run the Benders loop")
    run_p.add_argument(
        "--max-iterations",
        dest="max_iterations",
        type=int,
        default=None,
        help="Override run.max_iterations",
    )
    run_p.add_argument(
        "--tolerance",
        dest="tolerance",
        type=float,
        default=None,
        help="Override run.tolerance (0 = exact equality of fs and fm)",
    )
    sub.add_parser("validate", help="Validate config, problem data and solver availability")
    sub.add_parser("info", help="Show current configuration")
    return p


def _print_result(result: BendersResult) -> None:
    print(f"\nResult: status={result.status.value} iterations={result.iterations}")
    if result.converged:
        print(f"The optimal objective value t is {result.objective}")
        print(f"The optimal x is {list(result.x)}")
        print(f"The optimal v is {list(result.v) if result.v is not None else None}")
    else:
        print(f"best_lb={result.best_lower_bound} best_ub={result.best_upper_bound}")
        if result.incumbent_x is not None:
            print(f"incumbent x = {list(result.incumbent_x)}")
    state = result.state
    if state is not None:
        print(f"cuts: optimality={len(state.optimality_cuts)} feasibility={len(state.feasibility_cuts)}")


def cmd_run(args) -> int:
    try:
        cfg = load_config(args.config)
    except ValueError as exc:
        print(f"Config invalid: {exc}")
        return 1
    if getattr(args, "max_iterations", None) is not None:
        cfg.run.max_iterations = int(args.max_iterations)
    if getattr(args, "tolerance", None) is not None:
        cfg.run.tolerance = float(args.tolerance)
    setup_logging(cfg.run.log_level, cfg.run.log_dir)
    try:
        solver = build_solver(cfg)
        result = solver.run()
    except (BendersError, ValueError) as exc:
        print(f"Benders run failed: {exc}")
        return 1
    _print_result(result)
    return 0


def cmd_validate(args) -> int:
    try:
        cfg = load_config(args.config)
    except ValueError as exc:
        print(f"Config invalid: {exc}")
        return 1
    setup_logging(cfg.run.log_level, cfg.run.log_dir)
    try:
        problem = problem_from_config(cfg)
    except ValueError as exc:
        print(f"Problem data invalid: {exc}")
        return 1
    print(f"Config OK. Problem: n={problem.n} p={problem.p} m={problem.m}")
    rc = 0
    for label, sc in (("master", cfg.master), ("subproblem", cfg.subproblem)):
        ok = make_backend(sc).available()
        print(f"  {label} solver '{sc.name}': {'available' if ok else 'NOT available'}")
        if not ok:
            rc = 1
    return rc


def cmd_info(args) -> int:
    try:
        cfg = load_config(args.config)
    except ValueError as exc:
        print(f"Config invalid: {exc}")
        return 1
    print(cfg)
    return 0


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.cmd in (None, "run"):
        return cmd_run(args)
    if args.cmd == "validate":
        return cmd_validate(args)
    if args.cmd == "info":
        return cmd_info(args)
    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
