from __future__ import annotations

from pathlib import Path

from .backends.pyomo_backend import PyomoSolver
from .benders.solver import BendersSolver
from .benders.types import BendersResult
from .config import BendersConfig, SolverConfig, load_config
from .logging_config import setup_logging
from .problem import ProblemData, garfinkel_nemhauser


def _default_config_path() -> Path:
    """Best-effort discovery of the default YAML config.

    Tries `configs/default.yaml` in the CWD, then at the repo root relative
    to this file, and falls back to the CWD path.
    """
    cwd_path = Path("configs/default.yaml")
    if cwd_path.exists():
        return cwd_path
    repo_path = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"
    if repo_path.exists():
        return repo_path
    return cwd_path


def make_backend(sc: SolverConfig) -> PyomoSolver:
    return PyomoSolver(sc.name, executable=sc.executable, options=sc.options, tee=sc.tee)


def problem_from_config(cfg: BendersConfig) -> ProblemData:
    """Problem section of the config, or the Garfinkel-Nemhauser instance when absent."""
    if not cfg.problem:
        return garfinkel_nemhauser()
    return ProblemData.from_mapping(cfg.problem)


def build_solver(cfg: BendersConfig, problem: ProblemData | None = None) -> BendersSolver:
    problem = problem if problem is not None else problem_from_config(cfg)
    return BendersSolver(
        problem,
        make_backend(cfg.master),
        make_backend(cfg.subproblem),
        cfg=cfg.run,
    )


def run(config_path: str | Path | None = None) -> BendersResult:
    """Run Benders decomposition with all options read from YAML."""
    cfg_path = Path(config_path) if config_path is not None else _default_config_path()
    cfg = load_config(cfg_path)
    setup_logging(cfg.run.log_level, cfg.run.log_dir)
    return build_solver(cfg).run()


__all__ = ["run", "build_solver", "make_backend", "problem_from_config"]
