from backend.engine.gamesolver.solver import (
    DeductionContractError,
    LineSolver,
    SolverConfig,
    solve_line,
)
from backend.engine.gamesolver.techniques import Assignment

__all__ = [
    "Assignment",
    "DeductionContractError",
    "LineSolver",
    "SolverConfig",
    "solve_line",
]
