"""Solver abstraction layer for formal verification.

Note: the Python Z3 bindings are optional. Importing this package should not
require Z3 unless you explicitly use the Z3 backend.
"""

from .base import SolverBackend
from .process_solver import ProcessSolver, SolverSpec, pick_solver, run_solver
from .result import (
    CounterexampleModel,
    FunctionInterpretation,
    PropertyCategory,
    PropertyOutcome,
    PropertyResult,
    ProofCertificate,
    SolverResult,
    UnsatCore,
)

try:
    from .z3_solver import Z3Solver  # type: ignore
except Exception:  # pragma: no cover
    Z3Solver = None  # type: ignore


def z3_available() -> bool:
    """Return True if the Z3 Python bindings could be imported."""
    return Z3Solver is not None


__all__ = [
    "SolverBackend",
    "SolverResult",
    "PropertyCategory",
    "PropertyOutcome",
    "PropertyResult",
    "ProofCertificate",
    "CounterexampleModel",
    "FunctionInterpretation",
    "UnsatCore",
    "ProcessSolver",
    "SolverSpec",
    "pick_solver",
    "run_solver",
    "Z3Solver",
    "z3_available",
]
