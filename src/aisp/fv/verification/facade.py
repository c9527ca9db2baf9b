"""
Single entry point that hides whether an SMT solver is available.
"""
from typing import Optional

import structlog

from ..config import VerificationConfig
from ..document import Document
from ..encoding.obligation import Obligation
from ..errors import BackendUnavailableError
from ..solver import ProcessSolver, Z3Solver
from ..solver.base import SolverBackend
from ..solver.process_solver import is_solver_available, pick_solver
from ..solver.result import PropertyResult
from ..tri_vector import TriVectorAnalysis
from .backend import CheckOutcome, VerificationBackend
from .disabled import DisabledBackend
from .engine import SmtVerificationEngine
from .result import DocumentVerificationResult, VerificationStats, VerifiedProperty

logger = structlog.get_logger().bind(system="aisp.fv.facade")


def create_session(config: Optional[VerificationConfig] = None) -> SolverBackend:
    """Create a solver session for the configured backend.

    "z3" uses the Python bindings, "process" an SMT-LIB executable and
    "auto" the bindings when importable, else an executable.

    Raises:
        BackendUnavailableError: If the selected backend cannot be constructed
    """
    config = config or VerificationConfig()
    if config.solver in ("z3", "auto") and Z3Solver is not None:
        return Z3Solver.from_config(config)
    if config.solver == "z3":
        raise BackendUnavailableError("Z3 Python bindings are not installed (pip install z3-solver)")
    try:
        return ProcessSolver.from_config(config)
    except FileNotFoundError as exc:
        raise BackendUnavailableError(str(exc)) from exc


class VerificationFacade:
    """Verification entry point holding one backend.

    Callers get the same return types whether or not a solver is linked;
    without one, properties are Unsupported and documents Disabled.
    """

    def __init__(self, backend: VerificationBackend):
        self.backend = backend

    @staticmethod
    def is_available(config: Optional[VerificationConfig] = None) -> bool:
        """Return True if a solver backend can be constructed for ``config``."""
        config = config or VerificationConfig()
        if config.solver in ("z3", "auto") and Z3Solver is not None:
            return True
        if config.solver == "z3":
            return False
        if config.solver_command:
            return is_solver_available(config.solver_command)
        return pick_solver() is not None

    @classmethod
    def new(cls, config: Optional[VerificationConfig] = None) -> "VerificationFacade":
        """Build a facade around a working engine, or the disabled stand-in."""
        config = config or VerificationConfig()
        try:
            session = create_session(config)
        except BackendUnavailableError as exc:
            logger.info("solver_backend_unavailable", solver=config.solver, reason=str(exc))
            return cls.new_disabled(config)
        logger.debug("solver_backend_selected", backend=session.name)
        return cls(SmtVerificationEngine(session, config))

    @classmethod
    def new_disabled(cls, config: Optional[VerificationConfig] = None) -> "VerificationFacade":
        return cls(DisabledBackend(config))

    @property
    def enabled(self) -> bool:
        return self.backend.enabled

    @property
    def stats(self) -> VerificationStats:
        return self.backend.stats

    def verify_formula(self, formula: str, property_id: str) -> PropertyResult:
        return self.backend.verify(formula, property_id)

    def check_formula(self, formula: str, property_id: str) -> CheckOutcome:
        return self.backend.check(formula, property_id)

    def verify_obligation(self, obligation: Obligation) -> VerifiedProperty:
        return self.backend.verify_obligation(obligation)

    def verify_document(self, document: Document,
                        tri_vector: Optional[TriVectorAnalysis] = None) -> DocumentVerificationResult:
        return self.backend.verify_document(document, tri_vector)

    def reset(self) -> None:
        self.backend.reset()
