"""
Abstract base interface for SMT solver backends.
"""
from typing import Dict, List, Optional, Protocol

from .result import CounterexampleModel, ProofCertificate, SolverResult


class SolverBackend(Protocol):
    """Protocol defining one solver session.

    A session owns its declarations and assertions; it is never shared
    between threads. Pluggable implementations (Z3 bindings, external
    SMT-LIB executables) keep the verification engine solver-agnostic.
    """

    name: str

    def add_script(self, script: str) -> None:
        """Parse an SMT-LIB script (declarations and assertions) and assert it.

        Args:
            script: SMT-LIB text without ``check-sat``/``get-model`` commands

        Raises:
            FormulaError: If the script cannot be parsed
        """
        ...

    def check_sat(self) -> SolverResult:
        """Check satisfiability of the asserted script.

        Returns:
            SAT, UNSAT or UNKNOWN (timeout or resource limit)
        """
        ...

    def get_model(self) -> Optional[CounterexampleModel]:
        """Decode the model of the last SAT answer, or None if unavailable."""
        ...

    def get_proof(self) -> Optional[ProofCertificate]:
        """Decode the proof of the last UNSAT answer, or None if unavailable."""
        ...

    def get_unsat_core(self) -> Optional[List[str]]:
        """Assertions in the unsat core of the last UNSAT answer, or None."""
        ...

    def statistics(self) -> Dict[str, str]:
        """Backend-specific statistics of the last check."""
        ...

    def push(self) -> None:
        """Push a new assertion scope."""
        ...

    def pop(self) -> None:
        """Pop the most recent assertion scope."""
        ...

    def reset(self) -> None:
        """Reset the solver state, clearing all assertions."""
        ...
