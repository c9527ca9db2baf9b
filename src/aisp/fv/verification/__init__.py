"""Document verification: SMT engine, status aggregation and backend facade.

The facade hides backend availability. With the Z3 bindings installed the
engine runs in-process; otherwise an SMT-LIB executable is run as a
subprocess, and with neither the disabled stand-in answers Unsupported.
"""

from .result import (
    DiagnosticLevel,
    DocumentVerificationResult,
    SolverDiagnostic,
    VerificationOutcome,
    VerificationStats,
    VerificationStatus,
    VerifiedProperty,
)
from .aggregate import aggregate
from .backend import CheckOutcome, VerificationBackend
from .engine import SmtVerificationEngine
from .disabled import DisabledBackend
from .facade import VerificationFacade, create_session

__all__ = [
    "DiagnosticLevel",
    "DocumentVerificationResult",
    "SolverDiagnostic",
    "VerificationOutcome",
    "VerificationStats",
    "VerificationStatus",
    "VerifiedProperty",
    "aggregate",
    "CheckOutcome",
    "VerificationBackend",
    "SmtVerificationEngine",
    "DisabledBackend",
    "VerificationFacade",
    "create_session",
]
