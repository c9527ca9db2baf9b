"""
AISP formal verification core.

Translates AISP document declarations into SMT-LIB, checks tri-vector and
foundation properties with an SMT solver and scores reference compliance.
"""

__version__ = "0.1.0"

from .config import VerificationConfig
from .errors import (
    BackendUnavailableError,
    FormulaError,
    PhaseError,
    SetupError,
    SolverTimeoutError,
    VerificationError,
)
from .solver.result import PropertyCategory, PropertyOutcome, PropertyResult
from .tri_vector import (
    Orthogonality,
    OrthogonalityClaim,
    SafetyIsolation,
    TriVectorAnalysis,
    TriVectorSignal,
    VectorSpace,
)
from .verification import (
    DocumentVerificationResult,
    SmtVerificationEngine,
    VerificationFacade,
    VerificationStatus,
    VerifiedProperty,
    aggregate,
)
from .reference import ComplianceLevel, ReferenceValidator, SemanticAnalysis
from .checker import (
    check_orthogonality,
    validate_reference_compliance,
    verify_batch,
    verify_document,
)

__all__ = [
    "__version__",
    "VerificationConfig",
    "VerificationError",
    "SetupError",
    "FormulaError",
    "SolverTimeoutError",
    "BackendUnavailableError",
    "PhaseError",
    "PropertyCategory",
    "PropertyOutcome",
    "PropertyResult",
    "Orthogonality",
    "OrthogonalityClaim",
    "SafetyIsolation",
    "TriVectorAnalysis",
    "TriVectorSignal",
    "VectorSpace",
    "DocumentVerificationResult",
    "SmtVerificationEngine",
    "VerificationFacade",
    "VerificationStatus",
    "VerifiedProperty",
    "aggregate",
    "ComplianceLevel",
    "ReferenceValidator",
    "SemanticAnalysis",
    "check_orthogonality",
    "validate_reference_compliance",
    "verify_batch",
    "verify_document",
]
