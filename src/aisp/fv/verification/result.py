"""Document verification results: per-property records, status and statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from ..solver.result import (
    CounterexampleModel,
    PropertyCategory,
    PropertyResult,
    ProofCertificate,
    UnsatCore,
)


@dataclass(frozen=True)
class VerifiedProperty:
    """One verified property.

    Attributes:
        id: Property identifier, unique within a run
        category: Property family
        description: Human-readable description
        smt_formula: The property as an SMT-LIB term
        result: Verdict
        verification_time_ms: Time spent on this property
        proof_certificate: Certificate summary, present only when Proven
    """
    id: str
    category: PropertyCategory
    description: str
    smt_formula: str
    result: PropertyResult
    verification_time_ms: float = 0.0
    proof_certificate: Optional[str] = None


class VerificationOutcome(Enum):
    ALL_VERIFIED = "all_verified"
    PARTIALLY_VERIFIED = "partially_verified"
    INCOMPLETE = "incomplete"
    FAILED = "failed"
    DISABLED = "disabled"


@dataclass(frozen=True)
class VerificationStatus:
    """Document-level status derived from a property set."""
    outcome: VerificationOutcome
    reason: str = ""

    @classmethod
    def all_verified(cls) -> "VerificationStatus":
        return cls(VerificationOutcome.ALL_VERIFIED)

    @classmethod
    def partially_verified(cls) -> "VerificationStatus":
        return cls(VerificationOutcome.PARTIALLY_VERIFIED)

    @classmethod
    def incomplete(cls) -> "VerificationStatus":
        return cls(VerificationOutcome.INCOMPLETE)

    @classmethod
    def failed(cls, reason: str) -> "VerificationStatus":
        return cls(VerificationOutcome.FAILED, reason)

    @classmethod
    def disabled(cls) -> "VerificationStatus":
        return cls(VerificationOutcome.DISABLED)

    @property
    def is_failed(self) -> bool:
        return self.outcome is VerificationOutcome.FAILED

    def __str__(self) -> str:
        if self.reason:
            return f"{self.outcome.value}: {self.reason}"
        return self.outcome.value


@dataclass
class VerificationStats:
    """Cumulative counters of one engine instance."""
    total_time_ms: float = 0.0
    smt_queries: int = 0
    successful_proofs: int = 0
    counterexamples: int = 0
    timeouts: int = 0
    errors: int = 0
    solver_stats: Dict[str, str] = field(default_factory=dict)

    def copy(self) -> "VerificationStats":
        return VerificationStats(
            total_time_ms=self.total_time_ms,
            smt_queries=self.smt_queries,
            successful_proofs=self.successful_proofs,
            counterexamples=self.counterexamples,
            timeouts=self.timeouts,
            errors=self.errors,
            solver_stats=dict(self.solver_stats),
        )


class DiagnosticLevel(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    PERFORMANCE = "performance"


@dataclass
class SolverDiagnostic:
    level: DiagnosticLevel
    message: str
    context: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class DocumentVerificationResult:
    """Everything one document verification run produced."""
    status: VerificationStatus
    verified_properties: List[VerifiedProperty] = field(default_factory=list)
    proofs: Dict[str, ProofCertificate] = field(default_factory=dict)
    counterexamples: Dict[str, CounterexampleModel] = field(default_factory=dict)
    unsat_cores: Dict[str, UnsatCore] = field(default_factory=dict)
    stats: VerificationStats = field(default_factory=VerificationStats)
    diagnostics: List[SolverDiagnostic] = field(default_factory=list)

    @classmethod
    def disabled(cls) -> "DocumentVerificationResult":
        return cls(
            status=VerificationStatus.disabled(),
            diagnostics=[SolverDiagnostic(DiagnosticLevel.INFO,
                                          "No SMT solver backend available",
                                          "backend")],
        )

    def property(self, property_id: str) -> Optional[VerifiedProperty]:
        for prop in self.verified_properties:
            if prop.id == property_id:
                return prop
        return None

    def results(self) -> Dict[str, PropertyResult]:
        return {prop.id: prop.result for prop in self.verified_properties}
