"""
Verification backend interface shared by the SMT engine and the disabled stand-in.
"""
from dataclasses import dataclass
from typing import Optional, Protocol

from ..document import Document
from ..encoding.obligation import Obligation
from ..solver.result import CounterexampleModel, PropertyResult, ProofCertificate, UnsatCore
from ..tri_vector import TriVectorAnalysis
from .result import DocumentVerificationResult, VerificationStats, VerifiedProperty


@dataclass(frozen=True)
class CheckOutcome:
    """Verdict of one query plus the artifacts extracted for it.

    Attributes:
        result: Property verdict
        certificate: Proof certificate, only for Proven
        counterexample: Model, only for Disproven (possibly empty)
        unsat_core: Unsat core, only for Proven
        time_ms: Wall time of the query
    """
    result: PropertyResult
    certificate: Optional[ProofCertificate] = None
    counterexample: Optional[CounterexampleModel] = None
    unsat_core: Optional[UnsatCore] = None
    time_ms: float = 0.0


class VerificationBackend(Protocol):
    """Capability interface with two implementations: a working SMT engine
    and a disabled stand-in that answers Unsupported/Disabled.
    """

    @property
    def enabled(self) -> bool:
        ...

    @property
    def stats(self) -> VerificationStats:
        ...

    def verify(self, formula: str, property_id: str) -> PropertyResult:
        """Check an SMT-LIB script that asserts the negation of a property.

        Args:
            formula: Declarations and assertions, no ``check-sat``
            property_id: Identifier used for artifacts and logging

        Returns:
            Proven (unsat), Disproven (sat), Unknown, Error or Unsupported
        """
        ...

    def check(self, formula: str, property_id: str) -> CheckOutcome:
        ...

    def verify_obligation(self, obligation: Obligation) -> VerifiedProperty:
        ...

    def verify_document(self, document: Document,
                        tri_vector: Optional[TriVectorAnalysis] = None) -> DocumentVerificationResult:
        ...

    def reset(self) -> None:
        ...
