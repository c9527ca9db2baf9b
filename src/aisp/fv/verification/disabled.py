"""
Stand-in backend used when no SMT solver is available.
"""
from typing import Optional

import structlog

from ..config import VerificationConfig
from ..document import Document
from ..encoding.obligation import Obligation
from ..solver.result import PropertyResult
from ..tri_vector import TriVectorAnalysis
from .backend import CheckOutcome
from .result import DocumentVerificationResult, VerificationStats, VerifiedProperty

logger = structlog.get_logger().bind(system="aisp.fv.disabled")


class DisabledBackend:
    """Answers Unsupported for every property and Disabled for every document.

    Never touches a solver and never raises.
    """

    name = "disabled"

    def __init__(self, config: Optional[VerificationConfig] = None):
        self.config = config or VerificationConfig()
        self._stats = VerificationStats()

    @property
    def enabled(self) -> bool:
        return False

    @property
    def stats(self) -> VerificationStats:
        return self._stats

    def reset(self) -> None:
        self._stats = VerificationStats()

    def verify(self, formula: str, property_id: str) -> PropertyResult:
        return PropertyResult.unsupported()

    def check(self, formula: str, property_id: str) -> CheckOutcome:
        return CheckOutcome(PropertyResult.unsupported())

    def verify_obligation(self, obligation: Obligation) -> VerifiedProperty:
        return VerifiedProperty(
            id=obligation.id,
            category=obligation.category,
            description=obligation.description,
            smt_formula=obligation.formula,
            result=PropertyResult.unsupported(),
        )

    def verify_document(self, document: Document,
                        tri_vector: Optional[TriVectorAnalysis] = None) -> DocumentVerificationResult:
        logger.debug("document_verification_skipped", document=document.header.name)
        return DocumentVerificationResult.disabled()
