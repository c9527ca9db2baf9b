"""
Main verification API for AISP documents.

Provides high-level functions for verifying documents, checking single
orthogonality claims and scoring reference compliance.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

import structlog

from .config import VerificationConfig
from .document import Document
from .encoding.tri_vector_smt2 import orthogonality_obligation
from .reference.results import ReferenceValidationResult, SemanticAnalysis
from .reference.validator import ReferenceValidator
from .tri_vector import Orthogonality, OrthogonalityClaim, TriVectorAnalysis, TriVectorSignal
from .verification.facade import VerificationFacade
from .verification.result import DocumentVerificationResult, VerifiedProperty

logger = structlog.get_logger().bind(system="aisp.fv.checker")


def verify_document(document: Document,
                    tri_vector: Optional[TriVectorAnalysis] = None,
                    config: Optional[VerificationConfig] = None) -> DocumentVerificationResult:
    """Verify every property derived from a document.

    Args:
        document: Parsed document
        tri_vector: Tri-vector analysis; without one no tri-vector
            property is checked
        config: Verification options (default: VerificationConfig())

    Returns:
        DocumentVerificationResult. Without a solver backend the status is
        Disabled.

    Raises:
        SetupError: If the document's declarations cannot be translated

    Example:
        >>> result = verify_document(doc, TriVectorAnalysis.reference())
        >>> if result.status.is_failed:
        ...     print(result.counterexamples)
    """
    facade = VerificationFacade.new(config)
    return facade.verify_document(document, tri_vector)


def check_orthogonality(space1: str,
                        space2: str,
                        signal: Optional[TriVectorSignal] = None,
                        classification: Orthogonality = Orthogonality.PARTIALLY_ORTHOGONAL,
                        config: Optional[VerificationConfig] = None) -> VerifiedProperty:
    """Check that two concern spaces are orthogonal.

    Args:
        space1: First space name
        space2: Second space name
        signal: Signal carrying the space bases, if known
        classification: What is known about the pair when no bases are given
        config: Verification options

    Returns:
        VerifiedProperty for ``orthogonality_<space1>_⊥_<space2>``
    """
    claim = OrthogonalityClaim(space1, space2, classification)
    facade = VerificationFacade.new(config)
    return facade.verify_obligation(orthogonality_obligation(claim, signal))


def validate_reference_compliance(document: Document,
                                  source: str,
                                  analysis: SemanticAnalysis,
                                  tri_vector: Optional[TriVectorAnalysis] = None,
                                  verification: Optional[DocumentVerificationResult] = None,
                                  execution_tokens: int = 0,
                                  config: Optional[VerificationConfig] = None) -> ReferenceValidationResult:
    """Score a document against the AISP reference.

    See ReferenceValidator.validate for the arguments.
    """
    validator = ReferenceValidator(VerificationFacade.new(config))
    return validator.validate(document, source, analysis,
                              tri_vector=tri_vector,
                              verification=verification,
                              execution_tokens=execution_tokens)


def verify_batch(items: Sequence[Tuple[Document, Optional[TriVectorAnalysis]]],
                 config: Optional[VerificationConfig] = None) -> List[DocumentVerificationResult]:
    """Verify independent documents, each with its own facade and solver session.

    Documents run on a thread pool of ``config.worker_threads`` when
    ``config.parallel`` is set, otherwise one after another. Results are
    returned in input order.
    """
    config = config or VerificationConfig()

    def run(item: Tuple[Document, Optional[TriVectorAnalysis]]) -> DocumentVerificationResult:
        document, tri_vector = item
        return VerificationFacade.new(config).verify_document(document, tri_vector)

    if not config.parallel or len(items) < 2:
        return [run(item) for item in items]

    logger.info("batch_verification_started", documents=len(items), workers=config.worker_threads)
    with ThreadPoolExecutor(max_workers=config.worker_threads) as pool:
        return list(pool.map(run, items))
