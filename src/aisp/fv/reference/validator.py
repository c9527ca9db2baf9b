"""
Reference compliance validator.

Four phases run independently; a phase that fails is replaced by its
conservative fallback and the failure is recorded as an issue:

    1. math foundations     ambiguity bound, pipeline rates, token efficiency
    2. tri-vector           V_H⊥V_S and V_L⊥V_S (V_H∩V_L may overlap)
    3. feature compliance   the 20 registered feature checks
    4. layer composition    𝕃₀ → 𝕃₁ → 𝕃₂ and the two composition edges
"""
import math
import time
from typing import Dict, List, Optional

import structlog

from ..document import Document
from ..encoding.foundations_smt2 import (
    COMPOSITION_EDGES,
    PIPELINE_STEPS,
    ambiguity_obligation,
    composition_obligations,
    layer_obligations,
    pipeline_obligation,
    pipeline_rates,
)
from ..encoding.tri_vector_smt2 import orthogonality_obligation
from ..errors import PhaseError
from ..solver.result import PropertyResult
from ..tri_vector import Orthogonality, OrthogonalityClaim, TriVectorAnalysis
from ..verification.facade import VerificationFacade
from ..verification.result import DocumentVerificationResult, VerifiedProperty
from .features import FeatureContext, FeatureRegistry, default_registry
from .results import (
    ComplianceLevel,
    CompositionProof,
    FeatureComplianceResult,
    LayerCompositionResult,
    MathFoundationResult,
    PipelineProof,
    ReferenceValidationResult,
    SemanticAnalysis,
    TokenEfficiencyResult,
    TriVectorOrthogonalityResult,
)
from .scoring import compliance_score

logger = structlog.get_logger().bind(system="aisp.fv.reference")

# Execution-token budget; AISP specifications should execute at ~0 tokens.
EXECUTION_TOKEN_LIMIT = 10
CHARS_PER_TOKEN = 4


class ReferenceValidator:
    """Scores a document against the AISP reference.

    Args:
        facade: Verification facade used for every solver query; defaults
            to ``VerificationFacade.new()``
        registry: Feature registry; defaults to the 20 reference features
    """

    def __init__(self,
                 facade: Optional[VerificationFacade] = None,
                 registry: Optional[FeatureRegistry] = None):
        self.facade = facade or VerificationFacade.new()
        self.registry = registry or default_registry()
        # Results of the properties verified by the current run
        self._properties: Dict[str, PropertyResult] = {}

    def validate(self,
                 document: Document,
                 source: str,
                 analysis: SemanticAnalysis,
                 tri_vector: Optional[TriVectorAnalysis] = None,
                 verification: Optional[DocumentVerificationResult] = None,
                 execution_tokens: int = 0) -> ReferenceValidationResult:
        """Validate a document.

        Args:
            document: Parsed document; read only
            source: Document source text
            analysis: Externally computed ambiguity measurements
            tri_vector: Tri-vector analysis; the reference model when omitted
            verification: Prior document verification whose property
                results back the feature checks
            execution_tokens: Measured execution-token count

        Returns:
            ReferenceValidationResult; never raises for phase failures
        """
        t0 = time.perf_counter()
        self._properties = {}
        issues: List[str] = []
        log = logger.bind(document=document.header.name)

        try:
            math_result = self.verify_math_foundations(source, analysis, execution_tokens)
        except Exception as exc:
            log.warning("phase_failed", phase="math_foundations", error=str(exc))
            issues.append(f"Math foundations error: {exc}")
            math_result = MathFoundationResult.fallback()

        try:
            trivector = self.verify_trivector_orthogonality(tri_vector or TriVectorAnalysis.reference())
        except Exception as exc:
            log.warning("phase_failed", phase="trivector", error=str(exc))
            issues.append(f"Tri-vector error: {exc}")
            trivector = TriVectorOrthogonalityResult.fallback()

        try:
            properties = dict(verification.results()) if verification is not None else {}
            properties.update(self._properties)
            features = self.verify_feature_compliance(
                FeatureContext(document, source, analysis, properties))
        except Exception as exc:
            log.warning("phase_failed", phase="features", error=str(exc))
            issues.append(f"Feature compliance error: {exc}")
            features = FeatureComplianceResult.fallback(len(self.registry))

        try:
            layers = self.verify_layer_composition(document)
        except Exception as exc:
            log.warning("phase_failed", phase="layers", error=str(exc))
            issues.append(f"Layer composition error: {exc}")
            layers = LayerCompositionResult.fallback()

        score = compliance_score(math_result, trivector, features, layers)
        level = ComplianceLevel.from_score(score)
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        log.info("reference_validation_done",
                 score=round(score, 4), level=level.value, issues=len(issues))

        return ReferenceValidationResult(
            compliance_level=level,
            compliance_score=score,
            math_foundations=math_result,
            trivector_orthogonality=trivector,
            feature_compliance=features,
            layer_composition=layers,
            verification_issues=issues,
            verification_time_ms=elapsed_ms,
        )

    def _verify(self, obligation) -> VerifiedProperty:
        prop = self.facade.verify_obligation(obligation)
        self._properties[prop.id] = prop.result
        return prop

    def verify_math_foundations(self, source: str, analysis: SemanticAnalysis,
                                execution_tokens: int = 0) -> MathFoundationResult:
        """Phase 1: ambiguity bound, pipeline proofs and token efficiency.

        Raises:
            PhaseError: On an invalid ambiguity or token count
        """
        if math.isnan(analysis.ambiguity) or math.isinf(analysis.ambiguity):
            raise PhaseError(f"ambiguity must be finite, got {analysis.ambiguity}")
        if execution_tokens < 0:
            raise PhaseError(f"execution_tokens must be non-negative, got {execution_tokens}")

        ambiguity = self._verify(ambiguity_obligation(
            analysis.ambiguity, analysis.unique_parses, analysis.total_parses))
        calculated = analysis.ambiguity
        if analysis.unique_parses is not None and analysis.total_parses:
            calculated = 1.0 - analysis.unique_parses / analysis.total_parses

        pipeline_proofs = []
        for steps in PIPELINE_STEPS:
            rates = pipeline_rates(steps)
            prop = self._verify(pipeline_obligation(steps))
            pipeline_proofs.append(PipelineProof(
                steps=steps,
                prose_rate=float(rates.prose_rate),
                aisp_rate=float(rates.aisp_rate),
                improvement_factor=float(rates.improvement_factor),
                smt_verified=prop.result.is_proven,
            ))

        compilation_tokens = len(source) // CHARS_PER_TOKEN
        efficiency = TokenEfficiencyResult(
            compilation_tokens=compilation_tokens,
            execution_tokens=execution_tokens,
            efficiency_ratio=compilation_tokens / execution_tokens if execution_tokens > 0 else None,
            meets_spec=execution_tokens <= EXECUTION_TOKEN_LIMIT,
        )

        return MathFoundationResult(
            ambiguity_verified=ambiguity.result.is_proven,
            calculated_ambiguity=calculated,
            pipeline_proofs=pipeline_proofs,
            token_efficiency=efficiency,
        )

    def verify_trivector_orthogonality(self, analysis: TriVectorAnalysis) -> TriVectorOrthogonalityResult:
        """Phase 2: the two required disjointness checks.

        Raises:
            PhaseError: If the analysis has no signal
        """
        if analysis.signal is None:
            raise PhaseError("tri-vector analysis has no signal")
        signal = analysis.signal
        semantic, structural, safety = (s.name for s in signal.spaces())

        certificates = []
        verdicts = []
        for space in (semantic, structural):
            claim = analysis.claim(space, safety) or OrthogonalityClaim(
                space, safety, Orthogonality.PARTIALLY_ORTHOGONAL)
            # Orient the claim so the safety space is always second
            claim = OrthogonalityClaim(space, safety, claim.classification)
            prop = self._verify(orthogonality_obligation(claim, signal))
            verdicts.append(prop.result.is_proven)
            if prop.result.is_proven:
                certificates.append(prop.proof_certificate or f"{prop.id}: proven")

        return TriVectorOrthogonalityResult(
            vh_vs_orthogonal=verdicts[0],
            vl_vs_orthogonal=verdicts[1],
            vh_vl_overlap_allowed=True,
            orthogonality_certificates=certificates,
        )

    def verify_feature_compliance(self, ctx: FeatureContext) -> FeatureComplianceResult:
        """Phase 3: run every registered feature check."""
        return self.registry.run(ctx)

    def verify_layer_composition(self, document: Document) -> LayerCompositionResult:
        """Phase 4: the three layers and the composition edges between them."""
        layers = [self._verify(ob).result.is_proven for ob in layer_obligations(document)]

        proofs = []
        for (src, dst, enables, premises), obligation in zip(COMPOSITION_EDGES, composition_obligations()):
            prop = self._verify(obligation)
            proofs.append(CompositionProof(
                from_layer=src,
                to_layer=dst,
                enables_property=f"{'∧'.join(premises)}⇒{enables}",
                smt_verified=prop.result.is_proven,
                certificate=prop.proof_certificate,
            ))

        return LayerCompositionResult(
            layer0_verified=layers[0],
            layer1_verified=layers[1],
            layer2_verified=layers[2],
            composition_proofs=proofs,
        )
