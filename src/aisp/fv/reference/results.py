"""
Inputs and results of the reference compliance validator.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


@dataclass(frozen=True)
class SemanticAnalysis:
    """Externally computed semantic measurements of a document.

    Attributes:
        ambiguity: Ambig(D) = 1 - |Parse_u(D)| / |Parse_t(D)|
        unique_parses: |Parse_u(D)|, if known
        total_parses: |Parse_t(D)|, if known
        semantic_density: δ of the source, if computed
    """
    ambiguity: float
    unique_parses: Optional[int] = None
    total_parses: Optional[int] = None
    semantic_density: Optional[float] = None

    @classmethod
    def from_parses(cls, unique_parses: int, total_parses: int,
                    semantic_density: Optional[float] = None) -> "SemanticAnalysis":
        if total_parses <= 0:
            raise ValueError(f"total_parses must be positive, got {total_parses}")
        return cls(1.0 - unique_parses / total_parses, unique_parses, total_parses,
                   semantic_density)


class ComplianceLevel(Enum):
    """Compliance tier; a total partition of the score range [0, 1]."""
    PERFECT = "perfect"
    HIGH = "high"
    PARTIAL = "partial"
    LOW = "low"
    FAILED = "failed"

    @classmethod
    def from_score(cls, score: float) -> "ComplianceLevel":
        """Tier for a score; each lower bound is inclusive."""
        if math.isnan(score):
            return cls.FAILED
        if score >= 1.0:
            return cls.PERFECT
        if score >= 0.85:
            return cls.HIGH
        if score >= 0.60:
            return cls.PARTIAL
        if score >= 0.30:
            return cls.LOW
        return cls.FAILED


@dataclass
class PipelineProof:
    steps: int
    prose_rate: float
    aisp_rate: float
    improvement_factor: float
    smt_verified: bool = False

    @property
    def holds(self) -> bool:
        return self.aisp_rate > self.prose_rate and self.improvement_factor > 1.0


@dataclass
class TokenEfficiencyResult:
    compilation_tokens: int
    execution_tokens: int
    efficiency_ratio: Optional[float]
    meets_spec: bool

    @classmethod
    def fallback(cls) -> "TokenEfficiencyResult":
        return cls(compilation_tokens=0, execution_tokens=1000,
                   efficiency_ratio=None, meets_spec=False)


@dataclass
class MathFoundationResult:
    ambiguity_verified: bool
    calculated_ambiguity: float
    pipeline_proofs: List[PipelineProof] = field(default_factory=list)
    token_efficiency: TokenEfficiencyResult = field(default_factory=TokenEfficiencyResult.fallback)

    @classmethod
    def fallback(cls) -> "MathFoundationResult":
        return cls(ambiguity_verified=False, calculated_ambiguity=1.0)


@dataclass
class TriVectorOrthogonalityResult:
    vh_vs_orthogonal: bool
    vl_vs_orthogonal: bool
    vh_vl_overlap_allowed: bool = True
    orthogonality_certificates: List[str] = field(default_factory=list)

    @classmethod
    def fallback(cls) -> "TriVectorOrthogonalityResult":
        return cls(vh_vs_orthogonal=False, vl_vs_orthogonal=False, vh_vl_overlap_allowed=False)


@dataclass
class FeatureVerificationResult:
    feature_id: int
    feature_name: str
    implemented: bool
    smt_verified: bool
    mathematically_correct: bool
    verification_details: str = ""


@dataclass
class FeatureComplianceResult:
    features_implemented: int
    features_specified: int
    compliance_percentage: float
    feature_results: Dict[str, FeatureVerificationResult] = field(default_factory=dict)

    @classmethod
    def fallback(cls, features_specified: int = 20) -> "FeatureComplianceResult":
        return cls(features_implemented=0, features_specified=features_specified,
                   compliance_percentage=0.0)


@dataclass
class CompositionProof:
    from_layer: str
    to_layer: str
    enables_property: str
    smt_verified: bool
    certificate: Optional[str] = None


@dataclass
class LayerCompositionResult:
    layer0_verified: bool
    layer1_verified: bool
    layer2_verified: bool
    composition_proofs: List[CompositionProof] = field(default_factory=list)

    @property
    def layers_verified(self) -> int:
        return sum((self.layer0_verified, self.layer1_verified, self.layer2_verified))

    @classmethod
    def fallback(cls) -> "LayerCompositionResult":
        return cls(False, False, False)


@dataclass
class ReferenceValidationResult:
    """Compliance report of one document."""
    compliance_level: ComplianceLevel
    compliance_score: float
    math_foundations: MathFoundationResult
    trivector_orthogonality: TriVectorOrthogonalityResult
    feature_compliance: FeatureComplianceResult
    layer_composition: LayerCompositionResult
    verification_issues: List[str] = field(default_factory=list)
    verification_time_ms: float = 0.0
