"""
Reference compliance validation: phases, feature registry and scoring.
"""

from .results import (
    ComplianceLevel,
    CompositionProof,
    FeatureComplianceResult,
    FeatureVerificationResult,
    LayerCompositionResult,
    MathFoundationResult,
    PipelineProof,
    ReferenceValidationResult,
    SemanticAnalysis,
    TokenEfficiencyResult,
    TriVectorOrthogonalityResult,
)
from .features import (
    AISP_SYMBOLS,
    FEATURE_NAMES,
    FeatureCheck,
    FeatureContext,
    FeatureRegistry,
    default_registry,
    tier_from_delta,
)
from .scoring import compliance_score
from .validator import ReferenceValidator

__all__ = [
    "ComplianceLevel",
    "CompositionProof",
    "FeatureComplianceResult",
    "FeatureVerificationResult",
    "LayerCompositionResult",
    "MathFoundationResult",
    "PipelineProof",
    "ReferenceValidationResult",
    "SemanticAnalysis",
    "TokenEfficiencyResult",
    "TriVectorOrthogonalityResult",
    "AISP_SYMBOLS",
    "FEATURE_NAMES",
    "FeatureCheck",
    "FeatureContext",
    "FeatureRegistry",
    "default_registry",
    "tier_from_delta",
    "compliance_score",
    "ReferenceValidator",
]
