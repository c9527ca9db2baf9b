"""
Weighted compliance score over the four validator phases.

    math foundations      25%  ambiguity verified 12.5%, token efficiency met 12.5%
    tri-vector            25%  V_H⊥V_S 12.5%, V_L⊥V_S 12.5%
    feature compliance    35%  scaled by compliance percentage
    layer composition     15%  scaled by the fraction of layers verified
"""
from .results import (
    FeatureComplianceResult,
    LayerCompositionResult,
    MathFoundationResult,
    TriVectorOrthogonalityResult,
)

AMBIGUITY_WEIGHT = 0.125
TOKEN_EFFICIENCY_WEIGHT = 0.125
VH_VS_WEIGHT = 0.125
VL_VS_WEIGHT = 0.125
FEATURE_WEIGHT = 0.35
LAYER_WEIGHT = 0.15

TOTAL_WEIGHT = (AMBIGUITY_WEIGHT + TOKEN_EFFICIENCY_WEIGHT + VH_VS_WEIGHT
                + VL_VS_WEIGHT + FEATURE_WEIGHT + LAYER_WEIGHT)


def clamp_score(score: float) -> float:
    return min(1.0, max(0.0, score))


def compliance_score(math: MathFoundationResult,
                     trivector: TriVectorOrthogonalityResult,
                     features: FeatureComplianceResult,
                     layers: LayerCompositionResult) -> float:
    """Weighted sum of the phase results divided by the total weight, in [0, 1]."""
    score = 0.0
    if math.ambiguity_verified:
        score += AMBIGUITY_WEIGHT
    if math.token_efficiency.meets_spec:
        score += TOKEN_EFFICIENCY_WEIGHT
    if trivector.vh_vs_orthogonal:
        score += VH_VS_WEIGHT
    if trivector.vl_vs_orthogonal:
        score += VL_VS_WEIGHT
    score += FEATURE_WEIGHT * (features.compliance_percentage / 100.0)
    score += LAYER_WEIGHT * (layers.layers_verified / 3.0)
    # full marks must land exactly on 1.0
    return clamp_score(round(score / TOTAL_WEIGHT, 12))
