"""
Tests for the reference feature registry.
"""
import pytest

from aisp.fv.document import Document, EvidenceBlock
from aisp.fv.reference import (
    FEATURE_NAMES,
    FeatureCheck,
    FeatureContext,
    FeatureRegistry,
    SemanticAnalysis,
    default_registry,
    tier_from_delta,
)
from aisp.fv.reference.features import (
    check_glossary,
    check_proof_carrying,
    check_quality_tiers,
    check_tri_vector,
)
from aisp.fv.solver.result import PropertyResult

ANALYSIS = SemanticAnalysis.from_parses(99, 100)


def _ctx(document, source="", properties=None, analysis=ANALYSIS):
    return FeatureContext(document, source, analysis, properties or {})


def test_registry_has_twenty_unique_features():
    registry = default_registry()
    assert len(registry) == 20
    assert len(set(registry.names())) == 20
    assert FEATURE_NAMES[0] == "TriVectorDecomposition"
    assert FEATURE_NAMES[-1] == "Sigma512Glossary"
    assert tuple(registry.names()) == FEATURE_NAMES


def test_duplicate_registration():
    registry = default_registry()
    with pytest.raises(ValueError, match="SafetyGate"):
        registry.register("SafetyGate", check_glossary)


def test_unregister_changes_denominator(empty_document):
    registry = default_registry()
    registry.unregister("Sigma512Glossary")

    result = registry.run(_ctx(empty_document, "Pocket", analysis=SemanticAnalysis(0.5)))

    assert result.features_specified == 19
    assert result.features_implemented == 1
    assert result.compliance_percentage == pytest.approx(100.0 / 19)


def test_custom_registry():
    registry = FeatureRegistry()
    registry.register("Only", lambda ctx: FeatureCheck(True, False, True, "always"))

    result = registry.run(_ctx(Document.new("X")))

    assert result.compliance_percentage == 100.0
    only = result.feature_results["Only"]
    assert only.feature_id == 1
    assert only.verification_details == "always"


def test_plain_text_implements_nothing(empty_document):
    result = default_registry().run(_ctx(empty_document, "hello", analysis=SemanticAnalysis(0.5)))
    assert result.features_implemented == 0
    assert result.compliance_percentage == 0.0
    assert len(result.feature_results) == 20


def test_reference_source_implements_everything(full_document, reference_source):
    result = default_registry().run(_ctx(full_document, reference_source))

    missing = [name for name, r in result.feature_results.items() if not r.implemented]
    assert missing == []
    assert result.compliance_percentage == 100.0
    assert all(r.mathematically_correct for r in result.feature_results.values())


def test_percentage_is_implemented_over_twenty(empty_document):
    result = default_registry().run(_ctx(empty_document, "Pocket Hebbian RossNet DPP Bridge",
                                              analysis=SemanticAnalysis(0.5)))
    assert result.features_implemented == 5
    assert result.compliance_percentage == 25.0


@pytest.mark.parametrize("delta,glyph", [
    (0.9, "◊⁺⁺"),
    (0.75, "◊⁺⁺"),
    (0.6, "◊⁺"),
    (0.5, "◊"),
    (0.2, "◊⁻"),
    (0.1, "⊘"),
])
def test_tier_from_delta(delta, glyph):
    assert tier_from_delta(delta) == glyph


def test_quality_tier_must_match_delta():
    right = Document.new("Right", blocks=(EvidenceBlock(delta=0.81, tau="◊⁺⁺"),))
    wrong = Document.new("Wrong", blocks=(EvidenceBlock(delta=0.81, tau="◊"),))

    assert check_quality_tiers(_ctx(right)).mathematically_correct
    check = check_quality_tiers(_ctx(wrong))
    assert check.implemented
    assert not check.mathematically_correct
    assert "declared ◊" in check.details


def test_quality_tier_falls_back_to_analysis_density():
    doc = Document.new("NoDelta", blocks=(EvidenceBlock(tau="◊⁺"),))
    analysis = SemanticAnalysis(0.01, semantic_density=0.65)
    assert check_quality_tiers(_ctx(doc, analysis=analysis)).mathematically_correct


def test_tri_vector_backed_by_decomposition_proof(empty_document):
    source = "Signal≜V_H⊕V_L⊕V_S"
    proven = check_tri_vector(_ctx(empty_document, source,
                                   {"signal_decomposition": PropertyResult.proven()}))
    assert proven.implemented and proven.smt_verified and proven.mathematically_correct

    refuted = check_tri_vector(_ctx(empty_document, source,
                                    {"orthogonality_V_H_⊥_V_S": PropertyResult.disproven()}))
    assert not refuted.smt_verified
    assert not refuted.mathematically_correct

    partial = check_tri_vector(_ctx(empty_document, "V_H⊕V_L"))
    assert not partial.implemented
    assert "V_H, V_L" in partial.details


def test_proof_carrying(full_document):
    all_proven = {"a": PropertyResult.proven(), "b": PropertyResult.proven()}
    check = check_proof_carrying(_ctx(full_document, properties=all_proven))
    assert check.smt_verified and check.mathematically_correct

    with_error = {"a": PropertyResult.proven(), "b": PropertyResult.error("parse")}
    check = check_proof_carrying(_ctx(full_document, properties=with_error))
    assert not check.smt_verified
    assert not check.mathematically_correct


def test_glossary_balance(empty_document):
    symbols = "≜ ∀ ∃ λ ⇒ ∧ ∨ ∈ ℕ ℝ"
    balanced = check_glossary(_ctx(empty_document, "⟦Ω⟧ " + symbols))
    assert balanced.implemented and balanced.mathematically_correct
    assert "1/5 block markers" in balanced.details

    unbalanced = check_glossary(_ctx(empty_document, "⟦Ω ⟦Σ⟧ " + symbols))
    assert not unbalanced.mathematically_correct


def test_recursive_optimization_backed_by_safety_isolation(empty_document):
    properties = {"safety_isolation": PropertyResult.proven()}
    result = default_registry().run(_ctx(empty_document, "opt_δ≜recursive", properties))
    feature = result.feature_results["RecursiveOptimization"]
    assert feature.implemented and feature.smt_verified
    assert result.feature_results["SafetyGate"].smt_verified
