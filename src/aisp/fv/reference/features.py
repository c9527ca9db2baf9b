"""
Feature registry of the reference compliance validator.

Each of the 20 reference features is an independent, pure check of the
document and its source. A check reports whether the feature is
implemented (its notation is present), whether a backing property was
proven by the solver, and whether the feature is mathematically
consistent.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Mapping, Sequence, Tuple

from ..document import Document, EvidenceBlock, FunctionsBlock, MetaBlock, RulesBlock
from ..solver.result import PropertyOutcome, PropertyResult
from .results import FeatureComplianceResult, FeatureVerificationResult, SemanticAnalysis


# Σ glossary subset: block delimiters, definitions, quantifiers, logic,
# sets, relations, types, tiers, tuples and Greek letters.
AISP_SYMBOLS = (
    "⟦", "⟧",
    "≜", "≔", "≡", "≢",
    "∀", "∃",
    "λ",
    "⇒", "⇔", "→", "↔", "∧", "∨", "¬", "⊕",
    "∈", "∉", "⊆", "⊇", "∩", "∪", "∅", "𝒫",
    "≤", "≥", "<", ">",
    "ℕ", "ℤ", "ℝ", "𝔹", "𝕊",
    "𝔸",
    "◊", "⊘",
    "⟨", "⟩",
    "α", "β", "γ", "δ", "ε", "φ", "τ", "ρ", "Ω", "Σ", "Γ", "Λ", "Ε", "Θ", "Χ", "Δ", "Π",
)

BLOCK_MARKERS = ("⟦Ω", "⟦Σ", "⟦Γ", "⟦Λ", "⟦Ε")

# Distinct glossary symbols a document must use for the glossary feature.
GLOSSARY_MIN_SYMBOLS = 10

TIERS = (
    (0.75, "◊⁺⁺"),
    (0.60, "◊⁺"),
    (0.40, "◊"),
    (0.20, "◊⁻"),
)
REJECT_TIER = "⊘"


def tier_from_delta(delta: float) -> str:
    """Quality tier glyph for a semantic density δ."""
    for threshold, glyph in TIERS:
        if delta >= threshold:
            return glyph
    return REJECT_TIER


@dataclass(frozen=True)
class FeatureContext:
    """Everything a feature check may look at; checks must not modify it."""
    document: Document
    source: str
    analysis: SemanticAnalysis
    properties: Mapping[str, PropertyResult] = field(default_factory=dict)

    def text(self) -> str:
        """Source plus the textual content of the document's blocks."""
        parts = [self.source]
        for block in self.document.blocks_of(MetaBlock):
            parts.extend(block.entries)
        for block in self.document.blocks_of(RulesBlock):
            parts.extend(block.rules)
        for block in self.document.blocks_of(FunctionsBlock):
            parts.extend(f"{f.name}≜{f.expression}" for f in block.functions)
        return "\n".join(parts)

    def proven(self, *property_ids: str) -> bool:
        """True if every named property was supplied and proven."""
        return bool(property_ids) and all(
            pid in self.properties and self.properties[pid].is_proven for pid in property_ids)

    def disproven(self, *property_ids: str) -> bool:
        return any(pid in self.properties and self.properties[pid].is_disproven
                   for pid in property_ids)


@dataclass(frozen=True)
class FeatureCheck:
    implemented: bool
    smt_verified: bool
    mathematically_correct: bool
    details: str = ""


FeatureFn = Callable[[FeatureContext], FeatureCheck]


def marker_check(markers: Sequence[str],
                 description: str,
                 properties: Sequence[str] = ()) -> FeatureFn:
    """Check that detects a feature by its notation.

    Args:
        markers: Notation fragments; any one present means implemented
        description: Detail text when implemented
        properties: Property ids whose proofs back the feature
    """
    def check(ctx: FeatureContext) -> FeatureCheck:
        text = ctx.text()
        found = [m for m in markers if m in text]
        if not found:
            return FeatureCheck(False, False, False, f"No {' / '.join(markers)} notation found")
        return FeatureCheck(
            implemented=True,
            smt_verified=ctx.proven(*properties),
            mathematically_correct=not ctx.disproven(*properties),
            details=f"{description} ({', '.join(found)})",
        )
    return check


def check_tri_vector(ctx: FeatureContext) -> FeatureCheck:
    text = ctx.text()
    spaces = [s for s in ("V_H", "V_L", "V_S") if s in text]
    implemented = len(spaces) == 3
    if not implemented:
        return FeatureCheck(False, False, False,
                            f"Signal→V_H⊕V_L⊕V_S incomplete: found {', '.join(spaces) or 'none'}")
    return FeatureCheck(
        implemented=True,
        smt_verified=ctx.proven("signal_decomposition"),
        mathematically_correct=not ctx.disproven("signal_decomposition", "safety_isolation")
        and not any(pid.startswith("orthogonality_") and r.is_disproven
                    for pid, r in ctx.properties.items()),
        details="Signal→V_H⊕V_L⊕V_S decomposition declared",
    )


def check_ambiguity(ctx: FeatureContext) -> FeatureCheck:
    analysis = ctx.analysis
    measured = analysis.total_parses is not None or "Ambig" in ctx.text()
    in_range = 0.0 <= analysis.ambiguity <= 1.0
    return FeatureCheck(
        implemented=measured,
        smt_verified=ctx.proven("ambiguity_bound"),
        mathematically_correct=in_range,
        details=f"Ambig(D)={analysis.ambiguity:.4f}, bound 0.02",
    )


def check_quality_tiers(ctx: FeatureContext) -> FeatureCheck:
    evidence = [b for b in ctx.document.blocks_of(EvidenceBlock) if b.tau is not None]
    if not evidence:
        uses_glyph = any(glyph in ctx.source for _, glyph in TIERS) or REJECT_TIER in ctx.source
        return FeatureCheck(uses_glyph, False, False,
                            "Tier glyphs used without an evidence τ" if uses_glyph
                            else "No quality tier declared")
    block = evidence[0]
    delta = block.delta if block.delta is not None else ctx.analysis.semantic_density
    if delta is None:
        return FeatureCheck(True, False, False, f"τ={block.tau} declared without δ")
    expected = tier_from_delta(delta)
    return FeatureCheck(
        implemented=True,
        smt_verified=False,
        mathematically_correct=block.tau == expected,
        details=f"δ={delta:.2f} implies {expected}, declared {block.tau}",
    )


def check_proof_carrying(ctx: FeatureContext) -> FeatureCheck:
    has_evidence = ctx.document.first_block(EvidenceBlock) is not None
    results = list(ctx.properties.values())
    return FeatureCheck(
        implemented=has_evidence,
        smt_verified=has_evidence and bool(results) and all(r.is_proven for r in results),
        mathematically_correct=has_evidence and not any(
            r.outcome in (PropertyOutcome.DISPROVEN, PropertyOutcome.ERROR) for r in results),
        details="𝔻oc≜Σ(content)(π): evidence block present" if has_evidence
        else "No evidence block",
    )


def check_safety_gate(ctx: FeatureContext) -> FeatureCheck:
    text = ctx.text()
    declared = "μ_r" in text or "✂" in text or "safety_isolation" in ctx.properties
    return FeatureCheck(
        implemented=declared,
        smt_verified=ctx.proven("safety_isolation"),
        mathematically_correct=declared and not ctx.disproven("safety_isolation"),
        details="μ_r>τ⇒✂ gate" if declared else "No safety gate declared",
    )


def check_glossary(ctx: FeatureContext) -> FeatureCheck:
    text = ctx.text()
    used = [s for s in AISP_SYMBOLS if s in text]
    balanced = text.count("⟦") == text.count("⟧")
    blocks = [m for m in BLOCK_MARKERS if m in text]
    return FeatureCheck(
        implemented=len(used) >= GLOSSARY_MIN_SYMBOLS,
        smt_verified=False,
        mathematically_correct=balanced,
        details=f"{len(used)}/{len(AISP_SYMBOLS)} glossary symbols used, "
                f"{len(blocks)}/{len(BLOCK_MARKERS)} block markers",
    )


class FeatureRegistry:
    """Ordered registry of named feature checks."""

    def __init__(self):
        self._checks: Dict[str, FeatureFn] = {}

    def register(self, name: str, check: FeatureFn) -> None:
        """Append a check.

        Raises:
            ValueError: If a check of that name is already registered
        """
        if name in self._checks:
            raise ValueError(f"Feature '{name}' already registered")
        self._checks[name] = check

    def unregister(self, name: str) -> None:
        del self._checks[name]

    def names(self) -> List[str]:
        return list(self._checks)

    def __len__(self) -> int:
        return len(self._checks)

    def __iter__(self) -> Iterator[Tuple[str, FeatureFn]]:
        return iter(self._checks.items())

    def run(self, ctx: FeatureContext) -> FeatureComplianceResult:
        """Run every check in registration order."""
        results: Dict[str, FeatureVerificationResult] = {}
        implemented = 0
        for feature_id, (name, check) in enumerate(self, start=1):
            outcome = check(ctx)
            if outcome.implemented:
                implemented += 1
            results[name] = FeatureVerificationResult(
                feature_id=feature_id,
                feature_name=name,
                implemented=outcome.implemented,
                smt_verified=outcome.smt_verified,
                mathematically_correct=outcome.mathematically_correct,
                verification_details=outcome.details,
            )
        specified = len(self)
        percentage = implemented / specified * 100.0 if specified else 0.0
        return FeatureComplianceResult(
            features_implemented=implemented,
            features_specified=specified,
            compliance_percentage=percentage,
            feature_results=results,
        )


def default_registry() -> FeatureRegistry:
    """The 20 reference features, in reference order."""
    registry = FeatureRegistry()
    registry.register("TriVectorDecomposition", check_tri_vector)
    registry.register("MeasurableAmbiguity", check_ambiguity)
    registry.register("PocketArchitecture",
                      marker_check(("𝒫", "Pocket"), "Pocket architecture"))
    registry.register("FourStateBinding",
                      marker_check(("Δ⊗λ", "⊗"), "Four-state binding Δ⊗λ"))
    registry.register("GhostIntentSearch",
                      marker_check(("ψ_g", "ψ_*", "⊖"), "Ghost intent ψ_g ≜ ψ_* ⊖ ψ_have"))
    registry.register("RossNetScoring",
                      marker_check(("RossNet", "sim+fit+aff"), "sim+fit+aff scoring"))
    registry.register("HebbianLearning",
                      marker_check(("Hebbian", "⊕⊖"), "Hebbian reinforcement"))
    registry.register("QualityTiers", check_quality_tiers)
    registry.register("ProofCarryingDocs", check_proof_carrying)
    registry.register("ErrorAlgebra",
                      marker_check(("ε≜", "⟨ψ,ρ⟩"), "Error algebra ε≜⟨ψ,ρ⟩"))
    registry.register("CategoryFunctors",
                      marker_check(("𝔽", "Functor"), "Functor 𝔽:𝐁𝐥𝐤⇒𝐕𝐚𝐥"))
    registry.register("NaturalDeduction",
                      marker_check(("⊢", "-I]", "-E]"), "Inference rules"))
    registry.register("RosettaStone",
                      marker_check(("Rosetta", "Prose↔"), "Prose↔Code↔AISP mapping"))
    registry.register("AntiDriftProtocol",
                      marker_check(("Drift", "drift"), "Anti-drift protocol"))
    registry.register("RecursiveOptimization",
                      marker_check(("opt_δ", "opt≜"), "Recursive optimization opt_δ",
                                   properties=("safety_isolation",)))
    registry.register("BridgeSynthesis",
                      marker_check(("Bridge", "bridge"), "Adapter synthesis"))
    registry.register("SafetyGate", check_safety_gate)
    registry.register("DPPBeamInit",
                      marker_check(("DPP", "det("), "Determinantal point process beam init"))
    registry.register("ContrastiveLearning",
                      marker_check(("Contrastive", "contrastive"), "Online contrastive updates"))
    registry.register("Sigma512Glossary", check_glossary)
    return registry


FEATURE_NAMES = tuple(default_registry().names())
