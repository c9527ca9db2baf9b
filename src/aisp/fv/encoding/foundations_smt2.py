"""SMT-LIB obligations for the mathematical foundations and layer stack.

    ambiguity     Ambig(D) = 1 - |Parse_u(D)| / |Parse_t(D)| < 0.02
    pipeline      0.98^n > 0.62^n and 0.98^n / 0.62^n > 1 for n steps
    layers        𝕃₀ → 𝕃₁ → 𝕃₂ guarantees and the two composition edges
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional, Tuple

from ..document import Document, EvidenceBlock, FunctionsBlock, RulesBlock, TypesBlock
from ..solver.result import PropertyCategory
from .obligation import Obligation, conjunction, real_literal

AMBIGUITY_BOUND = Fraction(1, 50)
PROSE_STEP_RATE = Fraction(31, 50)   # 0.62
AISP_STEP_RATE = Fraction(49, 50)    # 0.98
PIPELINE_STEPS = (1, 5, 10, 20)


def ambiguity_obligation(ambiguity: float,
                         unique_parses: Optional[int] = None,
                         total_parses: Optional[int] = None) -> Obligation:
    """Obligation that the document's ambiguity is below 0.02.

    With parse counts the ambiguity is defined from them; otherwise the
    supplied ambiguity value is the fact.
    """
    background = ["(declare-const ambiguity Real)"]
    if unique_parses is not None and total_parses is not None:
        if total_parses <= 0:
            raise ValueError(f"total_parses must be positive, got {total_parses}")
        background.extend([
            "(declare-const unique_parses Int)",
            "(declare-const total_parses Int)",
            f"(assert (= unique_parses {unique_parses}))",
            f"(assert (= total_parses {total_parses}))",
            "(assert (= ambiguity (- 1.0 (/ (to_real unique_parses) (to_real total_parses)))))",
        ])
    else:
        background.append(f"(assert (= ambiguity {real_literal(ambiguity)}))")

    return Obligation(
        id="ambiguity_bound",
        category=PropertyCategory.CORRECTNESS,
        description="Ambig(D) = 1 - |Parse_u|/|Parse_t| < 0.02",
        formula=f"(< ambiguity {real_literal(AMBIGUITY_BOUND)})",
        background=tuple(background),
    )


@dataclass(frozen=True)
class PipelineRates:
    steps: int
    prose_rate: Fraction
    aisp_rate: Fraction

    @property
    def improvement_factor(self) -> Fraction:
        return self.aisp_rate / self.prose_rate


def pipeline_rates(steps: int) -> PipelineRates:
    if steps < 0:
        raise ValueError(f"steps must be non-negative, got {steps}")
    return PipelineRates(steps, PROSE_STEP_RATE ** steps, AISP_STEP_RATE ** steps)


def pipeline_obligation(steps: int) -> Obligation:
    """Obligation that an n-step AISP pipeline beats the prose baseline."""
    rates = pipeline_rates(steps)
    background = (
        "(declare-const prose_rate Real)",
        "(declare-const aisp_rate Real)",
        "(declare-const improvement_factor Real)",
        f"(assert (= prose_rate {real_literal(rates.prose_rate)}))",
        f"(assert (= aisp_rate {real_literal(rates.aisp_rate)}))",
        f"(assert (= improvement_factor {real_literal(rates.improvement_factor)}))",
    )
    return Obligation(
        id=f"pipeline_{steps}_steps",
        category=PropertyCategory.CORRECTNESS,
        description=f"Pipeline success rate over {steps} steps: 0.98^{steps} > 0.62^{steps}",
        formula="(and (> aisp_rate prose_rate) (> improvement_factor 1.0) "
                "(= improvement_factor (/ aisp_rate prose_rate)))",
        background=background,
    )


@dataclass(frozen=True)
class Layer:
    name: str
    guarantees: Tuple[str, ...]


LAYERS = (
    Layer("L0_Signal", ("stable", "deterministic")),
    Layer("L1_Pocket", ("integrity", "zero_copy")),
    Layer("L2_Intelligence", ("bounded", "calibrated")),
)

# (from layer, to layer, enabled property, premises)
COMPOSITION_EDGES = (
    ("L0_Signal", "L1_Pocket", "integrity", ("stable", "deterministic")),
    ("L1_Pocket", "L2_Intelligence", "bounded", ("integrity", "zero_copy")),
)

_LAYER_ATOMS = ("stable", "deterministic", "integrity", "zero_copy", "bounded", "calibrated")

_LAYER_DEFINITIONS = (
    "(assert (= integrity (and stable deterministic)))",
    "(assert (= bounded (and integrity zero_copy)))",
)


def layer_facts(document: Document) -> List[str]:
    """Atoms the document itself establishes.

    Types -> stable, Rules -> deterministic, Functions -> zero_copy,
    Evidence with δ -> calibrated.
    """
    facts = []
    if document.first_block(TypesBlock) is not None:
        facts.append("stable")
    if document.first_block(RulesBlock) is not None:
        facts.append("deterministic")
    if document.first_block(FunctionsBlock) is not None:
        facts.append("zero_copy")
    if any(block.delta is not None for block in document.blocks_of(EvidenceBlock)):
        facts.append("calibrated")
    return facts


def _layer_background(facts: List[str]) -> Tuple[str, ...]:
    lines = [f"(declare-const {atom} Bool)" for atom in _LAYER_ATOMS]
    lines.extend(_LAYER_DEFINITIONS)
    lines.extend(f"(assert {atom})" for atom in facts)
    return tuple(lines)


def layer_obligations(document: Document) -> List[Obligation]:
    background = _layer_background(layer_facts(document))
    return [
        Obligation(
            id=f"layer_{layer.name}",
            category=PropertyCategory.PROTOCOL_COMPLIANCE,
            description=f"{layer.name} guarantees {' ∧ '.join(layer.guarantees)}",
            formula=conjunction(layer.guarantees),
            background=background,
        )
        for layer in LAYERS
    ]


def composition_obligations() -> List[Obligation]:
    """Composition edges, provable from the layer definitions alone."""
    background = _layer_background([])
    obligations = []
    for src, dst, enables, premises in COMPOSITION_EDGES:
        obligations.append(Obligation(
            id=f"composition_{src}_{dst}",
            category=PropertyCategory.PROTOCOL_COMPLIANCE,
            description=f"{src} → {dst}: {'∧'.join(premises)}⇒{enables}",
            formula=f"(=> {conjunction(premises)} {enables})",
            background=background,
        ))
    return obligations
