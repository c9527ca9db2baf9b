"""SMT-LIB obligations for tri-vector properties.

Three families are encoded:

    orthogonality       V1 ⊥ V2: every pair of member vectors has zero dot product
    safety isolation    no optimization affects the safety space
    decomposition       every signal splits uniquely into V_H ⊕ V_L ⊕ V_S

Each obligation carries the facts known from the analysis as background.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..solver.result import PropertyCategory
from ..tri_vector import (
    Orthogonality,
    OrthogonalityClaim,
    SafetyIsolation,
    TriVectorAnalysis,
    TriVectorSignal,
    VectorSpace,
)
from .obligation import Obligation, disjunction, real_literal

# Inner products below this magnitude count as zero.
DOT_EPSILON = 1e-9


def orthogonality_formula(space1: str, space2: str) -> str:
    """∀v1,v2: (v1∈space1 ∧ v2∈space2) ⇒ ⟨v1,v2⟩ = 0.

    Space names are substituted verbatim.
    """
    return ("(forall ((v1 Vector) (v2 Vector)) "
            f"(=> (and (in_space v1 {space1}) (in_space v2 {space2})) "
            "(= (dot_product v1 v2) 0.0)))")


def safety_isolation_formula(safety_space: str = "V_S") -> str:
    """∀optimization: ¬affects(optimization, safety_space)."""
    return f"(forall ((optimization Optimization)) (not (affects optimization {safety_space})))"


def decomposition_formula() -> str:
    """∀s: ∃vh,vl,vs: s = vh⊕vl⊕vs ∧ vh=project_H(s) ∧ vl=project_L(s) ∧ vs=project_S(s)."""
    return ("(forall ((s Signal)) "
            "(exists ((vh Vector) (vl Vector) (vs Vector)) "
            "(and (= s (direct_sum vh vl vs)) "
            "(= vh (project_H s)) (= vl (project_L s)) (= vs (project_S s)))))")


def space_declarations(names: Sequence[str]) -> List[str]:
    lines = ["(declare-sort Space 0)"]
    unique = list(dict.fromkeys(names))
    for name in unique:
        lines.append(f"(declare-const {name} Space)")
    if len(unique) > 1:
        lines.append(f"(assert (distinct {' '.join(unique)}))")
    return lines


def _dot(u: Sequence[float], v: Sequence[float]) -> float:
    if len(u) != len(v):
        raise ValueError(f"Cannot take dot product of vectors of length {len(u)} and {len(v)}")
    value = sum(a * b for a, b in zip(u, v))
    return 0.0 if abs(value) < DOT_EPSILON else value


def _generator_facts(space1: VectorSpace, space2: VectorSpace) -> List[str]:
    """Restrict both spaces to their generators and fix the generator dot products.

    By bilinearity the spans are orthogonal iff every generator pair is.
    """
    lines = ["(declare-fun in_space (Vector Space) Bool)",
             "(declare-fun dot_product (Vector Vector) Real)"]
    generators = {}
    for space in (space1, space2):
        names = [f"{space.name}_g{i}" for i in range(len(space.basis))]
        generators[space.name] = names
        for name in names:
            lines.append(f"(declare-const {name} Vector)")
        members = disjunction(f"(= v {name})" for name in names)
        lines.append(f"(assert (forall ((v Vector)) (=> (in_space v {space.name}) {members})))")

    for i, u in enumerate(space1.basis):
        for j, v in enumerate(space2.basis):
            g1 = generators[space1.name][i]
            g2 = generators[space2.name][j]
            lines.append(f"(assert (= (dot_product {g1} {g2}) {real_literal(_dot(u, v))}))")
    return lines


def _classification_facts(claim: OrthogonalityClaim) -> List[str]:
    lines = ["(declare-fun in_space (Vector Space) Bool)",
             "(declare-fun dot_product (Vector Vector) Real)"]
    if claim.classification is Orthogonality.COMPLETELY_ORTHOGONAL:
        lines.append(f"(assert {orthogonality_formula(claim.space1, claim.space2)})")
    elif claim.classification is Orthogonality.NOT_ORTHOGONAL:
        lines.extend([
            "(declare-const witness1 Vector)",
            "(declare-const witness2 Vector)",
            f"(assert (in_space witness1 {claim.space1}))",
            f"(assert (in_space witness2 {claim.space2}))",
            "(assert (= (dot_product witness1 witness2) 1.0))",
        ])
    # PARTIALLY_ORTHOGONAL: nothing is known
    return lines


def orthogonality_obligation(claim: OrthogonalityClaim,
                             signal: Optional[TriVectorSignal] = None) -> Obligation:
    """Obligation for one orthogonality claim.

    When the signal gives a basis for both spaces the facts are computed from
    the bases; otherwise the claim's classification is taken as the fact.
    """
    background = space_declarations([claim.space1, claim.space2])
    space1 = signal.space(claim.space1) if signal else None
    space2 = signal.space(claim.space2) if signal else None
    if space1 is not None and space2 is not None and \
            space1.basis is not None and space2.basis is not None:
        background.extend(_generator_facts(space1, space2))
    else:
        background.extend(_classification_facts(claim))

    return Obligation(
        id=f"orthogonality_{claim.constraint.replace(' ', '_')}",
        category=PropertyCategory.TRI_VECTOR_ORTHOGONALITY,
        description=f"Orthogonality constraint: {claim.constraint}",
        formula=orthogonality_formula(claim.space1, claim.space2),
        background=tuple(background),
    )


def safety_isolation_obligation(safety: SafetyIsolation, safety_space: str = "V_S") -> Obligation:
    """Obligation that no optimization affects the safety space.

    ``affects`` is closed-world: it holds exactly for the named violations.
    A non-isolated result without names contributes one unattributed
    optimization.
    """
    violations = list(safety.violations)
    if not safety.isolated and not violations:
        violations = ["unattributed_optimization"]

    background = space_declarations([safety_space])
    background.append("(declare-sort Optimization 0)")
    background.append("(declare-fun affects (Optimization Space) Bool)")
    consts = []
    for i, name in enumerate(violations):
        const = f"opt_{i}"
        consts.append(const)
        background.append(f"; {const}: {name}")
        background.append(f"(declare-const {const} Optimization)")
    affected = disjunction(f"(and (= o {c}) (= s {safety_space}))" for c in consts)
    background.append(f"(assert (forall ((o Optimization) (s Space)) (= (affects o s) {affected})))")

    return Obligation(
        id="safety_isolation",
        category=PropertyCategory.TRI_VECTOR_ORTHOGONALITY,
        description="Safety constraints isolated from optimization",
        formula=safety_isolation_formula(safety_space),
        background=tuple(background),
    )


def decomposition_obligation(signal: TriVectorSignal) -> Obligation:
    """Obligation that signals decompose through the three projections.

    A lossless signal contributes the reconstruction axiom
    s = direct_sum(project_H s, project_L s, project_S s).
    """
    background = [
        "(declare-fun direct_sum (Vector Vector Vector) Signal)",
        "(declare-fun project_H (Signal) Vector)",
        "(declare-fun project_L (Signal) Vector)",
        "(declare-fun project_S (Signal) Vector)",
    ]
    if signal.lossless:
        background.append("(assert (forall ((s Signal)) "
                          "(= s (direct_sum (project_H s) (project_L s) (project_S s)))))")

    return Obligation(
        id="signal_decomposition",
        category=PropertyCategory.TRI_VECTOR_ORTHOGONALITY,
        description="Signal decomposes uniquely into V_H ⊕ V_L ⊕ V_S",
        formula=decomposition_formula(),
        background=tuple(background),
    )


def encode_tri_vector(analysis: Optional[TriVectorAnalysis]) -> List[Obligation]:
    """All tri-vector obligations for an analysis; empty without a signal."""
    if analysis is None or analysis.signal is None:
        return []
    signal = analysis.signal
    obligations = []
    for claim in analysis.claims:
        if not claim.required:
            continue
        try:
            obligations.append(orthogonality_obligation(claim, signal))
        except ValueError as exc:
            obligations.append(Obligation.failed(
                f"orthogonality_{claim.constraint.replace(' ', '_')}",
                PropertyCategory.TRI_VECTOR_ORTHOGONALITY,
                f"Orthogonality constraint: {claim.constraint}",
                str(exc)))
    obligations.append(safety_isolation_obligation(analysis.safety, signal.safety.name))
    obligations.append(decomposition_obligation(signal))
    return obligations
