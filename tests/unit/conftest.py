"""
Pytest configuration and fixtures for aisp-fv tests.
"""
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from aisp.fv.document import (  # noqa: E402
    NATURAL,
    REAL,
    STRING,
    Document,
    EvidenceBlock,
    FunctionDefinition,
    FunctionsBlock,
    MetaBlock,
    RulesBlock,
    SetType,
    TypeDefinition,
    TypesBlock,
)
from aisp.fv.errors import FormulaError  # noqa: E402
from aisp.fv.solver.result import (  # noqa: E402
    CounterexampleModel,
    ProofCertificate,
    SolverResult,
)


class ScriptedSession:
    """Solver session that answers from a script instead of solving.

    Args:
        answers: Answers returned by successive check_sat calls
        default: Answer once ``answers`` is exhausted
        model: Model returned for SAT answers, or an exception to raise
        core: Unsat core returned for UNSAT answers (None: no core support)
        reject: Substrings that make add_script raise FormulaError
    """

    name = "scripted"

    def __init__(self,
                 answers: Sequence[SolverResult] = (),
                 default: SolverResult = SolverResult.UNSAT,
                 model=None,
                 core: Optional[List[str]] = None,
                 reject: Sequence[str] = (),
                 check_delay_s: float = 0.0):
        self.answers = list(answers)
        self.default = default
        self.model = model
        self.core = core
        self.reject = tuple(reject)
        self.check_delay_s = check_delay_s
        self.added: List[str] = []
        self.depth = 0
        self.resets = 0
        self.checks = 0

    def add_script(self, script: str) -> None:
        for marker in self.reject:
            if marker in script:
                raise FormulaError(f"SMT-LIB parse error: unexpected '{marker}'")
        self.added.append(script)

    def check_sat(self) -> SolverResult:
        self.checks += 1
        if self.check_delay_s:
            import time
            time.sleep(self.check_delay_s)
        if self.answers:
            return self.answers.pop(0)
        return self.default

    def get_model(self) -> Optional[CounterexampleModel]:
        if isinstance(self.model, Exception):
            raise self.model
        if self.model is None:
            return CounterexampleModel(assignments={"x": "1"}, evaluation="((define-fun x () Int 1))")
        return self.model

    def get_proof(self) -> Optional[ProofCertificate]:
        return ProofCertificate(id="", format="scripted", content="(asserted false)",
                                size=2, dependencies=["false"])

    def get_unsat_core(self) -> Optional[List[str]]:
        return None if self.core is None else list(self.core)

    def statistics(self) -> Dict[str, str]:
        return {"checks": str(self.checks)}

    def push(self) -> None:
        self.depth += 1

    def pop(self) -> None:
        self.depth -= 1

    def reset(self) -> None:
        self.resets += 1
        self.depth = 0


@pytest.fixture
def scripted_session():
    """Factory for scripted solver sessions."""
    return ScriptedSession


@pytest.fixture
def empty_document():
    return Document.new("Empty")


@pytest.fixture
def full_document():
    """Document with one block of every kind."""
    return Document.new("VerificationDemo", blocks=(
        MetaBlock(entries=("domain≜verification", "∀D:Ambig(D)<0.02")),
        TypesBlock(definitions={
            "Count": TypeDefinition("Count", NATURAL),
            "Score": TypeDefinition("Score", REAL),
            "Tags": TypeDefinition("Tags", SetType(STRING)),
        }),
        RulesBlock(rules=("∀x∈Count:x≥0",)),
        FunctionsBlock(functions=(FunctionDefinition("increment", "λx:ℕ.x+1"),)),
        EvidenceBlock(delta=0.81, phi=98, tau="◊⁺⁺"),
    ))


@pytest.fixture
def reference_source():
    """Source text using the notation of all 20 reference features."""
    return "\n".join([
        "𝔸5.1.VerificationDemo@2026-01-27",
        "γ≔verification.demo",
        "⟦Ω:Meta⟧{ ∀D∈AISP:Ambig(D)<0.02; Drift≜0 }",
        "⟦Σ:Types⟧{ Signal≜V_H⊕V_L⊕V_S; 𝒫≜Pocket⟨ℋ,ℳ,𝒩⟩; Δ⊗λ≜Binding; ψ_g≜ψ_*⊖ψ_have }",
        "⟦Γ:Rules⟧{ ∀s:μ_r(s)>τ⇒✂; RossNet≜sim+fit+aff; Hebbian≜⊕⊖; ε≜⟨ψ,ρ⟩ }",
        "⟦Λ:Funcs⟧{ 𝔽:𝐁𝐥𝐤⇒𝐕𝐚𝐥; Rosetta≜Prose↔Code↔AISP; opt_δ≜recursive; "
        "Bridge≜adapter; DPP≜det(K); Contrastive≜online }",
        "⟦Χ:Proofs⟧{ [∧-I] ⊢ φ∧ψ }",
        "⟦Ε⟧⟨δ≜0.81;φ≜98;τ≜◊⁺⁺⟩",
    ])
