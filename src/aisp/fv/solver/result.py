"""
Solver answers, property results and solver artifacts.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class SolverResult(Enum):
    """Result from SMT solver check."""
    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"


class PropertyCategory(Enum):
    """Family a verified property belongs to."""
    TRI_VECTOR_ORTHOGONALITY = "tri_vector_orthogonality"
    TEMPORAL_SAFETY = "temporal_safety"
    TEMPORAL_LIVENESS = "temporal_liveness"
    TYPE_SAFETY = "type_safety"
    CORRECTNESS = "correctness"
    RESOURCE_CONSTRAINTS = "resource_constraints"
    PROTOCOL_COMPLIANCE = "protocol_compliance"


class PropertyOutcome(Enum):
    PROVEN = "proven"
    DISPROVEN = "disproven"
    UNKNOWN = "unknown"
    ERROR = "error"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class PropertyResult:
    """Four-valued verdict for one property, plus Unsupported.

    Attributes:
        outcome: Proven/Disproven/Unknown/Error/Unsupported
        reason: Error message, empty for every other outcome
    """
    outcome: PropertyOutcome
    reason: str = ""

    @classmethod
    def proven(cls) -> "PropertyResult":
        return cls(PropertyOutcome.PROVEN)

    @classmethod
    def disproven(cls) -> "PropertyResult":
        return cls(PropertyOutcome.DISPROVEN)

    @classmethod
    def unknown(cls) -> "PropertyResult":
        return cls(PropertyOutcome.UNKNOWN)

    @classmethod
    def error(cls, reason: str) -> "PropertyResult":
        return cls(PropertyOutcome.ERROR, reason)

    @classmethod
    def unsupported(cls) -> "PropertyResult":
        return cls(PropertyOutcome.UNSUPPORTED)

    @property
    def is_proven(self) -> bool:
        return self.outcome is PropertyOutcome.PROVEN

    @property
    def is_disproven(self) -> bool:
        return self.outcome is PropertyOutcome.DISPROVEN

    def __str__(self) -> str:
        if self.outcome is PropertyOutcome.ERROR:
            return f"error: {self.reason}"
        return self.outcome.value


@dataclass
class ProofCertificate:
    """Evidence for a Proven result.

    Attributes:
        id: Certificate identifier (``proof_<property id>``)
        format: "z3" for a decoded proof object, "unsat" when the backend
            only reports the verdict
        content: Proof term in S-expression form
        size: Number of distinct nodes in the proof DAG
        dependencies: Asserted facts the proof rests on
        valid: Whether the proof was produced by a completed unsat check
        explanation: Human-readable summary
    """
    id: str
    format: str = "z3"
    content: str = ""
    size: int = 0
    dependencies: List[str] = field(default_factory=list)
    valid: bool = True
    explanation: str = ""

    def summary(self) -> str:
        text = f"{self.id} [{self.format}, {self.size} steps, {len(self.dependencies)} premises]"
        if self.explanation:
            text += f": {self.explanation}"
        return text


@dataclass
class FunctionInterpretation:
    """Interpretation of an uninterpreted function in a model."""
    name: str
    domain: List[str] = field(default_factory=list)
    codomain: str = ""
    mapping: List[Tuple[List[str], str]] = field(default_factory=list)
    default: Optional[str] = None


@dataclass
class CounterexampleModel:
    """Satisfying assignment that witnesses a Disproven result.

    Attributes:
        id: Model identifier (``counterexample_<property id>``)
        assignments: Constant name to value
        function_interpretations: Function name to interpretation
        universes: Uninterpreted sort name to its finite universe in the model
        evaluation: Raw model text
        explanation: Human-readable summary
    """
    id: str = ""
    assignments: Dict[str, str] = field(default_factory=dict)
    function_interpretations: Dict[str, FunctionInterpretation] = field(default_factory=dict)
    universes: Dict[str, List[str]] = field(default_factory=dict)
    evaluation: str = ""
    explanation: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.assignments or self.function_interpretations)

    def __str__(self) -> str:
        parts = [f"{k}={v}" for k, v in sorted(self.assignments.items())]
        return f"{self.id}: " + (", ".join(parts) if parts else "<empty model>")


@dataclass
class UnsatCore:
    """Minimal unsatisfiable subset of the assertions of a Proven query."""
    id: str
    core_assertions: List[str] = field(default_factory=list)
    explanation: str = ""
    suggestions: List[str] = field(default_factory=list)
