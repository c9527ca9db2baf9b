"""
Tri-vector analysis input: the semantic (V_H), structural (V_L) and safety
(V_S) concern spaces of a signal, plus the orthogonality and isolation
claims made about them.

The analysis itself is produced outside this package; these types only
carry it into the property encoders.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple


class Orthogonality(Enum):
    COMPLETELY_ORTHOGONAL = "completely_orthogonal"
    PARTIALLY_ORTHOGONAL = "partially_orthogonal"
    NOT_ORTHOGONAL = "not_orthogonal"


Vector = Tuple[float, ...]


@dataclass(frozen=True)
class VectorSpace:
    """A named concern space.

    Attributes:
        name: Space identifier, used verbatim as a solver constant
        dimension: Declared dimension
        basis: Generator vectors in ambient coordinates, if known
    """
    name: str
    dimension: int
    basis: Optional[Tuple[Vector, ...]] = None

    def __post_init__(self):
        if self.basis is not None:
            widths = {len(v) for v in self.basis}
            if len(widths) > 1:
                raise ValueError(f"Basis vectors of {self.name} differ in length: {sorted(widths)}")


@dataclass(frozen=True)
class TriVectorSignal:
    """Signal ≅ V_H ⊕ V_L ⊕ V_S."""
    semantic: VectorSpace
    structural: VectorSpace
    safety: VectorSpace
    lossless: bool = True

    def spaces(self) -> Tuple[VectorSpace, VectorSpace, VectorSpace]:
        return (self.semantic, self.structural, self.safety)

    def space(self, name: str) -> Optional[VectorSpace]:
        for space in self.spaces():
            if space.name == name:
                return space
        return None


@dataclass(frozen=True)
class OrthogonalityClaim:
    """Claimed relationship between two spaces.

    Attributes:
        space1: First space name
        space2: Second space name
        classification: What the analysis found
        required: False for pairs allowed to overlap (V_H and V_L); those
            are recorded but not verified
    """
    space1: str
    space2: str
    classification: Orthogonality = Orthogonality.COMPLETELY_ORTHOGONAL
    required: bool = True

    @property
    def constraint(self) -> str:
        return f"{self.space1} ⊥ {self.space2}"


@dataclass(frozen=True)
class SafetyIsolation:
    """Whether optimizations leave the safety space untouched.

    Attributes:
        isolated: True if no optimization affects V_S
        violations: Names of optimizations that do
    """
    isolated: bool = True
    violations: Tuple[str, ...] = ()

    @classmethod
    def violated_by(cls, *names: str) -> "SafetyIsolation":
        return cls(isolated=False, violations=tuple(names))


def _unit(index: int, width: int) -> Vector:
    return tuple(1.0 if i == index else 0.0 for i in range(width))


def _coordinate_space(name: str, indices: Sequence[int], width: int) -> VectorSpace:
    return VectorSpace(name, len(indices), tuple(_unit(i, width) for i in indices))


@dataclass(frozen=True)
class TriVectorAnalysis:
    signal: Optional[TriVectorSignal] = None
    claims: Tuple[OrthogonalityClaim, ...] = ()
    safety: SafetyIsolation = SafetyIsolation()

    def claim(self, space1: str, space2: str) -> Optional[OrthogonalityClaim]:
        for claim in self.claims:
            if {claim.space1, claim.space2} == {space1, space2}:
                return claim
        return None

    @classmethod
    def reference(cls) -> "TriVectorAnalysis":
        """Canonical coordinate-block model of the three spaces.

        In a 6-dimensional ambient space V_H spans e0..e2, V_L spans e2..e3
        (sharing e2 with V_H) and V_S spans e4..e5. V_S is orthogonal to both
        others, V_H and V_L overlap, and the safety space is isolated.
        """
        width = 6
        signal = TriVectorSignal(
            semantic=_coordinate_space("V_H", (0, 1, 2), width),
            structural=_coordinate_space("V_L", (2, 3), width),
            safety=_coordinate_space("V_S", (4, 5), width),
        )
        claims = (
            OrthogonalityClaim("V_H", "V_S"),
            OrthogonalityClaim("V_L", "V_S"),
            OrthogonalityClaim("V_H", "V_L", Orthogonality.PARTIALLY_ORTHOGONAL, required=False),
        )
        return cls(signal=signal, claims=claims, safety=SafetyIsolation())
