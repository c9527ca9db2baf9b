"""Proof obligations and SMT-LIB term helpers.

An obligation is the property itself (``formula``) plus the declarations and
facts it is checked against (``background``). The solver script asserts the
background and the *negation* of the formula, so:

    UNSAT -> the property holds in every model of the facts (Proven)
    SAT   -> the model is a counterexample (Disproven)
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from ..solver.result import PropertyCategory


@dataclass(frozen=True)
class Obligation:
    """One property to verify.

    Attributes:
        id: Property identifier, unique within a run
        category: Property family
        description: Human-readable description
        formula: The desired property as an SMT-LIB boolean term
        background: Declarations and facts, one SMT-LIB command per entry
        error: Why the formula could not be built, None for a usable obligation
    """
    id: str
    category: PropertyCategory
    description: str
    formula: str
    background: Tuple[str, ...] = ()
    error: Optional[str] = None

    @classmethod
    def failed(cls, id: str, category: PropertyCategory, description: str,
               error: str) -> "Obligation":
        """Placeholder for an obligation whose formula could not be built."""
        return cls(id=id, category=category, description=description,
                   formula="", error=error)

    def script(self) -> str:
        """Declarations, facts and the negated property; no commands."""
        lines = [f"; {self.id}: {self.description}"]
        lines.extend(self.background)
        lines.append(f"(assert (not {self.formula}))")
        return "\n".join(lines)

    def to_smt2(self, preamble: str = "", *, get_model: bool = True) -> str:
        """Standalone SMT-LIBv2 problem, SAT iff the property is violated."""
        lines = ["(set-logic ALL)"]
        if preamble:
            lines.append(preamble)
        lines.append(self.script())
        lines.append("(check-sat)")
        if get_model:
            lines.append("(get-model)")
        return "\n".join(lines)


def write_smt2(obligation: Obligation, out_file: str | Path, preamble: str = "",
               *, get_model: bool = True) -> Path:
    out_path = Path(out_file)
    out_path.write_text(obligation.to_smt2(preamble, get_model=get_model) + "\n", encoding="utf-8")
    return out_path


def real_literal(value: Union[int, float, Fraction]) -> str:
    """Exact SMT-LIB real literal for a number.

    Floats are read through their shortest decimal representation, so 0.62
    becomes ``(/ 31.0 50.0)`` rather than the nearest binary fraction.
    """
    if isinstance(value, float):
        frac = Fraction(repr(value))
    else:
        frac = Fraction(value)
    sign = "-" if frac < 0 else ""
    frac = abs(frac)
    if frac.denominator == 1:
        text = f"{frac.numerator}.0"
    else:
        text = f"(/ {frac.numerator}.0 {frac.denominator}.0)"
    return f"(- {text})" if sign else text


def conjunction(terms: Iterable[str]) -> str:
    terms = list(terms)
    if not terms:
        return "true"
    if len(terms) == 1:
        return terms[0]
    return f"(and {' '.join(terms)})"


def disjunction(terms: Iterable[str]) -> str:
    terms = list(terms)
    if not terms:
        return "false"
    if len(terms) == 1:
        return terms[0]
    return f"(or {' '.join(terms)})"
