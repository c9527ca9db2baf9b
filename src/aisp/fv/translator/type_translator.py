"""
Type translator from AISP type expressions to SMT-LIB sorts.
"""
import re
from typing import Optional

from ..document import BasicKind, BasicType, TypeExpression
from ..errors import SetupError


# Sort names predefined by SMT-LIB theories; a document type may not reuse them.
BUILTIN_SORTS = frozenset({
    "Int", "Real", "Bool", "String", "Array", "Seq", "RegLan",
    "BitVec", "FloatingPoint", "RoundingMode",
})

_SIMPLE_SYMBOL = re.compile(r"^[A-Za-z~!@$%^&*_\-+=<>.?/][A-Za-z0-9~!@$%^&*_\-+=<>.?/]*$")


def smt_symbol(name: str) -> str:
    """Render a name as an SMT-LIB symbol, quoting it with ``|...|`` when needed.

    Raises:
        SetupError: If the name cannot be represented as a symbol
    """
    if not name:
        raise SetupError("Empty name cannot be declared")
    if _SIMPLE_SYMBOL.match(name):
        return name
    if "|" in name or "\\" in name:
        raise SetupError(f"Name '{name}' cannot be quoted as an SMT-LIB symbol")
    return f"|{name}|"


class TypeTranslator:
    """Translates AISP type expressions to SMT-LIB sort definitions.

    Mapping:
        ℕ / ℤ -> Int
        ℝ -> Real
        𝔹 -> Bool
        𝕊, symbols, sets, unions, products, functions -> uninterpreted sort
        Custom(name) -> alias of the named type
    """

    _BUILTIN = {
        BasicKind.NATURAL: "Int",
        BasicKind.INTEGER: "Int",
        BasicKind.REAL: "Real",
        BasicKind.BOOLEAN: "Bool",
    }

    def builtin_sort(self, type_expr: TypeExpression) -> Optional[str]:
        """Get the built-in sort a type expression maps to.

        Args:
            type_expr: Type expression of a definition

        Returns:
            "Int", "Real" or "Bool", or None if the type needs an
            uninterpreted sort or is a reference to another type
        """
        if isinstance(type_expr, BasicType):
            return self._BUILTIN.get(type_expr.kind)
        return None

    def referenced_name(self, type_expr: TypeExpression) -> Optional[str]:
        """Name referenced by a Custom basic type, else None."""
        if isinstance(type_expr, BasicType) and type_expr.kind is BasicKind.CUSTOM:
            if not type_expr.name:
                raise SetupError("Custom type without a name")
            return type_expr.name
        return None

    def is_uninterpreted(self, type_expr: TypeExpression) -> bool:
        return self.builtin_sort(type_expr) is None and self.referenced_name(type_expr) is None
