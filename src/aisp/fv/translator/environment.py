"""
Solver environment for one document: sort and function declarations.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from ..document import Document
from ..errors import SetupError
from .type_translator import BUILTIN_SORTS, TypeTranslator, smt_symbol

logger = structlog.get_logger().bind(system="aisp.fv.environment")

# Declared in every environment, in this order.
DOMAIN_SORTS = ("Vector", "Signal")

# Placeholder domain/codomain for document functions until signatures are parsed.
GENERIC_SORT = "Any"

# Vocabulary the property encoders declare inside their own scopes.
ENCODER_SORTS = frozenset({"Space", "Optimization"})
ENCODER_SYMBOLS = frozenset({
    "in_space", "dot_product", "affects", "direct_sum",
    "project_H", "project_L", "project_S",
    "ambiguity", "unique_parses", "total_parses",
    "prose_rate", "aisp_rate", "improvement_factor",
    "stable", "deterministic", "integrity", "zero_copy", "bounded", "calibrated",
})

# Space constants, witnesses and bound variables of the tri-vector encoders.
ENCODER_CONSTANTS = frozenset({
    "V_H", "V_L", "V_S", "witness1", "witness2",
    "v", "v1", "v2", "o", "s", "vh", "vl", "vs", "optimization",
})

# Generators (<space>_g<i>) and optimizations (opt_<i>), numbered per obligation.
_GENERATED_CONSTANT = re.compile(r"^(opt_\d+|.+_g\d+)$")


@dataclass(frozen=True)
class SortDecl:
    """One sort declaration.

    Attributes:
        name: Sort name as written in the document
        alias: Rendered target sort for ``define-sort``; None declares an
            uninterpreted sort
    """
    name: str
    alias: Optional[str] = None

    @property
    def symbol(self) -> str:
        return smt_symbol(self.name)

    def smt2(self) -> str:
        if self.alias is None:
            return f"(declare-sort {self.symbol} 0)"
        return f"(define-sort {self.symbol} () {self.alias})"


@dataclass(frozen=True)
class FunctionDecl:
    name: str
    domain: Tuple[str, ...] = (GENERIC_SORT,)
    codomain: str = GENERIC_SORT

    def smt2(self) -> str:
        return f"(declare-fun {smt_symbol(self.name)} ({' '.join(self.domain)}) {self.codomain})"


@dataclass
class SmtEnvironment:
    """Sort and function registries for one verification run.

    Owned by the engine that built it; never shared between runs.
    """
    sorts: Dict[str, SortDecl] = field(default_factory=dict)
    functions: Dict[str, FunctionDecl] = field(default_factory=dict)

    def add_sort(self, decl: SortDecl) -> None:
        self.sorts[decl.name] = decl

    def add_function(self, decl: FunctionDecl) -> None:
        self.functions[decl.name] = decl

    def has_sort(self, name: str) -> bool:
        return name in self.sorts

    def sort_symbol(self, name: str) -> str:
        """Rendered symbol of a declared sort.

        Raises:
            KeyError: If no sort of that name was declared
        """
        return self.sorts[name].symbol

    def declarations(self) -> List[str]:
        lines = [decl.smt2() for decl in self.sorts.values()]
        lines.extend(decl.smt2() for decl in self.functions.values())
        return lines

    def preamble(self) -> str:
        """SMT-LIB declarations asserted once before any property."""
        return "\n".join(self.declarations())


class EnvironmentBuilder:
    """Builds the solver environment from a document's declarations.

    Domain sorts ``Vector`` and ``Signal`` are always declared. Each type
    definition becomes one sort named after it: ℕ/ℤ/ℝ/𝔹 definitions alias
    the built-in sort, custom references alias the referenced sort, and
    every other type is an uninterpreted sort. Each declared function
    becomes ``(declare-fun f (Any) Any)``.
    """

    def __init__(self, type_translator: Optional[TypeTranslator] = None):
        self.type_translator = type_translator or TypeTranslator()

    def domain(self) -> SmtEnvironment:
        """Environment with only the domain sorts, for obligations checked without a document."""
        env = SmtEnvironment()
        for name in DOMAIN_SORTS:
            env.add_sort(SortDecl(name))
        return env

    def build(self, document: Document, reserved: Iterable[str] = ()) -> SmtEnvironment:
        """Build the environment for a document.

        Args:
            document: Document to read; it is never modified
            reserved: Further constant names the obligations of this run
                declare (e.g. tri-vector space names)

        Returns:
            Populated SmtEnvironment

        Raises:
            SetupError: On unresolvable, cyclic or reserved type names, or on
                function names that clash with encoder symbols
        """
        env = self.domain()
        reserved = frozenset(reserved)

        definitions = document.type_definitions()
        resolving: List[str] = []

        def resolve(name: str) -> str:
            if name in DOMAIN_SORTS or name in env.sorts:
                return env.sort_symbol(name)
            if name in resolving:
                cycle = " -> ".join(resolving[resolving.index(name):] + [name])
                raise SetupError(f"Cyclic type definition: {cycle}")
            definition = definitions.get(name)
            if definition is None:
                raise SetupError(f"Unresolvable type name '{name}'")
            self._check_sort_name(name)

            resolving.append(name)
            try:
                builtin = self.type_translator.builtin_sort(definition.type_expr)
                referenced = self.type_translator.referenced_name(definition.type_expr)
                if builtin is not None:
                    decl = SortDecl(name, alias=builtin)
                elif referenced is not None:
                    decl = SortDecl(name, alias=resolve(referenced))
                else:
                    decl = SortDecl(name)
            finally:
                resolving.pop()

            env.add_sort(decl)
            return decl.symbol

        for name in definitions:
            if name in DOMAIN_SORTS:
                logger.debug("domain_sort_redefined", type_name=name)
                continue
            resolve(name)

        functions = document.function_definitions()
        if functions:
            env.add_sort(SortDecl(GENERIC_SORT))
        for func in functions:
            self._check_function_name(func.name, reserved)
            smt_symbol(func.name)
            env.add_function(FunctionDecl(func.name))

        logger.info("environment_built",
                    document=document.header.name,
                    sorts=len(env.sorts),
                    functions=len(env.functions))
        return env

    @staticmethod
    def _check_function_name(name: str, reserved: frozenset) -> None:
        if name in ENCODER_SYMBOLS or name in ENCODER_CONSTANTS or name in reserved \
                or _GENERATED_CONSTANT.match(name):
            raise SetupError(f"Function name '{name}' is reserved")

    @staticmethod
    def _check_sort_name(name: str) -> None:
        if name in BUILTIN_SORTS:
            raise SetupError(f"Type name '{name}' clashes with a built-in solver sort")
        if name == GENERIC_SORT or name in ENCODER_SORTS:
            raise SetupError(f"Type name '{name}' is reserved")
