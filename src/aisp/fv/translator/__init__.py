"""
Translation from AISP document declarations to SMT-LIB declarations.
"""

from .type_translator import BUILTIN_SORTS, TypeTranslator, smt_symbol
from .environment import (
    DOMAIN_SORTS,
    GENERIC_SORT,
    EnvironmentBuilder,
    FunctionDecl,
    SmtEnvironment,
    SortDecl,
)

__all__ = [
    "BUILTIN_SORTS",
    "DOMAIN_SORTS",
    "GENERIC_SORT",
    "TypeTranslator",
    "smt_symbol",
    "EnvironmentBuilder",
    "SmtEnvironment",
    "SortDecl",
    "FunctionDecl",
]
