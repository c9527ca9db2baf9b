"""
Property encoders: document and analysis inputs to SMT-LIB obligations.
"""

from .obligation import Obligation, conjunction, disjunction, real_literal, write_smt2
from .tri_vector_smt2 import (
    decomposition_formula,
    decomposition_obligation,
    encode_tri_vector,
    orthogonality_formula,
    orthogonality_obligation,
    safety_isolation_formula,
    safety_isolation_obligation,
)
from .foundations_smt2 import (
    COMPOSITION_EDGES,
    LAYERS,
    PIPELINE_STEPS,
    ambiguity_obligation,
    composition_obligations,
    layer_obligations,
    pipeline_obligation,
    pipeline_rates,
)
from .document_smt2 import encode_correctness, encode_temporal, encode_type_safety

__all__ = [
    "Obligation",
    "conjunction",
    "disjunction",
    "real_literal",
    "write_smt2",
    "orthogonality_formula",
    "safety_isolation_formula",
    "decomposition_formula",
    "orthogonality_obligation",
    "safety_isolation_obligation",
    "decomposition_obligation",
    "encode_tri_vector",
    "ambiguity_obligation",
    "pipeline_obligation",
    "pipeline_rates",
    "layer_obligations",
    "composition_obligations",
    "LAYERS",
    "COMPOSITION_EDGES",
    "PIPELINE_STEPS",
    "encode_temporal",
    "encode_type_safety",
    "encode_correctness",
]
